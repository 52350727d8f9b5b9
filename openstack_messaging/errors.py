"""
This module defines the exceptions that can be raised by the OpenStack bindings.

Not-found conditions for message and queue operations are not represented here,
since they are translated into fallback values rather than raised.
"""


class Error(Exception):
    """
    Base class for all other errors in this module.
    """


class BadInputError(Error, RuntimeError):
    """
    Raised when the input to an operation is rejected, either by the client
    (e.g. a malformed Client-ID) or by the service.
    """


class AuthenticationError(Error, RuntimeError):
    """
    Raised when authentication fails when accessing a resource.
    """


class PermissionDeniedError(Error, RuntimeError):
    """
    Raised when permission is denied while accessing a resource.
    """


class ObjectNotFoundError(Error, RuntimeError):
    """
    Raised when an object is not found by an operation that has no fallback.
    """


class InvalidOperationError(Error, RuntimeError):
    """
    Raised when an operation is invalid for the current state of the target.
    """


class CommunicationError(Error, RuntimeError):
    """
    Raised when an unexpected communication problem occurs, e.g. the service
    cannot be reached or responds with a server error.
    """


class InvalidResponseError(CommunicationError):
    """
    Raised when the service responds with a body that cannot be parsed.
    """
