"""
Module containing the declarative description of REST operations and the routine
that executes them.

Each operation is a static :py:class:`Operation` that names the HTTP verb, the path
template, how each argument is bound into the request, how the response is parsed
and what to return when the target is not found.
"""

import enum
import functools
import logging
import typing as t
import uuid
from dataclasses import dataclass, field
from urllib.parse import quote

import rackit
import requests

from .. import dto, errors


logger = logging.getLogger(__name__)


class Fallback(enum.Enum):
    """
    The value that an operation produces when the service reports that the target
    does not exist.
    """

    NULL = "null"
    EMPTY_LIST = "empty_list"
    EMPTY_PAGE = "empty_page"
    FALSE = "false"

    def default(self):
        if self is Fallback.NULL:
            return None
        elif self is Fallback.EMPTY_LIST:
            return []
        elif self is Fallback.EMPTY_PAGE:
            return dto.MessageStream()
        else:
            return False


class Request:
    """
    Accumulates the parts of a request as the arguments of an operation are bound.
    """

    def __init__(self):
        self.path_params = {}
        self.headers = {}
        self.params = {}
        self.json = None

    def kwargs(self):
        kwargs = {}
        if self.headers:
            kwargs["headers"] = self.headers
        if self.params:
            kwargs["params"] = self.params
        if self.json is not None:
            kwargs["json"] = self.json
        return kwargs


#: A binder receives the request being built, the argument name and its value
Binder = t.Callable[[Request, str, t.Any], None]


def bind_path(request, name, value):
    # Path parameters are a single segment, so slashes must be encoded too
    request.path_params[name] = quote(str(value), safe="")


def bind_client_id(request, name, value):
    try:
        client_id = value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except ValueError:
        raise errors.BadInputError(f"Client-ID must be a UUID, got '{value}'.")
    request.headers["Client-ID"] = str(client_id)


def bind_ids_to_query(request, name, value):
    if isinstance(value, str):
        value = [value]
    request.params[name] = ",".join(value)


def bind_json_payload(request, name, value):
    request.json = [
        item.to_json() if hasattr(item, "to_json") else item
        for item in value
    ]


def bind_stream_options(request, name, value):
    if value is not None:
        request.params.update(value.to_params())


@dataclass(frozen=True)
class Operation:
    """
    Static description of a single REST operation.
    """

    #: The name of the operation, used for logging
    name: str
    #: The HTTP verb for the operation
    method: str
    #: The path template for the operation, relative to the service path prefix
    path: str
    #: Maps argument names to the binders that place them in the request
    binders: t.Mapping[str, Binder] = field(default_factory=dict)
    #: Produces the result of the operation from a successful response
    parser: t.Callable[[requests.Response], t.Any] = lambda response: True
    #: The fallback to apply on a not-found response, if any
    fallback: t.Optional[Fallback] = None

    def bind(self, arguments):
        """
        Returns the path and request keyword arguments for the given arguments.
        """
        request = Request()
        for name, value in arguments.items():
            try:
                binder = self.binders[name]
            except KeyError:
                raise TypeError(f"{self.name} got an unexpected argument '{name}'")
            binder(request, name, value)
        missing = set(self.binders) - set(arguments)
        if missing:
            raise TypeError(
                f"{self.name} missing arguments: {', '.join(sorted(missing))}"
            )
        return self.path.format(**request.path_params), request.kwargs()


def convert_exceptions(f):
    """
    Decorator that converts rackit exceptions into errors from :py:mod:`..errors`.
    """
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except rackit.ApiError as exc:
            # Extract the status code and message
            status_code = exc.status_code
            message = str(exc)
            if status_code == 400:
                raise errors.BadInputError(message)
            elif status_code == 401:
                raise errors.AuthenticationError("Your session has expired.")
            elif status_code == 403:
                raise errors.PermissionDeniedError("Permission denied.")
            elif status_code == 404:
                raise errors.ObjectNotFoundError(message)
            elif status_code == 409:
                raise errors.InvalidOperationError(message)
            else:
                logger.exception("Unknown error with OpenStack API.")
                raise errors.CommunicationError("Unknown error with OpenStack API.")
        except (rackit.RackitError, requests.exceptions.RequestException):
            logger.exception("Could not connect to OpenStack API.")
            raise errors.CommunicationError("Could not connect to OpenStack API.")
    return wrapper


@convert_exceptions
def execute(connection, operation, **arguments):
    """
    Executes the given operation using the connection and returns the result.

    A not-found response produces the fallback value of the operation, if it has one.
    """
    path, kwargs = operation.bind(arguments)
    logger.debug("[%s] %s %s", operation.name, operation.method.upper(), path)
    send = getattr(connection, f"api_{operation.method}")
    try:
        response = send(path, **kwargs)
    except rackit.ApiError as exc:
        if exc.status_code == 404 and operation.fallback is not None:
            logger.info(
                "[%s] %s not found, using %s fallback",
                operation.name,
                path,
                operation.fallback.name
            )
            return operation.fallback.default()
        else:
            raise
    try:
        return operation.parser(response)
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise errors.InvalidResponseError(
            f"Invalid response for {operation.name}: {exc}"
        )
