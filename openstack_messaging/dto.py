"""
This module defines data-transfer objects used by the messaging bindings.
"""

import typing as t
from dataclasses import dataclass, fields, replace
from urllib.parse import parse_qs, urlsplit


@dataclass(frozen=True)
class CreateMessage:
    """
    Represents a message to be posted to a queue.
    """

    #: The body of the message, which can be any JSON-serialisable value
    body: t.Any
    #: The number of seconds the message will live on the queue before it expires
    ttl: int

    def to_json(self):
        return {"ttl": self.ttl, "body": self.body}


@dataclass(frozen=True)
class Message:
    """
    Represents a message on a queue.
    """

    #: The ID of the message
    id: str
    #: The href of the message, relative to the service endpoint
    href: str
    #: The time-to-live of the message in seconds
    ttl: int
    #: The number of seconds since the message was posted
    age: int
    #: The body of the message
    body: t.Any


@dataclass(frozen=True)
class StreamOptions:
    """
    Represents the options for streaming messages from a queue.

    Options that are ``None`` are not sent to the service, which applies its own
    defaults.
    """

    #: The maximum number of messages to return in a single page
    limit: t.Optional[int] = None
    #: Opaque cursor indicating the message after which the page starts
    marker: t.Optional[str] = None
    #: Indicates whether messages posted by the requesting client should be returned
    echo: t.Optional[bool] = None
    #: Indicates whether claimed messages should be returned
    include_claimed: t.Optional[bool] = None

    def to_params(self):
        """
        Returns the query parameters for these options.
        """
        params = {}
        if self.limit is not None:
            params["limit"] = str(self.limit)
        if self.marker is not None:
            params["marker"] = self.marker
        if self.echo is not None:
            params["echo"] = "true" if self.echo else "false"
        if self.include_claimed is not None:
            params["include_claimed"] = "true" if self.include_claimed else "false"
        return params

    def merge(self, other):
        """
        Returns a copy of these options updated with the options that are set in other.
        """
        return replace(
            self,
            **{
                f.name: getattr(other, f.name)
                for f in fields(other)
                if getattr(other, f.name) is not None
            }
        )

    @classmethod
    def from_params(cls, params):
        """
        Returns stream options built from the given query parameters, where each
        parameter maps to a list of values as returned by ``parse_qs``.
        """
        def first(key):
            values = params.get(key)
            return values[0] if values else None

        def boolean(key):
            value = first(key)
            return None if value is None else value.lower() == "true"

        limit = first("limit")
        return cls(
            limit = int(limit) if limit is not None else None,
            marker = first("marker"),
            echo = boolean("echo"),
            include_claimed = boolean("include_claimed"),
        )


@dataclass(frozen=True)
class MessageStream:
    """
    Represents a single page of messages streamed from a queue.
    """

    #: The messages in the page
    messages: t.Tuple[Message, ...] = ()
    #: The pagination links for the page, each with ``rel`` and ``href`` keys
    links: t.Tuple[t.Mapping[str, str], ...] = ()

    def __iter__(self):
        return iter(self.messages)

    def __len__(self):
        return len(self.messages)

    @property
    def is_empty(self):
        return not self.messages

    @property
    def next_href(self):
        """
        The href of the next page, or ``None`` if there is no next page.
        """
        return next(
            (link["href"] for link in self.links if link.get("rel") == "next"),
            None
        )

    @property
    def next_options(self):
        """
        The stream options that continue from the end of this page, or ``None``
        if there is no next page.
        """
        href = self.next_href
        if href is None:
            return None
        return StreamOptions.from_params(parse_qs(urlsplit(href).query))

    @property
    def next_marker(self):
        """
        The marker for messages newer than those in this page.
        """
        options = self.next_options
        return options.marker if options else None


@dataclass(frozen=True)
class MessagesCreated:
    """
    Represents the result of posting messages to a queue.
    """

    #: The IDs of the created messages, in the same order as the submitted messages
    ids: t.Tuple[str, ...]
    #: The hrefs of the created messages
    resources: t.Tuple[str, ...]
    #: Indicates if only some of the submitted messages were enqueued
    partial: bool = False
