"""
Module containing service and operation definitions for the OpenStack messaging API.
"""

from .. import dto
from .core import Service
from .operations import (
    Fallback,
    Operation,
    bind_client_id,
    bind_ids_to_query,
    bind_json_payload,
    bind_path,
    bind_stream_options,
    execute,
)


def _id_from_href(href):
    return href.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0]


def parse_message(data):
    """
    Returns a :py:class:`~..dto.Message` for the given message data.
    """
    return dto.Message(
        id = data.get("id") or _id_from_href(data["href"]),
        href = data["href"],
        ttl = data["ttl"],
        age = data.get("age", 0),
        body = data.get("body"),
    )


def parse_message_response(response):
    return parse_message(response.json())


def parse_message_list(response):
    # An empty result is reported as 204 No Content
    if response.status_code == 204:
        return []
    data = response.json()
    # Older versions of the API return a bare list, newer ones nest it
    if isinstance(data, dict):
        data = data["messages"]
    return [parse_message(item) for item in data]


def parse_message_stream(response):
    if response.status_code == 204:
        return dto.MessageStream()
    data = response.json()
    return dto.MessageStream(
        messages = tuple(parse_message(item) for item in data.get("messages", [])),
        links = tuple(data.get("links", [])),
    )


def parse_messages_created(response):
    data = response.json()
    resources = tuple(data["resources"])
    return dto.MessagesCreated(
        ids = tuple(_id_from_href(href) for href in resources),
        resources = resources,
        partial = bool(data.get("partial", False)),
    )


QUEUE_PATH = "/queues/{queue_name}"
MESSAGES_PATH = QUEUE_PATH + "/messages"


MESSAGE_CREATE = Operation(
    name = "message:create",
    method = "post",
    path = MESSAGES_PATH,
    binders = dict(
        queue_name = bind_path,
        client_id = bind_client_id,
        messages = bind_json_payload,
    ),
    parser = parse_messages_created,
    fallback = Fallback.NULL,
)

MESSAGE_STREAM = Operation(
    name = "message:stream",
    method = "get",
    path = MESSAGES_PATH,
    binders = dict(
        queue_name = bind_path,
        client_id = bind_client_id,
        options = bind_stream_options,
    ),
    parser = parse_message_stream,
    fallback = Fallback.EMPTY_PAGE,
)

MESSAGE_LIST = Operation(
    name = "message:list",
    method = "get",
    path = MESSAGES_PATH,
    binders = dict(
        queue_name = bind_path,
        client_id = bind_client_id,
        ids = bind_ids_to_query,
    ),
    parser = parse_message_list,
    fallback = Fallback.EMPTY_LIST,
)

MESSAGE_GET = Operation(
    name = "message:get",
    method = "get",
    path = MESSAGES_PATH + "/{message_id}",
    binders = dict(
        queue_name = bind_path,
        client_id = bind_client_id,
        message_id = bind_path,
    ),
    parser = parse_message_response,
    fallback = Fallback.NULL,
)

MESSAGE_DELETE = Operation(
    name = "message:delete",
    method = "delete",
    path = MESSAGES_PATH,
    binders = dict(
        queue_name = bind_path,
        client_id = bind_client_id,
        ids = bind_ids_to_query,
    ),
    fallback = Fallback.FALSE,
)

QUEUE_CREATE = Operation(
    name = "queue:create",
    method = "put",
    path = QUEUE_PATH,
    binders = dict(queue_name = bind_path),
)

QUEUE_EXISTS = Operation(
    name = "queue:exists",
    method = "get",
    path = QUEUE_PATH,
    binders = dict(queue_name = bind_path),
    fallback = Fallback.FALSE,
)

QUEUE_DELETE = Operation(
    name = "queue:delete",
    method = "delete",
    path = QUEUE_PATH,
    binders = dict(queue_name = bind_path),
    fallback = Fallback.FALSE,
)


class Messages:
    """
    Provides access to the messages on a single queue.

    Every operation takes the Client-ID of the calling client, which the service
    uses to avoid echoing a client's own messages back to it.
    """

    def __init__(self, service, queue_name):
        self.service = service
        self.queue_name = queue_name

    def _execute(self, operation, **arguments):
        return execute(
            self.service,
            operation,
            queue_name = self.queue_name,
            **arguments
        )

    def create(self, client_id, messages):
        """
        Posts the given messages to the queue.

        Returns ``None`` if the queue does not exist.
        """
        return self._execute(MESSAGE_CREATE, client_id = client_id, messages = messages)

    def stream(self, client_id, options = None):
        """
        Returns a single page of messages from the queue.

        The next page is requested by passing the ``next_options`` of the returned
        stream. Returns an empty page if the queue does not exist.
        """
        return self._execute(MESSAGE_STREAM, client_id = client_id, options = options)

    def list(self, client_id, ids):
        """
        Returns the messages with the given IDs. Unlike :py:meth:`stream`, a client's
        own messages are always returned.

        Malformed or unknown IDs are ignored by the service.
        """
        return self._execute(MESSAGE_LIST, client_id = client_id, ids = ids)

    def get(self, client_id, id):
        """
        Returns the message with the given ID, or ``None`` if it does not exist.
        """
        return self._execute(MESSAGE_GET, client_id = client_id, message_id = id)

    def delete(self, client_id, ids):
        """
        Deletes the messages with the given IDs.

        Malformed or unknown IDs are ignored by the service and the remaining messages
        are deleted. Returns ``False`` if the queue does not exist.
        """
        return self._execute(MESSAGE_DELETE, client_id = client_id, ids = ids)


class Queues:
    """
    Provides access to the queues of the messaging service.
    """

    def __init__(self, service):
        self.service = service

    def create(self, name):
        return execute(self.service, QUEUE_CREATE, queue_name = name)

    def exists(self, name):
        return execute(self.service, QUEUE_EXISTS, queue_name = name)

    def delete(self, name):
        return execute(self.service, QUEUE_DELETE, queue_name = name)


class MessagingService(Service):
    """
    OpenStack service class for the messaging service.
    """

    catalog_type = "messaging"
    path_prefix = "/v1"

    @property
    def queues(self):
        return Queues(self)

    def messages(self, queue_name):
        """
        Returns the messages API for the named queue.
        """
        return Messages(self, queue_name)
