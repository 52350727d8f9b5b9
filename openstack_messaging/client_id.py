"""
Helpers for managing the Client-ID that identifies this client to the messaging service.

The Client-ID is generated once and persisted, so that the same ID is reused when the
client restarts.
"""

import functools
import logging
import os
import uuid


logger = logging.getLogger(__name__)


def load_or_create(path):
    """
    Returns the Client-ID stored at the given path, generating and storing a new one
    if the file does not exist.
    """
    path = os.path.expanduser(path)
    try:
        with open(path) as fh:
            return uuid.UUID(fh.read().strip())
    except FileNotFoundError:
        pass
    client_id = uuid.uuid4()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok = True)
    with open(path, "w") as fh:
        fh.write(str(client_id) + "\n")
    logger.info("Generated new Client-ID %s at %s", client_id, path)
    return client_id


@functools.lru_cache(maxsize = None)
def for_process(path):
    """
    Returns the Client-ID for the given path, loading it at most once per process.
    """
    return load_or_create(path)
