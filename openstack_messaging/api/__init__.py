# Import the modules for each of the services
from . import (
    messaging,  # noqa: F401
    orchestration,  # noqa: F401
)
from .core import Connection, ServiceNotSupported  # noqa: F401
