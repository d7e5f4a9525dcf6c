"""vigil - Persistent remote tmux sessions over SSH."""

from vigil.client import SessionClient
from vigil.config import RemoteConfig
from vigil.errors import (
    EXIT_COMPLETED,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_LOCAL_ERROR,
    InvalidNameError,
    InvalidSelectionError,
    NoSessionsError,
    RemoteExecError,
)

__version__ = "0.1.0"
__all__ = [
    "EXIT_COMPLETED",
    "EXIT_ERROR",
    "EXIT_INTERRUPTED",
    "EXIT_LOCAL_ERROR",
    "InvalidNameError",
    "InvalidSelectionError",
    "NoSessionsError",
    "RemoteConfig",
    "RemoteExecError",
    "SessionClient",
]
