"""Error types and exit codes for vigil."""

from __future__ import annotations

# Exit codes
EXIT_COMPLETED = 0
EXIT_ERROR = 1
EXIT_LOCAL_ERROR = 3
EXIT_INTERRUPTED = 130


class VigilError(Exception):
    """Base class for all vigil errors."""

    exit_code = EXIT_ERROR


class LocalError(VigilError):
    """A local precondition failed; rerunning with other arguments can fix it."""

    exit_code = EXIT_LOCAL_ERROR


class InvalidNameError(LocalError):
    """Session or base name is empty or unsafe to send to the remote shell."""


class InvalidSelectionError(LocalError):
    """Interactive selection input was not a valid session number."""


class NoSessionsError(LocalError):
    """A session had to be selected but the remote host has none."""


class MissingDestinationError(LocalError):
    """No SSH destination was given on the command line."""


class SSHNotFoundError(LocalError):
    """The SSH client binary is not on PATH."""


class RemoteExecError(VigilError):
    """The SSH subprocess exited non-zero.

    Covers connection failures and tmux-side errors alike; the remote
    stderr (when captured) is the only diagnostic.
    """

    def __init__(
        self, message: str, returncode: int, stderr: str = "", command: str = ""
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
        self.command = command

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return self.returncode if self.returncode > 0 else EXIT_ERROR
