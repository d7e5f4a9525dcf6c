"""Remote tmux command construction.

Every command is assembled from an argv whose tokens are quoted one by one
with shlex.quote, then wrapped in `sh -c` so that it behaves the same under
any remote login shell (tcsh mishandles sh syntax). Session names, the tmux
path and --tmuxargs never reach the remote shell unquoted.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Union

from vigil.config import RemoteConfig
from vigil.errors import InvalidNameError

# tmux never allows ":" in a session name, so it is safe as a field separator.
FIELD_SEPARATOR = ":"
LIST_FIELDS = (
    "session_name",
    "session_attached",
    "session_windows",
    "session_created",
)
LIST_FORMAT = FIELD_SEPARATOR.join(f"#{{{field}}}" for field in LIST_FIELDS)


@dataclass(frozen=True)
class CreateOrAttach:
    """Attach to the user's default session, creating it if needed."""


@dataclass(frozen=True)
class ListSessions:
    """List the user's sessions."""


@dataclass(frozen=True)
class Attach:
    """Attach to a session; name None means select interactively."""

    name: str | None = None


@dataclass(frozen=True)
class Kill:
    """Kill a session; name None means select interactively."""

    name: str | None = None


Operation = Union[CreateOrAttach, ListSessions, Attach, Kill]


def split_tmux_args(tmux_args: str) -> list[str]:
    """Split --tmuxargs with POSIX shell rules.

    A string that cannot be split (unbalanced quotes) is kept as a single
    literal argument.
    """
    if not tmux_args.strip():
        return []
    try:
        return shlex.split(tmux_args)
    except ValueError:
        return [tmux_args]


def exact_target(session_name: str) -> str:
    """tmux target matching session_name exactly rather than by prefix."""
    return f"={session_name}"


def tmux_argv(op: Operation, cfg: RemoteConfig, session_name: str = "") -> list[str]:
    """Return the unquoted remote tmux argv for an operation."""
    if isinstance(op, ListSessions):
        return [cfg.tmux_bin, "list-sessions", "-F", LIST_FORMAT]

    if not session_name:
        raise InvalidNameError("a session name is required for this operation")

    if isinstance(op, CreateOrAttach):
        return [
            cfg.tmux_bin,
            "new-session",
            "-A",
            "-s",
            session_name,
            *split_tmux_args(cfg.tmux_args),
        ]
    if isinstance(op, Attach):
        return [cfg.tmux_bin, "attach-session", "-t", exact_target(session_name)]
    if isinstance(op, Kill):
        return [cfg.tmux_bin, "kill-session", "-t", exact_target(session_name)]
    raise TypeError(f"Unknown operation: {op!r}")


def quote_argv(argv: list[str]) -> str:
    """Join argv into a shell command line with every token quoted."""
    return " ".join(shlex.quote(token) for token in argv)


def wrap_sh(script: str) -> str:
    """Run script under /bin/sh regardless of the remote login shell."""
    return f"sh -c {shlex.quote(script)}"


def build(op: Operation, cfg: RemoteConfig, session_name: str = "") -> str:
    """Build the remote command string for op.

    Args:
        op: Operation to perform
        cfg: Invocation configuration (tmux binary and extra args)
        session_name: Full session name; ignored for ListSessions

    Returns:
        A single command string to hand to the SSH client.
    """
    return wrap_sh(quote_argv(tmux_argv(op, cfg, session_name)))
