"""User-scoped tmux session names."""

from __future__ import annotations

import getpass
import re

from vigil.errors import InvalidNameError

DEFAULT_BASE = "default"
SEPARATOR = "-"
EXACT_PREFIX = "="

# Base and typed names. tmux rewrites "." and ":" to "_", so they are excluded
# along with anything the remote shell could interpret.
_NAME_RE = re.compile(r"^[A-Za-z0-9_@%+=,-]+$")


def validate(token: str, what: str = "session name") -> str:
    """Return token unchanged if it is a safe name component.

    Raises:
        InvalidNameError: if token is empty or has unsafe characters
    """
    if not token:
        raise InvalidNameError(f"{what} must not be empty")
    if not _NAME_RE.match(token):
        raise InvalidNameError(
            f"Invalid {what} {token!r}: use letters, digits and _-@%+=, only"
        )
    return token


def user_token(local_user: str) -> str:
    """Login name as it appears in tmux session names.

    Any non-empty name without whitespace is accepted. "." and ":" become
    "_" the way tmux rewrites them, so created names and the listing
    filter agree.
    """
    if not local_user or any(ch.isspace() for ch in local_user):
        raise InvalidNameError(
            f"Local user name {local_user!r} is empty or contains whitespace"
        )
    return local_user.replace(".", "_").replace(":", "_")


def resolve(base: str, local_user: str) -> str:
    """Build the session name `<base>-<local_user>`."""
    validate(base, "base session name")
    return f"{base}{SEPARATOR}{user_token(local_user)}"


def suffix(local_user: str) -> str:
    """Suffix carried by every session that belongs to local_user."""
    return f"{SEPARATOR}{user_token(local_user)}"


def qualify(name: str, local_user: str) -> str:
    """Turn a name typed on the command line into a full session name.

    Names already carrying the user's suffix are kept as they are, so both
    the display name shown by --list and the full tmux name are accepted.
    A leading "=" takes the rest as the full session name, for display
    names that themselves end with the user's suffix.
    """
    if name.startswith(EXACT_PREFIX):
        return validate(name[len(EXACT_PREFIX) :])
    validate(name)
    user_suffix = suffix(local_user)
    if name.endswith(user_suffix) and len(name) > len(user_suffix):
        return name
    return resolve(name, local_user)


def get_local_user() -> str:
    """Return the OS login name of the invoking user."""
    return getpass.getuser()
