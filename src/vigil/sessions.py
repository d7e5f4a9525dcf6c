"""Parsing of `tmux list-sessions` output."""

from __future__ import annotations

from dataclasses import dataclass

from vigil.commands import FIELD_SEPARATOR, LIST_FIELDS
from vigil.naming import suffix


@dataclass(frozen=True)
class SessionRecord:
    """One remote tmux session owned by the invoking user."""

    name: str
    display_name: str
    attached: bool
    windows: int
    created: str

    def describe(self) -> str:
        """Human-readable one-line summary."""
        state = "attached" if self.attached else "detached"
        plural = "" if self.windows == 1 else "s"
        return f"{self.display_name} ({self.windows} window{plural}, {state})"


def parse_line(line: str, local_user: str) -> SessionRecord | None:
    """Parse one listing line; None if malformed or owned by someone else."""
    fields = line.strip().split(FIELD_SEPARATOR, len(LIST_FIELDS) - 1)
    if len(fields) != len(LIST_FIELDS):
        return None

    name, attached, windows, created = fields
    if not attached.isdecimal() or not windows.isdecimal():
        return None

    user_suffix = suffix(local_user)
    if not name.endswith(user_suffix) or len(name) == len(user_suffix):
        return None

    return SessionRecord(
        name=name,
        display_name=name[: -len(user_suffix)],
        attached=int(attached) > 0,
        windows=int(windows),
        created=created,
    )


def parse(raw_output: str, local_user: str) -> list[SessionRecord]:
    """Parse list output into the user's sessions, in the order received.

    Lines that do not have the expected fields (blank lines, warnings the
    remote side printed to stdout) are skipped.
    """
    records = []
    for line in raw_output.splitlines():
        record = parse_line(line, local_user)
        if record is not None:
            records.append(record)
    return records
