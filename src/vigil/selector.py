"""Numbered interactive session selection."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TextIO

from vigil.console import info
from vigil.errors import InvalidSelectionError, NoSessionsError
from vigil.sessions import SessionRecord


@dataclass(frozen=True)
class Selection:
    """Outcome of parsing one line of selection input."""

    record: SessionRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def parse_selection(raw: str, sessions: Sequence[SessionRecord]) -> Selection:
    """Map user input to a session; invalid input is a result, not an exception."""
    choice = raw.strip()
    if not choice:
        return Selection(error="No selection entered.")
    if not choice.isdecimal():
        return Selection(error=f"'{choice}' is not a number.")

    index = int(choice)
    if not 1 <= index <= len(sessions):
        return Selection(
            error=f"{index} is out of range, pick 1 to {len(sessions)}."
        )
    return Selection(record=sessions[index - 1])


def select(
    sessions: Sequence[SessionRecord],
    action: str = "attach",
    input_func: Callable[[str], str] = input,
    stream: TextIO | None = None,
) -> str:
    """Prompt for one of sessions and return its full name.

    Raises:
        NoSessionsError: sessions is empty (input is never read)
        InvalidSelectionError: input is not a number in 1..N
    """
    if not sessions:
        raise NoSessionsError(f"No sessions found on the remote host to {action}.")

    out = stream if stream is not None else sys.stderr
    print(info(f"Select a session to {action}:"), file=out)
    for i, record in enumerate(sessions, start=1):
        print(f"  {i}. {record.describe()}", file=out)
    # The prompt goes to the same stream as the list, never to stdout.
    print(f"[?] Enter number (1-{len(sessions)}): ", end="", file=out)
    out.flush()

    try:
        raw = input_func("")
    except EOFError:
        raw = ""

    selection = parse_selection(raw, sessions)
    if not selection.ok:
        raise InvalidSelectionError(f"Invalid selection: {selection.error}")
    assert selection.record is not None
    return selection.record.name
