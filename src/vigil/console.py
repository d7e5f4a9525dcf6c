"""Colored status output helpers."""

from __future__ import annotations

import sys

# ANSI color codes
CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
GREY = "\033[90m"
RESET = "\033[0m"


def info(msg: str) -> str:
    """Format info message [*] in cyan."""
    return f"{CYAN}[*]{RESET} {msg}"


def success(msg: str) -> str:
    """Format success message [+] in green."""
    return f"{GREEN}[+]{RESET} {msg}"


def warning(msg: str) -> str:
    """Format warning message [!] in yellow."""
    return f"{YELLOW}[!]{RESET} {msg}"


def error(msg: str) -> str:
    """Format error message [!] in red."""
    return f"{RED}[!]{RESET} {msg}"


def debug(msg: str) -> str:
    """Format debug trace [debug] in grey."""
    return f"{GREY}[debug]{RESET} {msg}"


def status(line: str) -> None:
    """Print a formatted status line to stderr.

    Status never goes to stdout so `--list` output can be piped.
    """
    print(line, file=sys.stderr)
    sys.stderr.flush()
