"""Command-line interface for vigil."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from vigil import __version__
from vigil.client import SessionClient
from vigil.commands import Attach, CreateOrAttach, Kill, ListSessions, Operation
from vigil.config import RemoteConfig
from vigil.console import status, warning
from vigil.destination import find_destination
from vigil.errors import EXIT_INTERRUPTED
from vigil.naming import DEFAULT_BASE, get_local_user

# Our own flags; everything else on the command line belongs to ssh.
VALUE_FLAGS = frozenset({"--session", "--tmux", "--tmuxargs"})
OPTIONAL_VALUE_FLAGS = frozenset({"--attach", "--select", "--kill"})
SWITCH_FLAGS = frozenset({"--list", "--debug", "--version", "--help", "-h"})


def _is_own_flag(token: str) -> bool:
    flag = token.partition("=")[0]
    return flag in VALUE_FLAGS or flag in OPTIONAL_VALUE_FLAGS or token in SWITCH_FLAGS


def split_args(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Separate vigil's flags from the SSH arguments.

    Our flags may appear before or after the destination. The optional NAME
    of --attach/--select/--kill is only consumed when a destination is still
    left for ssh, so `vigil --attach host` attaches interactively on host.

    Returns:
        (own, ssh_args) with ssh_args in their original order.
    """
    own: list[str] = []
    ssh_args: list[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        flag, has_value, value = token.partition("=")

        if token == "--":
            ssh_args.extend(argv[i + 1 :])
            break

        if flag in VALUE_FLAGS:
            if not has_value and i + 1 < len(argv):
                i += 1
                value = argv[i]
            own.append(f"{flag}={value}")
        elif flag in OPTIONAL_VALUE_FLAGS:
            if has_value:
                own.append(token)
            elif _next_is_name(argv, i + 1, ssh_args):
                i += 1
                own.append(f"{flag}={argv[i]}")
            else:
                own.append(flag)
        elif token in SWITCH_FLAGS:
            own.append(token)
        else:
            ssh_args.append(token)
        i += 1
    return own, ssh_args


def _next_is_name(argv: Sequence[str], j: int, ssh_so_far: list[str]) -> bool:
    if j >= len(argv):
        return False
    candidate = argv[j]
    if candidate.startswith("-") or _is_own_flag(candidate):
        return False
    _own, ssh_after = split_args(argv[j + 1 :])
    return find_destination([*ssh_so_far, *ssh_after]) is not None


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for vigil's own flags."""
    parser = argparse.ArgumentParser(
        prog="vigil",
        usage="%(prog)s [options] [ssh options] destination",
        description=(
            "Persistent remote tmux sessions over SSH. Unrecognized options "
            "and the destination are passed to ssh unchanged."
        ),
    )
    parser.add_argument(
        "--session",
        default=DEFAULT_BASE,
        help="Base session name, suffixed with the local user (default: default)",
    )
    parser.add_argument(
        "--tmux",
        default="tmux",
        metavar="PATH",
        help="tmux binary on the remote host (default: tmux)",
    )
    parser.add_argument(
        "--tmuxargs",
        default="",
        metavar="ARGS",
        help="Extra arguments for remote 'tmux new-session'",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--attach",
        "--select",
        dest="attach",
        nargs="?",
        const="",
        default=None,
        metavar="NAME",
        help=(
            "Attach to a session (select interactively if NAME is omitted). "
            "NAME is the listed name; prefix it with = to give the full tmux "
            "session name exactly"
        ),
    )
    mode.add_argument(
        "--kill",
        nargs="?",
        const="",
        default=None,
        metavar="NAME",
        help=(
            "Kill a session (select interactively if NAME is omitted). "
            "Prefix NAME with = to give the full tmux session name exactly"
        ),
    )
    mode.add_argument(
        "--list",
        action="store_true",
        help="List sessions on the remote host and exit",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the ssh command line and remote command",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def operation_from_args(parsed: argparse.Namespace) -> Operation:
    """Map parsed flags to the operation to run."""
    if parsed.list:
        return ListSessions()
    if parsed.kill is not None:
        return Kill(parsed.kill or None)
    if parsed.attach is not None:
        return Attach(parsed.attach or None)
    return CreateOrAttach()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = sys.argv[1:] if args is None else args
    own, ssh_args = split_args(argv)
    parsed = build_parser().parse_args(own)

    config = RemoteConfig(
        ssh_args=tuple(ssh_args),
        tmux_bin=parsed.tmux,
        tmux_args=parsed.tmuxargs,
        debug=parsed.debug,
    )
    client = SessionClient(config, get_local_user(), base=parsed.session)

    try:
        return client.run(operation_from_args(parsed))
    except KeyboardInterrupt:
        print(file=sys.stderr)
        status(warning("Interrupted."))
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
