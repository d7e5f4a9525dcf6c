"""Locate and resolve the SSH destination among passthrough SSH args."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass

import paramiko

from vigil.errors import MissingDestinationError

# ssh(1) options that consume a value: "-p 22", "-p22", "-vp 22".
SSH_OPTIONS_WITH_ARG = frozenset("BbcDEeFIiJLlmOoPpQRSWw")

DEFAULT_SSH_CONFIG = os.path.expanduser("~/.ssh/config")


@dataclass(frozen=True)
class Destination:
    """Where the SSH client will connect."""

    host: str
    user: str | None = None
    port: int | None = None

    def __str__(self) -> str:
        text = f"{self.user}@{self.host}" if self.user else self.host
        if self.port and self.port != 22:
            text += f":{self.port}"
        return text


def scan_ssh_args(
    args: Sequence[str],
) -> tuple[list[tuple[str, str]], list[int]]:
    """Walk SSH args the way ssh(1) does.

    Returns:
        (options, positionals): options as (flag, value) pairs for flags that
        take a value, and the indices of positional tokens in args.
    """
    options: list[tuple[str, str]] = []
    positionals: list[int] = []
    i = 0
    while i < len(args):
        token = args[i]
        if token == "--":
            positionals.extend(range(i + 1, len(args)))
            break
        if not token.startswith("-") or token == "-":
            positionals.append(i)
            i += 1
            continue

        # Bundled flags: the first one that takes a value ends the bundle.
        for pos, flag in enumerate(token[1:], start=1):
            if flag not in SSH_OPTIONS_WITH_ARG:
                continue
            value = token[pos + 1 :]
            if not value and i + 1 < len(args):
                i += 1
                value = args[i]
            options.append((flag, value))
            break
        i += 1
    return options, positionals


def find_destination(args: Sequence[str]) -> str | None:
    """Return the destination token, or None if args has no positional."""
    _options, positionals = scan_ssh_args(args)
    return args[positionals[0]] if positionals else None


def parse_destination(token: str) -> Destination:
    """Parse `[user@]host` or `ssh://[user@]host[:port]`."""
    port = None
    rest = token
    if rest.startswith("ssh://"):
        rest = rest[len("ssh://") :]
        if ":" in rest.rsplit("@", 1)[-1]:
            rest, _, port_text = rest.rpartition(":")
            if port_text.isdecimal():
                port = int(port_text)
    user, _, host = rest.rpartition("@")
    return Destination(host=host, user=user or None, port=port)


def _lookup_ssh_config(path: str, host: str) -> dict[str, str]:
    """Host entry from an OpenSSH client config, empty if unavailable."""
    if not os.path.exists(path):
        return {}
    try:
        ssh_config = paramiko.SSHConfig.from_path(path)
        return dict(ssh_config.lookup(host))
    except (OSError, paramiko.ssh_exception.ConfigParseError):
        # ssh itself reports a broken config when it runs.
        return {}


def resolve_destination(
    args: Sequence[str], config_path: str | None = None
) -> Destination:
    """Resolve the effective host, user and port ssh will connect with.

    Command-line values win over ~/.ssh/config (or the file given by -F).

    Raises:
        MissingDestinationError: args contain no destination
    """
    token = find_destination(args)
    if not token:
        raise MissingDestinationError(
            "No SSH destination given (e.g. 'vigil user@host')."
        )

    dest = parse_destination(token)
    options, _positionals = scan_ssh_args(args)
    flags = dict(options)

    path = os.path.expanduser(flags.get("F", config_path or DEFAULT_SSH_CONFIG))
    entry = _lookup_ssh_config(path, dest.host)

    user = dest.user or flags.get("l") or entry.get("user")
    port_text = flags.get("p") or entry.get("port")
    port = dest.port
    if port is None and port_text and str(port_text).isdecimal():
        port = int(port_text)

    return Destination(host=entry.get("hostname", dest.host), user=user, port=port)
