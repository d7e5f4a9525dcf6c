"""Per-invocation configuration."""

from __future__ import annotations

from dataclasses import dataclass

TTY_FLAGS = ("-t", "-tt")


@dataclass(frozen=True)
class RemoteConfig:
    """Configuration for one vigil invocation.

    ssh_args holds the destination plus any passthrough SSH options, in the
    order they were given on the command line.
    """

    ssh_args: tuple[str, ...] = ()
    tmux_bin: str = "tmux"
    tmux_args: str = ""
    ssh_prog: str = "ssh"
    debug: bool = False

    def interactive_ssh_args(self) -> list[str]:
        """SSH args with a TTY forced, for sessions the user works in."""
        args = list(self.ssh_args)
        if not any(a in TTY_FLAGS for a in args):
            args.insert(0, "-t")
        return args

    def capture_ssh_args(self) -> list[str]:
        """SSH args without TTY flags, for commands whose output is parsed."""
        return [a for a in self.ssh_args if a not in TTY_FLAGS]
