"""Pytest configuration and fixtures."""

from __future__ import annotations

import shlex
import subprocess
from typing import Any

import pytest

from vigil.config import RemoteConfig

TEST_HOST = "test-host.example.com"
TEST_USER = "alice"


class FakeRemote:
    """Stands in for subprocess.run: an ssh client talking to a tmux host.

    The remote command (last argv element) is decoded the way a remote
    /bin/sh would decode it, and the resulting tmux argv is applied to an
    in-memory session table.
    """

    def __init__(
        self,
        sessions: list[str] | None = None,
        ssh_exit: int = 0,
        ssh_error: str = "ssh: connect to host: Connection refused",
    ) -> None:
        self.sessions: dict[str, int] = {name: 0 for name in sessions or []}
        self.ssh_exit = ssh_exit
        self.ssh_error = ssh_error
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    @staticmethod
    def tmux_argv(command: str) -> list[str]:
        outer = shlex.split(command)
        assert outer[:2] == ["sh", "-c"] and len(outer) == 3, command
        return shlex.split(outer[2])

    @property
    def tmux_calls(self) -> list[list[str]]:
        return [self.tmux_argv(argv[-1]) for argv, _kwargs in self.calls]

    def _tmux(self, argv: list[str]) -> tuple[int, str, str]:
        if argv[0] != "tmux":
            return 127, "", f"sh: 1: {argv[0]}: not found"

        verb = argv[1]
        if verb == "list-sessions":
            if not self.sessions:
                return 1, "", "no server running on /tmp/tmux-1000/default"
            lines = [
                f"{name}:{attached}:1:1700000000"
                for name, attached in self.sessions.items()
            ]
            return 0, "\n".join(lines) + "\n", ""

        if verb == "new-session":
            name = argv[argv.index("-s") + 1]
            self.sessions.setdefault(name, 0)
            return 0, "", ""

        target = argv[argv.index("-t") + 1]
        name = target[1:] if target.startswith("=") else target
        if name not in self.sessions:
            return 1, "", f"can't find session: {name}"
        if verb == "kill-session":
            del self.sessions[name]
        return 0, "", ""

    def __call__(self, argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append((list(argv), kwargs))
        if self.ssh_exit:
            code, out, err = self.ssh_exit, "", self.ssh_error
        else:
            code, out, err = self._tmux(self.tmux_argv(argv[-1]))

        captured_out = kwargs.get("capture_output") or kwargs.get("stdout") is not None
        captured_err = kwargs.get("capture_output") or kwargs.get("stderr") is not None
        return subprocess.CompletedProcess(
            argv,
            code,
            stdout=out if captured_out else None,
            stderr=err if captured_err else None,
        )


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: pytest.TempPathFactory
) -> None:
    """Keep tests away from the real ~/.ssh/config and PATH lookups."""
    monkeypatch.setattr(
        "vigil.destination.DEFAULT_SSH_CONFIG",
        str(tmp_path / "no_such_ssh_config"),  # type: ignore[operator]
    )
    monkeypatch.setattr("vigil.client.shutil.which", lambda prog: f"/usr/bin/{prog}")


@pytest.fixture
def mock_config() -> RemoteConfig:
    """Create a configuration pointing at a fake host."""
    return RemoteConfig(ssh_args=(f"{TEST_USER}@{TEST_HOST}",))


@pytest.fixture
def fake_remote() -> FakeRemote:
    """A remote host with no tmux sessions."""
    return FakeRemote()
