"""SSH client driver for remote tmux sessions."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable

from vigil.commands import (
    Attach,
    CreateOrAttach,
    Kill,
    ListSessions,
    Operation,
    build,
)
from vigil.config import RemoteConfig
from vigil.console import debug, error, info, status, success, warning
from vigil.destination import resolve_destination
from vigil.errors import (
    EXIT_COMPLETED,
    LocalError,
    NoSessionsError,
    RemoteExecError,
    SSHNotFoundError,
    VigilError,
)
from vigil.naming import DEFAULT_BASE, qualify, resolve
from vigil.selector import select
from vigil.sessions import SessionRecord, parse

# stderr from `tmux list-sessions` when no server is running for the user
NO_SERVER_MARKERS = ("no server running", "error connecting to")

EXIT_COMMAND_NOT_FOUND = 127
# tmux itself exits 1 on failure; ssh uses 255 for its own errors
EXIT_TMUX_FAILURE = 1

TMUX_INSTALL_HINT = (
    "Remote reported 'command not found'; tmux may not be installed.\n"
    "    - Debian/Ubuntu: sudo apt-get install tmux\n"
    "    - RHEL/CentOS/Fedora: sudo dnf install tmux\n"
    "    - macOS (Homebrew): brew install tmux\n"
    "    Or point --tmux at the remote tmux binary."
)

Runner = Callable[..., subprocess.CompletedProcess]


class SessionClient:
    """Realizes the vigil verbs by running the SSH client with tmux commands."""

    def __init__(
        self,
        config: RemoteConfig,
        local_user: str,
        base: str = DEFAULT_BASE,
        runner: Runner | None = None,
        input_func: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Configuration for this invocation
            local_user: Invoking user's login name, used to scope sessions
            base: Base name of the default session
            runner: Callable with the subprocess.run signature (for testing)
            input_func: Reads one line of selection input (for testing)
        """
        self.config = config
        self.local_user = local_user
        self.base = base
        self._runner = runner if runner is not None else subprocess.run
        self._input = input_func if input_func is not None else input

    @property
    def default_session(self) -> str:
        """Full name of the user's default session."""
        return resolve(self.base, self.local_user)

    def _trace(self, msg: str) -> None:
        if self.config.debug:
            status(debug(msg))

    def _check_ssh(self) -> None:
        if shutil.which(self.config.ssh_prog) is None:
            raise SSHNotFoundError(f"`{self.config.ssh_prog}` not found in PATH")

    def _announce(self) -> None:
        dest = resolve_destination(self.config.ssh_args)
        if dest.user:
            status(info(f"Connecting to {dest.host} as {dest.user}..."))
        else:
            status(info(f"Connecting to {dest.host}..."))

    def _ssh(
        self,
        command: str,
        tty: bool,
        capture_stdout: bool = False,
        capture_stderr: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        """Run one remote command and wait for it.

        Streams that are not captured stay attached to the local terminal.
        """
        if tty:
            ssh_args = self.config.interactive_ssh_args()
        else:
            ssh_args = self.config.capture_ssh_args()
        argv = [self.config.ssh_prog, *ssh_args, command]
        self._trace(f"ssh argv: {argv}")

        if capture_stdout or capture_stderr:
            result = self._runner(
                argv,
                stdout=subprocess.PIPE if capture_stdout else None,
                stderr=subprocess.PIPE if capture_stderr else None,
                text=True,
                check=False,
            )
        else:
            result = self._runner(argv, check=False)

        self._trace(f"exit status: {result.returncode}")
        stderr = (result.stderr or "").strip() if capture_stderr else ""
        if result.returncode != EXIT_COMPLETED:
            raise RemoteExecError(
                f"Remote command failed (exit {result.returncode})",
                returncode=result.returncode,
                stderr=stderr,
                command=command,
            )
        if stderr and not capture_stdout:
            status(stderr)
        return result

    def list_sessions(self) -> list[SessionRecord]:
        """Query the remote host for the invoking user's sessions."""
        command = build(ListSessions(), self.config)
        try:
            result = self._ssh(
                command, tty=False, capture_stdout=True, capture_stderr=True
            )
        except RemoteExecError as e:
            if e.returncode == EXIT_TMUX_FAILURE and any(
                marker in e.stderr for marker in NO_SERVER_MARKERS
            ):
                self._trace("no tmux server running remotely")
                return []
            raise
        return parse(result.stdout or "", self.local_user)

    def show_sessions(self) -> int:
        """Print the user's sessions to stdout."""
        sessions = self.list_sessions()
        if not sessions:
            status(info("No tmux sessions found remotely."))
            return EXIT_COMPLETED
        for record in sessions:
            print(record.describe())
        return EXIT_COMPLETED

    def create_or_attach(self, session_name: str | None = None) -> int:
        """Attach to session_name (default session if None), creating it if needed."""
        name = session_name or self.default_session
        status(info(f"Attaching to session: {name}"))
        self._ssh(build(CreateOrAttach(), self.config, name), tty=True)
        return EXIT_COMPLETED

    def attach(self, session_name: str | None = None) -> int:
        """Attach to an existing session.

        Args:
            session_name: Session to attach to (default: select interactively,
                or create the default session when none exist)
        """
        if session_name:
            name = qualify(session_name, self.local_user)
        else:
            sessions = self.list_sessions()
            if not sessions:
                status(
                    info(
                        "No tmux sessions found remotely; "
                        f"will create '{self.default_session}'."
                    )
                )
                return self.create_or_attach()
            name = select(sessions, "attach", input_func=self._input)

        status(info(f"Attaching to session: {name}"))
        self._ssh(build(Attach(name), self.config, name), tty=True)
        return EXIT_COMPLETED

    def kill(self, session_name: str | None = None) -> int:
        """Kill a session.

        Args:
            session_name: Session to kill (default: select interactively)
        """
        if session_name:
            name = qualify(session_name, self.local_user)
        else:
            sessions = self.list_sessions()
            if not sessions:
                raise NoSessionsError("No tmux sessions found remotely to kill.")
            name = select(sessions, "kill", input_func=self._input)

        self._ssh(
            build(Kill(name), self.config, name),
            tty=False,
            capture_stderr=True,
        )
        status(success(f"Killed session '{name}'."))
        return EXIT_COMPLETED

    def dispatch(self, op: Operation) -> int:
        """Run op, letting errors propagate."""
        if isinstance(op, ListSessions):
            return self.show_sessions()
        if isinstance(op, CreateOrAttach):
            return self.create_or_attach()
        if isinstance(op, Attach):
            return self.attach(op.name)
        if isinstance(op, Kill):
            return self.kill(op.name)
        raise TypeError(f"Unknown operation: {op!r}")

    def run(self, op: Operation) -> int:
        """Run op and turn failures into a printed message and exit code.

        Returns:
            EXIT_COMPLETED, EXIT_LOCAL_ERROR for local precondition failures,
            or the SSH subprocess exit code for remote failures.
        """
        try:
            resolve(self.base, self.local_user)
            self._check_ssh()
            self._announce()
            return self.dispatch(op)
        except LocalError as e:
            status(error(str(e)))
            status(info("Local check failed; fix the arguments and retry."))
            return e.exit_code
        except RemoteExecError as e:
            status(error(f"{e}: SSH connection or remote tmux error."))
            if e.stderr:
                status(warning(f"Remote said: {e.stderr}"))
            if e.returncode == EXIT_COMMAND_NOT_FOUND:
                status(warning(TMUX_INSTALL_HINT))
            return e.exit_code
        except VigilError as e:
            status(error(str(e)))
            return e.exit_code
