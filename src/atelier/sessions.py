"""Session backend and last-session recovery state.

The backend owns persistent terminal sessions; atelier only asks it to
attach to (creating if needed), list, and kill sessions by name.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import get_state_dir
from .exceptions import SessionError
from .shell import set_terminal_title

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """A running session as reported by the backend."""

    id: str
    path: str = ""


class SessionBackend(ABC):
    """Interface to a persistent session manager."""

    @abstractmethod
    def attach(self, name: str, directory: str, *command: str) -> None:
        """Attach to session ``name``, creating it in ``directory`` running ``command``."""
        ...

    @abstractmethod
    def list(self) -> list[Session]:
        ...

    @abstractmethod
    def kill(self, name: str) -> None:
        ...

    def exists(self, name: str) -> bool:
        try:
            return any(s.id == name for s in self.list())
        except SessionError as e:
            logger.debug("Could not list sessions: %s", e)
            return False


class ZmxBackend(SessionBackend):
    """Backend driving the ``zmx`` session manager."""

    # zmx exits with 1 when the client detaches
    EXIT_DETACHED = 1

    def __init__(self, binary: str = "zmx"):
        self.binary = binary

    def attach(self, name: str, directory: str, *command: str) -> None:
        set_terminal_title(name)
        args = [self.binary, "attach", name, *command]
        logger.debug("Running %s in %s", args, directory)
        try:
            proc = subprocess.run(args, cwd=directory or None, check=False)
        except OSError as e:
            raise SessionError(f"failed to run {self.binary}: {e}") from e

        if proc.returncode not in (0, self.EXIT_DETACHED):
            raise SessionError(f"{self.binary} session ended with status {proc.returncode}")

    def list(self) -> list[Session]:
        try:
            proc = subprocess.run([self.binary, "list"], capture_output=True, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise SessionError(f"failed to list sessions: {e}") from e
        return self.parse_list(proc.stdout)

    def kill(self, name: str) -> None:
        try:
            subprocess.run([self.binary, "kill", name], capture_output=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise SessionError(f"failed to kill session {name}: {e}") from e

    @staticmethod
    def parse_list(output: str) -> list[Session]:
        """Parse ``zmx list`` output: one ``ID`` or ``ID<TAB>PATH`` per line."""
        sessions = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            parts = line.split("\t", 1)
            session_id = parts[0].removeprefix("session_name=")
            path = parts[1] if len(parts) > 1 else ""
            sessions.append(Session(id=session_id, path=path))
        return sessions


class SshZmxBackend(ZmxBackend):
    """zmx on another host, reached over ``ssh -t``."""

    def __init__(self, host: str, binary: str = "zmx"):
        super().__init__(binary)
        self.host = host

    def _ssh(self, *remote: str) -> list[str]:
        return ["ssh", "-t", self.host, " ".join(remote)]

    def attach(self, name: str, directory: str, *command: str) -> None:
        set_terminal_title(name)
        remote = [self.binary, "attach", shlex.quote(name), *(shlex.quote(c) for c in command)]
        if directory:
            remote = ["cd", shlex.quote(directory), "&&", *remote]
        args = self._ssh(*remote)
        logger.debug("Running %s", args)
        try:
            proc = subprocess.run(args, check=False)
        except OSError as e:
            raise SessionError(f"failed to run ssh: {e}") from e

        if proc.returncode not in (0, self.EXIT_DETACHED):
            raise SessionError(f"ssh session on {self.host} ended with status {proc.returncode}")

    def list(self) -> list[Session]:
        try:
            proc = subprocess.run(["ssh", self.host, self.binary, "list"],
                                  capture_output=True, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise SessionError(f"failed to list sessions on {self.host}: {e}") from e
        return self.parse_list(proc.stdout)

    def kill(self, name: str) -> None:
        try:
            subprocess.run(["ssh", self.host, self.binary, "kill", shlex.quote(name)],
                           capture_output=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise SessionError(f"failed to kill session {name} on {self.host}: {e}") from e


# ── Recovery state ───────────────────────────────────────────────


def _state_file(client_id: str, state_dir: Optional[Path] = None) -> Path:
    if not client_id or os.sep in client_id or client_id in (".", ".."):
        raise SessionError(f"invalid client id: {client_id!r}")
    return (state_dir or get_state_dir()) / client_id


def save_state(client_id: str, session_id: str, state_dir: Optional[Path] = None) -> None:
    """Remember ``session_id`` as the last session attached by ``client_id``."""
    path = _state_file(client_id, state_dir)
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    path.write_text(session_id, encoding="utf-8")
    path.chmod(0o600)


def load_state(client_id: str, state_dir: Optional[Path] = None) -> str:
    """Return the saved session id for ``client_id``, or "" if none."""
    path = _state_file(client_id, state_dir)
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return ""


def clear_state(client_id: str, state_dir: Optional[Path] = None) -> None:
    _state_file(client_id, state_dir).unlink(missing_ok=True)
