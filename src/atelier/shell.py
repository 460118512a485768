"""Shell detection, command wrapping and terminal housekeeping."""

import logging
import os
import subprocess
import sys

from .utils import is_ssh

logger = logging.getLogger(__name__)

FALLBACK_SHELL = "/bin/bash"
ICON_SSH = "\uf233"  # nf-fa-server


def detect_shell() -> str:
    """Return the user's shell, falling back to bash."""
    return os.environ.get("SHELL") or FALLBACK_SHELL


def interactive_wrapper(shell: str, command: str = "") -> tuple[str, ...]:
    """Return argv running ``command`` in an interactive login shell.

    An empty command yields a bare interactive login shell.
    """
    if not command:
        return (shell, "-l", "-i")
    return (shell, "-l", "-i", "-c", command)


def set_terminal_title(title: str) -> None:
    if is_ssh():
        title = f"{ICON_SSH} {title}"
    sys.stdout.write(f"\033]0;{title}\007")
    sys.stdout.flush()


def bootstrap_environment(timeout: float = 5.0) -> None:
    """Take PATH from an interactive login shell when running over SSH.

    SSH RemoteCommand sessions often start with a minimal PATH that lacks
    zoxide and zmx. Failures only log a warning.
    """
    if not os.environ.get("SSH_CONNECTION"):
        return

    shell = os.environ.get("SHELL", "")
    if not shell or shell == "/bin/sh":
        shell = next((s for s in ("/bin/zsh", "/bin/bash") if os.path.exists(s)), "/bin/sh")

    try:
        result = subprocess.run(
            [shell, "-l", "-i", "-c", "echo $PATH"],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Failed to harvest environment from %s: %s", shell, e)
        return

    # rc files may print banners; the PATH is the last line that looks like one
    for line in reversed(result.stdout.strip().splitlines()):
        line = line.strip()
        if line and "/" in line:
            os.environ["PATH"] = line
            logger.debug("PATH harvested from %s", shell)
            return
