"""Name sanitization and path helpers shared across the pipeline."""

import os
import re
import socket
from pathlib import Path

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def sanitize(s: str) -> str:
    """Normalize a string for use as a session name component.

    Lower-cases, collapses every run of non-alphanumeric characters to a
    single dash and trims dashes from both ends.
    """
    return _NON_ALNUM.sub("-", s.lower()).strip("-")


def expand_path(path: str) -> str:
    """Expand environment variables, then a leading ``~``."""
    if not path:
        return ""
    return os.path.expanduser(os.path.expandvars(path))


def canonical_path(path: str) -> str:
    """Return the absolute, symlink-resolved form of ``path``.

    Falls back to the absolute path when resolution fails.
    """
    if not path:
        return ""
    absolute = os.path.abspath(path)
    try:
        return str(Path(absolute).resolve(strict=True))
    except (OSError, RuntimeError):
        return absolute


def shorten_path(path: str) -> str:
    """Replace the home directory prefix with ``~`` for display."""
    home = str(Path.home())
    if path == home:
        return "~"
    if path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path


def get_hostname() -> str:
    """Return the short, lower-cased host name used for host config files."""
    return socket.gethostname().split(".")[0].lower()


def is_ssh() -> bool:
    """Return True when running over an SSH connection."""
    return any(os.environ.get(v) for v in ("SSH_CONNECTION", "SSH_CLIENT", "SSH_TTY"))
