"""Provider for frequently used directories ranked by zoxide.

Runs ``zoxide query -l``, which prints one absolute path per line, most
frecent first. zoxide is optional: when the binary is missing or its
database is empty the provider yields no locations instead of failing.
"""

import asyncio
import logging
import os

from ..actions import build_actions_with_shell
from ..core import SOURCE_ZOXIDE, Action, Location
from ..exceptions import ProviderError
from ..provider import LocationProvider
from ..utils import canonical_path

logger = logging.getLogger(__name__)

# zoxide exits with 1 and prints nothing when its database is empty
_EXIT_NO_MATCH = 1


class ZoxideProvider(LocationProvider):
    """Provider for zoxide's directory index."""

    name = SOURCE_ZOXIDE

    def __init__(self, default_actions: list[Action] | None = None, shell_default: bool = False,
                 binary: str = "zoxide"):
        self.default_actions = list(default_actions or [])
        self.shell_default = shell_default
        self.binary = binary

    async def fetch(self) -> list[Location]:
        output = await self._query()
        actions = tuple(build_actions_with_shell(self.default_actions, self.shell_default))
        return self.parse_output(output, actions)

    async def _query(self) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary, "query", "-l",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            logger.debug("%s not found on PATH, skipping", self.binary)
            return ""
        except OSError as e:
            raise ProviderError(f"failed to run {self.binary} query: {e}") from e

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        out = stdout.decode("utf-8", errors="replace")
        if proc.returncode == 0:
            return out
        if proc.returncode == _EXIT_NO_MATCH and not out.strip():
            logger.debug("zoxide database is empty")
            return ""

        detail = stderr.decode("utf-8", errors="replace").strip()
        raise ProviderError(f"{self.binary} query exited with status {proc.returncode}: {detail}")

    @staticmethod
    def parse_output(output: str, actions: tuple[Action, ...] = ()) -> list[Location]:
        """Turn newline-delimited paths into locations."""
        locations = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            path = canonical_path(os.path.normpath(line))
            locations.append(Location(
                name=os.path.basename(path) or path,
                path=path,
                source=SOURCE_ZOXIDE,
                actions=actions,
            ))
        return locations
