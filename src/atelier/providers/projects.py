"""Provider for statically configured projects."""

import logging

from ..config import Project
from ..core import SOURCE_PROJECT, Action, Location
from ..provider import LocationProvider
from ..utils import canonical_path, expand_path

logger = logging.getLogger(__name__)


class ProjectProvider(LocationProvider):
    """Provider for the projects listed in the configuration."""

    name = SOURCE_PROJECT

    def __init__(self, projects: list[Project], global_actions: list[Action] | None = None,
                 shell_default: bool = False):
        self.projects = list(projects)
        self.global_actions = list(global_actions or [])
        self.shell_default = shell_default

    async def fetch(self) -> list[Location]:
        locations = []
        for project in self.projects:
            if not project.path:
                logger.debug("Skipping project %r without a path", project.name)
                continue

            locations.append(Location(
                name=project.name,
                path=canonical_path(expand_path(project.path)),
                source=SOURCE_PROJECT,
                actions=tuple(project.effective_actions(self.global_actions, self.shell_default)),
            ))
        return locations
