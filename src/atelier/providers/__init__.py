"""Built-in location providers and provider selection."""

from ..config import Config
from ..provider import LocationProvider
from .projects import ProjectProvider
from .remote import RemoteProvider
from .zoxide import ZoxideProvider

__all__ = ["ProjectProvider", "RemoteProvider", "ZoxideProvider", "get_providers"]


def get_providers(config: Config, include_projects: bool = False,
                  include_zoxide: bool = False) -> list[LocationProvider]:
    """Return providers in precedence order: projects before zoxide.

    Selecting neither source means both.
    """
    if not include_projects and not include_zoxide:
        include_projects = include_zoxide = True

    providers: list[LocationProvider] = []
    if include_projects:
        providers.append(ProjectProvider(config.projects, config.actions, config.get_shell_default()))
    if include_zoxide:
        providers.append(ZoxideProvider(config.actions, config.get_shell_default()))
    return providers
