"""FastAPI relay exposing locations and actions to remote pickers."""

import logging
from collections.abc import Callable

from fastapi import Depends, FastAPI, HTTPException, Query

from . import __version__
from .auth import bearer_auth
from .config import Config
from .exceptions import AggregationError
from .manager import Manager
from .provider import LocationProvider
from .providers import ProjectProvider, get_providers
from .utils import canonical_path, expand_path

logger = logging.getLogger(__name__)

FILTERS = ("all", "projects", "zoxide")

ProviderFactory = Callable[[Config, str], list[LocationProvider]]


def default_providers(config: Config, filter: str) -> list[LocationProvider]:
    return get_providers(
        config,
        include_projects=filter in ("all", "projects"),
        include_zoxide=filter in ("all", "zoxide"),
    )


def create_app(config: Config, token: str, providers: ProviderFactory = default_providers) -> FastAPI:
    """Build the relay application for ``config``, guarded by ``token``."""
    app = FastAPI(title="atelier", version=__version__)
    auth = [Depends(bearer_auth(token))]

    # ── Routes ───────────────────────────────────────────────────────

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/locations", dependencies=auth)
    async def get_locations(
        filter: str = Query("all", description="Source filter: all, projects, zoxide"),
    ):
        """Return the aggregated locations."""
        if filter not in FILTERS:
            raise HTTPException(status_code=400, detail=f"Unknown filter: {filter}")

        manager = Manager(*providers(config, filter))
        try:
            locations = await manager.get_all()
        except AggregationError as e:
            logger.error("Failed to aggregate locations: %s", e)
            raise HTTPException(status_code=502, detail=str(e))

        return {"locations": [loc.to_dict() for loc in locations]}

    @app.get("/api/actions", dependencies=auth)
    async def get_actions(path: str = Query(..., description="Location path")):
        """Return the effective actions for the location at ``path``."""
        wanted = canonical_path(expand_path(path))
        provider = ProjectProvider(config.projects, config.actions, config.get_shell_default())
        for project in await provider.fetch():
            if project.path == wanted:
                return {
                    "actions": [a.to_dict() for a in project.actions],
                    "is_project": True,
                }

        return {
            "actions": [a.to_dict() for a in config.default_actions()],
            "is_project": False,
        }

    return app
