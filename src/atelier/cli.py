"""CLI entry point for atelier."""

import asyncio
import logging
import os
from urllib.parse import urlparse

import click
import uvicorn
from rich.console import Console
from rich.table import Table

from . import __version__
from .auth import default_token_path, generate_token, load_or_create_token, save_token
from .client import RelayClient
from .config import Config, load_config
from .core import SOURCE_FOLDER, Action, Location
from .exceptions import AtelierError, RelayError
from .manager import Manager
from .provider import LocationProvider
from .providers import RemoteProvider, get_providers
from .resolver import resolve, target_from_selection
from .sessions import SessionBackend, SshZmxBackend, ZmxBackend, clear_state, load_state, save_state
from .shell import bootstrap_environment, detect_shell
from .utils import canonical_path, expand_path, get_hostname

logger = logging.getLogger(__name__)
console = Console()


def _load_config() -> Config:
    try:
        return load_config()
    except AtelierError as e:
        raise click.ClickException(f"error loading config: {e}")


def _providers(ctx: click.Context, config: Config, projects: bool = False,
               zoxide: bool = False) -> list[LocationProvider]:
    remote = ctx.obj.get("remote")
    if remote:
        if projects and not zoxide:
            filter = "projects"
        elif zoxide and not projects:
            filter = "zoxide"
        else:
            filter = "all"
        token = ctx.obj.get("token") or ""
        return [RemoteProvider(RelayClient(remote, token), filter)]
    return get_providers(config, include_projects=projects, include_zoxide=zoxide)


def _remote_actions(ctx: click.Context, path: str) -> list[Action]:
    """Ask the relay which actions apply to ``path`` on its host."""
    client = RelayClient(ctx.obj["remote"], ctx.obj.get("token") or "")
    try:
        actions, _ = asyncio.run(client.fetch_actions(path))
    except RelayError as e:
        logger.warning("Failed to fetch actions for %s: %s", path, e)
        return []
    return actions


def _backend(ctx: click.Context) -> SessionBackend:
    remote = ctx.obj.get("remote")
    if remote:
        return SshZmxBackend(urlparse(remote).hostname or remote)
    return ZmxBackend()


def _run_interactive(ctx: click.Context, projects: bool = False, zoxide: bool = False) -> None:
    """Aggregate locations, let the user pick one, and attach to its session."""
    from .tui import run_picker

    config = _load_config()
    backend = _backend(ctx)
    client_id = ctx.obj.get("client_id")

    try:
        if client_id:
            saved = load_state(client_id)
            if saved and backend.exists(saved):
                click.echo(f"Reattaching to session '{saved}'")
                backend.attach(saved, "")
                clear_state(client_id)
                return

        locations = asyncio.run(Manager(*_providers(ctx, config, projects, zoxide)).get_all())
        if not locations:
            click.echo("No projects or recent directories found.")
            return

        result = run_picker(locations, config.theme)
        if result.canceled:
            return

        target = target_from_selection(result, detect_shell(), config.get_editor())
        if client_id:
            save_state(client_id, target.name)
        click.echo(f"Attaching to session '{target.name}' in {target.path}")
        backend.attach(target.name, target.path, *target.command)
        if client_id:
            clear_state(client_id)
    except AtelierError as e:
        raise click.ClickException(str(e))


@click.group(invoke_without_command=True)
@click.option("--client-id", default=None, help="Client identifier for session recovery.")
@click.option("--remote", default=None, metavar="URL", help="Fetch locations from a relay at URL.")
@click.option("--token", envvar="ATELIER_TOKEN", default=None, help="Relay token (used with --remote).")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="atelier")
@click.pass_context
def main(ctx: click.Context, client_id, remote, token, verbose):
    """Jump into a project or directory inside a persistent session."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj.update(client_id=client_id, remote=remote, token=token)
    bootstrap_environment()

    if ctx.invoked_subcommand is None:
        _run_interactive(ctx)


@main.command()
@click.option("-p", "--projects", is_flag=True, help="Show projects only.")
@click.option("-z", "--zoxide", is_flag=True, help="Show zoxide directories only.")
@click.pass_context
def ui(ctx: click.Context, projects: bool, zoxide: bool):
    """Start the interactive picker with custom sources."""
    _run_interactive(ctx, projects, zoxide)


main.add_command(ui, name="start")


@main.command()
@click.option("-p", "--projects", is_flag=True, help="List only configured projects.")
@click.option("-z", "--zoxide", is_flag=True, help="List only zoxide directories.")
@click.pass_context
def locations(ctx: click.Context, projects: bool, zoxide: bool):
    """List available projects and directories."""
    config = _load_config()
    try:
        locs = asyncio.run(Manager(*_providers(ctx, config, projects, zoxide)).get_all())
    except AtelierError as e:
        raise click.ClickException(f"error fetching locations: {e}")

    table = _table("SOURCE", "NAME", "PATH", "ACTIONS")
    for loc in locs:
        table.add_row(loc.source, loc.name, loc.path, str(len(loc.actions)) if loc.actions else "-")
    console.print(table)


@click.command()
@click.option("-p", "--project", default=None, help="Project name to attach to.")
@click.option("-a", "--action", "action_name", default="", help="Action to run (optional, with --project).")
@click.option("-f", "--folder", default=None, type=click.Path(file_okay=False), help="Folder to attach to.")
@click.pass_context
def attach(ctx: click.Context, project, action_name, folder):
    """Attach to a session without the picker."""
    if bool(project) == bool(folder):
        raise click.UsageError("provide exactly one of --project or --folder")

    config = _load_config()
    try:
        if project:
            manager = Manager(*_providers(ctx, config, projects=True))
            location = asyncio.run(manager.find(project))
        else:
            if ctx.obj.get("remote"):
                # the folder lives on the relay host
                path = os.path.normpath(folder)
                actions = tuple(_remote_actions(ctx, path))
            else:
                path = canonical_path(expand_path(folder))
                actions = ()
            location = Location(
                name=os.path.basename(path) or path,
                path=path,
                source=SOURCE_FOLDER,
                actions=actions,
            )

        target = resolve(location, action_name, detect_shell(), config.get_editor())
        _backend(ctx).attach(target.name, target.path, *target.command)
    except AtelierError as e:
        raise click.ClickException(str(e))


main.add_command(attach)


@main.group()
def sessions():
    """Manage workspace sessions."""
    pass


sessions.add_command(attach)


@sessions.command("list")
@click.pass_context
def sessions_list(ctx: click.Context):
    """List active sessions."""
    try:
        active = _backend(ctx).list()
    except AtelierError as e:
        raise click.ClickException(f"error listing sessions: {e}")

    if not active:
        click.echo("No active sessions found.")
        return
    table = _table("ID", "PATH")
    for s in active:
        table.add_row(s.id, s.path)
    console.print(table)


@sessions.command("kill")
@click.argument("name")
@click.pass_context
def sessions_kill(ctx: click.Context, name: str):
    """Kill a session."""
    try:
        _backend(ctx).kill(name)
    except AtelierError as e:
        raise click.ClickException(f"error killing session: {e}")
    click.echo(f"Session '{name}' killed.")


@main.command()
@click.option("--port", default=8421, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
def serve(port: int, host: str):
    """Start the relay serving locations and actions over HTTP."""
    from .server import create_app

    config = _load_config()
    app = create_app(config, load_or_create_token())
    click.echo(f"Starting atelier relay on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, reload=False)


@main.command()
@click.option("--rotate", is_flag=True, help="Generate and store a new token.")
def token(rotate: bool):
    """Print the relay token."""
    path = default_token_path()
    if rotate:
        value = generate_token()
        save_token(path, value)
    else:
        value = load_or_create_token(path)
    click.echo(value)


@main.command()
def hostname():
    """Print the host name used for host-specific configuration."""
    click.echo(get_hostname())


def _table(*columns: str) -> Table:
    table = Table(box=None, header_style="bold")
    for i, column in enumerate(columns):
        table.add_column(column, style="cyan" if i == 0 else None)
    return table
