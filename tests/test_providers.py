"""Tests for the built-in location providers."""

import asyncio
import os

import pytest
from httpx import ASGITransport

from atelier.client import RelayClient
from atelier.config import Config, Project
from atelier.core import SOURCE_PROJECT, SOURCE_ZOXIDE, Action
from atelier.exceptions import ProviderError
from atelier.manager import Manager
from atelier.providers import ProjectProvider, RemoteProvider, ZoxideProvider, get_providers
from atelier.server import create_app
from atelier.utils import canonical_path


class TestProjectProvider:
    @pytest.mark.asyncio
    async def test_projects_become_locations(self, tmp_path):
        (tmp_path / "api").mkdir()
        provider = ProjectProvider(
            [Project(name="api", path=str(tmp_path / "api"), actions=[Action("build", "make")])],
            global_actions=[Action("editor", "nvim .")],
        )
        locations = await provider.fetch()

        assert len(locations) == 1
        api = locations[0]
        assert api.name == "api"
        assert api.path == canonical_path(str(tmp_path / "api"))
        assert api.source == SOURCE_PROJECT
        assert api.actions == (Action("editor", "nvim ."), Action("build", "make"), Action("shell", ""))

    @pytest.mark.asyncio
    async def test_paths_are_expanded_and_canonical(self, tmp_path, monkeypatch):
        real = tmp_path / "real"
        real.mkdir()
        (tmp_path / "link").symlink_to(real)
        monkeypatch.setenv("HOME", str(tmp_path))

        provider = ProjectProvider([Project(name="linked", path="~/link")])
        locations = await provider.fetch()

        assert locations[0].path == str(real.resolve())

    @pytest.mark.asyncio
    async def test_project_without_path_is_skipped(self):
        provider = ProjectProvider([Project(name="ghost", path="")])
        assert await provider.fetch() == []

    @pytest.mark.asyncio
    async def test_shell_default_places_shell_first(self, tmp_path):
        provider = ProjectProvider(
            [Project(name="api", path=str(tmp_path), actions=[Action("build", "make")])],
            shell_default=True,
        )
        locations = await provider.fetch()
        assert locations[0].actions[0] == Action("shell", "")


class TestZoxideProvider:
    @pytest.mark.asyncio
    async def test_parses_paths(self, tmp_path, fake_zoxide):
        a = tmp_path / "alpha"
        b = tmp_path / "beta"
        a.mkdir()
        b.mkdir()
        binary = fake_zoxide(f"printf '%s\\n' '{a}' '' '{b}/'")

        locations = await ZoxideProvider(binary=binary).fetch()

        assert [l.name for l in locations] == ["alpha", "beta"]
        assert [l.path for l in locations] == [canonical_path(str(a)), canonical_path(str(b))]
        assert all(l.source == SOURCE_ZOXIDE for l in locations)
        assert all(l.actions == (Action("shell", ""),) for l in locations)

    @pytest.mark.asyncio
    async def test_default_actions_with_shell(self, tmp_path, fake_zoxide):
        binary = fake_zoxide(f"echo '{tmp_path}'")
        provider = ZoxideProvider([Action("editor", "nvim .")], shell_default=True, binary=binary)
        locations = await provider.fetch()
        assert locations[0].actions == (Action("shell", ""), Action("editor", "nvim ."))

    @pytest.mark.asyncio
    async def test_missing_binary_yields_nothing(self, tmp_path):
        provider = ZoxideProvider(binary=str(tmp_path / "no-such-zoxide"))
        assert await provider.fetch() == []

    @pytest.mark.asyncio
    async def test_empty_database_yields_nothing(self, fake_zoxide):
        binary = fake_zoxide("echo 'zoxide: no match found' >&2; exit 1")
        assert await ZoxideProvider(binary=binary).fetch() == []

    @pytest.mark.asyncio
    async def test_real_failure_raises(self, fake_zoxide):
        binary = fake_zoxide("echo 'database corrupted' >&2; exit 2")
        with pytest.raises(ProviderError, match="database corrupted"):
            await ZoxideProvider(binary=binary).fetch()

    @pytest.mark.asyncio
    async def test_cancel_kills_and_reaps_child(self, tmp_path, fake_zoxide):
        pid_file = tmp_path / "pid"
        binary = fake_zoxide(f"echo $$ > '{pid_file}'; exec sleep 30")
        task = asyncio.create_task(ZoxideProvider(binary=binary).fetch())

        for _ in range(100):
            if pid_file.exists() and pid_file.read_text().strip():
                break
            await asyncio.sleep(0.05)
        pid = int(pid_file.read_text())

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)

    def test_parse_output_ignores_blank_lines(self):
        locations = ZoxideProvider.parse_output("\n  \n")
        assert locations == []


class TestRemoteProvider:
    @pytest.mark.asyncio
    async def test_fetches_from_relay(self, static_provider, api_location):
        app = create_app(Config(), "secret", providers=lambda c, f: [static_provider("Project", [api_location])])
        client = RelayClient("http://test", "secret", transport=ASGITransport(app=app))

        locations = await Manager(RemoteProvider(client)).get_all()

        assert locations == [api_location]

    @pytest.mark.asyncio
    async def test_relay_error_is_provider_error(self, static_provider):
        app = create_app(Config(), "secret", providers=lambda c, f: [])
        client = RelayClient("http://test", "wrong", transport=ASGITransport(app=app))
        with pytest.raises(ProviderError, match="401"):
            await RemoteProvider(client).fetch()


class TestGetProviders:
    def test_both_by_default(self):
        providers = get_providers(Config())
        assert [p.name for p in providers] == [SOURCE_PROJECT, SOURCE_ZOXIDE]

    def test_projects_only(self):
        assert [p.name for p in get_providers(Config(), include_projects=True)] == [SOURCE_PROJECT]

    def test_zoxide_only(self):
        assert [p.name for p in get_providers(Config(), include_zoxide=True)] == [SOURCE_ZOXIDE]
