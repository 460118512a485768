"""Shared test fixtures for atelier."""

import asyncio

import pytest

from atelier.core import SOURCE_PROJECT, SOURCE_ZOXIDE, Action, Location
from atelier.exceptions import ProviderError
from atelier.provider import LocationProvider


class StaticProvider(LocationProvider):
    """Provider returning a fixed list, optionally after a delay."""

    def __init__(self, name, locations, delay=0.0):
        self.name = name
        self.locations = list(locations)
        self.delay = delay
        self.cancelled = False

    async def fetch(self):
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        return list(self.locations)


class FailingProvider(LocationProvider):
    """Provider that always fails."""

    def __init__(self, name="Broken", message="boom"):
        self.name = name
        self.message = message

    async def fetch(self):
        raise ProviderError(self.message)


@pytest.fixture
def static_provider():
    """Factory for providers with canned locations."""
    return StaticProvider


@pytest.fixture
def failing_provider():
    return FailingProvider


@pytest.fixture
def api_location():
    """A project with two actions, build first."""
    return Location(
        name="api",
        path="/home/u/api",
        source=SOURCE_PROJECT,
        actions=(Action("build", "make"), Action("test", "go test")),
    )


@pytest.fixture
def picker_locations():
    """Locations in aggregation order: zoxide entry first, projects after."""
    return [
        Location(
            name="dotfiles",
            path="/home/u/dotfiles",
            source=SOURCE_ZOXIDE,
            actions=(Action("shell", ""),),
        ),
        Location(
            name="api",
            path="/home/u/api",
            source=SOURCE_PROJECT,
            actions=(Action("build", "make"), Action("test", "go test"), Action("shell", "")),
        ),
        Location(name="web", path="/home/u/web", source=SOURCE_PROJECT),
    ]


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """An empty config directory that load_config() picks up."""
    directory = tmp_path / "config"
    directory.mkdir()
    monkeypatch.setenv("ATELIER_CONFIG_DIR", str(directory))
    return directory


@pytest.fixture
def fake_zoxide(tmp_path):
    """Write an executable standing in for zoxide.

    Returns a function taking the script body and returning its path.
    """
    def make(body: str) -> str:
        script = tmp_path / "zoxide"
        script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        script.chmod(0o755)
        return str(script)

    return make
