"""Tests for sanitization and path helpers."""

import os
from pathlib import Path

import pytest

from atelier.utils import canonical_path, expand_path, sanitize, shorten_path


class TestSanitize:
    @pytest.mark.parametrize("raw, expected", [
        ("My Project!", "my-project"),
        ("  ", ""),
        ("", ""),
        ("build", "build"),
        ("--Go  Test--", "go-test"),
        ("api_v2.server", "api-v2-server"),
        ("ÜBER cool", "ber-cool"),
    ])
    def test_examples(self, raw, expected):
        assert sanitize(raw) == expected

    @pytest.mark.parametrize("raw", ["My Project!", "a--b", "-x-", "Shell"])
    def test_idempotent(self, raw):
        assert sanitize(sanitize(raw)) == sanitize(raw)


class TestPaths:
    def test_expand_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_path("~/src") == str(tmp_path / "src")

    def test_expand_env_var(self, monkeypatch):
        monkeypatch.setenv("ATELIER_TEST_ROOT", "/opt/work")
        assert expand_path("$ATELIER_TEST_ROOT/api") == "/opt/work/api"

    def test_expand_empty(self):
        assert expand_path("") == ""

    def test_canonical_resolves_symlinks(self, tmp_path):
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real)
        assert canonical_path(str(link)) == str(real.resolve())

    def test_canonical_missing_path_is_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = canonical_path("does-not-exist")
        assert os.path.isabs(result)
        assert result.endswith("does-not-exist")

    def test_shorten_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert shorten_path(str(tmp_path / "src" / "api")) == "~/src/api"
        assert shorten_path(str(Path.home())) == "~"
        assert shorten_path("/etc") == "/etc"
