"""Configuration loading and XDG-aware path resolution.

The configuration lives in ``config.yaml`` inside the config directory. A
file named after the current host (``<hostname>.yaml``) is merged on top of
it, so one dotfiles checkout can carry per-machine projects.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from .actions import build_actions_with_shell, merge_actions
from .core import Action
from .exceptions import ConfigError
from .utils import get_hostname

logger = logging.getLogger(__name__)

APP_NAME = "atelier"
CONFIG_FILENAME = "config.yaml"
DEFAULT_EDITOR = "vim"


def get_config_dir() -> Path:
    """Return the configuration directory."""
    env = os.environ.get("ATELIER_CONFIG_DIR")
    if env:
        return Path(env).expanduser()

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_state_dir() -> Path:
    """Return the directory holding session recovery files."""
    xdg = os.environ.get("XDG_STATE_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".local" / "state"
    return base / APP_NAME / "sessions"


def get_data_dir() -> Path:
    """Return the data directory (relay token)."""
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".local" / "share"
    return base / APP_NAME


@dataclass
class Theme:
    """Colors used by the picker."""

    primary: str = "#58a6ff"
    accent: str = "#1f6feb"
    highlight: str = "#238636"
    text: str = "#c9d1d9"
    subtext: str = "#8b949e"

    def merged(self, other: dict) -> "Theme":
        values = {f.name: other.get(f.name) or getattr(self, f.name) for f in fields(self)}
        return Theme(**values)


@dataclass
class Project:
    """A statically configured project."""

    name: str
    path: str
    actions: list[Action] = field(default_factory=list)
    default_actions: Optional[bool] = None  # None: inherit global actions
    shell_default: Optional[bool] = None  # None: inherit the root setting

    def use_default_actions(self) -> bool:
        return True if self.default_actions is None else self.default_actions

    def get_shell_default(self, root_default: bool) -> bool:
        return root_default if self.shell_default is None else self.shell_default

    def effective_actions(self, global_actions: list[Action], root_shell_default: bool) -> list[Action]:
        """Return the ordered action list shown for this project."""
        base = global_actions if self.use_default_actions() else []
        actions = merge_actions(base, self.actions)
        return build_actions_with_shell(actions, self.get_shell_default(root_shell_default))


@dataclass
class Config:
    """Application configuration, passed explicitly to every component."""

    projects: list[Project] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    shell_default: Optional[bool] = None
    editor: str = ""
    theme: Theme = field(default_factory=Theme)

    def get_shell_default(self) -> bool:
        return bool(self.shell_default)

    def get_editor(self) -> str:
        """Return the configured editor, then $EDITOR, then vim."""
        return self.editor or os.environ.get("EDITOR") or DEFAULT_EDITOR

    def default_actions(self) -> list[Action]:
        """Return the action list used for locations that are not projects."""
        return build_actions_with_shell(self.actions, self.get_shell_default())

    def merge(self, other: "Config", raw_theme: Optional[dict] = None) -> None:
        """Merge ``other`` (a host config) into this one; ``other`` wins."""
        self.projects = _merge_projects(self.projects, other.projects)
        self.actions = merge_actions(self.actions, other.actions)
        if raw_theme:
            self.theme = self.theme.merged(raw_theme)
        if other.editor:
            self.editor = other.editor
        if other.shell_default is not None:
            self.shell_default = other.shell_default

    def validate(self) -> None:
        for i, project in enumerate(self.projects):
            if not project.name:
                raise ConfigError(f"project at index {i} missing name")
            if not project.path:
                raise ConfigError(f"project {project.name!r} missing path")


def _merge_projects(base: list[Project], host: list[Project]) -> list[Project]:
    """Host projects replace base projects with the same name, others append."""
    merged = list(base)
    index = {p.name: i for i, p in enumerate(merged)}
    for project in host:
        if project.name in index:
            merged[index[project.name]] = project
        else:
            index[project.name] = len(merged)
            merged.append(project)
    return merged


def _optional_bool(data: dict, key: str, where: str) -> Optional[bool]:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value
    raise ConfigError(f"{where}: {key!r} must be true or false")


def _parse_actions(raw, where: str) -> list[Action]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"{where}: 'actions' must be a list")
    actions = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ConfigError(f"{where}: each action must be a mapping")
        actions.append(Action.from_dict(entry))
    return actions


def parse_config(data: Optional[dict], source: str = "<config>") -> Config:
    """Build a Config from a parsed YAML document."""
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")

    projects = []
    for i, entry in enumerate(data.get("projects") or []):
        if not isinstance(entry, dict):
            raise ConfigError(f"{source}: project at index {i} must be a mapping")
        where = f"{source}: project {entry.get('name') or i!r}"
        projects.append(Project(
            name=str(entry.get("name") or ""),
            path=str(entry.get("path") or ""),
            actions=_parse_actions(entry.get("actions"), where),
            default_actions=_optional_bool(entry, "default-actions", where),
            shell_default=_optional_bool(entry, "shell-default", where),
        ))

    theme = data.get("theme") or {}
    if not isinstance(theme, dict):
        raise ConfigError(f"{source}: 'theme' must be a mapping")

    return Config(
        projects=projects,
        actions=_parse_actions(data.get("actions"), source),
        shell_default=_optional_bool(data, "shell-default", source),
        editor=str(data.get("editor") or ""),
        theme=Theme().merged(theme),
    )


def _read_yaml(path: Path) -> Optional[dict]:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"failed to read {path}: {e}") from e


def load_config(config_dir: Optional[Path] = None, hostname: Optional[str] = None) -> Config:
    """Load config.yaml and merge the host-specific file on top of it.

    Missing files are not an error; an absent configuration yields defaults.
    """
    config_dir = config_dir or get_config_dir()
    hostname = get_hostname() if hostname is None else hostname

    main_path = config_dir / CONFIG_FILENAME
    if main_path.is_file():
        config = parse_config(_read_yaml(main_path), str(main_path))
        logger.debug("Loaded config from %s", main_path)
    else:
        config = Config()
        logger.debug("No config at %s, using defaults", main_path)

    if hostname:
        host_path = config_dir / f"{hostname}.yaml"
        if host_path.is_file():
            raw = _read_yaml(host_path)
            host_config = parse_config(raw, str(host_path))
            config.merge(host_config, raw_theme=(raw or {}).get("theme"))
            logger.debug("Merged host config from %s", host_path)

    config.validate()
    return config
