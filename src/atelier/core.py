"""Core data models for atelier."""

from dataclasses import dataclass, field
from typing import Optional

SOURCE_PROJECT = "Project"
SOURCE_ZOXIDE = "Zoxide"
SOURCE_FOLDER = "Folder"


@dataclass(frozen=True)
class Action:
    """A named command bound to a location."""

    name: str  # e.g. "build", "shell"
    command: str = ""  # empty: interactive login shell, no command

    def to_dict(self) -> dict:
        return {"name": self.name, "command": self.command}

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        return cls(name=str(data.get("name") or ""), command=str(data.get("command") or ""))


@dataclass(frozen=True)
class Location:
    """A project or directory a session can be attached to.

    Two locations with the same canonical ``path`` are the same entity no
    matter which provider produced them.
    """

    name: str
    path: str  # canonical: absolute, symlinks resolved
    source: str  # "Project" | "Zoxide" | "Folder"
    actions: tuple[Action, ...] = field(default_factory=tuple)

    @property
    def is_project(self) -> bool:
        return self.source == SOURCE_PROJECT

    @property
    def has_actions(self) -> bool:
        return len(self.actions) > 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "source": self.source,
            "actions": [a.to_dict() for a in self.actions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        return cls(
            name=str(data.get("name") or ""),
            path=str(data.get("path") or ""),
            source=str(data.get("source") or ""),
            actions=tuple(Action.from_dict(a) for a in data.get("actions") or []),
        )


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of the interactive picker.

    When ``canceled`` is true, ``location`` and ``action`` are always None.
    """

    location: Optional[Location] = None
    action: Optional[Action] = None  # None: the location's implicit default
    canceled: bool = False

    @classmethod
    def cancel(cls) -> "SelectionResult":
        return cls(location=None, action=None, canceled=True)


@dataclass(frozen=True)
class Target:
    """A resolved session, ready for the session backend."""

    name: str
    path: str
    command: tuple[str, ...] = ()
