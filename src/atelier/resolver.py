"""Resolution of a picked location and action into a session target.

Resolution order, first match wins:

1. an explicit action name that matches one of the location's actions;
2. "editor", opening the configured editor in the location;
3. "shell", a bare interactive shell;
4. any other explicit name is an error;
5. no name: the location's first action, or a bare shell if it has none.

Names are compared after sanitization, the same way the action merge does,
so session names agree between the picker and the session backend.
"""

from typing import Optional

from .actions import SHELL
from .core import Action, Location, SelectionResult, Target
from .exceptions import UnknownActionError
from .shell import interactive_wrapper
from .utils import sanitize

EDITOR = "editor"


def _action_target(location: Location, action: Action, shell: str) -> Target:
    base = sanitize(location.name)
    key = sanitize(action.name)
    name = base if key == SHELL else f"{base}:{key}"
    return Target(name=name, path=location.path, command=interactive_wrapper(shell, action.command))


def resolve(location: Location, action_name: str, shell: str, editor: str) -> Target:
    """Turn ``location`` and an optional action name into a Target."""
    wanted = sanitize(action_name)

    if action_name:
        for action in location.actions:
            if sanitize(action.name) == wanted:
                return _action_target(location, action, shell)

        if wanted == EDITOR:
            return Target(
                name=f"{sanitize(location.name)}:{EDITOR}",
                path=location.path,
                command=interactive_wrapper(shell, f"{editor} ."),
            )
        if wanted == SHELL:
            return Target(name=sanitize(location.name), path=location.path,
                          command=interactive_wrapper(shell))

        raise UnknownActionError(action_name, location.name)

    if location.actions:
        return _action_target(location, location.actions[0], shell)

    return Target(name=sanitize(location.name), path=location.path, command=interactive_wrapper(shell))


def target_from_selection(result: SelectionResult, shell: str, editor: str) -> Optional[Target]:
    """Resolve a picker result; a canceled result resolves to None."""
    if result.canceled or result.location is None:
        return None
    action_name = result.action.name if result.action is not None else ""
    return resolve(result.location, action_name, shell, editor)
