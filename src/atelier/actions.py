"""Merging of global and project actions, and placement of the shell action."""

from collections.abc import Iterable

from .core import Action
from .utils import sanitize

SHELL = "shell"


def merge_actions(global_actions: Iterable[Action], specific: Iterable[Action]) -> list[Action]:
    """Merge two action lists, letting ``specific`` win on name collisions.

    Names are compared after sanitization. Global actions keep their order,
    an overridden global action is replaced in place by the specific one, and
    actions only present in ``specific`` are appended in their original order.
    """
    specific = list(specific)
    overrides = {}
    for action in specific:
        overrides.setdefault(sanitize(action.name), action)

    merged = []
    used = set()
    for action in global_actions:
        key = sanitize(action.name)
        if key in used:
            continue
        merged.append(overrides.get(key, action))
        used.add(key)

    for action in specific:
        key = sanitize(action.name)
        if key not in used:
            merged.append(action)
            used.add(key)

    return merged


def build_actions_with_shell(actions: Iterable[Action], shell_default: bool) -> list[Action]:
    """Return ``actions`` with exactly one shell action, first or last.

    An existing action named "shell" (after sanitization) is moved rather
    than duplicated, so applying this twice changes nothing. Later actions
    whose sanitized name repeats an earlier one are dropped.
    """
    shell = None
    rest = []
    seen = set()
    for action in actions:
        key = sanitize(action.name)
        if key in seen:
            continue
        seen.add(key)
        if key == SHELL:
            shell = action
        else:
            rest.append(action)
    if shell is None:
        shell = Action(name=SHELL, command="")

    if shell_default:
        return [shell] + rest
    return rest + [shell]
