"""The two-panel picker as a pure state machine.

The left panel lists locations, the right panel lists the actions of the
highlighted location. ``transition`` maps a state and an input event to the
next state; it never touches the terminal, so the picker logic can be driven
by the TUI or by tests alike. A state whose ``result`` is set is terminal.
"""

import enum
from dataclasses import dataclass, replace
from typing import Optional, Union

from .core import Action, Location, SelectionResult
from .fuzzy import fuzzy_filter


class Focus(enum.Enum):
    LOCATIONS = "locations"
    ACTIONS = "actions"


@dataclass(frozen=True)
class TextChanged:
    """The search input now holds ``value``."""

    value: str


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass(frozen=True)
class FastConfirm:
    """Pick the highlighted location without going through its actions."""


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class Interrupt:
    pass


@dataclass(frozen=True)
class CursorUp:
    pass


@dataclass(frozen=True)
class CursorDown:
    pass


Event = Union[TextChanged, Confirm, FastConfirm, Cancel, Interrupt, CursorUp, CursorDown]


@dataclass(frozen=True)
class SelectionState:
    locations: tuple[Location, ...]
    focus: Focus = Focus.LOCATIONS
    location_filter: str = ""
    action_filter: str = ""
    visible_locations: tuple[Location, ...] = ()
    location_cursor: int = 0
    visible_actions: tuple[Action, ...] = ()
    action_cursor: int = 0
    result: Optional[SelectionResult] = None

    @property
    def done(self) -> bool:
        return self.result is not None

    @property
    def filter_text(self) -> str:
        """Text of the search input for the focused panel."""
        if self.focus is Focus.ACTIONS:
            return self.action_filter
        return self.location_filter

    @property
    def selected_location(self) -> Optional[Location]:
        if 0 <= self.location_cursor < len(self.visible_locations):
            return self.visible_locations[self.location_cursor]
        return None

    @property
    def selected_action(self) -> Optional[Action]:
        if 0 <= self.action_cursor < len(self.visible_actions):
            return self.visible_actions[self.action_cursor]
        return None


def _by_name(item) -> str:
    return item.name


def _with_preview(state: SelectionState) -> SelectionState:
    """Show the highlighted location's actions in the right panel."""
    location = state.selected_location
    actions = location.actions if location is not None else ()
    return replace(state, visible_actions=tuple(actions), action_cursor=0)


def _filter_locations(state: SelectionState, text: str) -> SelectionState:
    visible = tuple(fuzzy_filter(text, state.locations, _by_name))
    return _with_preview(replace(state, location_filter=text, visible_locations=visible, location_cursor=0))


def _move(cursor: int, delta: int, size: int) -> int:
    if size == 0:
        return 0
    return min(max(cursor + delta, 0), size - 1)


def _finish(state: SelectionState, result: SelectionResult) -> SelectionState:
    return replace(state, result=result)


def initial_state(locations) -> SelectionState:
    """Return the starting state: all locations, projects first, no filter."""
    ordered = sorted(locations, key=lambda loc: not loc.is_project)
    state = SelectionState(locations=tuple(ordered), visible_locations=tuple(ordered))
    return _with_preview(state)


def transition(state: SelectionState, event: Event) -> SelectionState:
    """Return the state that follows ``event``."""
    if state.done:
        return state

    if isinstance(event, Interrupt):
        return _finish(state, SelectionResult.cancel())

    if state.focus is Focus.LOCATIONS:
        return _on_locations(state, event)
    return _on_actions(state, event)


def _on_locations(state: SelectionState, event: Event) -> SelectionState:
    if isinstance(event, TextChanged):
        if event.value == state.location_filter:
            return state
        return _filter_locations(state, event.value)

    if isinstance(event, (CursorUp, CursorDown)):
        delta = -1 if isinstance(event, CursorUp) else 1
        cursor = _move(state.location_cursor, delta, len(state.visible_locations))
        return _with_preview(replace(state, location_cursor=cursor))

    if isinstance(event, Confirm):
        location = state.selected_location
        if location is None:
            return state
        if location.has_actions:
            state = replace(state, focus=Focus.ACTIONS, action_filter="")
            return _with_preview(state)
        return _finish(state, SelectionResult(location=location, action=None))

    if isinstance(event, FastConfirm):
        return _fast_confirm(state)

    if isinstance(event, Cancel):
        if not state.location_filter:
            return _finish(state, SelectionResult.cancel())
        return _filter_locations(state, "")

    return state


def _on_actions(state: SelectionState, event: Event) -> SelectionState:
    location = state.selected_location

    if isinstance(event, TextChanged):
        if event.value == state.action_filter:
            return state
        actions = location.actions if location is not None else ()
        visible = tuple(fuzzy_filter(event.value, actions, _by_name))
        return replace(state, action_filter=event.value, visible_actions=visible, action_cursor=0)

    if isinstance(event, (CursorUp, CursorDown)):
        delta = -1 if isinstance(event, CursorUp) else 1
        return replace(state, action_cursor=_move(state.action_cursor, delta, len(state.visible_actions)))

    if isinstance(event, Confirm):
        action = state.selected_action
        if location is None or action is None:
            return state
        return _finish(state, SelectionResult(location=location, action=action))

    if isinstance(event, FastConfirm):
        return _fast_confirm(state)

    if isinstance(event, Cancel):
        # back to the locations panel with the filter it had before drilling in
        state = replace(state, focus=Focus.LOCATIONS, action_filter="")
        return _with_preview(state)

    return state


def _fast_confirm(state: SelectionState) -> SelectionState:
    location = state.selected_location
    if location is None:
        return state
    return _finish(state, SelectionResult(location=location, action=None))


class Selector:
    """Mutable wrapper that feeds events through ``transition``."""

    def __init__(self, locations):
        self.state = initial_state(locations)

    def dispatch(self, event: Event) -> SelectionState:
        self.state = transition(self.state, event)
        return self.state

    @property
    def result(self) -> Optional[SelectionResult]:
        return self.state.result
