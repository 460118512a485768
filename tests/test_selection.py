"""Tests for the picker state machine."""

import pytest

from atelier.core import Action
from atelier.selection import (
    Cancel,
    Confirm,
    CursorDown,
    CursorUp,
    FastConfirm,
    Focus,
    Interrupt,
    Selector,
    TextChanged,
    initial_state,
    transition,
)


def run(locations, *events):
    state = initial_state(locations)
    for event in events:
        state = transition(state, event)
    return state


def assert_canceled(state):
    assert state.done
    result = state.result
    assert (result.canceled, result.location, result.action) == (True, None, None)


class TestInitialState:
    def test_projects_first_then_original_order(self, picker_locations):
        state = initial_state(picker_locations)
        assert [l.name for l in state.visible_locations] == ["api", "web", "dotfiles"]
        assert state.focus is Focus.LOCATIONS
        assert state.filter_text == ""
        assert not state.done

    def test_action_preview_of_first_location(self, picker_locations):
        state = initial_state(picker_locations)
        assert [a.name for a in state.visible_actions] == ["build", "test", "shell"]

    def test_empty_list(self):
        state = initial_state([])
        assert state.selected_location is None
        assert state.visible_actions == ()


class TestLocationsPanel:
    def test_cursor_moves_refresh_action_preview(self, picker_locations):
        state = run(picker_locations, CursorDown())
        assert state.selected_location.name == "web"
        assert state.visible_actions == ()

        state = transition(state, CursorDown())
        assert state.selected_location.name == "dotfiles"
        assert state.visible_actions == (Action("shell", ""),)

        state = transition(state, CursorUp())
        assert state.selected_location.name == "web"
        assert state.visible_actions == ()

    def test_cursor_is_clamped(self, picker_locations):
        state = run(picker_locations, CursorUp())
        assert state.location_cursor == 0
        state = run(picker_locations, CursorDown(), CursorDown(), CursorDown(), CursorDown())
        assert state.selected_location.name == "dotfiles"

    def test_typing_filters_and_resets_cursor(self, picker_locations):
        state = run(picker_locations, CursorDown(), TextChanged("dot"))
        assert [l.name for l in state.visible_locations] == ["dotfiles"]
        assert state.location_cursor == 0
        assert state.visible_actions == (Action("shell", ""),)

    def test_confirm_drills_into_actions(self, picker_locations):
        state = run(picker_locations, TextChanged("ap"), Confirm())
        assert state.focus is Focus.ACTIONS
        assert state.filter_text == ""
        assert state.location_filter == "ap"
        assert state.selected_action == Action("build", "make")
        assert not state.done

    def test_confirm_without_actions_selects_location(self, picker_locations):
        state = run(picker_locations, CursorDown(), Confirm())
        assert state.done
        assert state.result.canceled is False
        assert state.result.location.name == "web"
        assert state.result.action is None

    def test_fast_confirm_skips_actions(self, picker_locations):
        state = run(picker_locations, FastConfirm())
        assert state.result.location.name == "api"
        assert state.result.action is None
        assert state.result.canceled is False

    def test_cancel_with_filter_clears_it(self, picker_locations):
        state = run(picker_locations, TextChanged("web"), Cancel())
        assert not state.done
        assert state.filter_text == ""
        assert len(state.visible_locations) == 3

    def test_cancel_without_filter_cancels(self, picker_locations):
        assert_canceled(run(picker_locations, Cancel()))

    def test_cancel_twice_after_typing_cancels(self, picker_locations):
        assert_canceled(run(picker_locations, TextChanged("a"), Cancel(), Cancel()))

    def test_confirm_with_no_match_is_ignored(self, picker_locations):
        state = run(picker_locations, TextChanged("zzz"), Confirm())
        assert not state.done
        assert state.visible_locations == ()


class TestActionsPanel:
    def test_confirm_selects_highlighted_action(self, picker_locations):
        state = run(picker_locations, Confirm(), CursorDown(), Confirm())
        assert state.result.location.name == "api"
        assert state.result.action == Action("test", "go test")
        assert state.result.canceled is False

    def test_action_filter(self, picker_locations):
        state = run(picker_locations, Confirm(), TextChanged("te"))
        assert state.visible_actions == (Action("test", "go test"),)
        state = transition(state, Confirm())
        assert state.result.action == Action("test", "go test")

    def test_cancel_restores_location_filter(self, picker_locations):
        state = run(picker_locations, TextChanged("ap"), Confirm(), TextChanged("te"), Cancel())
        assert state.focus is Focus.LOCATIONS
        assert state.filter_text == "ap"
        assert state.action_filter == ""
        assert [l.name for l in state.visible_locations] == ["api"]
        assert [a.name for a in state.visible_actions] == ["build", "test", "shell"]

    def test_drill_in_after_cursor_move_uses_highlighted_location(self, picker_locations):
        state = run(picker_locations, CursorDown(), CursorDown(), Confirm(), Confirm())
        assert state.result.location.name == "dotfiles"
        assert state.result.action == Action("shell", "")

    def test_confirm_with_no_matching_action_is_ignored(self, picker_locations):
        state = run(picker_locations, Confirm(), TextChanged("zzz"), Confirm())
        assert not state.done

    def test_fast_confirm_from_actions(self, picker_locations):
        state = run(picker_locations, Confirm(), CursorDown(), FastConfirm())
        assert state.result.location.name == "api"
        assert state.result.action is None


class TestInterrupt:
    @pytest.mark.parametrize("events", [
        (),
        (TextChanged("ap"),),
        (Confirm(),),
        (Confirm(), TextChanged("te")),
        (CursorDown(), CursorDown()),
    ])
    def test_interrupt_always_cancels(self, picker_locations, events):
        assert_canceled(run(picker_locations, *events, Interrupt()))

    def test_interrupt_on_empty_list(self):
        assert_canceled(run([], Interrupt()))

    def test_events_after_termination_are_ignored(self, picker_locations):
        state = run(picker_locations, Interrupt(), Confirm(), TextChanged("x"))
        assert_canceled(state)


class TestSelector:
    def test_dispatch(self, picker_locations):
        selector = Selector(picker_locations)
        assert selector.result is None
        selector.dispatch(Confirm())
        selector.dispatch(Confirm())
        assert selector.result.action == Action("build", "make")
