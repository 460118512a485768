"""Textual front end for the location/action picker.

All picker decisions live in ``selection``; this module only turns key
presses into selection events and paints the resulting state.
"""

from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.theme import Theme as TextualTheme
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from .config import Theme
from .core import Location, SelectionResult
from .selection import (
    Cancel,
    Confirm,
    CursorDown,
    CursorUp,
    Event,
    FastConfirm,
    Focus,
    Interrupt,
    Selector,
    TextChanged,
)
from .utils import shorten_path

ICON_SEARCH = "\uf002"
ICON_PROJECT = "\uf503"
ICON_FOLDER = "\uea83"

HELP = "Enter:Select • Tab:Actions • Alt+Enter/Ctrl+S:Fast • Esc:Back • Ctrl+C:Quit"

_CSS = """
Screen {
    padding: 0 1;
}
#search {
    border: tall $primary;
}
#panels {
    height: 1fr;
}
#locations {
    width: 3fr;
    border: round $accent;
}
#right {
    width: 2fr;
    border: round $accent;
}
#actions-title {
    color: $text-muted;
    margin-bottom: 1;
}
#help {
    color: $text-muted;
}
"""


class _Panel(OptionList, can_focus=False):
    """Option list driven entirely by the selection state."""


def _location_label(location: Location, subtext: str = "dim") -> Text:
    icon = ICON_PROJECT if location.is_project else ICON_FOLDER
    label = Text(f"{icon} {location.name}", style="bold" if location.is_project else "")
    label.append(f"  {shorten_path(location.path)}", style=subtext)
    return label


class PickerApp(App[SelectionResult]):
    """Two-panel picker: locations on the left, their actions on the right."""

    CSS = _CSS
    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", show=False, priority=True),
        Binding("escape", "cancel", "Back", show=False, priority=True),
        Binding("enter,tab", "confirm", "Select", show=False, priority=True),
        Binding("alt+enter,ctrl+s", "fast_confirm", "Fast", show=False, priority=True),
        Binding("up,ctrl+p", "cursor_up", "Up", show=False, priority=True),
        Binding("down,ctrl+n", "cursor_down", "Down", show=False, priority=True),
    ]

    def __init__(self, locations: list[Location], theme: Theme | None = None) -> None:
        super().__init__()
        self.selector = Selector(locations)
        colors = theme or Theme()
        self.subtext = colors.subtext
        self.register_theme(TextualTheme(
            name="atelier",
            primary=colors.primary,
            accent=colors.accent,
            success=colors.highlight,
            foreground=colors.text,
            dark=True,
            variables={"text-muted": colors.subtext},
        ))

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Search...", id="search")
        with Horizontal(id="panels"):
            yield _Panel(id="locations")
            with Vertical(id="right"):
                yield Static("AVAILABLE ACTIONS", id="actions-title")
                yield _Panel(id="actions")
        yield Static(HELP, id="help")

    def on_mount(self) -> None:
        self.theme = "atelier"
        self.query_one("#search", Input).focus()
        self._paint()

    def on_input_changed(self, event: Input.Changed) -> None:
        self._dispatch(TextChanged(event.value))

    def action_confirm(self) -> None:
        self._dispatch(Confirm())

    def action_fast_confirm(self) -> None:
        self._dispatch(FastConfirm())

    def action_cancel(self) -> None:
        self._dispatch(Cancel())

    def action_interrupt(self) -> None:
        self._dispatch(Interrupt())

    def action_cursor_up(self) -> None:
        self._dispatch(CursorUp())

    def action_cursor_down(self) -> None:
        self._dispatch(CursorDown())

    def _dispatch(self, event: Event) -> None:
        state = self.selector.dispatch(event)
        if state.done:
            self.exit(state.result)
            return
        self._paint()

    def _paint(self) -> None:
        state = self.selector.state

        search = self.query_one("#search", Input)
        if search.value != state.filter_text:
            # the resulting Changed event carries the same text and is a no-op
            search.value = state.filter_text
        if state.focus is Focus.ACTIONS:
            search.placeholder = f"Action {ICON_SEARCH} ..."
        else:
            search.placeholder = f"{ICON_SEARCH} Search..."

        locations = self.query_one("#locations", _Panel)
        locations.clear_options()
        if state.visible_locations:
            locations.add_options([Option(_location_label(loc, self.subtext)) for loc in state.visible_locations])
            locations.highlighted = state.location_cursor
        else:
            locations.add_option(Option("No items match your search", disabled=True))

        title = self.query_one("#actions-title", Static)
        title.update("SELECT ACTION" if state.focus is Focus.ACTIONS else "AVAILABLE ACTIONS")

        actions = self.query_one("#actions", _Panel)
        actions.clear_options()
        if state.visible_actions:
            default = state.selected_location.actions[0] if state.selected_location else None
            actions.add_options([
                Option(f"{a.name} (Default)" if a == default else a.name)
                for a in state.visible_actions
            ])
            if state.focus is Focus.ACTIONS:
                actions.highlighted = state.action_cursor
        else:
            actions.add_option(Option("No actions available", disabled=True))


def run_picker(locations: list[Location], theme: Theme | None = None) -> SelectionResult:
    """Run the picker and return the user's choice."""
    result = PickerApp(locations, theme).run()
    return result if result is not None else SelectionResult.cancel()
