"""Main screen of themecrate."""

import textual.markup
from textual import events
from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.screen import Screen
from textual.widgets import Header, Static

from themecrate.core.session import Outcome, Session
from themecrate.core.state import KeyPress
from themecrate.core.view import ScreenView, ViewLine, render_view


class BodyScroll(VerticalScroll, can_focus=False):
    """Scrollable body that leaves every key to the screen."""


def _markup(line: ViewLine) -> str:
    text: str = textual.markup.escape(line.text)
    style: str = " ".join(part for part in (line.style, "reverse bold" if line.highlighted else "") if part)
    return f"[{style}]{text}[/]" if style else text


class MainScreen(Screen):
    """Paints the current view and forwards key presses to the session."""

    AUTO_FOCUS = None

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        """Create child widgets for the screen."""
        yield Header()

        with Container(id="main-container"):
            with BodyScroll(id="body-scroll"):
                yield Static(id="body")

            yield Static(id="status")

    def on_mount(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        """Repaint everything from the session state."""
        view: ScreenView = render_view(self.session.state)

        self.app.title = view.title
        self.app.sub_title = view.panel_title

        body_scroll: BodyScroll = self.query_one("#body-scroll", BodyScroll)
        body_scroll.border_title = view.panel_title

        body: Static = self.query_one("#body", Static)
        body.update("\n".join(_markup(line) for line in view.lines))

        status: Static = self.query_one("#status", Static)
        status.update(textual.markup.escape(view.status))

        highlighted: int | None = view.highlighted_index
        if highlighted is not None:
            body_scroll.scroll_to(y=max(0, highlighted - 2), animate=False)
        else:
            body_scroll.scroll_home(animate=False)

    def on_key(self, event: events.Key) -> None:
        """Handle every key press of the interaction flow."""
        event.stop()
        event.prevent_default()

        character: str | None = event.character if event.is_printable else None
        outcome: Outcome = self.session.handle(KeyPress(event.key, character))

        if outcome.notice:
            self.notify(
                outcome.notice,
                severity=outcome.severity,  # type: ignore[arg-type]
                timeout=15
            )

        if outcome.exit:
            self.app.finish(outcome)  # type: ignore[attr-defined]
            return

        self.refresh_view()
