"""Screen descriptions for each interaction mode.

The interface paints whatever ``render_view`` returns; it never looks at
the state itself.
"""

from dataclasses import dataclass, field

from themecrate.core.permissions import IssueKind, PermissionIssue
from themecrate.core.state import DEFAULT_MESSAGE, ApplicationState, InteractionMode

APP_TITLE = "Theme Creator"


@dataclass
class ViewLine:
    """
    One line of body text.

    Attributes:
        text: Plain text, never markup.
        style: Textual style string such as ``"dim"`` or ``"bold cyan"``.
        highlighted: Whether the line carries the cursor.
    """
    text: str
    style: str = ""
    highlighted: bool = False


@dataclass
class ScreenView:
    title: str
    panel_title: str
    lines: list[ViewLine] = field(default_factory=list)
    status: str = ""

    @property
    def highlighted_index(self) -> int | None:
        """Index of the first highlighted line, used to keep it scrolled into view."""
        for i, line in enumerate(self.lines):
            if line.highlighted:
                return i
        return None


def _selection(state: ApplicationState) -> list[ViewLine]:
    lines: list[ViewLine] = []

    for i, component in enumerate(state.catalog):
        checkbox: str = "[x]" if component.selected else "[ ]"
        lines.append(ViewLine(f" {checkbox} {component.name}", "bold", highlighted=i == state.cursor))
        lines.append(ViewLine(f"     {component.description}", "dim"))

        if component.detected_setting:
            lines.append(ViewLine(f"     → {component.detected_setting}", "cyan"))
        else:
            lines.append(ViewLine("     → (none detected)", "dim"))

    return lines


def _naming(state: ApplicationState) -> list[ViewLine]:
    return [
        ViewLine("Enter theme name:"),
        ViewLine(""),
        ViewLine(f"> {state.theme_name}_", "green"),
    ]


def _directory_selection(state: ApplicationState) -> list[ViewLine]:
    lines: list[ViewLine] = [
        ViewLine("Choose where to save your theme:"),
        ViewLine(""),
        ViewLine(f"Current: {state.theme_directory}", "yellow"),
        ViewLine(""),
    ]

    if not state.directory_entries:
        lines.append(ViewLine("No subdirectories. Enter: use this directory", "dim"))
        return lines

    lines.append(ViewLine("Directories:"))
    for i, entry in enumerate(state.directory_entries):
        lines.append(ViewLine(f"  📁 {entry}/", highlighted=i == state.directory_selected))

    lines.append(ViewLine(""))
    lines.append(ViewLine("↑↓: Navigate | Enter: Open | ←: Parent | Tab: Use this directory", "dim"))
    return lines


def _summary(state: ApplicationState) -> list[ViewLine]:
    lines: list[ViewLine] = [
        ViewLine(f"Theme: {state.theme_name}", "bold cyan"),
        ViewLine(f"Location: {state.theme_directory / state.theme_name}", "cyan"),
        ViewLine(""),
    ]

    selected = state.selected_components()
    if not selected:
        lines.append(ViewLine("No components selected!", "red"))
        return lines

    lines.append(ViewLine("Components to include:"))
    for component in selected:
        lines.append(ViewLine(f"✓ {component.name}", "bold green"))
        lines.append(ViewLine(f"  {component.description}", "dim"))

    return lines


def _issue_lines(index: int, issue: PermissionIssue) -> list[ViewLine]:
    return [
        ViewLine(f"{index}. {issue.component} ({issue.kind.value})", "bold red"),
        ViewLine(f"   Path: {issue.path}", "blue"),
        ViewLine(""),
    ]


def _permission_check(state: ApplicationState) -> list[ViewLine]:
    lines: list[ViewLine] = [
        ViewLine("Permission Issues Found", "bold red"),
        ViewLine(""),
    ]

    if not state.permission_issues:
        lines.append(ViewLine("No permission issues detected!"))
        return lines

    lines.append(ViewLine("The following components have permission issues:"))
    lines.append(ViewLine(""))

    for i, issue in enumerate(state.permission_issues, start=1):
        lines.extend(_issue_lines(i, issue))

    needs_elevation: bool = any(
        issue.kind is IssueKind.SUDO_REQUIRED for issue in state.permission_issues
    )

    lines += [
        ViewLine("Options:", "bold"),
        ViewLine("1. Re-run with elevated privileges", "bold" if needs_elevation else ""),
        ViewLine("2. Copy chmod commands to clipboard"),
        ViewLine("Esc. Cancel and go back"),
    ]
    return lines


def _status(state: ApplicationState) -> str:
    mode: InteractionMode = state.mode

    if mode is InteractionMode.SELECTING:
        return state.message
    if mode is InteractionMode.NAMING:
        return f"Name: {state.theme_name}_"
    if mode is InteractionMode.DIRECTORY_SELECTION:
        return f"Path: {state.theme_directory} | Enter: accept, Esc: cancel, Tab: create new"
    if mode is InteractionMode.SUMMARY:
        if state.message != DEFAULT_MESSAGE:
            return f"{state.message} | Enter to retry, Esc to cancel"
        return "Enter to create, Esc to cancel"
    return "1: Re-run with sudo, 2: Copy chmod commands, Esc: Cancel"


_BODIES = {
    InteractionMode.SELECTING: ("Select Components", _selection),
    InteractionMode.NAMING: ("Name Theme", _naming),
    InteractionMode.DIRECTORY_SELECTION: ("Select Directory", _directory_selection),
    InteractionMode.SUMMARY: ("Summary", _summary),
    InteractionMode.PERMISSION_CHECK: ("Permission Check", _permission_check),
}


def render_view(state: ApplicationState) -> ScreenView:
    """Describe the screen for the current mode."""
    panel_title, body = _BODIES[state.mode]
    return ScreenView(
        title=APP_TITLE,
        panel_title=panel_title,
        lines=body(state),
        status=_status(state),
    )
