"""Interaction state machine.

``transition`` maps a key press in the current mode to state changes plus a
list of effects. Effects name the I/O the caller has to perform (listing a
directory, auditing, copying, re-running elevated); their results are fed
back through ``directory_listed``, ``audit_finished`` and friends. Nothing in
this module touches the terminal.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from themecrate.core.catalog import Catalog, ThemeComponent
from themecrate.core.permissions import PermissionIssue

DEFAULT_MESSAGE = "Space to toggle, Enter to continue"
EMPTY_SELECTION_MESSAGE = "Select at least one component"


class InteractionMode(Enum):
    """Screens of the interaction flow."""
    SELECTING = auto()
    NAMING = auto()
    DIRECTORY_SELECTION = auto()
    SUMMARY = auto()
    PERMISSION_CHECK = auto()


class Effect(Enum):
    """Side effects requested by a transition."""
    QUIT = auto()
    LIST_DIRECTORY = auto()
    AUDIT = auto()
    MATERIALIZE = auto()
    ELEVATE = auto()
    COPY_REMEDIATION = auto()


@dataclass(frozen=True)
class KeyPress:
    """
    A key event.

    Attributes:
        key: Key name (``"enter"``, ``"escape"``, ``"up"``, ``"a"``, ...).
        character: Printable character produced by the key, if any.
    """
    key: str
    character: str | None = None


@dataclass
class ApplicationState:
    """All mutable session data."""
    catalog: Catalog
    theme_directory: Path
    cursor: int = 0
    theme_name: str = ""
    mode: InteractionMode = InteractionMode.SELECTING
    message: str = DEFAULT_MESSAGE
    permission_issues: list[PermissionIssue] = field(default_factory=list)
    directory_entries: list[str] = field(default_factory=list)
    directory_selected: int = 0

    def next(self) -> None:
        self.cursor = (self.cursor + 1) % len(self.catalog)

    def prev(self) -> None:
        self.cursor = (self.cursor - 1) % len(self.catalog)

    def toggle(self) -> None:
        self.catalog.toggle(self.cursor)

    def selected_components(self) -> list[ThemeComponent]:
        return self.catalog.selected()

    def highlighted_entry(self) -> str | None:
        """Directory entry under the cursor, or None when the listing is empty."""
        if 0 <= self.directory_selected < len(self.directory_entries):
            return self.directory_entries[self.directory_selected]
        return None


def list_subdirectories(path: Path) -> list[str]:
    """
    List the visible subdirectories of path.

    Returns:
        Sorted names without hidden entries; empty if path can't be read.
    """
    try:
        names: list[str] = [
            entry.name for entry in path.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        ]
    except OSError:
        return []
    return sorted(names)


def _selecting(state: ApplicationState, key: KeyPress) -> list[Effect]:
    if key.key in ("q", "escape"):
        return [Effect.QUIT]
    if key.key in ("up", "left", "k"):
        state.prev()
    elif key.key in ("down", "right", "j"):
        state.next()
    elif key.key == "space":
        state.toggle()
    elif key.key == "enter":
        if state.selected_components():
            state.message = DEFAULT_MESSAGE
            state.mode = InteractionMode.NAMING
        else:
            state.message = EMPTY_SELECTION_MESSAGE
    return []


def _naming(state: ApplicationState, key: KeyPress) -> list[Effect]:
    if key.key == "escape":
        state.mode = InteractionMode.SELECTING
    elif key.key == "enter":
        name: str = state.theme_name.strip()
        if name:
            state.theme_name = name
            state.mode = InteractionMode.DIRECTORY_SELECTION
            return [Effect.LIST_DIRECTORY]
    elif key.key == "backspace":
        state.theme_name = state.theme_name[:-1]
    elif key.character and key.character.isprintable():
        state.theme_name += key.character
    return []


def _directory_selection(state: ApplicationState, key: KeyPress) -> list[Effect]:
    entries: list[str] = state.directory_entries

    if key.key == "escape":
        state.mode = InteractionMode.NAMING
    elif key.key == "enter":
        entry: str | None = state.highlighted_entry()
        if entry is None:
            # Nothing to descend into, use this directory
            state.mode = InteractionMode.SUMMARY
        else:
            state.theme_directory = state.theme_directory / entry
            return [Effect.LIST_DIRECTORY]
    elif key.key == "tab":
        state.mode = InteractionMode.SUMMARY
    elif key.key in ("left", "h"):
        if state.theme_directory.parent != state.theme_directory:
            state.theme_directory = state.theme_directory.parent
            return [Effect.LIST_DIRECTORY]
    elif key.key in ("up", "k") and entries:
        state.directory_selected = (state.directory_selected - 1) % len(entries)
    elif key.key in ("down", "j") and entries:
        state.directory_selected = (state.directory_selected + 1) % len(entries)
    return []


def _summary(state: ApplicationState, key: KeyPress) -> list[Effect]:
    if key.key == "escape":
        state.mode = InteractionMode.SELECTING
    elif key.key == "enter":
        return [Effect.AUDIT]
    return []


def _permission_check(state: ApplicationState, key: KeyPress) -> list[Effect]:
    if key.key == "escape":
        state.mode = InteractionMode.SUMMARY
    elif key.key == "1":
        return [Effect.ELEVATE]
    elif key.key == "2":
        state.mode = InteractionMode.SELECTING
        return [Effect.COPY_REMEDIATION]
    return []


_HANDLERS = {
    InteractionMode.SELECTING: _selecting,
    InteractionMode.NAMING: _naming,
    InteractionMode.DIRECTORY_SELECTION: _directory_selection,
    InteractionMode.SUMMARY: _summary,
    InteractionMode.PERMISSION_CHECK: _permission_check,
}


def transition(state: ApplicationState, key: KeyPress) -> list[Effect]:
    """
    Apply one key press to the state.

    Args:
        state: The session state, updated in place.
        key: The key press.

    Returns:
        Effects the caller must carry out, in order.
    """
    return _HANDLERS[state.mode](state, key)


def directory_listed(state: ApplicationState, entries: list[str]) -> None:
    """Install a fresh listing of ``state.theme_directory``."""
    state.directory_entries = entries
    state.directory_selected = 0


def audit_finished(state: ApplicationState, issues: list[PermissionIssue]) -> list[Effect]:
    """Route to materialization when clear, to the permission screen otherwise."""
    state.permission_issues = issues
    if issues:
        state.mode = InteractionMode.PERMISSION_CHECK
        return []
    return [Effect.MATERIALIZE]


def materialize_failed(state: ApplicationState, reason: str) -> None:
    state.mode = InteractionMode.SUMMARY
    state.message = f"Theme creation failed: {reason}"


def elevation_finished(state: ApplicationState, success: bool, reason: str | None = None) -> list[Effect]:
    """Quit after a successful elevated run, go back to selection otherwise."""
    if success:
        return [Effect.QUIT]
    state.message = f"Elevation failed: {reason}" if reason else "Elevation failed"
    state.mode = InteractionMode.SELECTING
    return []
