"""Runs the state machine against the real collaborators."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from themecrate.core.catalog import ThemeComponent
from themecrate.core.commands import copy_to_clipboard
from themecrate.core.identity import Identity
from themecrate.core.materializer import CreationReport, MaterializeError, materialize
from themecrate.core.permissions import (DEFAULT_SYSTEM_PREFIXES, PermissionIssue,
                                         audit, format_remediation,
                                         remediation_commands)
from themecrate.core.privilege import ElevationError
from themecrate.core.state import (ApplicationState, Effect, KeyPress,
                                   audit_finished, directory_listed,
                                   elevation_finished, list_subdirectories,
                                   materialize_failed, transition)

logger = logging.getLogger(__name__)

Lister = Callable[[Path], list[str]]
Auditor = Callable[[Iterable[ThemeComponent], Path, Iterable[str]], list[PermissionIssue]]
Materializer = Callable[[str, Path, Iterable[ThemeComponent], Path, Identity], CreationReport]
Elevator = Callable[[], int]
Clipboard = Callable[[str], bool]


def _no_elevation() -> int:
    raise ElevationError("elevation is not available")


@dataclass
class Outcome:
    """What the interface has to do after a key press."""
    exit: bool = False
    report: CreationReport | None = None
    elevated: bool = False
    notice: str | None = None
    severity: str = "information"


@dataclass
class Session:
    """
    Owns the application state and carries out the effects of transitions.

    Attributes:
        state: The single application state.
        home: Real user's home directory, for tilde expansion.
        identity: Identity values recorded in the manifest.
        system_prefixes: Roots treated as system paths.
        elevation: Program prefixed to remediation commands on system paths.
        deferred_output: Text to print once the interface has closed.
    """
    state: ApplicationState
    home: Path
    identity: Identity
    system_prefixes: tuple[str, ...] = DEFAULT_SYSTEM_PREFIXES
    elevation: str = "sudo"
    lister: Lister = list_subdirectories
    auditor: Auditor = audit
    materializer: Materializer = materialize
    elevator: Elevator = _no_elevation
    clipboard: Clipboard = copy_to_clipboard
    deferred_output: list[str] = field(default_factory=list)

    def handle(self, key: KeyPress) -> Outcome:
        """Process one key press, including every effect it triggers."""
        outcome = Outcome()
        pending: list[Effect] = transition(self.state, key)

        while pending:
            effect: Effect = pending.pop(0)
            pending.extend(self._run(effect, outcome))

        return outcome

    def _run(self, effect: Effect, outcome: Outcome) -> list[Effect]:
        state: ApplicationState = self.state

        if effect is Effect.QUIT:
            outcome.exit = True

        elif effect is Effect.LIST_DIRECTORY:
            directory_listed(state, self.lister(state.theme_directory))

        elif effect is Effect.AUDIT:
            issues: list[PermissionIssue] = self.auditor(
                state.selected_components(), self.home, self.system_prefixes
            )
            return audit_finished(state, issues)

        elif effect is Effect.MATERIALIZE:
            try:
                outcome.report = self.materializer(
                    state.theme_name,
                    state.theme_directory,
                    state.selected_components(),
                    self.home,
                    self.identity,
                )
            except MaterializeError as e:
                logger.error("theme creation failed: %s", e)
                materialize_failed(state, str(e))
                outcome.notice = str(e)
                outcome.severity = "error"
                return []
            return [Effect.QUIT]

        elif effect is Effect.ELEVATE:
            try:
                returncode: int = self.elevator()
            except ElevationError as e:
                logger.warning("elevation failed: %s", e)
                return elevation_finished(state, False, str(e))

            if returncode == 0:
                outcome.elevated = True
                return elevation_finished(state, True)
            return elevation_finished(state, False, f"exit code {returncode}")

        elif effect is Effect.COPY_REMEDIATION:
            text: str = format_remediation(
                remediation_commands(state.permission_issues, self.elevation, self.system_prefixes)
            )
            if self.clipboard(text):
                state.message = "Chmod commands copied to clipboard!"
            else:
                state.message = "No clipboard available, chmod commands will be printed on exit"
                self.deferred_output.append(f"=== Chmod Commands ===\n{text}\n=== End Commands ===")
                outcome.notice = text
                outcome.severity = "warning"

        return []
