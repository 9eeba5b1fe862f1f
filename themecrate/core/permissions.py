"""Access checks run on the selected components before anything is copied."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

from themecrate.core.catalog import ThemeComponent
from themecrate.core.identity import expand_path

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PREFIXES: tuple[str, ...] = ("/usr", "/etc")

PROBE_FILE_NAME = ".theme_creator_test"


class IssueKind(Enum):
    """Kinds of access problems."""
    NO_READ_ACCESS = "No read access"
    SUDO_REQUIRED = "Sudo required"


@dataclass(frozen=True)
class PermissionIssue:
    """An access problem on one source path of a component."""
    component: str
    path: str
    kind: IssueKind

    def __str__(self) -> str:
        return f"{self.component}: {self.path} ({self.kind.value})"


def is_system_path(path: Path | str, system_prefixes: Iterable[str] = DEFAULT_SYSTEM_PREFIXES) -> bool:
    """Check whether path lies under one of the system prefixes."""
    candidate = Path(path)
    return any(candidate.is_relative_to(prefix) for prefix in system_prefixes)


def _write_probe(path: Path) -> bool:
    """
    Try to create and delete a marker file next to or inside path.

    Returns:
        True if the marker could be written, False otherwise.
    """
    probe_dir: Path = path if path.is_dir() else path.parent
    marker: Path = probe_dir / PROBE_FILE_NAME

    try:
        marker.write_text("test", encoding="utf-8")
    except OSError:
        return False

    try:
        marker.unlink()
    except OSError as e:
        logger.warning("could not remove write probe %s: %s", marker, e)

    return True


def audit(
        components: Iterable[ThemeComponent],
        home: Path,
        system_prefixes: Iterable[str] = DEFAULT_SYSTEM_PREFIXES
) -> list[PermissionIssue]:
    """
    Find source paths that cannot be read or that need elevated privileges.

    Paths that do not exist are ignored; the materializer reports them as
    skipped.

    Args:
        components: Components to audit, normally the selected ones.
        home: Home directory used for tilde expansion.
        system_prefixes: Roots whose paths get a write probe.

    Returns:
        Issues in component and source path order; empty when clear to proceed.
    """
    prefixes: tuple[str, ...] = tuple(system_prefixes)
    issues: list[PermissionIssue] = []

    for component in components:
        for pattern in component.source_paths:
            path: Path = expand_path(pattern, home)

            if not path.exists():
                continue

            if not os.access(path, os.R_OK):
                issues.append(PermissionIssue(component.name, str(path), IssueKind.NO_READ_ACCESS))

            if is_system_path(path, prefixes) and not _write_probe(path):
                issues.append(PermissionIssue(component.name, str(path), IssueKind.SUDO_REQUIRED))

    for issue in issues:
        logger.info("permission issue: %s", issue)

    return issues


def remediation_commands(
        issues: Iterable[PermissionIssue],
        elevation: str = "sudo",
        system_prefixes: Iterable[str] = DEFAULT_SYSTEM_PREFIXES
) -> list[str]:
    """
    Build one chmod command per unique flagged path.

    Args:
        issues: Issues reported by ``audit``.
        elevation: Program prefixed to commands on system paths.
        system_prefixes: Roots considered system paths.

    Returns:
        Commands in first-seen order.
    """
    prefixes: tuple[str, ...] = tuple(system_prefixes)
    commands: list[str] = []
    seen: set[str] = set()

    for issue in issues:
        if issue.path in seen:
            continue
        seen.add(issue.path)

        command: str = f'chmod -R 755 "{issue.path}"'
        if is_system_path(issue.path, prefixes):
            command = f"{elevation} {command}"
        commands.append(command)

    return commands


def format_remediation(commands: list[str]) -> str:
    """Join commands into clipboard text."""
    if not commands:
        return "No chmod commands needed"
    return "\n".join(commands)
