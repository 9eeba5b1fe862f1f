"""Creation of the theme bundle on disk."""

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from themecrate.core.catalog import ThemeComponent
from themecrate.core.identity import Identity, expand_path

logger = logging.getLogger(__name__)

MANIFEST_NAME = "theme_info.txt"


class MaterializeError(Exception):
    """The bundle directory or its manifest could not be written."""


@dataclass
class CopyRecord:
    """Outcome of one source path."""
    component: str
    path: str
    reason: str | None = None

    def __str__(self) -> str:
        if self.reason is None:
            return f"{self.component}: {self.path}"
        return f"{self.component}: {self.path} ({self.reason})"


@dataclass
class CreationReport:
    """Aggregate result of a bundle creation."""
    theme_name: str
    destination: Path
    components: list[ThemeComponent]
    created: datetime
    identity: Identity
    copied: list[CopyRecord] = field(default_factory=list)
    skipped: list[CopyRecord] = field(default_factory=list)

    @property
    def manifest_path(self) -> Path:
        return self.destination / MANIFEST_NAME


def sanitize_component_name(name: str) -> str:
    """Turn a component name into a single path segment."""
    return name.replace(" ", "_").replace("/", "_")


def copy_source(source: Path, destination: Path) -> None:
    """
    Copy a file or directory into destination, keeping its base name.

    Directories are merged into an existing copy and symlinks are copied as
    links.
    """
    target: Path = destination / source.name

    if source.is_dir():
        shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
    else:
        shutil.copy2(source, target)


def _bullets(records: list[CopyRecord], empty: str) -> str:
    if not records:
        return empty
    return "\n".join(f"- {record}" for record in records)


def render_manifest(report: CreationReport) -> str:
    """Render the human-readable manifest for a finished creation."""
    components: str = "\n".join(
        f"- {component.name}: {component.description}"
        for component in report.components
    )
    identity: Identity = report.identity

    return (
        f"Theme Name: {report.theme_name}\n"
        f"Created: {report.created.strftime('%Y-%m-%d %H:%M:%S UTC')}\n"
        f"Saved at: {report.destination}\n"
        f"Components:\n{components}\n"
        f"\n"
        f"Successfully copied files:\n{_bullets(report.copied, 'No files were copied')}\n"
        f"\n"
        f"Skipped files:\n{_bullets(report.skipped, 'No files were skipped')}\n"
        f"\n"
        f"Runtime info:\n"
        f"- USER: {identity.user or 'unknown'}\n"
        f"- HOME: {identity.home or 'unknown'}\n"
        f"- SUDO_USER: {identity.sudo_user or 'not set'}\n"
    )


def materialize(
        theme_name: str,
        directory: Path,
        components: Iterable[ThemeComponent],
        home: Path,
        identity: Identity
) -> CreationReport:
    """
    Copy the files of the selected components into a new theme bundle.

    The bundle lives in ``directory / theme_name`` with one subdirectory per
    component. A failing source path is recorded as skipped and does not stop
    the remaining copies.

    Args:
        theme_name: Name of the bundle.
        directory: Parent directory chosen by the user.
        components: Components to include.
        home: Home directory used for tilde expansion.
        identity: Identity values recorded in the manifest.

    Returns:
        The creation report.

    Raises:
        MaterializeError: If the bundle directory or manifest can't be written.
    """
    destination: Path = (directory / theme_name).absolute()
    report = CreationReport(
        theme_name=theme_name,
        destination=destination,
        components=list(components),
        created=datetime.now(timezone.utc),
        identity=identity,
    )

    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MaterializeError(f"Cannot create {destination}: {e}") from e

    logger.info("creating theme %r at %s", theme_name, destination)

    for component in report.components:
        component_dir: Path = destination / sanitize_component_name(component.name)

        try:
            component_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise MaterializeError(f"Cannot create {component_dir}: {e}") from e

        for pattern in component.source_paths:
            source: Path = expand_path(pattern, home)

            if not source.exists():
                report.skipped.append(CopyRecord(component.name, str(source), "not found"))
                continue

            # Copying a parent of the bundle into the bundle never terminates
            if destination.is_relative_to(source):
                report.skipped.append(CopyRecord(component.name, str(source), "contains the destination"))
                continue

            try:
                copy_source(source, component_dir)
            except (OSError, shutil.Error) as e:
                logger.warning("failed to copy %s: %s", source, e)
                report.skipped.append(CopyRecord(component.name, str(source), str(e)))
            else:
                logger.debug("copied %s into %s", source, component_dir)
                report.copied.append(CopyRecord(component.name, str(source)))

    try:
        report.manifest_path.write_text(render_manifest(report), encoding="utf-8")
    except OSError as e:
        raise MaterializeError(f"Cannot write {report.manifest_path}: {e}") from e

    logger.info(
        "theme %r created: %d copied, %d skipped",
        theme_name, len(report.copied), len(report.skipped)
    )
    return report


def format_report(report: CreationReport) -> str:
    """Summary printed after the interface has closed."""
    rule: str = "=" * 60
    lines: list[str] = [
        rule,
        "THEME CREATION COMPLETE",
        rule,
        f"Theme Name: {report.theme_name}",
        f"Saved at: {report.destination}",
        f"Components included: {len(report.components)}",
        f"Files successfully copied: {len(report.copied)}",
    ]

    if report.skipped:
        lines.append(f"Files skipped/not found: {len(report.skipped)}")

    lines += [
        rule,
        f"A {MANIFEST_NAME} file has been created with complete details.",
    ]

    if not report.copied:
        lines += [
            "",
            "Warning: No files were copied. Check the paths and permissions.",
            "The app might be looking for files in the wrong home directory.",
        ]

    lines.append(rule)
    return "\n".join(lines)
