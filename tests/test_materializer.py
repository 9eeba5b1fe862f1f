"""Tests for writing theme bundles."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from themecrate.core import materializer
from themecrate.core.catalog import ThemeComponent
from themecrate.core.identity import Identity
from themecrate.core.materializer import (MANIFEST_NAME, CopyRecord,
                                          CreationReport, MaterializeError,
                                          format_report, materialize,
                                          render_manifest,
                                          sanitize_component_name)


def _component(name: str, *paths: str) -> ThemeComponent:
    return ThemeComponent(name=name, source_paths=list(paths), description=f"{name} files", selected=True)


def test_sanitize_component_name() -> None:
    assert sanitize_component_name("Qt/KDE Styles") == "Qt_KDE_Styles"
    assert sanitize_component_name("Icons") == "Icons"


def test_absent_sources_are_all_skipped(tmp_path: Path, home: Path, identity: Identity) -> None:
    components = [
        _component("GTK Themes", "~/.themes/", "~/.local/share/themes/"),
        _component("Icons", "~/.icons/"),
    ]

    report = materialize("Nord", tmp_path / "out", components, home, identity)

    assert report.copied == []
    assert len(report.skipped) == 3
    assert all(record.reason == "not found" for record in report.skipped)
    assert (tmp_path / "out" / "Nord" / "GTK_Themes").is_dir()
    assert (tmp_path / "out" / "Nord" / "Icons").is_dir()
    assert "No files were copied" in report.manifest_path.read_text(encoding="utf-8")


def test_files_and_directories_are_copied(tmp_path: Path, home: Path, identity: Identity) -> None:
    gtk_css = home / ".themes" / "Nord" / "gtk-3.0" / "gtk.css"
    gtk_css.parent.mkdir(parents=True)
    gtk_css.write_text("* { color: #88c0d0; }", encoding="utf-8")
    kwinrc = home / ".config" / "kwinrc"
    kwinrc.parent.mkdir(parents=True)
    kwinrc.write_text("[org.kde.kdecoration2]\nplugin=Sweet\n", encoding="utf-8")

    components = [
        _component("GTK Themes", "~/.themes/"),
        _component("Window Decorations", "~/.config/kwinrc", "~/.config/i3/"),
    ]
    report = materialize("Nord", tmp_path / "out", components, home, identity)
    bundle = tmp_path / "out" / "Nord"

    assert report.destination == bundle
    assert (bundle / "GTK_Themes" / ".themes" / "Nord" / "gtk-3.0" / "gtk.css").read_text(encoding="utf-8") == "* { color: #88c0d0; }"
    assert (bundle / "Window_Decorations" / "kwinrc").exists()
    assert [record.path for record in report.copied] == [str(home / ".themes"), str(kwinrc)]
    assert [record.path for record in report.skipped] == [str(home / ".config" / "i3")]


def test_rerun_merges_into_existing_bundle(tmp_path: Path, home: Path, identity: Identity) -> None:
    (home / ".themes" / "Nord").mkdir(parents=True)
    components = [_component("GTK Themes", "~/.themes/")]

    materialize("Nord", tmp_path / "out", components, home, identity)
    report = materialize("Nord", tmp_path / "out", components, home, identity)

    assert len(report.copied) == 1
    assert report.skipped == []


def test_single_copy_failure_does_not_abort(tmp_path: Path, home: Path, identity: Identity, monkeypatch) -> None:
    (home / ".themes").mkdir()
    (home / ".icons").mkdir()
    real_copy = materializer.copy_source

    def flaky_copy(source: Path, destination: Path) -> None:
        if source.name == ".themes":
            raise PermissionError(13, "Permission denied")
        real_copy(source, destination)

    monkeypatch.setattr(materializer, "copy_source", flaky_copy)
    components = [_component("GTK Themes", "~/.themes/"), _component("Icons", "~/.icons/")]

    report = materialize("Nord", tmp_path / "out", components, home, identity)

    assert [record.component for record in report.copied] == ["Icons"]
    assert report.skipped[0].component == "GTK Themes"
    assert "Permission denied" in (report.skipped[0].reason or "")


def test_source_containing_destination_is_skipped(home: Path, identity: Identity) -> None:
    (home / "notes.txt").write_text("x", encoding="utf-8")
    report = materialize("Nord", home / "CustomThemes", [_component("Everything", "~")], home, identity)

    assert report.copied == []
    assert report.skipped[0].reason == "contains the destination"


def test_unwritable_destination_raises(tmp_path: Path, home: Path, identity: Identity) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(MaterializeError):
        materialize("Nord", blocker, [_component("Icons", "~/.icons/")], home, identity)


def _report(copied: list[CopyRecord], skipped: list[CopyRecord]) -> CreationReport:
    return CreationReport(
        theme_name="Test",
        destination=Path("/home/alice/CustomThemes/Test"),
        components=[_component("Icons"), _component("Fonts")],
        created=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        identity=Identity(user="root", home="/root", sudo_user="alice"),
        copied=copied,
        skipped=skipped,
    )


def test_manifest_lists_skipped_entries_with_reasons() -> None:
    report = _report([], [
        CopyRecord("Icons", "/home/alice/.icons", "not found"),
        CopyRecord("Fonts", "/home/alice/.fonts", "Permission denied"),
    ])

    manifest = render_manifest(report)

    assert "Theme Name: Test" in manifest
    assert "No files were copied" in manifest
    assert "- Icons: /home/alice/.icons (not found)" in manifest
    assert "- Fonts: /home/alice/.fonts (Permission denied)" in manifest
    assert "- SUDO_USER: alice" in manifest


def test_manifest_section_order() -> None:
    manifest = render_manifest(_report([CopyRecord("Icons", "/home/alice/.icons")], []))
    markers = [
        "Theme Name:",
        "Created: 2026-01-02 03:04:05 UTC",
        "Saved at: /home/alice/CustomThemes/Test",
        "Components:\n- Icons: Icons files\n- Fonts: Fonts files",
        "Successfully copied files:\n- Icons: /home/alice/.icons",
        "Skipped files:\nNo files were skipped",
        "Runtime info:",
    ]

    positions = [manifest.index(marker) for marker in markers]
    assert positions == sorted(positions)


def test_manifest_is_written_into_bundle(tmp_path: Path, home: Path, identity: Identity) -> None:
    report = materialize("Nord", tmp_path, [_component("Icons", "~/.icons/")], home, identity)
    assert (tmp_path / "Nord" / MANIFEST_NAME).read_text(encoding="utf-8") == render_manifest(report)


def test_format_report_warns_when_nothing_copied() -> None:
    text = format_report(_report([], [CopyRecord("Icons", "/x", "not found")]))

    assert "Files successfully copied: 0" in text
    assert "Files skipped/not found: 1" in text
    assert "Warning: No files were copied" in text
