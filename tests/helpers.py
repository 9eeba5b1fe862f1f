from __future__ import annotations

import os

import pytest

from themecrate.core.catalog import Catalog, ThemeComponent

requires_non_root = pytest.mark.skipif(
    os.geteuid() == 0, reason="permission bits are ignored for root"
)


class FakeRunner:
    """Query runner answering from a fixed table, failing everything else."""

    def __init__(self, answers: dict[tuple[str, ...], str] | None = None) -> None:
        self.answers = answers or {}
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> tuple[bool, str]:
        self.calls.append(cmd)
        key = tuple(cmd)
        if key in self.answers:
            return True, self.answers[key]
        return False, ""


def make_catalog(*names: str, paths: list[str] | None = None) -> Catalog:
    return Catalog([
        ThemeComponent(name=name, source_paths=list(paths or []), description=f"{name} files")
        for name in names
    ])
