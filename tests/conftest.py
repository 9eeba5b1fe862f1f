from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tests.helpers import FakeRunner, make_catalog
from themecrate.core.detectors import DetectionContext
from themecrate.core.identity import Identity
from themecrate.core.state import ApplicationState


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home" / "alice"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_ctx(tmp_path: Path, home: Path) -> Callable[..., DetectionContext]:
    root = tmp_path / "root"
    root.mkdir()

    def factory(
        answers: dict[tuple[str, ...], str] | None = None,
        env: dict[str, str] | None = None,
    ) -> DetectionContext:
        return DetectionContext(home=home, env=env or {}, run=FakeRunner(answers), root=root)

    return factory


@pytest.fixture
def state(tmp_path: Path) -> ApplicationState:
    return ApplicationState(
        catalog=make_catalog("GTK Themes", "Icons", "Cursors"),
        theme_directory=tmp_path / "out",
    )


@pytest.fixture
def identity() -> Identity:
    return Identity(user="alice", home="/home/alice", sudo_user=None)
