import asyncio
from datetime import datetime, timezone
from pathlib import Path

from tests.helpers import make_catalog
from themecrate.core.config import Configuration
from themecrate.core.identity import Identity
from themecrate.core.materializer import CreationReport
from themecrate.core.session import Session
from themecrate.core.state import ApplicationState, InteractionMode
from themecrate.tui.app import ThemeCrateApp


def make_app(tmp_path: Path, created: list[str]) -> ThemeCrateApp:
    def materializer(name, directory, components, home, identity) -> CreationReport:
        created.append(name)
        return CreationReport(
            theme_name=name,
            destination=directory / name,
            components=list(components),
            created=datetime.now(timezone.utc),
            identity=identity,
        )

    session = Session(
        state=ApplicationState(
            catalog=make_catalog("GTK Themes", "Icons"),
            theme_directory=tmp_path / "out",
        ),
        home=tmp_path,
        identity=Identity(user="alice", home=str(tmp_path), sudo_user=None),
        lister=lambda path: [],
        auditor=lambda components, home, prefixes: [],
        materializer=materializer,
    )
    return ThemeCrateApp(session, Configuration(tmp_path / "themecrate.toml"), [])


def test_create_theme_through_the_interface(tmp_path: Path) -> None:
    created: list[str] = []
    app = make_app(tmp_path, created)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("space", "enter")
            assert app.session.state.mode is InteractionMode.NAMING

            await pilot.press("n", "o", "r", "d", "enter")
            assert app.session.state.mode is InteractionMode.DIRECTORY_SELECTION

            await pilot.press("tab", "enter")
            await pilot.pause()

    asyncio.run(scenario())

    assert created == ["nord"]
    assert app.return_value is not None
    assert app.return_value.theme_name == "nord"
    assert Configuration(tmp_path / "themecrate.toml").output_directory == str(tmp_path / "out")


def test_quit_without_creating(tmp_path: Path) -> None:
    created: list[str] = []
    app = make_app(tmp_path, created)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("q")
            await pilot.pause()

    asyncio.run(scenario())

    assert created == []
    assert app.return_value is None
    assert Configuration(tmp_path / "themecrate.toml").output_directory == "~/CustomThemes"
