"""Main themecrate TUI application."""

import logging
import os
from functools import partial
from pathlib import Path

from textual.app import App, SuspendNotSupported

from themecrate.core.catalog import Catalog
from themecrate.core.commands import run_query
from themecrate.core.config import Configuration
from themecrate.core.detectors import DetectionContext
from themecrate.core.identity import Identity, expand_path, resolve_home
from themecrate.core.materializer import CreationReport
from themecrate.core.privilege import ElevationError, elevation_prefix, relaunch_elevated
from themecrate.core.session import Outcome, Session
from themecrate.core.state import ApplicationState
from themecrate.tui.screens.main_scrn import MainScreen

logger = logging.getLogger(__name__)


class ThemeCrateApp(App[CreationReport | None]):
    """Bundle the current desktop theming into a portable directory"""

    TITLE = "themecrate"
    CSS_PATH = "styles.tcss"

    def __init__(self, session: Session, config: Configuration, argv: list[str]) -> None:
        """
        Initialize the application.

        Args:
            session: Session driving the interaction.
            config: Loaded configuration.
            argv: Command line arguments, reused for an elevated re-run.
        """
        self.session = session
        self.config = config
        self.argv = argv
        self.elevated_run: bool = False

        super().__init__()

        self.session.elevator = self.elevate

    def on_mount(self) -> None:
        """Initialize the application."""
        if self.config.theme in self.available_themes:
            self.theme = self.config.theme
        self.push_screen(MainScreen(self.session))

    def elevate(self) -> int:
        """Hand the terminal to an elevated copy of ourselves and wait for it."""
        try:
            with self.suspend():
                return relaunch_elevated(self.argv)
        except SuspendNotSupported as e:
            raise ElevationError("this terminal can't be handed over") from e

    def finish(self, outcome: Outcome) -> None:
        """Leave the interface after quitting, creating a theme or an elevated run."""
        self.elevated_run = outcome.elevated

        if outcome.report is not None:
            self._remember_directory()

        self.exit(outcome.report)

    def _remember_directory(self) -> None:
        directory: Path = self.session.state.theme_directory
        try:
            self.config.output_directory = str(directory)
        except OSError as e:
            logger.warning("could not save output directory %s: %s", directory, e)


def build_session(config: Configuration, output_dir: Path | None = None) -> Session:
    """
    Detect the current theming and set up the interaction session.

    Args:
        config: Loaded configuration.
        output_dir: Overrides the configured starting directory.

    Returns:
        A session in the initial Selecting mode.
    """
    env: dict[str, str] = dict(os.environ)
    home: Path = resolve_home(env)

    ctx = DetectionContext(
        home=home,
        env=env,
        run=partial(run_query, timeout=config.command_timeout),
    )
    catalog: Catalog = Catalog.build(ctx)

    directory: Path = output_dir.absolute() if output_dir else expand_path(config.output_directory, home)
    logger.info("home %s, starting directory %s", home, directory)

    return Session(
        state=ApplicationState(catalog=catalog, theme_directory=directory),
        home=home,
        identity=Identity.from_env(env),
        system_prefixes=tuple(config.system_prefixes),
        elevation=elevation_prefix(),
    )


def run(config: Configuration, argv: list[str], output_dir: Path | None = None) -> ThemeCrateApp:
    """
    Run the themecrate TUI application.

    Returns:
        The finished application, carrying its return value and code.
    """
    app: ThemeCrateApp = ThemeCrateApp(build_session(config, output_dir), config, argv)
    app.run()
    return app
