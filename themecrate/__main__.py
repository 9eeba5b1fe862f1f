"""Command line entry point."""

import os
import sys
import termios
from pathlib import Path

from themecrate.core.args import ArgsInit
from themecrate.core.config import Configuration, get_config
from themecrate.core.identity import resolve_home
from themecrate.core.logs import configure_logging
from themecrate.core.materializer import format_report
from themecrate.tui.app import ThemeCrateApp, run


def main(argv: list[str] | None = None) -> int:
    """
    Run themecrate.

    Returns:
        0 on quit, successful creation or successful elevated run; 1 when
        the terminal can't be driven.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = ArgsInit(argv)
    home: Path = resolve_home(dict(os.environ))
    logger = configure_logging(home / ".cache" / "themecrate", args.get_element("verbose"))

    config: Configuration = get_config(args.get_element("config"))

    try:
        app: ThemeCrateApp = run(config, argv, args.get_element("output_dir"))
    except (OSError, termios.error) as e:
        logger.error("terminal initialisation failed: %s", e)
        print(
            f"Terminal error: {e}. Make sure you're running this in a proper terminal.",
            file=sys.stderr
        )
        return 1

    if app.return_code:
        return app.return_code

    for text in app.session.deferred_output:
        print(f"\n{text}\n")

    if app.return_value is not None:
        print(format_report(app.return_value))

    return 0


if __name__ == "__main__":
    sys.exit(main())
