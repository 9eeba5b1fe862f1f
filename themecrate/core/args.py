import argparse
from pathlib import Path
from typing import Any

import themecrate

APP_NAME = "themecrate"
APP_DESC = "Bundle your current desktop theming into a portable directory"


class ArgsInit:
    def __init__(self, argv: list[str] | None = None):
        self.args = self._parse_args(argv)

    @staticmethod
    def _parse_args(argv: list[str] | None) -> argparse.Namespace:
        parser = argparse.ArgumentParser(
            prog=APP_NAME,
            description=APP_DESC,
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        # Version argument
        parser.add_argument(
            "-V", "--version",
            action="version",
            version=f"%(prog)s {themecrate.__version__}",
            help="Show version information and exit"
        )

        # Config file path
        parser.add_argument(
            "-c", "--config",
            type=Path,
            default=None,
            help="Path to configuration file",
            metavar="FILE"
        )

        # Starting directory for the destination browser
        parser.add_argument(
            "-o", "--output-dir",
            type=Path,
            default=None,
            help="Directory to start browsing for the theme destination",
            metavar="DIR"
        )

        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Log debug information"
        )

        return parser.parse_args(argv)

    def get_element(self, element: str) -> Any:
        """Returns the value of a command line argument"""
        return getattr(self.args, element, None)
