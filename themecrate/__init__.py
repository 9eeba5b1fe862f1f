"""Bundle the currently installed desktop theming into a portable directory."""

__version__ = "0.3.0"
