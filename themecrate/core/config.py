"""Configuration management for themecrate using TOML."""

import logging
from pathlib import Path
from typing import Any, Dict, List

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import Table

from themecrate.core.identity import current_home

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIRECTORY = "~/CustomThemes"


class Configuration:
    """Manages themecrate configuration with TOML files."""

    def __init__(self, config_path: Path | None = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. Defaults to
                ~/.config/themecrate.toml of the real (non-elevated) user.
        """
        if config_path is None:
            config_path = current_home() / ".config" / "themecrate.toml"

        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._toml_doc: TOMLDocument | None = None
        self._load_config()

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get the default configuration."""
        return {
            "global": {
                "theme": "textual-dark",
                "privilege_backend": "auto"
            },
            "output": {
                "directory": DEFAULT_OUTPUT_DIRECTORY
            },
            "detection": {
                "command_timeout": 2.0
            },
            "audit": {
                "system_prefixes": ["/usr", "/etc"]
            }
        }

    @staticmethod
    def _build_default_document() -> TOMLDocument:
        """Build the default configuration document with comments."""
        # Create TOML document with comments
        doc: TOMLDocument = tomlkit.document()

        # Add header comment
        doc.add(tomlkit.comment("themecrate configuration file"))
        doc.add(tomlkit.nl())

        # Global section
        global_section: Table = tomlkit.table()
        global_section.add(tomlkit.comment("User interface theme"))
        global_section.add("theme", "textual-dark")
        global_section.add(tomlkit.nl())
        global_section.add(tomlkit.comment("Privilege escalation backend used to re-run with elevated rights"))
        global_section.add(tomlkit.comment("Options: auto, pkexec, sudo, doas, none"))
        global_section.add("privilege_backend", "auto")
        doc.add("global", global_section)

        # Output section
        output_section: Table = tomlkit.table()
        output_section.add(tomlkit.comment("Directory where new themes are saved"))
        output_section.add(tomlkit.comment("Updated automatically after each successful creation"))
        output_section.add("directory", DEFAULT_OUTPUT_DIRECTORY)
        doc.add("output", output_section)

        # Detection section
        detection_section: Table = tomlkit.table()
        detection_section.add(tomlkit.comment("Seconds to wait for each query command (gsettings, kreadconfig5, ...)"))
        detection_section.add("command_timeout", 2.0)
        doc.add("detection", detection_section)

        # Audit section
        audit_section: Table = tomlkit.table()
        audit_section.add(tomlkit.comment("Paths under these prefixes are checked for elevated access"))
        audit_section.add("system_prefixes", tomlkit.array('["/usr", "/etc"]'))
        doc.add("audit", audit_section)

        return doc

    def _create_default_config(self) -> None:
        """Create default configuration file with comments."""
        # Ensure config directory exists
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        # Write to file
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(tomlkit.dumps(self._build_default_document()))

    def _load_config(self) -> None:
        """Load configuration from file or create default."""
        try:
            if not self.config_path.exists():
                self._create_default_config()

            with open(self.config_path, "r", encoding="utf-8") as f:
                self._toml_doc = tomlkit.parse(f.read())
                # Convert to plain dict for easy access
                self._config = self._toml_doc.unwrap()
        except (TOMLKitError, OSError):
            # Fall back to defaults if config is corrupted or unwritable
            self._toml_doc = None
            self._config = self._get_default_config()

    def _save_config(self) -> None:
        """Save current configuration to file preserving comments."""
        # Ensure config directory exists
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        # Write back to file
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(tomlkit.dumps(self._toml_doc))

    def _replace_unreadable_config(self) -> None:
        """Start over from the commented defaults, keeping a corrupted file as a backup."""
        if self.config_path.exists():
            backup: Path = self.config_path.with_name(self.config_path.name + ".bak")
            self.config_path.replace(backup)
            logger.warning("config %s could not be parsed, moved to %s", self.config_path, backup)

        self._toml_doc = self._build_default_document()

    def _get_nested_value(self, keys: List[str], default: Any = None) -> Any:
        """Get a nested value from the configuration."""
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def _set_nested_value(self, keys: List[str], value: Any) -> None:
        """Set a nested value in the configuration."""
        current = self._config
        for key in keys[:-1]:
            if key not in current or not isinstance(current[key], dict):
                current[key] = {}
            current = current[key]
        current[keys[-1]] = value

    # Global settings
    @property
    def theme(self) -> str:
        """Get the UI theme setting."""
        return self._get_nested_value(["global", "theme"], "textual-dark")

    @property
    def privilege_backend(self) -> str:
        """Get the privilege escalation backend setting."""
        return self._get_nested_value(["global", "privilege_backend"], "auto")

    # Output settings
    @property
    def output_directory(self) -> str:
        """Get the directory new themes are saved in."""
        return self._get_nested_value(["output", "directory"], DEFAULT_OUTPUT_DIRECTORY)

    @output_directory.setter
    def output_directory(self, value: str) -> None:
        """Set and persist the output directory."""
        self._set_nested_value(["output", "directory"], value)

        if self._toml_doc is None:
            self._replace_unreadable_config()
        elif "output" not in self._toml_doc:
            self._toml_doc.add("output", tomlkit.table())
        self._toml_doc["output"]["directory"] = value  # type: ignore

        self._save_config()

    @property
    def command_timeout(self) -> float:
        """Get the upper bound for query commands, in seconds."""
        return float(self._get_nested_value(["detection", "command_timeout"], 2.0))

    @property
    def system_prefixes(self) -> List[str]:
        """Get the prefixes that mark system paths."""
        return self._get_nested_value(["audit", "system_prefixes"], ["/usr", "/etc"])


# Global configuration instance
_config_instance: Configuration | None = None


def get_config(config_path: Path | None = None) -> Configuration:
    """
    Get the global configuration instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Configuration instance
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = Configuration(config_path)

    return _config_instance
