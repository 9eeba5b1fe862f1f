"""Best-effort detection of the currently active theming settings.

Every detector probes a handful of config files and query commands and
returns a short label such as ``"GTK3: Arc-Dark"``, or ``None`` when no
evidence is found. Detectors never write anything and never raise.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from lxml import etree

from themecrate.core.commands import DEFAULT_TIMEOUT, run_query

logger = logging.getLogger(__name__)

QueryRunner = Callable[[list[str]], tuple[bool, str]]


def _default_runner(cmd: list[str]) -> tuple[bool, str]:
    return run_query(cmd, DEFAULT_TIMEOUT)


@dataclass
class DetectionContext:
    """
    Everything a detector is allowed to look at.

    Attributes:
        home: The real user's home directory.
        env: Environment snapshot.
        run: Query command runner returning (success, stdout).
        root: Filesystem root for system-wide files (``/`` outside tests).
    """
    home: Path
    env: Mapping[str, str] = field(default_factory=dict)
    run: QueryRunner = _default_runner
    root: Path = Path("/")

    def home_path(self, relative: str) -> Path:
        return self.home / relative

    def system_path(self, absolute: str) -> Path:
        return self.root / absolute.lstrip("/")

    @staticmethod
    def read_text(path: Path) -> str | None:
        """Read a text file, returning None if it is missing or unreadable."""
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None


def ini_value(content: str | None, key: str) -> str | None:
    """
    Find the first ``key=value`` line and return its value.

    Surrounding whitespace and double quotes are stripped. Empty values are
    treated as absent.
    """
    if not content:
        return None

    for line in content.splitlines():
        name, separator, value = line.partition("=")
        if separator and name.strip() == key:
            value = value.strip().strip('"')
            return value or None
    return None


def xml_text(content: str | None, xpath: str) -> str | None:
    """
    Return the stripped text of the first element matching xpath.

    Comments are dropped and malformed documents are parsed as far as
    possible, so commented-out settings are never reported.

    Args:
        content: Raw XML document.
        xpath: Expression selecting elements.

    Returns:
        The text, or None if nothing non-empty matched.
    """
    if not content:
        return None

    parser = etree.XMLParser(recover=True, remove_comments=True)
    root = etree.fromstring(content.encode("utf-8"), parser=parser)
    if root is None:
        return None

    for elem in root.xpath(xpath):
        text: str = (elem.text or "").strip()
        if text:
            return text
    return None


def _query_value(ctx: DetectionContext, cmd: list[str]) -> str | None:
    success, stdout = ctx.run(cmd)
    if not success:
        return None
    value: str = stdout.strip().strip("'")
    return value or None


def gsettings(ctx: DetectionContext, schema: str, key: str) -> str | None:
    """Read a GSettings key, with GVariant string quotes removed."""
    return _query_value(ctx, ["gsettings", "get", schema, key])


def kreadconfig(ctx: DetectionContext, group: str, key: str, file: str | None = None) -> str | None:
    """Read a KDE config key through kreadconfig5."""
    cmd: list[str] = ["kreadconfig5"]
    if file:
        cmd += ["--file", file]
    cmd += ["--group", group, "--key", key]
    return _query_value(ctx, cmd)


def _sorted_dirs(path: Path) -> list[Path]:
    try:
        return sorted(entry for entry in path.iterdir() if entry.is_dir())
    except OSError:
        return []


class Detector:
    """Base class for a single theming domain probe."""

    domain: str = ""

    def probe(self, ctx: DetectionContext) -> str | None:
        raise NotImplementedError

    def detect(self, ctx: DetectionContext) -> str | None:
        """
        Run the probe, absorbing every failure.

        Returns:
            A non-empty label, or None if nothing was detected.
        """
        try:
            label: str | None = self.probe(ctx)
        except (OSError, ValueError, subprocess.SubprocessError, etree.LxmlError) as e:
            logger.debug("%s detection failed: %s", self.domain, e)
            return None

        if label is None or not label.strip():
            logger.debug("%s: nothing detected", self.domain)
            return None

        logger.debug("%s: detected %s", self.domain, label)
        return label


GTK_SETTINGS = ".config/gtk-3.0/settings.ini"
GNOME_INTERFACE = "org.gnome.desktop.interface"


class GtkThemeDetector(Detector):
    domain = "GTK Themes"

    def probe(self, ctx: DetectionContext) -> str | None:
        theme: str | None = ini_value(ctx.read_text(ctx.home_path(GTK_SETTINGS)), "gtk-theme-name")
        if theme:
            return f"GTK3: {theme}"

        theme = gsettings(ctx, GNOME_INTERFACE, "gtk-theme")
        if theme:
            return f"GTK: {theme}"

        return None


class IconThemeDetector(Detector):
    domain = "Icons"

    def probe(self, ctx: DetectionContext) -> str | None:
        theme: str | None = (
            ini_value(ctx.read_text(ctx.home_path(GTK_SETTINGS)), "gtk-icon-theme-name")
            or gsettings(ctx, GNOME_INTERFACE, "icon-theme")
        )
        return f"Icons: {theme}" if theme else None


class CursorThemeDetector(Detector):
    domain = "Cursors"

    def probe(self, ctx: DetectionContext) -> str | None:
        theme: str | None = (
            ini_value(ctx.read_text(ctx.home_path(GTK_SETTINGS)), "gtk-cursor-theme-name")
            or gsettings(ctx, GNOME_INTERFACE, "cursor-theme")
        )
        if theme:
            return f"Cursor: {theme}"

        # Heuristic: an installed theme with "cursor" in its name
        icon_dirs: list[Path] = [
            ctx.home_path(".icons"),
            ctx.home_path(".local/share/icons"),
            ctx.system_path("/usr/share/icons"),
        ]
        for icon_dir in icon_dirs:
            for entry in _sorted_dirs(icon_dir):
                if "cursor" in entry.name.lower():
                    return f"Cursor: {entry.name}"

        return None


class QtStyleDetector(Detector):
    domain = "Qt/KDE Styles"

    def probe(self, ctx: DetectionContext) -> str | None:
        for version in ("5", "6"):
            conf: Path = ctx.home_path(f".config/qt{version}ct/qt{version}ct.conf")
            style: str | None = ini_value(ctx.read_text(conf), "style")
            if style:
                return f"Qt{version}: {style}"
        return None


class ApplicationStyleDetector(Detector):
    """Always yields a label, falling back to the available toolkits or "Default"."""

    domain = "Application Style"

    def probe(self, ctx: DetectionContext) -> str | None:
        style: str | None = kreadconfig(ctx, "KDE", "widgetStyle")
        if style and style != "default":
            return f"KDE Style: {style}"

        scheme: str | None = kreadconfig(ctx, "General", "ColorSchemeKey")
        if scheme:
            return f"KDE Theme: {scheme}"

        gtk_theme: str | None = gsettings(ctx, GNOME_INTERFACE, "gtk-theme")
        if gtk_theme and gtk_theme != "Adwaita":
            return f"GTK Style: {gtk_theme}"

        toolkits: list[str] = []
        if ctx.home_path(GTK_SETTINGS).exists():
            toolkits.append("GTK3")
        if ctx.home_path(".config/qt5ct/qt5ct.conf").exists():
            toolkits.append("Qt5")
        if ctx.home_path(".config/qt6ct/qt6ct.conf").exists():
            toolkits.append("Qt6")

        if toolkits:
            return f"Available: {', '.join(toolkits)}"

        return "Default"


class ColorSchemeDetector(Detector):
    domain = "Colors Schemes"

    def probe(self, ctx: DetectionContext) -> str | None:
        scheme: str | None = ini_value(ctx.read_text(ctx.home_path(".config/kdeglobals")), "ColorScheme")
        if scheme:
            return f"KDE: {scheme}"

        color: str | None = kreadconfig(ctx, "Colors:Window", "BackgroundNormal")
        if color:
            return f"Plasma: {color}"

        return None


# rc.xml declares a default namespace
_OPENBOX_THEME = "//*[local-name()='theme']/*[local-name()='name']"


class WindowDecorationsDetector(Detector):
    domain = "Window Decorations"

    def probe(self, ctx: DetectionContext) -> str | None:
        decoration: str | None = kreadconfig(ctx, "org.kde.kdecoration2", "library", file="kwinrc")
        # Aurorae is only the engine, its theme shows up as the kwinrc plugin
        if decoration and decoration != "org.kde.kwin.aurorae":
            return f"KWin: {decoration}"

        plugin: str | None = ini_value(ctx.read_text(ctx.home_path(".config/kwinrc")), "plugin")
        if plugin:
            return f"KWin Plugin: {plugin}"

        rc_lua: str | None = ctx.read_text(ctx.home_path(".config/awesome/rc.lua"))
        if rc_lua and "beautiful.init" in rc_lua:
            return "AwesomeWM: Beautiful"

        theme: str | None = xml_text(ctx.read_text(ctx.home_path(".config/openbox/rc.xml")), _OPENBOX_THEME)
        if theme:
            return f"Openbox: {theme}"

        return None


class SplashScreenDetector(Detector):
    domain = "Splash Screen"

    def probe(self, ctx: DetectionContext) -> str | None:
        theme: str | None = _query_value(ctx, ["plymouth-set-default-theme", "--show-current"])
        if theme:
            return f"Plymouth: {theme}"

        theme = ini_value(ctx.read_text(ctx.system_path("/etc/plymouth/plymouthd.conf")), "Theme")
        if theme:
            return f"Plymouth: {theme}"

        theme = ini_value(ctx.read_text(ctx.system_path("/etc/default/grub")), "GRUB_THEME")
        if theme:
            return f"GRUB: {theme}"

        if _sorted_dirs(ctx.system_path("/usr/share/plymouth/themes")):
            return "Plymouth: Available"

        return None


class SddmThemeDetector(Detector):
    domain = "SDDM Theme"

    def probe(self, ctx: DetectionContext) -> str | None:
        theme: str | None = ini_value(ctx.read_text(ctx.system_path("/etc/sddm.conf")), "Current")
        if theme:
            return f"SDDM: {theme}"

        conf_dir: Path = ctx.system_path("/etc/sddm.conf.d")
        try:
            drop_ins: list[Path] = sorted(conf_dir.iterdir())
        except OSError:
            return None

        for drop_in in drop_ins:
            theme = ini_value(ctx.read_text(drop_in), "Current")
            if theme:
                return f"SDDM: {theme}"

        return None


class TerminalThemeDetector(Detector):
    domain = "Terminal Themes"

    def probe(self, ctx: DetectionContext) -> str | None:
        alacritty_yml: str | None = ctx.read_text(ctx.home_path(".config/alacritty/alacritty.yml"))
        if alacritty_yml:
            for line in alacritty_yml.splitlines():
                if line.strip().startswith("colors:") or "primary:" in line:
                    return "Alacritty: Custom theme"

        alacritty_toml: str | None = ctx.read_text(ctx.home_path(".config/alacritty/alacritty.toml"))
        if alacritty_toml and "[colors" in alacritty_toml:
            return "Alacritty: Custom theme"

        kitty_conf: str | None = ctx.read_text(ctx.home_path(".config/kitty/kitty.conf"))
        if kitty_conf:
            for line in kitty_conf.splitlines():
                parts: list[str] = line.split()
                if len(parts) > 1 and parts[0] == "include" and "theme" in line:
                    return f"Kitty: {parts[1]}"

        if gsettings(ctx, "org.gnome.Terminal.ProfilesList", "default"):
            return "GNOME Terminal: Configured"

        return None


# Process names that identify a running window manager
_WM_PROCESSES: dict[str, str] = {
    "openbox": "Openbox",
    "xfwm4": "Xfwm4",
    "kwin": "KWin",
}


class WindowManagerDetector(Detector):
    domain = "Window Manager Themes"

    def probe(self, ctx: DetectionContext) -> str | None:
        desktop: str | None = ctx.env.get("XDG_CURRENT_DESKTOP")
        if desktop:
            return f"WM: {desktop}"

        if "I3SOCK" in ctx.env:
            return "WM: i3"
        if "BSPWM_SOCKET" in ctx.env:
            return "WM: bspwm"

        user: str | None = ctx.env.get("SUDO_USER") or ctx.env.get("USER")
        if not user:
            return None

        success, stdout = ctx.run(["ps", "-u", user, "-o", "comm="])
        if not success:
            return None

        for process, name in _WM_PROCESSES.items():
            if process in stdout:
                return f"WM: {name}"

        return None


class ShellThemeDetector(Detector):
    domain = "Shell Themes"

    def probe(self, ctx: DetectionContext) -> str | None:
        shell: str = ctx.env.get("SHELL", "")

        if "zsh" in shell:
            zshrc: str | None = ctx.read_text(ctx.home_path(".zshrc"))
            if zshrc and "ZSH_THEME=" in zshrc:
                return "Shell: Zsh (Oh My Zsh)"
            return "Shell: Zsh"
        if "bash" in shell:
            return "Shell: Bash"
        if "fish" in shell:
            return "Shell: Fish"

        return None


class FontDetector(Detector):
    domain = "Fonts"

    def probe(self, ctx: DetectionContext) -> str | None:
        font: str | None = gsettings(ctx, GNOME_INTERFACE, "font-name")
        if font:
            return f"Font: {font}"

        family: str | None = xml_text(
            ctx.read_text(ctx.home_path(".config/fontconfig/fonts.conf")), "//family"
        )
        if family:
            return f"Font: {family}"

        return None


DETECTORS: dict[str, Detector] = {
    detector.domain: detector
    for detector in (
        GtkThemeDetector(),
        IconThemeDetector(),
        CursorThemeDetector(),
        QtStyleDetector(),
        ApplicationStyleDetector(),
        ColorSchemeDetector(),
        WindowDecorationsDetector(),
        SplashScreenDetector(),
        SddmThemeDetector(),
        TerminalThemeDetector(),
        WindowManagerDetector(),
        ShellThemeDetector(),
        FontDetector(),
    )
}


def detect(domain: str, ctx: DetectionContext) -> str | None:
    """
    Detect the active setting for a theming domain.

    Args:
        domain: Component name the detector is registered under.
        ctx: Detection context.

    Returns:
        Label of the active setting, or None for unknown domains and when
        nothing was detected.
    """
    detector: Detector | None = DETECTORS.get(domain)
    if detector is None:
        return None
    return detector.detect(ctx)
