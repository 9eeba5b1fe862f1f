"""Catalog of the theming domains that can be bundled."""

from dataclasses import dataclass
from typing import Iterator

from themecrate.core.detectors import DetectionContext, detect


@dataclass
class ThemeComponent:
    """A themeable subsystem and the locations its files live in."""
    name: str
    source_paths: list[str]
    description: str
    selected: bool = False
    detected_setting: str | None = None

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ThemeComponent({self.name!r}, selected={self.selected})"


@dataclass(frozen=True)
class ComponentSpec:
    """Static catalog entry."""
    name: str
    source_paths: tuple[str, ...]
    description: str


CATALOG: tuple[ComponentSpec, ...] = (
    ComponentSpec(
        "GTK Themes",
        ("~/.themes/", "~/.local/share/themes/", "/usr/share/themes/"),
        "GTK2/GTK3 theme files",
    ),
    ComponentSpec(
        "Icons",
        ("~/.icons/", "~/.local/share/icons/", "/usr/share/icons/"),
        "Icon themes",
    ),
    ComponentSpec(
        "Cursors",
        ("~/.icons/", "~/.local/share/icons/", "/usr/share/icons/"),
        "Mouse cursor themes",
    ),
    ComponentSpec("Qt/KDE Styles", ("~/.config/",), "Qt5/Qt6 styles"),
    ComponentSpec(
        "Application Style",
        ("~/.config/", "/etc/xdg/"),
        "Current desktop application style (Oxygen, Edge Runner, etc.)",
    ),
    ComponentSpec(
        "Colors Schemes",
        ("~/.local/share/color-schemes/",),
        "KDE color schemes",
    ),
    ComponentSpec(
        "Window Decorations",
        (
            "~/.config/kwinrc",
            "~/.config/awesome/",
            "~/.config/i3/",
            "~/.config/openbox/",
            "~/.config/bspwm/",
            "/usr/share/kde4/config/",
        ),
        "Window manager decorations and borders",
    ),
    ComponentSpec(
        "Splash Screen",
        (
            "/usr/share/plymouth/themes/",
            "/boot/grub/themes/",
            "/etc/alternatives/",
            "~/.config/plymouth/",
        ),
        "Boot splash screen and login animations",
    ),
    ComponentSpec(
        "SDDM Theme",
        ("/usr/share/sddm/themes/",),
        "SDDM login manager theme",
    ),
    ComponentSpec(
        "Terminal Themes",
        ("~/.config/alacritty/", "~/.config/kitty/"),
        "Terminal themes",
    ),
    ComponentSpec(
        "Window Manager Themes",
        ("~/.config/openbox/", "~/.config/xfce4/xfconf/xfce-perchannel-xml/xfwm4.xml"),
        "Window manager configuration and themes",
    ),
    ComponentSpec(
        "Shell Themes",
        ("~/.zshrc", "~/.oh-my-zsh/custom/themes/", "~/.config/fish/", "~/.config/starship.toml"),
        "Shell prompt themes",
    ),
    ComponentSpec(
        "Fonts",
        ("~/.fonts/", "~/.local/share/fonts/", "~/.config/fontconfig/"),
        "User fonts and fontconfig settings",
    ),
)


class Catalog:
    """Ordered, index-addressable list of theme components."""

    def __init__(self, components: list[ThemeComponent]):
        self.components: list[ThemeComponent] = components

    @classmethod
    def build(cls, ctx: DetectionContext, specs: tuple[ComponentSpec, ...] = CATALOG) -> "Catalog":
        """
        Build the catalog and run each component's detector once.

        Args:
            ctx: Detection context handed to every detector.
            specs: Static catalog entries.

        Returns:
            A catalog with ``detected_setting`` populated.
        """
        return cls([
            ThemeComponent(
                name=spec.name,
                source_paths=list(spec.source_paths),
                description=spec.description,
                detected_setting=detect(spec.name, ctx),
            )
            for spec in specs
        ])

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[ThemeComponent]:
        return iter(self.components)

    def __getitem__(self, index: int) -> ThemeComponent:
        return self.components[index]

    def toggle(self, index: int) -> None:
        """Flip the selection flag of the component at index, if it exists."""
        if 0 <= index < len(self.components):
            component: ThemeComponent = self.components[index]
            component.selected = not component.selected

    def selected(self) -> list[ThemeComponent]:
        """Selected components, in catalog order."""
        return [component for component in self.components if component.selected]
