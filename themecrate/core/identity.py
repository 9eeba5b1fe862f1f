"""Resolution of the real user's identity and home directory."""

import os
import pwd
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

HOME_ROOT = Path("/home")


@dataclass(frozen=True)
class Identity:
    """Snapshot of the identity-related environment values."""
    user: str | None
    home: str | None
    sudo_user: str | None

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "Identity":
        return cls(
            user=env.get("USER"),
            home=env.get("HOME"),
            sudo_user=env.get("SUDO_USER"),
        )


def resolve_home(
        env: Mapping[str, str],
        home_root: Path = HOME_ROOT,
        cwd: Path | None = None
) -> Path:
    """
    Resolve the home directory of the user the theme belongs to.

    When running elevated, ``HOME`` usually points at root's home, so the
    invoking user (``SUDO_USER``, ``DOAS_USER`` or
    ``PKEXEC_UID``) takes priority.

    Args:
        env: Environment snapshot to resolve from.
        home_root: Directory holding the users' home directories.
        cwd: Last-resort fallback. Defaults to the current directory.

    Returns:
        The resolved home directory.
    """
    for variable in ("SUDO_USER", "DOAS_USER"):
        elevated_user: str | None = env.get(variable)
        if elevated_user:
            candidate: Path = home_root / elevated_user
            if candidate.exists():
                return candidate

    # pkexec only leaves the numeric uid behind
    pkexec_uid: str | None = env.get("PKEXEC_UID")
    if pkexec_uid:
        try:
            candidate = Path(pwd.getpwuid(int(pkexec_uid)).pw_dir)
        except (KeyError, ValueError):
            pass
        else:
            if candidate.exists():
                return candidate

    home: str | None = env.get("HOME")
    if home:
        home_path = Path(home)
        # Root's home never holds the desktop session we want
        if home_path != Path("/root") and home_path.exists():
            return home_path

    user: str | None = env.get("USER")
    if user and user != "root":
        candidate = home_root / user
        if candidate.exists():
            return candidate

    try:
        for entry in sorted(home_root.iterdir()):
            if entry.is_dir() and entry.name != "root":
                return entry
    except OSError:
        pass

    return cwd if cwd is not None else Path.cwd()


def expand_path(pattern: str, home: Path, cwd: Path | None = None) -> Path:
    """
    Expand a source path pattern to an absolute path.

    Args:
        pattern: Path that may start with ``~``.
        home: Home directory substituted for ``~``.
        cwd: Base for relative paths. Defaults to the current directory.

    Returns:
        Absolute path.
    """
    if pattern == "~":
        return home
    if pattern.startswith("~/"):
        return home / pattern[2:]

    path = Path(pattern)
    if not path.is_absolute():
        return (cwd if cwd is not None else Path.cwd()) / path
    return path


def current_home() -> Path:
    """Resolve the home directory from the live process environment."""
    return resolve_home(dict(os.environ))
