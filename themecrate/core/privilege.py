"""Privilege escalation utilities."""

import logging
import os
import shutil
import subprocess
import sys
from subprocess import CompletedProcess

from themecrate.core.config import Configuration, get_config

logger = logging.getLogger(__name__)

# Available privilege escalation backends
BACKENDS: dict[str, str] = {
    "pkexec": "pkexec",
    "sudo": "sudo",
    "doas": "doas",
}


class ElevationError(Exception):
    """No way to re-run with elevated privileges."""


def detect_backend() -> str | None:
    """
    Detect available privilege escalation backend.

    Returns:
        The first available backend name, or None if none found.
    """
    for backend, cmd in BACKENDS.items():
        if shutil.which(cmd):
            return backend
    return None


def get_configured_backend() -> str | None:
    """
    Get privilege backend from configuration or auto-detect.

    Returns:
        Configured backend name, auto-detected backend, or None
    """
    config: Configuration = get_config()
    backend_str: str = config.privilege_backend.lower()

    # Handle auto-detection
    if backend_str == "auto":
        return detect_backend()

    # Handle 'none' explicitly
    if backend_str == "none":
        return None

    # Validate configured backend
    if backend_str in BACKENDS:
        return backend_str

    # Invalid backend in config, fall back to auto-detection
    return detect_backend()


def elevation_prefix() -> str:
    """Program to prefix remediation commands on system paths with."""
    backend: str | None = get_configured_backend()
    return BACKENDS[backend] if backend else "sudo"


def is_elevated() -> bool:
    return os.geteuid() == 0


def elevated_command(argv: list[str], backend: str) -> list[str]:
    """
    Build the command that re-runs themecrate through a backend.

    Args:
        argv: Original command line arguments, without the program name.
        backend: Backend name from ``BACKENDS``.

    Returns:
        Full command.
    """
    return [BACKENDS[backend], sys.executable, "-m", "themecrate", *argv]


def relaunch_elevated(argv: list[str], backend: str | None = None) -> int:
    """
    Re-run themecrate with elevated privileges and wait for it.

    The child shares the terminal; the caller must release it first.

    Args:
        argv: Original command line arguments, without the program name.
        backend: Specific backend to use. If None, use configured backend.

    Returns:
        The child's exit code.

    Raises:
        ElevationError: If already elevated, no backend is available or the
            child could not be started.
    """
    if is_elevated():
        raise ElevationError("already running with elevated privileges")

    if backend is None:
        backend = get_configured_backend()

    if not backend or backend not in BACKENDS:
        raise ElevationError("no privilege escalation backend available")

    cmd: list[str] = elevated_command(argv, backend)
    logger.info("re-running elevated: %s", " ".join(cmd))

    try:
        result: CompletedProcess[bytes] = subprocess.run(cmd)
    except OSError as e:
        raise ElevationError(f"could not start {BACKENDS[backend]}: {e}") from e

    logger.info("elevated run exited with %d", result.returncode)
    return result.returncode
