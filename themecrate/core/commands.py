"""Bounded execution of external query commands and clipboard helpers."""

import logging
import subprocess
from subprocess import CompletedProcess

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 2.0

# Clipboard programs, tried in order
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["xclip", "-selection", "clipboard"],
    ["wl-copy"],
    ["xsel", "--clipboard", "--input"],
]


def run_query(cmd: list[str], timeout: float = DEFAULT_TIMEOUT) -> tuple[bool, str]:
    """
    Run a short-lived query command.

    A missing program, a spawn error or an expired timeout are all reported
    as an unsuccessful run.

    Args:
        cmd: Command and arguments to run.
        timeout: Upper bound in seconds.

    Returns:
        Tuple of (success, stdout)
    """
    try:
        result: CompletedProcess[str] = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("query %s failed: %s", cmd[0], e)
        return False, ""

    return result.returncode == 0, result.stdout


def copy_to_clipboard(text: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """
    Place text on the clipboard using the first working clipboard program.

    Args:
        text: Text to copy.
        timeout: Upper bound in seconds per attempt.

    Returns:
        True if a clipboard program accepted the text, False otherwise.
    """
    for cmd in CLIPBOARD_COMMANDS:
        try:
            result: CompletedProcess[str] = subprocess.run(
                cmd,
                input=text,
                # The selection owner forks and must not hold our pipes open
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                text=True,
                timeout=timeout
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("clipboard program %s unavailable: %s", cmd[0], e)
            continue

        if result.returncode == 0:
            logger.info("copied %d characters with %s", len(text), cmd[0])
            return True

    return False
