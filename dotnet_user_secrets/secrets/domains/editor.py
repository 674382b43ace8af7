"""Open secrets files in the user's text editor."""
import os
import shlex
import logging
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Editor launch or exit failure."""
    pass


def resolve_editor(configured: Optional[str] = None) -> Optional[str]:
    """
    Pick the editor command.

    Priority order:
    1. Configured editor (config file 'editor' key)
    2. VISUAL environment variable
    3. EDITOR environment variable

    Returns:
        Editor command line, or None if nothing is configured
    """
    for candidate in (configured, os.getenv("VISUAL"), os.getenv("EDITOR")):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def open_in_editor(path: Path, command: Optional[str] = None) -> bool:
    """
    Open a file in the editor and wait for it to exit.

    Args:
        path: File to open
        command: Editor command line (resolved from environment if not provided)

    Returns:
        True if an editor was launched, False if none is configured

    Raises:
        EditorError: If the editor cannot be started or exits non-zero
    """
    command = resolve_editor(command)
    if not command:
        logger.info("No editor configured (set VISUAL, EDITOR or 'editor' in config)")
        return False

    argv = shlex.split(command) + [str(path)]
    logger.info(f"Launching editor: {' '.join(argv)}")

    try:
        result = subprocess.run(argv, check=False)
    except OSError as e:
        raise EditorError(f"Failed to launch editor '{argv[0]}': {e}")

    if result.returncode != 0:
        raise EditorError(f"Editor '{argv[0]}' exited with code {result.returncode}")

    return True
