"""User secrets store location and initialization.

Store files live at:
    Windows:        %APPDATA%/Microsoft/UserSecrets/<id>/secrets.json
    macOS / Linux:  ~/.microsoft/usersecrets/<id>/secrets.json
"""
import os
import sys
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SECRETS_FILE_NAME = "secrets.json"

# Empty object with a blank indented line left for manual key entry
EMPTY_SECRETS_CONTENT = "{\n  \n}"

# Path separators plus characters Windows forbids in file names
INVALID_ID_CHARS = frozenset('/\\<>:"|?*')


class Platform(Enum):
    """Operating system families with distinct store locations."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"


def current_platform() -> Platform:
    """Map sys.platform onto a Platform."""
    if sys.platform.startswith("win"):
        return Platform.WINDOWS
    if sys.platform == "darwin":
        return Platform.MACOS
    if sys.platform.startswith("linux"):
        return Platform.LINUX
    return Platform.OTHER


def secrets_base_dir(
    platform: Platform,
    home: Path,
    getenv: Callable[[str], Optional[str]] = os.getenv,
) -> Path:
    """
    Get the directory that holds all user secrets stores.

    Args:
        platform: Operating system family
        home: User home directory
        getenv: Environment lookup (os.getenv by default)

    Returns:
        Base directory for per-project store directories
    """
    if platform is Platform.WINDOWS:
        appdata = getenv("APPDATA")
        roaming = Path(appdata) if appdata else home / "AppData" / "Roaming"
        return roaming / "Microsoft" / "UserSecrets"

    # macOS, Linux and anything unrecognized share the same layout
    return home / ".microsoft" / "usersecrets"


def validate_user_secrets_id(user_secrets_id: str) -> None:
    """
    Reject identifiers that cannot name a single directory.

    Raises:
        ValueError: If the identifier is empty, is "." or "..", or contains a
            character that is invalid in a file name on any platform
    """
    if not user_secrets_id or user_secrets_id in (".", ".."):
        raise ValueError(f"Invalid UserSecretsId '{user_secrets_id}'")

    for char in user_secrets_id:
        if char in INVALID_ID_CHARS or ord(char) < 32:
            raise ValueError(
                f"Invalid character {char!r} in UserSecretsId '{user_secrets_id}'"
            )


def get_secrets_path(
    user_secrets_id: str,
    platform: Optional[Platform] = None,
    home: Optional[Path] = None,
    getenv: Callable[[str], Optional[str]] = os.getenv,
) -> Path:
    """
    Build the secrets.json path for an identifier.

    Platform and home default to the running system.
    """
    validate_user_secrets_id(user_secrets_id)

    if platform is None:
        platform = current_platform()
    if home is None:
        home = Path.home()

    base_dir = secrets_base_dir(platform, home, getenv)
    return base_dir / user_secrets_id / SECRETS_FILE_NAME


def ensure_secrets_file(secrets_path: Path) -> bool:
    """
    Create the store file and its parent directories if missing.

    An existing file is left untouched.

    Returns:
        True if the file was created, False if it already existed
    """
    secrets_path.parent.mkdir(parents=True, exist_ok=True)

    if secrets_path.exists():
        logger.debug(f"Using existing secrets file: {secrets_path}")
        return False

    with open(secrets_path, "w", encoding="utf-8", newline="") as f:
        f.write(EMPTY_SECRETS_CONTENT)
    logger.info(f"Created secrets file: {secrets_path}")
    return True
