"""Configuration loader for dotnet-user-secrets.

The config file is optional. Supported keys:

    editor: "code --wait"     # command used to open secrets.json
    open_in_editor: true      # set false to only print the path
"""
import logging
from pathlib import Path
from typing import Dict, Any, Optional
import yaml

from .preferences import get_preference

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": None,
    "open_in_editor": True,
}


class ConfigError(Exception):
    """Configuration error exception."""
    pass


def default_config_path() -> Path:
    return Path.home() / ".config" / "dotnet-user-secrets" / "config.yml"


def _get_config_path() -> Optional[Path]:
    """
    Get config file path using XDG Base Directory standard.

    Priority order:
    1. User preference (stored in ~/.config/dotnet-user-secrets/preferences.json)
    2. Default location: ~/.config/dotnet-user-secrets/config.yml

    Returns:
        Path to the config file, or None if no config file exists
    """
    config_path_pref = get_preference("config_path")
    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            logger.info(f"Using config from preference: {config_path}")
            return config_path
        logger.warning(f"Config path from preference doesn't exist: {config_path}")

    default_config = default_config_path()
    if default_config.exists():
        logger.info(f"Using default config location: {default_config}")
        return default_config

    return None


def load_config() -> Dict[str, Any]:
    """
    Load configuration from YAML file, merged over defaults.

    Returns:
        Dict containing configuration with keys:
        - editor: editor command line or None
        - open_in_editor: whether to launch the editor

    Raises:
        ConfigError: If the config file cannot be read, parsed or has invalid values
    """
    config = dict(DEFAULT_CONFIG)

    # Resolved on every call so preference changes apply immediately
    config_path = _get_config_path()
    if config_path is None:
        logger.debug("No config file found, using defaults")
        return config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if loaded is None:
        return config

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")

    editor = loaded.get("editor")
    if editor is not None and not isinstance(editor, str):
        raise ConfigError(f"'editor' must be a string in config at {config_path}")

    open_in_editor = loaded.get("open_in_editor", True)
    if not isinstance(open_in_editor, bool):
        raise ConfigError(f"'open_in_editor' must be true or false in config at {config_path}")

    config.update({key: loaded[key] for key in DEFAULT_CONFIG if key in loaded})
    logger.info(f"Configuration loaded successfully from {config_path}")
    return config
