"""Configuration path handling for the environment switcher.

This module implements path resolution for the environment definitions file
and the persisted selection following the XDG Base Directory Specification.
"""

import os
from pathlib import Path

import platformdirs

from .logging import LogEvent, log_error

# Application name used for directory paths
APP_NAME = "env-switcher"

# Environment variable names
ENV_ENVIRONMENTS_PATH = "ENV_SWITCHER_ENVIRONMENTS_PATH"
ENV_STORAGE_PATH = "ENV_SWITCHER_STORAGE_PATH"

# Default filenames
ENVIRONMENTS_FILENAME = "environments.yml"
STORAGE_FILENAME = "preferences.yml"


def get_package_config_dir() -> Path:
    """Get the path to the package's bundled config directory."""
    return Path(__file__).parent / "config"


def get_user_config_dir() -> Path:
    """Get the path to the user's config directory for this application."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_user_data_dir() -> Path:
    """Get the path to the user's data directory for this application."""
    return Path(platformdirs.user_data_dir(APP_NAME))


def ensure_user_config_dir_exists() -> None:
    """Ensure that the user config directory exists.

    Raises:
        OSError: If the directory cannot be created due to permission errors or other IO issues
        PermissionError: If the directory exists but is not writable
    """
    config_dir = get_user_config_dir()

    # If directory already exists, check if it's writable
    if config_dir.exists():
        if not os.access(config_dir, os.W_OK):
            raise PermissionError(f"Config directory exists but is not writable: {config_dir}")
        return

    os.makedirs(config_dir, exist_ok=True)

    if not os.access(config_dir, os.W_OK):
        raise PermissionError(f"Created config directory but it is not writable: {config_dir}")


def copy_default_to_user_config(filename: str) -> bool:
    """Copy a bundled config file to the user config directory if it doesn't exist.

    Args:
        filename: Name of the config file to copy

    Returns:
        True if file was copied, False if no action was taken

    Raises:
        OSError: If there is an error creating directory or copying file
    """
    package_file = get_package_config_dir() / filename
    user_file = get_user_config_dir() / filename

    if user_file.exists():
        return False

    try:
        ensure_user_config_dir_exists()
    except OSError as e:
        log_error(LogEvent.CONFIG, f"Failed to create user config directory: {e}")
        raise

    if package_file.exists():
        try:
            user_file.write_bytes(package_file.read_bytes())
            return True
        except OSError as e:
            log_error(LogEvent.CONFIG, f"Failed to copy config file {filename}: {e}")
            raise

    return False


def get_environments_path() -> str:
    """Get the path to the environment definitions file.

    Returns:
        Path to the definitions file
    """
    # 1. Check environment variable
    env_path = os.environ.get(ENV_ENVIRONMENTS_PATH)
    if env_path and Path(env_path).is_file():
        return env_path

    # 2. Check user config directory
    user_path = get_user_config_dir() / ENVIRONMENTS_FILENAME
    if user_path.is_file():
        return str(user_path)

    # 3. Fall back to package directory
    return str(get_package_config_dir() / ENVIRONMENTS_FILENAME)


def get_storage_path() -> str:
    """Get the path to the file holding the persisted selection.

    Unlike the definitions file the storage file need not exist yet, so the
    environment variable wins whenever it is set.

    Returns:
        Path to the storage file
    """
    env_path = os.environ.get(ENV_STORAGE_PATH)
    if env_path:
        return env_path

    return str(get_user_data_dir() / STORAGE_FILENAME)
