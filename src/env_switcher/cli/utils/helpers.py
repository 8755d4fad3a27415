"""Helper functions for CLI operations."""

import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

import click

from ...config_paths import ENV_ENVIRONMENTS_PATH, ENV_STORAGE_PATH, get_storage_path
from ...errors import ConfigurationError
from ...loader import load_environments
from ...registry import EnvironmentRegistry
from ...storage import YamlFileStore


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    ENVIRONMENT_NOT_FOUND = 3
    CONFIG_ERROR = 4
    CREDENTIALS_REJECTED = 5
    VALUE_NOT_FOUND = 6


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    # Auto-detect based on TTY
    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def resolve_log_level(verbose: int = 0, quiet: int = 0, debug: bool = False) -> str:
    """Map verbosity flags to a logging level name."""
    if debug:
        return "DEBUG"
    if verbose > quiet:
        return "DEBUG" if verbose >= 2 else "INFO"
    if quiet > verbose:
        return "ERROR"
    return "WARNING"


def configure_logging(log_level: str) -> None:
    """Send package log records to stderr at ``log_level``."""
    logger = logging.getLogger("env_switcher")
    logger.setLevel(log_level)
    for existing in logger.handlers:
        if getattr(existing, "cli_handler", False):
            # sys.stderr may have been replaced since the last invocation
            existing.setStream(sys.stderr)  # type: ignore[attr-defined]
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.cli_handler = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def get_env_switcher_env_vars() -> Dict[str, Optional[str]]:
    """Get all ENV_SWITCHER_* environment variables.

    Returns:
        Dictionary of variable names and their values
    """
    env_vars: Dict[str, Optional[str]] = {}
    for key, value in os.environ.items():
        if key.startswith("ENV_SWITCHER_"):
            env_vars[key] = value

    # Include known variables even if not set
    for var in (ENV_ENVIRONMENTS_PATH, ENV_STORAGE_PATH):
        if var not in env_vars:
            env_vars[var] = None

    return env_vars


def parse_credential_options(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options.

    Raises:
        click.BadParameter: If an option has no ``=``
    """
    credentials: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got '{item}'", param_hint="--credential")
        credentials[key.strip()] = value
    return credentials


def load_registry(ctx_obj: Dict[str, Any]) -> EnvironmentRegistry:
    """Build and initialize a registry from the global CLI options.

    Raises:
        ConfigurationError: If the environment definitions cannot be loaded
    """
    result = load_environments(ctx_obj.get("environments_path"))
    if not result.success:
        raise ConfigurationError(result.error or "Failed to load environments", path=result.path)

    store = YamlFileStore(ctx_obj.get("storage_path") or get_storage_path())
    registry = EnvironmentRegistry(store=store)
    registry.initialize(result.environments, default_environment=result.default_environment)
    ctx_obj["environments_source"] = result.path
    return registry


def type_choices() -> List[str]:
    return ["any", "str", "int", "float", "bool", "dict", "list"]
