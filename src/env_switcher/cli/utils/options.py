"""Common CLI options and decorators."""

from functools import wraps
from typing import Any, Callable, TypeVar, cast

import click

F = TypeVar("F", bound=Callable[..., Any])


def format_option(func: F) -> F:
    """Add --format option to a command."""

    @click.option(
        "--format",
        type=click.Choice(["table", "json"], case_sensitive=False),
        help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def verbosity_options(func: F) -> F:
    """Add verbosity options to a command."""

    @click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
    @click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
    @click.option("--debug", is_flag=True, help="Enable debug-level logging.")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def source_options(func: F) -> F:
    """Add --environments and --storage options to a command."""

    @click.option(
        "--environments",
        "environments_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Environment definitions file. Takes precedence over ENV_SWITCHER_ENVIRONMENTS_PATH.",
    )
    @click.option(
        "--storage",
        "storage_path",
        type=click.Path(dir_okay=False),
        help="File holding the selected environment. Takes precedence over ENV_SWITCHER_STORAGE_PATH.",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)
