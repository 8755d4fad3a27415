"""CLI formatters package."""

from .json import (
    format_environment_json,
    format_environments_json,
    format_json,
    format_paths_json,
)
from .table import (
    create_console,
    format_environment_details,
    format_environments_table,
    format_paths_table,
)

__all__ = [
    "format_json",
    "format_environments_json",
    "format_environment_json",
    "format_paths_json",
    "create_console",
    "format_environments_table",
    "format_environment_details",
    "format_paths_table",
]
