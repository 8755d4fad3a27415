"""CLI utilities package."""

from .helpers import (
    ExitCode,
    configure_logging,
    get_env_switcher_env_vars,
    handle_error,
    load_registry,
    parse_credential_options,
    resolve_format,
    resolve_log_level,
    type_choices,
)
from .options import (
    format_option,
    source_options,
    verbosity_options,
)

__all__ = [
    "ExitCode",
    "resolve_format",
    "resolve_log_level",
    "configure_logging",
    "handle_error",
    "get_env_switcher_env_vars",
    "parse_credential_options",
    "load_registry",
    "type_choices",
    "format_option",
    "source_options",
    "verbosity_options",
]
