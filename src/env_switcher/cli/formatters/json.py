"""JSON output formatter for CLI."""

import json
import sys
from enum import Enum as _Enum
from typing import Any, Dict, Optional, Sequence, TextIO

from ...environment import EnvironmentConfig, environment_key


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - Enum -> value (fallback to name)
    - Fallback -> str(obj)
    """
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_environments_json(
    environments: Sequence[EnvironmentConfig], current: Optional[EnvironmentConfig]
) -> Dict[str, Any]:
    """Format the environment list for JSON output."""
    current_key = environment_key(current) if current is not None else None
    return {
        "environments": [
            {**env.to_dict(), "current": environment_key(env) == current_key} for env in environments
        ],
        "current": current_key,
        "count": len(environments),
    }


def format_environment_json(env: EnvironmentConfig, saved_name: Optional[str]) -> Dict[str, Any]:
    """Format the active environment for JSON output."""
    return {"environment": env.to_dict(), "saved": saved_name}


def format_paths_json(paths: Dict[str, Optional[str]], env_vars: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Format resolved paths for JSON output."""
    return {"paths": paths, "environment_variables": env_vars}
