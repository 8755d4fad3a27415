"""Loading environment definitions from YAML.

A definitions file looks like::

    default: dev
    environments:
      - name: dev
        display_name: Development
        base_url: https://dev-api.example.com
        extras:
          timeout: 30
      - name: production
        display_name: Production
        base_url: https://api.example.com

Entries may also use the camelCase keys of the JSON form
(``displayName``, ``baseUrl``, ``requiresCredentials`` ...).
"""

from typing import Any, List, Optional

import yaml

from .config_paths import ENVIRONMENTS_FILENAME, copy_default_to_user_config, get_environments_path
from .config_result import ConfigResult
from .environment import EnvironmentConfig
from .errors import InvalidConfigFormatError
from .logging import LogEvent, log_debug, log_error, log_warning


def parse_environments(data: Any, path: Optional[str] = None) -> List[EnvironmentConfig]:
    """Build environments from parsed YAML data.

    Args:
        data: Parsed document; a mapping with an ``environments`` list
        path: Source path, for error messages

    Returns:
        Environments in file order

    Raises:
        InvalidConfigFormatError: If the document or an entry is malformed
    """
    if not isinstance(data, dict):
        raise InvalidConfigFormatError(
            f"Invalid environments format: expected dictionary, got {type(data).__name__}",
            path=path,
        )

    entries = data.get("environments")
    if not isinstance(entries, list):
        raise InvalidConfigFormatError(
            "Invalid environments format: 'environments' must be a list",
            path=path,
            expected_type="list",
        )

    environments: List[EnvironmentConfig] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidConfigFormatError(
                f"Environment #{index} must be a mapping, got {type(entry).__name__}",
                path=path,
            )
        if not entry.get("name"):
            raise InvalidConfigFormatError(f"Environment #{index} has no name", path=path, expected_type="str")
        extras = entry.get("extras")
        if extras is not None and not isinstance(extras, dict):
            raise InvalidConfigFormatError(
                f"Extras of environment '{entry['name']}' must be a mapping",
                path=path,
            )
        try:
            environments.append(EnvironmentConfig.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidConfigFormatError(
                f"Invalid environment '{entry['name']}': {e}",
                path=path,
            ) from e

    if not environments:
        raise InvalidConfigFormatError("No environments defined", path=path, expected_type="list")
    return environments


def load_environments(path: Optional[str] = None) -> ConfigResult:
    """Load environment definitions from a YAML file.

    Args:
        path: File to load. If None, the path is resolved through
              ``ENV_SWITCHER_ENVIRONMENTS_PATH``, the user config directory,
              and finally the bundled example file.

    Returns:
        ConfigResult: Result of the loading operation
    """
    if path is None:
        try:
            copy_default_to_user_config(ENVIRONMENTS_FILENAME)
        except OSError as e:
            log_warning(
                LogEvent.CONFIG,
                f"Failed to copy default environments config: {e}",
                error=str(e),
            )
        path = get_environments_path()

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        error_msg = f"Could not read environments file: {e}"
        log_error(LogEvent.CONFIG, error_msg, path=path)
        return ConfigResult(success=False, error=error_msg, exception=e, path=path)

    if not content.strip():
        error_msg = "Environments file is empty"
        log_error(LogEvent.CONFIG, error_msg, path=path)
        return ConfigResult(success=False, error=error_msg, path=path)

    try:
        data = yaml.safe_load(content)
        environments = parse_environments(data, path=path)
    except yaml.YAMLError as e:
        error_msg = f"YAML parsing error in {path}: {e}"
        log_error(LogEvent.CONFIG, error_msg, path=path)
        return ConfigResult(success=False, error=error_msg, exception=e, path=path)
    except InvalidConfigFormatError as e:
        log_error(LogEvent.CONFIG, e.message, path=path)
        return ConfigResult(success=False, error=e.message, exception=e, path=path)

    default_name = data.get("default")
    if default_name is not None and not any(env.name == default_name for env in environments):
        log_warning(
            LogEvent.CONFIG,
            "Declared default environment is not defined",
            default=default_name,
            path=path,
        )
        default_name = None

    log_debug(LogEvent.CONFIG, f"Loaded {len(environments)} environments", path=path)
    return ConfigResult(success=True, environments=environments, default_name=default_name, path=path)
