"""Storage inspection commands for the env-switcher CLI."""

from typing import Dict, Optional

import click

from ...config_paths import get_environments_path, get_storage_path, get_user_config_dir, get_user_data_dir
from ...errors import ConfigurationError
from ..formatters import create_console, format_json, format_paths_json, format_paths_table
from ..utils import ExitCode, get_env_switcher_env_vars, handle_error, load_registry


@click.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Forget the saved environment; the next start uses the default."""
    try:
        registry = load_registry(ctx.obj)
    except ConfigurationError as e:
        handle_error(e, ExitCode.CONFIG_ERROR)
        return

    if not registry.clear_saved():
        handle_error(RuntimeError(f"Failed to clear saved environment in {registry.store!r}"))
        return
    click.echo("Cleared saved environment")


@click.command()
@click.pass_context
def paths(ctx: click.Context) -> None:
    """Show resolved definition and storage paths."""
    resolved: Dict[str, Optional[str]] = {
        "environments": ctx.obj.get("environments_path") or get_environments_path(),
        "storage": ctx.obj.get("storage_path") or get_storage_path(),
        "user_config_dir": str(get_user_config_dir()),
        "user_data_dir": str(get_user_data_dir()),
    }
    env_vars = get_env_switcher_env_vars()

    if ctx.obj["format"] == "json":
        format_json(format_paths_json(resolved, env_vars))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_paths_table(resolved, env_vars, console)
