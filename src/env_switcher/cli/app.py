"""Main CLI application for env-switcher."""

import json
from typing import Optional

import click
import rich_click as rich_click

from .utils import (
    configure_logging,
    format_option,
    resolve_format,
    resolve_log_level,
    source_options,
    verbosity_options,
)

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


def _show_json_help(ctx: click.Context) -> None:
    """Show command overview as JSON and exit."""
    try:
        from .. import __version__

        cli_version = __version__
    except ImportError:
        cli_version = "unknown"

    help_data = {
        "command": "env-switcher",
        "description": "Inspect and switch the backend environment an application uses",
        "usage": "env-switcher [OPTIONS] COMMAND [ARGS]...",
        "version": cli_version,
        "commands": {
            "list": {"description": "List the defined environments, marking the active one"},
            "current": {"description": "Show the active environment and its extras"},
            "switch": {
                "description": "Switch to an environment",
                "options": [
                    {"name": "--credential", "short": "-c", "type": "string", "help": "Credential as KEY=VALUE"},
                    {"name": "--no-input", "type": "flag", "help": "Never prompt for missing credentials"},
                ],
            },
            "extra": {
                "description": "Print an extras value of the active environment",
                "options": [{"name": "--type", "type": "choice", "help": "Required type of the value"}],
            },
            "clear": {"description": "Forget the saved environment"},
            "paths": {"description": "Show resolved definition and storage paths"},
        },
        "exit_codes": {
            "0": "Success",
            "1": "Generic error",
            "2": "Invalid usage",
            "3": "Environment not found",
            "4": "Environment definitions missing/invalid",
            "5": "Credentials rejected",
            "6": "Extras value not found",
        },
        "environment_variables": [
            "ENV_SWITCHER_ENVIRONMENTS_PATH",
            "ENV_SWITCHER_STORAGE_PATH",
        ],
    }

    click.echo(json.dumps(help_data, indent=2, sort_keys=True))
    ctx.exit()


@click.group(invoke_without_command=True)
@source_options
@format_option
@verbosity_options
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option("--version", is_flag=True, is_eager=True, help="Print CLI and library version information.")
@click.option(
    "--help-json",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: _show_json_help(ctx) if value else None,
    help="Show help in JSON format for programmatic use.",
)
@click.pass_context
def app(
    ctx: click.Context,
    environments_path: Optional[str] = None,
    storage_path: Optional[str] = None,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
    version: bool = False,
) -> None:
    """env-switcher - inspect and switch backend environments.

    Reads environment definitions from a YAML file and remembers the
    selected environment between runs, exactly as an application using
    the library would.

    Examples:
      # Show all environments
      env-switcher list

      # Switch to staging
      env-switcher switch staging

      # Read a typed extras value
      env-switcher extra timeout --type int
    """
    if version:
        try:
            from .. import __version__

            library_version = __version__
        except ImportError:
            library_version = "unknown"

        click.echo(f"env-switcher version: {library_version}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()

    ctx.ensure_object(dict)

    log_level = resolve_log_level(verbose, quiet, debug)
    configure_logging(log_level)

    ctx.obj.update(
        {
            "environments_path": environments_path,
            "storage_path": storage_path,
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "log_level": log_level,
        }
    )


# Import and register subcommands after the group is defined
from .commands import environments, storage  # noqa: E402

app.add_command(environments.list_environments)
app.add_command(environments.current)
app.add_command(environments.switch)
app.add_command(environments.extra)
app.add_command(storage.clear)
app.add_command(storage.paths)


if __name__ == "__main__":
    app()
