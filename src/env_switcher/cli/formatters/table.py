"""Rich table formatter for CLI output."""

import sys
from typing import Any, Dict, Optional, Sequence, TextIO

from rich.console import Console
from rich.table import Table

from ...environment import EnvironmentConfig, environment_key


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    return Console(file=output, no_color=no_color)


def _format_value(value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, dict):
        return ", ".join(f"{k}={_format_value(v)}" for k, v in value.items())
    return str(value)


def format_environments_table(
    environments: Sequence[EnvironmentConfig],
    current: Optional[EnvironmentConfig],
    console: Optional[Console] = None,
) -> None:
    """Format the environment list as a Rich table.

    Args:
        environments: Registered environments
        current: Active environment, highlighted in the table
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    current_key = environment_key(current) if current is not None else None

    table = Table(title="Environments", show_header=True, header_style="bold magenta")
    table.add_column("", no_wrap=True, justify="center")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Display Name")
    table.add_column("Base URL", no_wrap=True)
    table.add_column("Storage", no_wrap=True)
    table.add_column("Credentials", justify="center", no_wrap=True)

    for env in environments:
        is_current = environment_key(env) == current_key
        table.add_row(
            "●" if is_current else "",
            env.name,
            env.display_name,
            env.base_url,
            env.storage_mode.value,
            _format_value(env.requires_credentials),
            style="bold green" if is_current else None,
        )

    console.print(table)


def format_environment_details(
    env: EnvironmentConfig, saved_name: Optional[str], console: Optional[Console] = None
) -> None:
    """Print the active environment and its extras."""
    if console is None:
        console = create_console()

    console.print(f"[bold]Current Environment:[/bold] {env.display_name} ({env.name})")
    console.print(f"[bold]Base URL:[/bold] {env.base_url}")
    console.print(f"[bold]Storage Mode:[/bold] {env.storage_mode.value}")
    console.print(f"[bold]Saved Selection:[/bold] {saved_name or 'none'}")

    if env.extras:
        table = Table(title="Extras", show_header=True, header_style="bold magenta")
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value")
        table.add_column("Type", no_wrap=True)
        for key, value in env.extras.items():
            table.add_row(key, _format_value(value), type(value).__name__)
        console.print(table)


def format_paths_table(
    paths: Dict[str, Optional[str]],
    env_vars: Dict[str, Optional[str]],
    console: Optional[Console] = None,
) -> None:
    """Format resolved paths and environment variables as Rich tables."""
    if console is None:
        console = create_console()

    table = Table(title="Paths", show_header=True, header_style="bold magenta")
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Path")
    for name, path in paths.items():
        table.add_row(name, _format_value(path))
    console.print(table)

    env_table = Table(title="Environment Variables", show_header=True, header_style="bold magenta")
    env_table.add_column("Variable", style="cyan", no_wrap=True)
    env_table.add_column("Value")
    for name, value in sorted(env_vars.items()):
        env_table.add_row(name, value if value is not None else "[dim]not set[/dim]")
    console.print(env_table)
