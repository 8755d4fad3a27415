"""Environment selection commands for the env-switcher CLI."""

from typing import Any, Dict, Optional, Tuple, Type

import click

from ...credentials import CredentialForm
from ...errors import ConfigurationError, CredentialValidationError, EnvironmentNotAvailableError
from ...selector import EnvironmentSelector
from ..formatters import (
    create_console,
    format_environment_details,
    format_environment_json,
    format_environments_json,
    format_environments_table,
    format_json,
)
from ..utils import ExitCode, handle_error, load_registry, parse_credential_options, type_choices

_TYPES: Dict[str, Optional[Type[Any]]] = {
    "any": None,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "dict": dict,
    "list": list,
}


@click.command("list")
@click.pass_context
def list_environments(ctx: click.Context) -> None:
    """List the defined environments, marking the active one."""
    try:
        registry = load_registry(ctx.obj)
    except ConfigurationError as e:
        handle_error(e, ExitCode.CONFIG_ERROR)
        return

    if ctx.obj["format"] == "json":
        format_json(format_environments_json(registry.available_environments, registry.current_environment))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_environments_table(registry.available_environments, registry.current_environment, console)


@click.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Show the active environment and its extras."""
    try:
        registry = load_registry(ctx.obj)
    except ConfigurationError as e:
        handle_error(e, ExitCode.CONFIG_ERROR)
        return

    env = registry.current_environment
    saved_name = registry.saved_environment_name()
    if ctx.obj["format"] == "json":
        format_json(format_environment_json(env, saved_name))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_environment_details(env, saved_name, console)


def _prompt_credentials(form: CredentialForm, given: Dict[str, str]) -> Dict[str, str]:
    values = dict(given)
    for credential_field in form.fields:
        if values.get(credential_field.key):
            continue
        label = credential_field.label
        if credential_field.hint:
            label = f"{label} ({credential_field.hint})"
        values[credential_field.key] = click.prompt(
            label,
            default=credential_field.default_value or ("" if not credential_field.is_required else None),
            hide_input=credential_field.is_password,
            show_default=not credential_field.is_password,
        )
    return values


@click.command()
@click.argument("name")
@click.option("--credential", "-c", "credential_options", multiple=True, help="Credential as KEY=VALUE (repeatable).")
@click.option("--no-input", is_flag=True, help="Never prompt for missing credentials.")
@click.pass_context
def switch(ctx: click.Context, name: str, credential_options: Tuple[str, ...], no_input: bool) -> None:
    """Switch to the environment called NAME.

    Environments that require credentials prompt for every field not given
    with --credential. Password fields are read without echo.
    """
    try:
        credentials = parse_credential_options(credential_options)
    except click.BadParameter as e:
        handle_error(e, ExitCode.INVALID_USAGE)
        return

    try:
        registry = load_registry(ctx.obj)
        selector = EnvironmentSelector(registry)
        form = selector.credential_form(name)
    except EnvironmentNotAvailableError as e:
        handle_error(
            ConfigurationError(f"{e.message}. Available: {', '.join(e.available)}"),
            ExitCode.ENVIRONMENT_NOT_FOUND,
        )
        return
    except ConfigurationError as e:
        handle_error(e, ExitCode.CONFIG_ERROR)
        return

    current_env = registry.current_environment
    if form.is_required and not no_input and (current_env is None or current_env.name != name):
        credentials = _prompt_credentials(form, credentials)

    try:
        result = selector.confirm(name, credentials)
    except CredentialValidationError as e:
        for key, message in e.errors.items():
            click.echo(f"  {key or 'credentials'}: {message}", err=True)
        handle_error(e, ExitCode.CREDENTIALS_REJECTED)
        return

    env = result.environment
    if not result.changed:
        click.echo(f"Already using {env.display_name} ({env.name})")
        return

    click.echo(f"Switched to {env.display_name} ({env.name})")
    if not env.is_permanent:
        click.echo("Note: this environment is temporary and will not be remembered.")
    if result.credentials and ctx.obj.get("verbose", 0) > 0:
        for key, value in form.display_values(result.credentials).items():
            click.echo(f"  {key}: {value}")


@click.command()
@click.argument("key")
@click.option(
    "--type",
    "type_name",
    type=click.Choice(type_choices(), case_sensitive=False),
    default="any",
    show_default=True,
    help="Required type of the value.",
)
@click.pass_context
def extra(ctx: click.Context, key: str, type_name: str) -> None:
    """Print the extras value KEY of the active environment as JSON."""
    try:
        registry = load_registry(ctx.obj)
    except ConfigurationError as e:
        handle_error(e, ExitCode.CONFIG_ERROR)
        return

    value = registry.get_extra(key, _TYPES[type_name.lower()])
    if value is None:
        env_name = registry.current_environment.name if registry.current_environment else "none"
        handle_error(
            LookupError(f"No {type_name} value for '{key}' in environment {env_name}"),
            ExitCode.VALUE_NOT_FOUND,
        )
        return
    format_json(value)
