#!/usr/bin/env python3
"""Example of basic environment switcher usage."""

import tempfile
from pathlib import Path

from env_switcher import (
    CredentialField,
    CredentialValidationError,
    EnvironmentConfig,
    EnvironmentRegistry,
    EnvironmentSelector,
    EnvSwitcher,
    StorageMode,
    YamlFileStore,
)

ENVIRONMENTS = [
    EnvironmentConfig(
        name="dev",
        display_name="Development",
        base_url="https://dev-api.example.com",
        extras={"timeout": 30, "analytics": False},
    ),
    EnvironmentConfig(
        name="production",
        display_name="Production",
        base_url="https://api.example.com",
        extras={"timeout": 10, "analytics": True},
    ),
    EnvironmentConfig(
        name="custom",
        display_name="Custom Server",
        base_url="https://custom.example.com",
        storage_mode=StorageMode.TEMPORARY,
        requires_credentials=True,
        credential_fields=[
            CredentialField(key="username", label="Username"),
            CredentialField(key="password", label="Password", is_password=True),
        ],
    ),
]


def environment_printer(registry: EnvironmentRegistry):
    """Build a listener printing every environment change."""

    def listener() -> None:
        env = registry.current_environment
        print(f"  -> active: {env.display_name} ({env.base_url})")

    return listener


def pick_custom(selector: EnvironmentSelector) -> None:
    """Stand-in for a selection dialog: show the options and pick 'custom'."""
    for option in selector.options():
        marker = "*" if option.is_current else " "
        lock = " [credentials]" if option.requires_credentials else ""
        print(f"  {marker} {option.environment.display_name}{lock}")

    try:
        selector.confirm("custom", {"username": "alice"})
    except CredentialValidationError as e:
        print(f"  rejected: {e.errors}")

    result = selector.confirm("custom", {"username": "alice", "password": "secret"})
    print(f"  accepted credentials for {', '.join(result.credentials)}")


def main():
    """Run the example."""
    with tempfile.TemporaryDirectory() as tmp:
        store = YamlFileStore(Path(tmp) / "preferences.yml")

        registry = EnvironmentRegistry(store=store)
        registry.add_listener(environment_printer(registry))

        print("Initializing:")
        registry.initialize(ENVIRONMENTS)
        print(f"  timeout = {registry.get_extra('timeout', int)}")

        print("Switching to production:")
        registry.switch_environment("production")
        print(f"  analytics = {registry.get_extra('analytics', bool)}")

        print("Restarting with the same store:")
        restarted = EnvironmentRegistry(store=store)
        restarted.initialize(ENVIRONMENTS)
        print(f"  restored {restarted.current_environment.name}")

        print("Five quick taps open the selector:")
        switcher = EnvSwitcher(registry, open_selector=pick_custom)
        for timestamp in (0, 150, 300, 450, 600):
            switcher.tap(timestamp)

        print(f"Saved selection after temporary switch: {registry.saved_environment_name()}")


if __name__ == "__main__":
    main()
