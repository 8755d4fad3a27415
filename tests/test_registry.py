"""Tests for the environment registry."""

from typing import Any, Dict, List, Union
from unittest.mock import Mock

import pytest

from env_switcher import (
    ConfigurationError,
    EnvironmentConfig,
    EnvironmentNotAvailableError,
    EnvironmentRegistry,
    MemoryStore,
    StorageError,
    StorageMode,
)
from env_switcher.logging import set_log_callback
from env_switcher.registry import DEFAULT_STORAGE_KEY
from env_switcher.storage import KeyValueStore


@pytest.fixture
def environments() -> List[EnvironmentConfig]:
    """Create the dev/staging/production environments used across tests."""
    return [
        EnvironmentConfig(
            name="dev",
            display_name="Development",
            base_url="https://dev-api.example.com",
            extras={
                "apiKey": "dev-api-key-12345",
                "enableLogging": True,
                "timeout": 30,
                "features": {"newUI": True, "analytics": False},
            },
        ),
        EnvironmentConfig(
            name="staging",
            display_name="Staging",
            base_url="https://staging-api.example.com",
            extras={"timeout": "thirty", "ratio": 0.5},
        ),
        EnvironmentConfig(
            name="production",
            display_name="Production",
            base_url="https://api.example.com",
        ),
    ]


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def registry(store: MemoryStore) -> EnvironmentRegistry:
    """Create an uninitialized registry backed by an in-memory store."""
    return EnvironmentRegistry(store=store)


class FailingStore(KeyValueStore):
    """Store whose every operation fails."""

    def __init__(self, raise_errors: bool = True):
        self.raise_errors = raise_errors

    def get(self, key):
        if self.raise_errors:
            raise StorageError("read failed", key=key)
        return None

    def set(self, key, value):
        if self.raise_errors:
            raise StorageError("write failed", key=key)
        return False

    def remove(self, key):
        if self.raise_errors:
            raise StorageError("remove failed", key=key)
        return False


class TestInitialize:
    """Tests for registry initialization."""

    def test_selects_first_without_saved_or_default(self, registry, environments) -> None:
        registry.initialize(environments)

        assert registry.is_initialized
        assert registry.current_environment is environments[0]
        assert registry.current_environment.name == "dev"

    def test_selects_default_without_saved(self, registry, environments) -> None:
        registry.initialize(environments, default_environment=environments[2])
        assert registry.current_environment.name == "production"

    def test_saved_name_wins_over_default(self, store, registry, environments) -> None:
        store.set(DEFAULT_STORAGE_KEY, "staging")

        registry.initialize(environments, default_environment=environments[2])

        assert registry.current_environment is environments[1]

    def test_unknown_saved_name_falls_back_to_default(self, store, registry, environments) -> None:
        store.set(DEFAULT_STORAGE_KEY, "removed-env")

        registry.initialize(environments, default_environment=environments[1])

        assert registry.current_environment.name == "staging"

    def test_unknown_saved_name_falls_back_to_first(self, store, registry, environments) -> None:
        store.set(DEFAULT_STORAGE_KEY, "removed-env")
        registry.initialize(environments)
        assert registry.current_environment.name == "dev"

    def test_unregistered_default_falls_back_to_first(self, registry, environments) -> None:
        stranger = EnvironmentConfig(name="qa", display_name="QA", base_url="https://qa.example.com")

        registry.initialize(environments, default_environment=stranger)

        assert registry.current_environment.name == "dev"

    def test_default_resolved_by_name(self, registry, environments) -> None:
        """A default equal by name resolves to the registered instance."""
        lookalike = environments[1].replace(base_url="https://elsewhere.example.com")

        registry.initialize(environments, default_environment=lookalike)

        assert registry.current_environment is environments[1]

    def test_empty_list_raises(self, registry) -> None:
        with pytest.raises(ConfigurationError):
            registry.initialize([])
        assert not registry.is_initialized
        assert registry.current_environment is None

    def test_second_call_is_noop(self, registry, environments) -> None:
        registry.initialize(environments, default_environment=environments[1])
        other = [EnvironmentConfig(name="local", display_name="Local", base_url="http://localhost")]

        registry.initialize(other)

        assert registry.current_environment.name == "staging"
        assert [e.name for e in registry.available_environments] == ["dev", "staging", "production"]

    def test_notifies_exactly_once(self, registry, environments) -> None:
        listener = Mock()
        registry.add_listener(listener)

        registry.initialize(environments)
        registry.initialize(environments)

        listener.assert_called_once_with()

    def test_storage_read_failure_treated_as_unsaved(self, environments) -> None:
        registry = EnvironmentRegistry(store=FailingStore())

        registry.initialize(environments, default_environment=environments[2])

        assert registry.current_environment.name == "production"

    def test_available_environments_is_immutable(self, registry, environments) -> None:
        registry.initialize(environments)
        environments.append(EnvironmentConfig(name="late", display_name="Late", base_url=""))

        assert isinstance(registry.available_environments, tuple)
        assert len(registry.available_environments) == 3


class TestSwitchEnvironment:
    """Tests for switching environments."""

    def test_switch_updates_current_and_store(self, store, registry, environments) -> None:
        registry.initialize(environments)

        result = registry.switch_environment(environments[1])

        assert result is environments[1]
        assert registry.current_environment is environments[1]
        assert store.get(DEFAULT_STORAGE_KEY) == "staging"

    def test_switch_by_name(self, store, registry, environments) -> None:
        registry.initialize(environments)
        registry.switch_environment("production")
        assert registry.current_environment.name == "production"

    def test_switch_notifies_once(self, registry, environments) -> None:
        registry.initialize(environments)
        listener = Mock()
        registry.add_listener(listener)

        registry.switch_environment(environments[2])

        listener.assert_called_once_with()

    def test_switch_to_same_environment_still_notifies(self, registry, environments) -> None:
        registry.initialize(environments)
        listener = Mock()
        registry.add_listener(listener)

        registry.switch_environment(environments[0])
        registry.switch_environment(environments[0])

        assert listener.call_count == 2

    def test_switch_to_unknown_raises(self, store, registry, environments) -> None:
        registry.initialize(environments)
        listener = Mock()
        registry.add_listener(listener)
        stranger = EnvironmentConfig(name="qa", display_name="QA", base_url="https://qa.example.com")

        with pytest.raises(EnvironmentNotAvailableError) as exc_info:
            registry.switch_environment(stranger)

        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.name == "qa"
        assert exc_info.value.available == ["dev", "staging", "production"]
        assert registry.current_environment.name == "dev"
        assert store.get(DEFAULT_STORAGE_KEY) is None
        listener.assert_not_called()

    def test_switch_before_initialize_raises(self, registry, environments) -> None:
        with pytest.raises(ConfigurationError):
            registry.switch_environment(environments[0])

    def test_membership_is_by_name(self, registry, environments) -> None:
        registry.initialize(environments)
        lookalike = EnvironmentConfig(name="staging", display_name="Other", base_url="https://other.example.com")

        registry.switch_environment(lookalike)

        assert registry.current_environment is environments[1]

    def test_storage_failure_keeps_in_memory_switch(self, environments) -> None:
        registry = EnvironmentRegistry(store=FailingStore())
        registry.initialize(environments)
        listener = Mock()
        registry.add_listener(listener)

        registry.switch_environment(environments[1])

        assert registry.current_environment.name == "staging"
        listener.assert_called_once_with()

    def test_rejected_write_keeps_in_memory_switch(self, environments) -> None:
        registry = EnvironmentRegistry(store=FailingStore(raise_errors=False))
        registry.initialize(environments)

        registry.switch_environment(environments[2])

        assert registry.current_environment.name == "production"

    def test_listener_sees_persisted_state(self, store, registry, environments) -> None:
        registry.initialize(environments)
        seen = []
        registry.add_listener(lambda: seen.append((registry.current_environment.name, store.get(DEFAULT_STORAGE_KEY))))

        registry.switch_environment(environments[2])

        assert seen == [("production", "production")]

    def test_reset_is_switch(self, store, registry, environments) -> None:
        registry.initialize(environments)
        registry.switch_environment(environments[2])

        registry.reset(environments[0])

        assert registry.current_environment.name == "dev"
        assert store.get(DEFAULT_STORAGE_KEY) == "dev"

    def test_get_environment(self, registry, environments) -> None:
        registry.initialize(environments)

        assert registry.get_environment("staging") is environments[1]
        with pytest.raises(EnvironmentNotAvailableError) as exc_info:
            registry.get_environment("qa")
        assert exc_info.value.name == "qa"
        assert exc_info.value.available == ["dev", "staging", "production"]


class TestPersistence:
    """Tests for selection persistence across registry instances."""

    def test_restart_restores_permanent_selection(self, store, environments) -> None:
        first = EnvironmentRegistry(store=store)
        first.initialize(environments)
        first.switch_environment(environments[1])

        restarted = EnvironmentRegistry(store=store)
        restarted.initialize(environments, default_environment=environments[0])

        assert restarted.current_environment.name == "staging"

    def test_clear_saved_then_restart_uses_default(self, store, environments) -> None:
        first = EnvironmentRegistry(store=store)
        first.initialize(environments)
        first.switch_environment(environments[1])

        assert first.clear_saved() is True
        assert first.current_environment.name == "staging"
        assert first.saved_environment_name() is None

        restarted = EnvironmentRegistry(store=store)
        restarted.initialize(environments, default_environment=environments[2])
        assert restarted.current_environment.name == "production"

    def test_clear_saved_then_restart_uses_first(self, store, environments) -> None:
        first = EnvironmentRegistry(store=store)
        first.initialize(environments)
        first.switch_environment(environments[2])
        first.clear_saved()

        restarted = EnvironmentRegistry(store=store)
        restarted.initialize(environments)
        assert restarted.current_environment.name == "dev"

    def test_temporary_selection_not_restored(self, store, environments) -> None:
        scratch = EnvironmentConfig(
            name="scratch",
            display_name="Scratch",
            base_url="https://scratch.example.com",
            storage_mode=StorageMode.TEMPORARY,
        )
        all_envs = environments + [scratch]
        first = EnvironmentRegistry(store=store)
        first.initialize(all_envs)
        first.switch_environment(environments[1])

        first.switch_environment(scratch)

        assert first.current_environment.name == "scratch"
        assert store.get(DEFAULT_STORAGE_KEY) is None

        restarted = EnvironmentRegistry(store=store)
        restarted.initialize(all_envs, default_environment=environments[2])
        assert restarted.current_environment.name == "production"

    def test_clear_saved_reports_failure(self, environments) -> None:
        registry = EnvironmentRegistry(store=FailingStore())
        registry.initialize(environments)
        assert registry.clear_saved() is False

    def test_custom_storage_key(self, store, environments) -> None:
        registry = EnvironmentRegistry(store=store, storage_key="my_app_env")
        registry.initialize(environments)
        registry.switch_environment("staging")

        assert store.get("my_app_env") == "staging"
        assert DEFAULT_STORAGE_KEY not in store


class TestGetExtra:
    """Tests for typed extras access."""

    def test_untyped_value(self, registry, environments) -> None:
        registry.initialize(environments)
        assert registry.get_extra("apiKey") == "dev-api-key-12345"
        assert registry.get_extra("features") == {"newUI": True, "analytics": False}

    def test_typed_value(self, registry, environments) -> None:
        registry.initialize(environments)
        assert registry.get_extra("timeout", int) == 30
        assert registry.get_extra("enableLogging", bool) is True
        assert registry.get_extra("features", dict) == {"newUI": True, "analytics": False}

    def test_type_mismatch_returns_none(self, registry, environments) -> None:
        registry.initialize(environments, default_environment=environments[1])
        assert registry.get_extra("timeout", int) is None

    def test_bool_is_not_int(self, registry, environments) -> None:
        registry.initialize(environments)
        assert registry.get_extra("enableLogging", int) is None

    def test_int_coerced_to_float(self, registry, environments) -> None:
        registry.initialize(environments)
        value = registry.get_extra("timeout", float)
        assert value == 30.0
        assert isinstance(value, float)

    def test_missing_key(self, registry, environments) -> None:
        registry.initialize(environments)
        assert registry.get_extra("nope") is None
        assert registry.get_extra("nope", str) is None

    def test_subscripted_generic_type(self, registry, environments) -> None:
        registry.initialize(environments)
        assert registry.get_extra("features", Dict[str, Any]) == {"newUI": True, "analytics": False}
        assert registry.get_extra("timeout", Dict[str, Any]) is None
        assert registry.get_extra("features", List[str]) is None

    def test_unsupported_type_returns_none(self, registry, environments) -> None:
        registry.initialize(environments)
        assert registry.get_extra("timeout", Union[int, str]) is None

    def test_before_initialize(self, registry) -> None:
        assert registry.get_extra("timeout", int) is None


class TestListeners:
    """Tests for change notification."""

    def test_listeners_called_in_registration_order(self, registry, environments) -> None:
        calls = []
        registry.add_listener(lambda: calls.append("first"))
        registry.add_listener(lambda: calls.append("second"))

        registry.initialize(environments)

        assert calls == ["first", "second"]

    def test_removed_listener_not_called(self, registry, environments) -> None:
        listener = Mock()
        registry.add_listener(listener)
        registry.remove_listener(listener)

        registry.initialize(environments)

        listener.assert_not_called()
        assert not registry.has_listeners

    def test_remove_unknown_listener_is_ignored(self, registry) -> None:
        registry.remove_listener(lambda: None)

    def test_notification_skipped_without_listeners(self, registry, environments) -> None:
        events = []
        set_log_callback(lambda level, event, data: events.append(data["message"]))
        try:
            registry.initialize(environments)
        finally:
            set_log_callback(None)

        assert not registry.has_listeners
        assert "No listeners to notify" in events

    def test_failing_listener_does_not_block_others(self, registry, environments) -> None:
        after = Mock()
        registry.add_listener(Mock(side_effect=RuntimeError("boom")))
        registry.add_listener(after)

        registry.initialize(environments)

        after.assert_called_once_with()

    def test_listener_may_unregister_itself(self, registry, environments) -> None:
        calls = []

        def once() -> None:
            calls.append("once")
            registry.remove_listener(once)

        registry.add_listener(once)
        registry.initialize(environments)
        registry.switch_environment("staging")

        assert calls == ["once"]


class TestDefaultInstance:
    """Tests for the process-wide default registry."""

    def setup_method(self) -> None:
        EnvironmentRegistry.cleanup()

    def teardown_method(self) -> None:
        EnvironmentRegistry.cleanup()

    def test_get_default_returns_same_instance(self) -> None:
        assert EnvironmentRegistry.get_default() is EnvironmentRegistry.get_default()

    def test_cleanup_discards_instance(self) -> None:
        first = EnvironmentRegistry.get_default()
        EnvironmentRegistry.cleanup()
        assert EnvironmentRegistry.get_default() is not first
