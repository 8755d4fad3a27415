"""Environment registry.

This module provides the EnvironmentRegistry class, which holds the list of
available environments, the active selection, and the observers notified
whenever the selection changes. The selection is persisted by name in a
:class:`~env_switcher.storage.KeyValueStore`.

Typical usage:

    from env_switcher import get_registry  # process-wide default instance

    registry = get_registry()
    registry.initialize(environments, default_environment=environments[0])
    registry.add_listener(on_env_changed)

Tests and hosts that want isolation construct their own instance and inject
it, e.g. ``EnvironmentRegistry(store=MemoryStore())``.
"""

import threading
from typing import Any, Callable, List, Optional, Sequence, Tuple, Type, TypeVar, Union, get_origin, overload

from .config_paths import get_storage_path
from .environment import EnvironmentConfig, environment_key, find_environment
from .errors import ConfigurationError, EnvironmentNotAvailableError, StorageError
from .logging import LogEvent, get_logger, log_debug, log_error, log_info, log_warning
from .storage import KeyValueStore, YamlFileStore

# Create module logger
logger = get_logger("registry")

# Key under which the selected environment name is stored
DEFAULT_STORAGE_KEY = "env_switcher_selected_env"

Listener = Callable[[], None]
T = TypeVar("T")


class EnvironmentRegistry:
    """Registry of environments and the active selection."""

    _default_instance: Optional["EnvironmentRegistry"] = None
    _instance_lock = threading.RLock()

    @classmethod
    def get_default(cls) -> "EnvironmentRegistry":
        """Get the default registry instance, backed by the user's storage file.

        Returns:
            The process-wide EnvironmentRegistry instance
        """
        with cls._instance_lock:
            if cls._default_instance is None:
                cls._default_instance = cls()
            return cls._default_instance

    @staticmethod
    def cleanup() -> None:
        """Discard the default instance; the next ``get_default`` builds a fresh one."""
        with EnvironmentRegistry._instance_lock:
            EnvironmentRegistry._default_instance = None

    def __init__(self, store: Optional[KeyValueStore] = None, storage_key: str = DEFAULT_STORAGE_KEY):
        """Initialize a new, uninitialized registry.

        Args:
            store: Key-value store for the persisted selection. If None, a
                   YAML file in the user data directory is used.
            storage_key: Key under which the selected name is stored.
        """
        self.store = store if store is not None else YamlFileStore(get_storage_path())
        self.storage_key = storage_key
        self._available: Tuple[EnvironmentConfig, ...] = ()
        self._current: Optional[EnvironmentConfig] = None
        self._initialized = False
        self._listeners: List[Listener] = []

    @property
    def available_environments(self) -> Tuple[EnvironmentConfig, ...]:
        """Registered environments, in registration order."""
        return self._available

    @property
    def current_environment(self) -> Optional[EnvironmentConfig]:
        """The active environment; None only before ``initialize``."""
        return self._current

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(
        self,
        environments: Sequence[EnvironmentConfig],
        default_environment: Optional[EnvironmentConfig] = None,
    ) -> None:
        """Register the environments and restore the persisted selection.

        Only the first call has any effect; later calls return immediately,
        even when given a different list.

        The selection is resolved in this order: the environment whose name
        was persisted by a previous run, then ``default_environment`` if it is
        one of ``environments``, then the first entry.

        Args:
            environments: Non-empty ordered list of environments
            default_environment: Environment to select when nothing usable
                                 was persisted

        Raises:
            ConfigurationError: If ``environments`` is empty
        """
        if self._initialized:
            log_debug(LogEvent.ENV_REGISTRY, "Registry already initialized")
            return

        if not environments:
            raise ConfigurationError("At least one environment must be provided")

        available = tuple(environments)
        names = [environment_key(env) for env in available]
        if len(set(names)) != len(names):
            log_warning(
                LogEvent.ENV_REGISTRY,
                "Duplicate environment names registered; the first entry wins on lookup",
                names=names,
            )

        fallback = available[0]
        if default_environment is not None:
            resolved_default = find_environment(available, environment_key(default_environment))
            if resolved_default is None:
                log_warning(
                    LogEvent.ENV_REGISTRY,
                    "Default environment is not registered, using the first environment",
                    default=environment_key(default_environment),
                    fallback=environment_key(fallback),
                )
            else:
                fallback = resolved_default

        saved_name = self._read_saved_name()
        current = fallback
        if saved_name is not None:
            restored = find_environment(available, saved_name)
            if restored is None:
                log_info(
                    LogEvent.ENV_REGISTRY,
                    "Saved environment is no longer registered",
                    saved=saved_name,
                    fallback=environment_key(fallback),
                )
            else:
                current = restored

        self._available = available
        self._current = current
        self._initialized = True
        self._notify_listeners()
        log_info(LogEvent.ENV_REGISTRY, f"Initialized with {environment_key(current)}")

    def get_environment(self, name: str) -> EnvironmentConfig:
        """Look up a registered environment by name.

        Raises:
            EnvironmentNotAvailableError: If no environment has that name
        """
        env = find_environment(self._available, name)
        if env is None:
            raise EnvironmentNotAvailableError(
                f"Environment {name} is not available",
                name=name,
                available=[environment_key(e) for e in self._available],
            )
        return env

    def switch_environment(self, target: Union[EnvironmentConfig, str]) -> EnvironmentConfig:
        """Make ``target`` the active environment.

        The selection is persisted when the target's storage mode is
        permanent. Selecting a temporary environment removes any persisted
        name, so the next start falls back to the default. A storage failure
        is logged and does not undo the in-memory switch. Observers are
        notified exactly once, after the storage operation completed.

        Args:
            target: Registered environment, or its name

        Returns:
            The registered environment that is now active

        Raises:
            EnvironmentNotAvailableError: If ``target`` is not registered
        """
        name = target if isinstance(target, str) else environment_key(target)
        env = self.get_environment(name)

        self._current = env
        if env.is_permanent:
            self._write_saved_name(name)
        else:
            self._remove_saved_name()

        self._notify_listeners()
        log_info(LogEvent.ENV_SWITCH, f"Switched to {name}", storage_mode=env.storage_mode.value)
        return env

    def reset(self, default_environment: Union[EnvironmentConfig, str]) -> EnvironmentConfig:
        """Switch back to ``default_environment``."""
        return self.switch_environment(default_environment)

    def clear_saved(self) -> bool:
        """Forget the persisted selection.

        The active environment is unchanged; only the next ``initialize``
        is affected.

        Returns:
            True if the store reported success
        """
        removed = self._remove_saved_name()
        if removed:
            log_info(LogEvent.STORAGE, "Cleared saved environment")
        return removed

    def saved_environment_name(self) -> Optional[str]:
        """Return the persisted environment name, or None."""
        return self._read_saved_name()

    @overload
    def get_extra(self, key: str) -> Any: ...

    @overload
    def get_extra(self, key: str, expected_type: Type[T]) -> Optional[T]: ...

    def get_extra(self, key: str, expected_type: Optional[Type[Any]] = None) -> Any:
        """Get a value from the active environment's extras.

        Args:
            key: Extras key
            expected_type: Type the value must have. ``bool`` values never
                           satisfy ``int`` or ``float``; an ``int`` is
                           converted when ``float`` is requested.

        Returns:
            The value, or None if there is no active environment, the key is
            absent, or the value does not have the expected type
        """
        if self._current is None:
            return None
        value = self._current.extras.get(key)
        if value is None or expected_type is None:
            return value

        # Dict[str, Any] and friends are checked against their runtime class
        expected_type = get_origin(expected_type) or expected_type
        if not isinstance(expected_type, type):
            return None

        if isinstance(value, bool) and expected_type is not bool:
            return None
        if expected_type is float and isinstance(value, int):
            return float(value)
        if isinstance(value, expected_type):
            return value
        return None

    def add_listener(self, listener: Listener) -> None:
        """Register a zero-argument callback run after every selection change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def _notify_listeners(self) -> None:
        if not self.has_listeners:
            log_debug(LogEvent.ENV_REGISTRY, "No listeners to notify")
            return
        # Snapshot so listeners may unregister themselves while being notified
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                log_error(
                    LogEvent.ENV_REGISTRY,
                    f"Environment listener raised: {e}",
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )
                logger.debug("Listener traceback", exc_info=True)

    def _read_saved_name(self) -> Optional[str]:
        try:
            return self.store.get(self.storage_key)
        except StorageError as e:
            log_warning(LogEvent.STORAGE, "Failed to read saved environment", error=str(e))
            return None

    def _write_saved_name(self, name: str) -> bool:
        try:
            saved = self.store.set(self.storage_key, name)
        except StorageError as e:
            log_warning(LogEvent.STORAGE, "Failed to persist environment selection", name=name, error=str(e))
            return False
        if not saved:
            log_warning(LogEvent.STORAGE, "Store rejected environment selection", name=name)
        return saved

    def _remove_saved_name(self) -> bool:
        try:
            removed = self.store.remove(self.storage_key)
        except StorageError as e:
            log_warning(LogEvent.STORAGE, "Failed to clear saved environment", error=str(e))
            return False
        if not removed:
            log_warning(LogEvent.STORAGE, "Store failed to clear saved environment")
        return removed


def get_registry() -> EnvironmentRegistry:
    """Get the environment registry singleton instance.

    Returns:
        EnvironmentRegistry: The default registry instance
    """
    return EnvironmentRegistry.get_default()
