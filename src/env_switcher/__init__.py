"""Hidden environment switching for application testers.

This package keeps a registry of named backend environments (dev, staging,
production ...), remembers the tester's choice across restarts, and provides
a multi-tap gesture recognizer that opens the environment selector.
"""

# Version of the package
try:
    from importlib.metadata import version as _version

    __version__ = _version("env-switcher")
except ImportError:
    raise ImportError(
        "Failed to determine package version. This package requires Python 3.8+ "
        "where importlib.metadata is available, or must be installed as a package."
    )

# Import main components for easier access
from .credentials import CredentialForm
from .environment import (
    CallableValidator,
    CredentialField,
    CredentialsValidator,
    EnvironmentConfig,
    FieldValidator,
    StorageMode,
    environment_key,
)
from .errors import (
    ConfigurationError,
    CredentialValidationError,
    EnvironmentNotAvailableError,
    EnvSwitcherError,
    InvalidConfigFormatError,
    StorageError,
)
from .gesture import GestureState, TapGestureRecognizer
from .loader import load_environments, parse_environments
from .registry import EnvironmentRegistry, get_registry
from .selector import EnvironmentSelector, EnvSwitcher, SelectionResult, SelectorOption
from .storage import KeyValueStore, MemoryStore, YamlFileStore

# Define public API
__all__ = [
    # Core registry
    "EnvironmentRegistry",
    "get_registry",
    # Environments
    "EnvironmentConfig",
    "CredentialField",
    "StorageMode",
    "environment_key",
    "FieldValidator",
    "CredentialsValidator",
    "CallableValidator",
    "load_environments",
    "parse_environments",
    # Gesture and selection
    "TapGestureRecognizer",
    "GestureState",
    "EnvSwitcher",
    "EnvironmentSelector",
    "SelectorOption",
    "SelectionResult",
    "CredentialForm",
    # Storage
    "KeyValueStore",
    "MemoryStore",
    "YamlFileStore",
    # Errors
    "EnvSwitcherError",
    "ConfigurationError",
    "EnvironmentNotAvailableError",
    "InvalidConfigFormatError",
    "StorageError",
    "CredentialValidationError",
]
