"""Environment definitions for the environment switcher.

An :class:`EnvironmentConfig` describes one deployable backend target. Its
identity is its ``name``: two configs with the same name are the same
environment, whatever their other fields hold. That identity is exposed as
:func:`environment_key` instead of overloaded equality, and the registry uses
it wherever membership or "already selected" has to be decided.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable


class StorageMode(str, Enum):
    """How a selected environment is remembered."""

    PERMANENT = "permanent"
    """Persisted to the key-value store and restored on the next start."""

    TEMPORARY = "temporary"
    """Kept for the current session only."""

    @classmethod
    def parse(cls, value: Any) -> "StorageMode":
        """Parse a storage mode, falling back to ``PERMANENT`` for unknown values."""
        if isinstance(value, StorageMode):
            return value
        for mode in cls:
            if mode.value == value:
                return mode
        return cls.PERMANENT


@runtime_checkable
class FieldValidator(Protocol):
    """Validates a single credential value."""

    def validate(self, value: Optional[str]) -> Optional[str]:
        """Return an error message, or ``None`` when the value is acceptable."""
        ...


@runtime_checkable
class CredentialsValidator(Protocol):
    """Validates the full set of credentials entered for an environment."""

    def validate(self, credentials: Mapping[str, str]) -> Optional[str]:
        """Return an error message, or ``None`` when the credentials are acceptable."""
        ...


class CallableValidator:
    """Adapts a plain function to the validator interface."""

    def __init__(self, func: Callable[[Any], Optional[str]]):
        self.func = func

    def validate(self, value: Any) -> Optional[str]:
        return self.func(value)

    def __repr__(self) -> str:
        return f"CallableValidator({getattr(self.func, '__name__', self.func)!r})"


def _as_validator(value: Any) -> Any:
    if value is None or hasattr(value, "validate"):
        return value
    if callable(value):
        return CallableValidator(value)
    raise TypeError(f"Validator must provide validate() or be callable, got {type(value).__name__}")


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class CredentialField:
    """A credential the host must collect before switching to an environment."""

    key: str
    label: str
    hint: Optional[str] = None
    is_password: bool = False
    is_required: bool = True
    default_value: Optional[str] = None
    validator: Optional[FieldValidator] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "validator", _as_validator(self.validator))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the field; the validator is not serialized."""
        return {
            "key": self.key,
            "label": self.label,
            "hint": self.hint,
            "is_password": self.is_password,
            "is_required": self.is_required,
            "default_value": self.default_value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CredentialField":
        """Create a field from a mapping (snake_case or camelCase keys)."""
        return cls(
            key=data["key"],
            label=_pick(data, "label", default=data["key"]),
            hint=_pick(data, "hint"),
            is_password=bool(_pick(data, "is_password", "isPassword", default=False)),
            is_required=bool(_pick(data, "is_required", "isRequired", default=True)),
            default_value=_pick(data, "default_value", "defaultValue"),
        )


@dataclass(frozen=True, eq=False)
class EnvironmentConfig:
    """A named backend target.

    Attributes:
        name: Unique identifier, also the persisted key
        display_name: Human-readable label
        base_url: Endpoint of the backend
        extras: Environment-specific values, opaque to the registry
        requires_credentials: Whether the host must collect credentials first
        credential_fields: Fields to collect, in display order
        storage_mode: Whether selecting this environment survives a restart
        credentials_validator: Optional check over all collected credentials
    """

    name: str
    display_name: str
    base_url: str
    extras: Mapping[str, Any] = field(default_factory=dict)
    requires_credentials: bool = False
    credential_fields: Tuple[CredentialField, ...] = ()
    storage_mode: StorageMode = StorageMode.PERMANENT
    credentials_validator: Optional[CredentialsValidator] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Environment name must not be empty")
        object.__setattr__(self, "extras", dict(self.extras))
        object.__setattr__(self, "credential_fields", tuple(self.credential_fields))
        object.__setattr__(self, "storage_mode", StorageMode.parse(self.storage_mode))
        object.__setattr__(self, "credentials_validator", _as_validator(self.credentials_validator))

    @property
    def key(self) -> str:
        return environment_key(self)

    @property
    def is_permanent(self) -> bool:
        return self.storage_mode is StorageMode.PERMANENT

    def replace(self, **changes: Any) -> "EnvironmentConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the environment; validators are not serialized."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "base_url": self.base_url,
            "extras": dict(self.extras),
            "requires_credentials": self.requires_credentials,
            "credential_fields": [f.to_dict() for f in self.credential_fields],
            "storage_mode": self.storage_mode.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EnvironmentConfig":
        """Create an environment from a mapping.

        Both snake_case keys and the camelCase keys of the JSON form are
        accepted. Missing optional keys take their defaults and an unknown
        storage mode falls back to permanent.

        Raises:
            KeyError: If ``name`` is missing
        """
        name = data["name"]
        fields = _pick(data, "credential_fields", "credentialFields", default=None) or []
        return cls(
            name=name,
            display_name=_pick(data, "display_name", "displayName", default=name),
            base_url=_pick(data, "base_url", "baseUrl", default=""),
            extras=_pick(data, "extras", default=None) or {},
            requires_credentials=bool(_pick(data, "requires_credentials", "requiresCredentials", default=False)),
            credential_fields=tuple(CredentialField.from_dict(f) for f in fields),
            storage_mode=StorageMode.parse(_pick(data, "storage_mode", "storageMode")),
        )

    def __str__(self) -> str:
        return (
            f"EnvironmentConfig(name: {self.name}, display_name: {self.display_name}, "
            f"base_url: {self.base_url}, requires_credentials: {self.requires_credentials}, "
            f"storage_mode: {self.storage_mode.value})"
        )


def environment_key(env: EnvironmentConfig) -> str:
    """Return the identity key of an environment (its name)."""
    return env.name


def find_environment(environments: Sequence[EnvironmentConfig], name: str) -> Optional[EnvironmentConfig]:
    """Return the first environment whose key equals ``name``."""
    for env in environments:
        if environment_key(env) == name:
            return env
    return None
