"""Error types for the environment switcher.

This module defines the error types raised by the environment registry,
the definitions loader, the storage layer and the credential surface.
"""

from typing import Dict, List, Optional, Sequence


class EnvSwitcherError(Exception):
    """Base class for all environment switcher errors.

    This is the parent class for all package-specific exceptions.
    """

    pass


class ConfigurationError(EnvSwitcherError):
    """Raised when the registry is configured or driven incorrectly.

    This covers an empty environment list passed to ``initialize`` as well
    as errors loading environment definitions from disk.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the definitions file that caused the error
        """
        super().__init__(message)
        self.message = message
        self.path = path


class EnvironmentNotAvailableError(ConfigurationError):
    """Raised when an environment is not registered.

    Examples:
        >>> try:
        ...     registry.switch_environment(unknown_env)
        ... except EnvironmentNotAvailableError as e:
        ...     print(f"{e.name} is not one of {e.available}")
    """

    def __init__(
        self,
        message: str,
        name: str,
        available: Optional[Sequence[str]] = None,
    ) -> None:
        """Initialize environment not available error.

        Args:
            message: Error message
            name: Name of the environment that was requested
            available: Names of the registered environments
        """
        super().__init__(message)
        self.name = name
        self.available: List[str] = list(available) if available is not None else []

    def __str__(self) -> str:
        return self.message


class InvalidConfigFormatError(ConfigurationError):
    """Raised when an environment definitions file has an invalid format.

    Examples:
        >>> try:
        ...     parse_environments(["dev", "prod"])
        ... except InvalidConfigFormatError as e:
        ...     print(f"Expected {e.expected_type}: {e}")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_type: str = "dict",
    ) -> None:
        """Initialize invalid format error.

        Args:
            message: Error message
            path: Optional path to the definitions file
            expected_type: Expected type of the offending value
        """
        super().__init__(message, path)
        self.expected_type = expected_type


class StorageError(EnvSwitcherError):
    """Raised by a key-value store when a read, write or remove fails."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key


class CredentialValidationError(EnvSwitcherError):
    """Raised when submitted credentials do not pass validation.

    The ``errors`` mapping holds one message per failing field key. An error
    reported by the environment-level validator is stored under the empty key.

    Examples:
        >>> try:
        ...     form.submit({"username": ""})
        ... except CredentialValidationError as e:
        ...     print(e.errors["username"])
    """

    def __init__(self, message: str, errors: Dict[str, str], environment: Optional[str] = None) -> None:
        """Initialize credential validation error.

        Args:
            message: Error message
            errors: Field key to error message
            environment: Name of the environment the credentials were for
        """
        super().__init__(message)
        self.message = message
        self.errors = dict(errors)
        self.environment = environment
