"""Configuration loading result object.

This module defines a standard result object for loading environment
definitions.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .environment import EnvironmentConfig


@dataclass
class ConfigResult:
    """Result of loading environment definitions.

    Attributes:
        success: Whether the operation was successful
        environments: Parsed environments (if successful)
        default_name: Name of the default environment declared in the file
        error: Error message (if unsuccessful)
        exception: Original exception (if an error occurred)
        path: Path to the definitions file (if applicable)
    """

    success: bool
    environments: List["EnvironmentConfig"] = field(default_factory=list)
    default_name: Optional[str] = None
    error: Optional[str] = None
    exception: Optional[Exception] = None
    path: Optional[str] = None

    @property
    def default_environment(self) -> Optional["EnvironmentConfig"]:
        """The environment named by ``default_name``, if it was defined."""
        for env in self.environments:
            if env.name == self.default_name:
                return env
        return None
