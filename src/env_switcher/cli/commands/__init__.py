"""CLI commands package."""

# Import all command modules to make them available
from . import environments, storage

__all__ = ["environments", "storage"]
