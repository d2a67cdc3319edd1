"""
Error taxonomy for the storage layer.

Validation and business-rule errors carry enough detail for the caller
to act on (which field, which id).
"""

from pathlib import Path
from typing import Iterable, Optional, Union


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class ValidationError(DashboardError):
    """Raised when required preset fields are missing or invalid."""
    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class DuplicateError(DashboardError):
    """Raised when a preset name already exists within its category."""
    def __init__(self, name: str, category: str):
        super().__init__(f'Preset "{name}" already exists in category "{category}"')
        self.name = name
        self.category = category


class NotFoundError(DashboardError):
    """Raised when a preset id does not exist."""
    def __init__(self, preset_id: str):
        super().__init__(f"Preset not found: {preset_id}")
        self.preset_id = preset_id


class StorageError(DashboardError):
    """Raised when the backing JSON file cannot be read or written."""
    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path
