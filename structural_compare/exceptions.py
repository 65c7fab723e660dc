"""
Exception types raised by the structural comparison tool.
"""

from typing import List, Optional


class StructuralCompareError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(StructuralCompareError):
    """Raised when a configuration file is missing, unreadable or invalid."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        if self.errors:
            message = message + "\n" + "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(message)


class DesignDataError(StructuralCompareError):
    """Raised when a design document is malformed or a frame cannot be found."""
