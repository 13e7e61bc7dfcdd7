"""Error definitions for the keysmith localizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    """Categorises runtime errors for reporting."""

    FILE_READ = auto()
    PARSE = auto()
    FILE_WRITE = auto()
    CATALOG = auto()


class KeysmithError(Exception):
    """Base exception for all custom errors."""


class InvalidTargetError(KeysmithError):
    """Raised when the scan target is missing or not a directory."""


class FileReadError(KeysmithError):
    """Raised when a source file cannot be read."""


class TemplateParseError(KeysmithError):
    """Raised when a source file cannot be parsed into a tree."""


class FileWriteError(KeysmithError):
    """Raised when a rewritten source file cannot be written."""


class CatalogReadError(KeysmithError):
    """Raised when an existing catalog exists but cannot be read."""


class CatalogParseError(KeysmithError):
    """Raised when an existing catalog is not a JSON object of strings."""


class CatalogWriteError(KeysmithError):
    """Raised when the merged catalog cannot be written."""


class KeysmithConfigurationError(KeysmithError):
    """Raised when configuration sources are unreadable or invalid."""


@dataclass
class ErrorRecord:
    """Stores context for a handled error."""

    category: ErrorCategory
    message: str
    details: Optional[str] = None
