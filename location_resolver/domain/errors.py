"""Typed domain errors for the location resolver.

The resolution path itself never raises for malformed or unmatched
input; "no match" is a normal outcome. These errors cover loading the
catalog snapshot, offline ingestion, configuration and the explicit
``*_or_raise`` helpers.

All errors inherit from LocationResolverError and can optionally
wrap a root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class LocationResolverError(Exception):
    """Base error for the location resolver.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        text = self._describe()
        if self.cause:
            return f"{text}: {self.cause}"
        return text

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def _describe(self) -> str:
        return self.message


@dataclass
class CatalogError(LocationResolverError):
    """Facility catalog snapshot could not be loaded.

    Attributes:
        file_path: Catalog file being read, if any
    """

    file_path: Optional[str] = None


@dataclass
class DuplicateAliasError(CatalogError):
    """Two alias rows normalize to the same key.

    Attributes:
        alias_normalized: The colliding normalized alias
    """

    alias_normalized: str = ""


@dataclass
class IngestionError(LocationResolverError):
    """Offline reference file (UN/LOCODE, airports) could not be read.

    Attributes:
        file_path: File being read
        line_number: Line where reading stopped, if known
    """

    file_path: Optional[str] = None
    line_number: Optional[int] = None

    def _describe(self) -> str:
        if self.file_path and self.line_number is not None:
            return f"{self.message} ({self.file_path}:{self.line_number})"
        return self.message


@dataclass
class FacilityNotFoundError(LocationResolverError):
    """Input did not resolve to exactly one facility.

    Attributes:
        query: Normalized input that failed to resolve
        ambiguous: True when several facilities qualified
    """

    query: str = ""
    ambiguous: bool = False


@dataclass
class ConfigurationError(LocationResolverError):
    """A setting holds a value the resolver cannot use.

    Attributes:
        setting_name: Environment variable or field name
        expected_type: Accepted values, for the error message
    """

    setting_name: str = ""
    expected_type: Optional[str] = None

    def _describe(self) -> str:
        if self.expected_type:
            return f"{self.message} (expected {self.expected_type})"
        return self.message
