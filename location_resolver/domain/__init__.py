"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    CatalogError,
    ConfigurationError,
    DuplicateAliasError,
    FacilityNotFoundError,
    IngestionError,
    LocationResolverError,
)
from .models import (
    AirportRecord,
    Alias,
    Facility,
    FacilityCategory,
    GeoLocation,
    Resolution,
    ResolutionReport,
    ResolutionStage,
    TransportMode,
    UnlocodeRecord,
)

__all__ = [
    # Models
    "Facility",
    "FacilityCategory",
    "Alias",
    "GeoLocation",
    "TransportMode",
    "Resolution",
    "ResolutionStage",
    "ResolutionReport",
    "UnlocodeRecord",
    "AirportRecord",
    # Errors
    "LocationResolverError",
    "CatalogError",
    "DuplicateAliasError",
    "IngestionError",
    "FacilityNotFoundError",
    "ConfigurationError",
]
