"""Immutable domain models for the location resolver.

All models are frozen dataclasses with slots. They carry no behaviour
beyond small derived properties and never touch the catalog, so they
can be shared freely between concurrent resolution sessions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FacilityCategory(str, Enum):
    """Kind of transport node a facility represents.

    The category decides which identifier fields are meaningful:
    IATA/ICAO codes only exist on airports.
    """

    SEA_PORT = "SEA_PORT"
    AIRPORT = "AIRPORT"
    ICD = "ICD"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Optional[str]) -> FacilityCategory:
        """Parse a category label, defaulting to UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN


class TransportMode(str, Enum):
    """Caller-supplied hint used to break ties inside a city cluster."""

    SEA = "SEA"
    AIR = "AIR"

    @property
    def preferred_category(self) -> FacilityCategory:
        if self is TransportMode.AIR:
            return FacilityCategory.AIRPORT
        return FacilityCategory.SEA_PORT


class ResolutionStage(str, Enum):
    """Cascade stage that produced a resolution outcome."""

    EMPTY = "empty"
    UNLOCODE = "unlocode"
    IATA = "iata"
    ICAO = "icao"
    PARENTHETICAL_CODE = "parenthetical_code"
    CODE = "code"
    EXACT_NAME = "exact_name"
    ALIAS = "alias"
    NAME_PREFIX = "name_prefix"
    ALIAS_PREFIX = "alias_prefix"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True, slots=True)
class Facility:
    """A resolvable transport node: sea port, airport or inland terminal.

    Attributes:
        id: Stable surrogate identifier
        code: Short carrier-style code (2-6 alphanumeric, e.g. 'ANR')
        name: Display name
        country: Country display name
        region: Free-text region
        category: Kind of facility
        unlocode: 5-character UN/LOCODE of the facility itself
        city_unlocode: UN/LOCODE of the city the facility belongs to;
            facilities sharing it form a city cluster
        iata_code: 3-letter IATA code (airports only)
        icao_code: 4-letter ICAO code (airports only)
        country_code: ISO 3166 alpha-2 country code
        coordinates: Optional GPS position
        is_active: Inactive facilities are never returned by lookups
    """

    id: int
    code: str
    name: str
    country: str = ""
    region: str = ""
    category: FacilityCategory = FacilityCategory.UNKNOWN
    unlocode: Optional[str] = None
    city_unlocode: Optional[str] = None
    iata_code: Optional[str] = None
    icao_code: Optional[str] = None
    country_code: Optional[str] = None
    coordinates: Optional[GeoLocation] = None
    is_active: bool = True

    @property
    def is_airport(self) -> bool:
        return self.category is FacilityCategory.AIRPORT

    @property
    def is_sea_port(self) -> bool:
        return self.category is FacilityCategory.SEA_PORT


@dataclass(frozen=True, slots=True)
class Alias:
    """Free-text name pointing at exactly one facility.

    ``alias_normalized`` is globally unique across the catalog.
    """

    alias_text: str
    alias_normalized: str
    facility_id: int
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving one normalized input.

    Attributes:
        query: The normalized input that was resolved
        facility: The resolved facility, or None when unresolved
        stage: Cascade stage that produced this outcome
        ambiguous: True when the stage refused to pick between
            several equally-qualified candidates
        candidates: Number of candidates the deciding stage saw
    """

    query: str
    facility: Optional[Facility]
    stage: ResolutionStage
    ambiguous: bool = False
    candidates: int = 0

    @property
    def is_resolved(self) -> bool:
        return self.facility is not None


@dataclass(frozen=True, slots=True)
class ResolutionReport:
    """Result of resolving a compound input.

    Attributes:
        facilities: Resolved facilities, unique by identity, input order
        unresolved_tokens: Normalized tokens that matched nothing
    """

    facilities: tuple[Facility, ...] = field(default_factory=tuple)
    unresolved_tokens: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_complete(self) -> bool:
        """Check if every token resolved."""
        return len(self.unresolved_tokens) == 0


@dataclass(frozen=True, slots=True)
class UnlocodeRecord:
    """One parsed row of a UN/LOCODE code list."""

    country_code: str
    location_code: str
    name: str
    category: FacilityCategory
    sub_division: str = ""
    function: str = ""
    coordinates: Optional[GeoLocation] = None
    coordinates_raw: str = ""
    status: str = ""
    date: str = ""
    iata: str = ""

    @property
    def unlocode(self) -> str:
        return f"{self.country_code}{self.location_code}"


@dataclass(frozen=True, slots=True)
class AirportRecord:
    """One parsed row of an airport reference file."""

    iata_code: str
    icao_code: str
    name: str
    city: str = ""
    country: str = ""
    coordinates: Optional[GeoLocation] = None
