"""Top-level package for the location resolver.

Maps free-text place references (port names, IATA/ICAO codes,
UN/LOCODEs, compound strings such as "CAS/TFN") to canonical facility
records, returning nothing rather than guessing when several
facilities could be meant.
"""

from .domain.models import Facility, FacilityCategory, TransportMode
from .services import LocationResolverService, ResolutionSession

__all__ = [
    "Facility",
    "FacilityCategory",
    "TransportMode",
    "LocationResolverService",
    "ResolutionSession",
]
