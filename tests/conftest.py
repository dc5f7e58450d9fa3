"""Shared fixtures: a small catalog covering every resolution path."""

import pytest

from location_resolver.adapters.cache import InMemoryCache, NullCache
from location_resolver.adapters.catalog import InMemoryFacilityCatalog
from location_resolver.config import ResolverConfig, reset_config
from location_resolver.container import reset_container
from location_resolver.domain.models import Alias, Facility, FacilityCategory
from location_resolver.services import (
    LocationResolverService,
    ResolutionEngine,
    ResolutionSession,
)

SEA = FacilityCategory.SEA_PORT
AIR = FacilityCategory.AIRPORT

FACILITIES = [
    Facility(1, "ANR", "Antwerp", "Belgium", category=SEA, unlocode="BEANR", city_unlocode="BEANR"),
    Facility(2, "NYC", "New York", "United States", category=SEA, unlocode="USNYC", city_unlocode="USNYC"),
    Facility(
        3, "JFK", "New York", "United States", category=AIR, unlocode="USNYC",
        city_unlocode="USNYC", iata_code="JFK", icao_code="KJFK",
    ),
    Facility(4, "CAS", "Casablanca", "Morocco", category=SEA, unlocode="MACAS", city_unlocode="MACAS"),
    Facility(5, "TFN", "Tenerife", "Spain", category=SEA, unlocode="ESSCT", city_unlocode="ESSCT"),
    Facility(6, "VIC", "Victoria", "Seychelles", category=SEA, unlocode="SCPOV", city_unlocode="SCPOV"),
    Facility(7, "VCT", "Victoria", "Canada", category=SEA, unlocode="CAVIC", city_unlocode="CAVIC"),
    Facility(
        8, "CDG", "Paris Charles de Gaulle", "France", category=AIR, unlocode="FRCDG",
        city_unlocode="FRPAR", iata_code="CDG", icao_code="LFPG",
    ),
    Facility(
        9, "GNV", "Paris Gennevilliers", "France", category=FacilityCategory.ICD,
        unlocode="FRGNV", city_unlocode="FRPAR",
    ),
    Facility(10, "GNE", "Ghent", "Belgium", category=SEA, unlocode="BEGNE", is_active=False),
    Facility(11, "JED", "Jeddah", "Saudi Arabia", category=SEA),
    Facility(12, "LOS", "Lagos", "Nigeria", category=SEA, unlocode="NGLOS", city_unlocode="NGLOS"),
    Facility(
        13, "LOSA", "Lagos", "Nigeria", category=AIR, unlocode="NGLOS",
        city_unlocode="NGLOS", iata_code="LOS", icao_code="DNMM",
    ),
    Facility(14, "RTM", "Rotterdam", "Netherlands", category=SEA, unlocode="NLRTM", city_unlocode="NLRTM"),
    Facility(15, "CASTFN", "Casablanca Tenerife Shuttle", "Morocco", category=SEA),
]

ALIASES = [
    Alias("Antwerpen", "antwerpen", 1),
    Alias("Big Apple", "big apple", 3),
    Alias("Djeddah", "djeddah", 11),
    Alias("Santa Cruz de Tenerife", "santa cruz de tenerife", 5),
    Alias("Casa", "casa", 4),
    Alias("Gand", "gand", 10),
    Alias("Vridi", "vridi", 1, is_active=False),
]


@pytest.fixture(autouse=True)
def _fresh_globals():
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


@pytest.fixture
def catalog():
    return InMemoryFacilityCatalog(FACILITIES, ALIASES)


@pytest.fixture
def resolver_config():
    return ResolverConfig()


@pytest.fixture
def engine(catalog, resolver_config):
    return ResolutionEngine(catalog=catalog, config=resolver_config)


@pytest.fixture
def service(catalog, resolver_config):
    return LocationResolverService(catalog=catalog, config=resolver_config)


@pytest.fixture
def session(engine):
    with ResolutionSession(engine=engine, cache=InMemoryCache(name="test")) as s:
        yield s


@pytest.fixture
def uncached_session(engine):
    return ResolutionSession(engine=engine, cache=NullCache())
