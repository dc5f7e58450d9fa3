"""Tests for the caller-facing resolution session."""

import pytest

from location_resolver.adapters.cache import InMemoryCache, NullCache
from location_resolver.adapters.catalog import InMemoryFacilityCatalog
from location_resolver.config import ResolverConfig
from location_resolver.domain.errors import FacilityNotFoundError
from location_resolver.domain.models import (
    Facility,
    FacilityCategory,
    ResolutionStage,
    TransportMode,
)
from location_resolver.services import LocationResolverService, ResolutionEngine, ResolutionSession

SAMPLE_INPUTS = [
    "Antwerp",
    "  antwerp ",
    "BEANR",
    "JFK",
    "KJFK",
    "New York",
    "Big Apple",
    "CAS/TFN",
    "Victoria",
    "Atlantis",
    "Rotterd",
    "Paris",
    "",
]


# ----------------------------------------------------------------------------
# resolve_one
# ----------------------------------------------------------------------------


def test_resolve_one_normalizes_input(session):
    assert session.resolve_one('  "Antwerp"  ').id == 1
    assert session.resolve_one("“Casablanca”").id == 4


@pytest.mark.parametrize("raw", [None, "", "   ", 42, ["Antwerp"]])
def test_resolve_one_never_raises_on_bad_input(session, raw):
    assert session.resolve_one(raw) is None


def test_empty_input_skips_the_cache(session):
    resolution = session.resolve("   ")
    assert resolution.stage is ResolutionStage.EMPTY
    assert session.cache.size() == 0


def test_iata_wins_over_mode(session):
    """An exact IATA code ignores a conflicting mode hint."""
    jfk = session.resolve_one("JFK", TransportMode.SEA)
    assert jfk.id == 3
    assert jfk.category.value == "AIRPORT"


def test_cluster_disambiguation_by_unlocode(session):
    assert session.resolve_one("USNYC", TransportMode.AIR).id == 3
    assert session.resolve_one("USNYC", TransportMode.SEA).id == 2
    assert session.resolve_one("USNYC").id == 2


def test_cluster_disambiguation_by_name(session):
    assert session.resolve_one("New York", TransportMode.AIR).id == 3
    assert session.resolve_one("New York", TransportMode.SEA).id == 2
    assert session.resolve_one("New York") is None


def test_mode_is_part_of_the_cache_key(session):
    assert session.resolve_one("new york", TransportMode.AIR).id == 3
    assert session.resolve_one("new york", TransportMode.SEA).id == 2
    assert session.resolve_one("new york") is None
    assert session.cache.size() == 3


def test_duplicate_names_in_different_clusters_are_not_guessed(session):
    assert session.resolve_one("Victoria") is None
    assert session.resolve_one("Victoria", TransportMode.SEA) is None


def test_prefix_only_accepts_unique_matches(session):
    assert session.resolve_one("Rotterd").id == 14
    assert session.resolve_one("Paris") is None


def test_resolve_one_or_raise(session):
    assert session.resolve_one_or_raise("ANR").id == 1

    with pytest.raises(FacilityNotFoundError) as exc_info:
        session.resolve_one_or_raise("  Atlantis ")
    assert exc_info.value.query == "Atlantis"
    assert "no match" in str(exc_info.value)

    with pytest.raises(FacilityNotFoundError, match="ambiguous") as exc_info:
        session.resolve_one_or_raise("Victoria")
    assert exc_info.value.ambiguous


# ----------------------------------------------------------------------------
# Caching
# ----------------------------------------------------------------------------


def test_repeated_resolution_hits_the_cache(session):
    first = session.resolve_one("Antwerp")
    second = session.resolve_one("  Antwerp ")
    assert first == second
    stats = session.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1


def test_unresolved_outcome_is_memoized(session, monkeypatch):
    assert session.resolve_one("Atlantis") is None

    def fail(*args, **kwargs):
        raise AssertionError("engine called twice")

    monkeypatch.setattr(session.engine, "resolve", fail)
    assert session.resolve_one("Atlantis") is None


@pytest.mark.parametrize("raw", SAMPLE_INPUTS)
def test_cache_never_changes_outcomes(engine, raw):
    cached = ResolutionSession(engine=engine, cache=InMemoryCache(name="cached"))
    uncached = ResolutionSession(engine=engine, cache=NullCache())

    for mode in (None, TransportMode.SEA, TransportMode.AIR):
        expected = uncached.resolve_one(raw, mode)
        assert cached.resolve_one(raw, mode) == expected
        assert cached.resolve_one(raw, mode) == expected
        assert cached.resolve_many(raw) == uncached.resolve_many(raw)


def test_sessions_do_not_share_caches(service):
    with service.open_session() as first, service.open_session() as second:
        first.resolve_one("Antwerp")
        assert first.cache.size() == 1
        assert second.cache.size() == 0


def test_close_clears_the_cache(service):
    session = service.open_session()
    session.resolve_one("Antwerp")
    session.close()
    assert session.cache.size() == 0


# ----------------------------------------------------------------------------
# resolve_many
# ----------------------------------------------------------------------------


def test_compound_codes(session):
    assert [f.id for f in session.resolve_many("CAS/TFN")] == [4, 5]


def test_compound_does_not_fabricate_joined_code(session):
    """'CAS/TFN' must never resolve to the facility coded 'CASTFN'."""
    for raw in ("CAS/TFN", "CAS + TFN", "CAS & TFN", "CAS, TFN", "CAS and TFN"):
        ids = [f.id for f in session.resolve_many(raw)]
        assert ids == [4, 5]


def test_quoted_compound(session):
    assert [f.id for f in session.resolve_many('"CAS/TFN"')] == [4, 5]
    assert [f.id for f in session.resolve_many("“CAS & TFN”")] == [4, 5]


def test_compound_deduplicates_facilities(session):
    facilities = session.resolve_many("Antwerp / Antwerpen / BEANR / ANR")
    assert [f.id for f in facilities] == [1]


def test_compound_reports_unresolved_tokens(session):
    report = session.resolve_many_with_report("CAS / TFN / Atlantis")
    assert [f.id for f in report.facilities] == [4, 5]
    assert report.unresolved_tokens == ("Atlantis",)
    assert not report.is_complete


def test_compound_tokens_resolve_without_mode(session):
    report = session.resolve_many_with_report("New York & Antwerp")
    assert [f.id for f in report.facilities] == [1]
    assert report.unresolved_tokens == ("New York",)


def test_resolve_many_unmatched_and_empty(session):
    assert session.resolve_many("Atlantis") == []
    assert session.resolve_many("") == []
    assert session.resolve_many(None) == []
    assert session.resolve_many_with_report(None).is_complete


def test_resolve_many_single_token(session):
    assert [f.id for f in session.resolve_many("Jeddah")] == [11]


# ----------------------------------------------------------------------------
# Derived operations
# ----------------------------------------------------------------------------


def test_normalize_code(session):
    assert session.normalize_code("antwerp") == "ANR"
    assert session.normalize_code("Lagos", TransportMode.AIR) == "LOSA"
    assert session.normalize_code("Atlantis") is None


def test_canonical_format_round_trip(session, catalog):
    for facility in catalog.list_facilities():
        canonical = session.format_canonical(facility)
        assert session.resolve_one(canonical) == facility, canonical
        assert session.normalize_code(canonical) == facility.code.upper()


def test_canonical_round_trip_with_parenthesised_name():
    lagos = Facility(1, "APP", "Lagos (Apapa)", "Nigeria", category=FacilityCategory.SEA_PORT)
    engine = ResolutionEngine(InMemoryFacilityCatalog([lagos]), ResolverConfig())
    with ResolutionSession(engine=engine, cache=InMemoryCache(name="apapa")) as session:
        canonical = session.format_canonical(lagos)
        assert canonical == "Lagos (Apapa) (APP), Nigeria"
        assert session.resolve_one(canonical) == lagos
        assert session.normalize_code(canonical) == "APP"


def test_format_canonical(session):
    antwerp = session.resolve_one("ANR")
    assert session.format_canonical(antwerp) == "Antwerp (ANR), Belgium"


def test_resolve_by_city_returns_cluster(session):
    assert [f.id for f in session.resolve_by_city("JFK")] == [2, 3]
    assert [f.id for f in session.resolve_by_city("CDG")] == [8, 9]


def test_resolve_by_city_without_cluster(session):
    assert [f.id for f in session.resolve_by_city("Jeddah")] == [11]


def test_resolve_by_city_unresolved(session):
    assert session.resolve_by_city("Atlantis") == []
    assert session.resolve_by_city(None) == []


# ----------------------------------------------------------------------------
# Service
# ----------------------------------------------------------------------------


def test_service_uses_null_cache_when_disabled(catalog):
    service = LocationResolverService(catalog, ResolverConfig(cache_enabled=False))
    with service.open_session() as session:
        assert isinstance(session.cache, NullCache)
        assert session.resolve_one("ANR").id == 1


def test_service_applies_cache_size(catalog):
    service = LocationResolverService(catalog, ResolverConfig(cache_max_size=2))
    with service.open_session() as session:
        for raw in ("ANR", "CAS", "TFN"):
            session.resolve_one(raw)
        assert session.cache.size() == 2


def test_service_accepts_cache_override(service):
    cache = InMemoryCache(name="custom")
    with service.open_session(cache=cache) as session:
        session.resolve_one("ANR")
        assert cache.size() == 1
