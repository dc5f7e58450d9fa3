"""In-memory facility catalog.

An immutable, indexed snapshot of facilities and aliases. All indexes
are built once at construction and only read afterwards, so a single
instance can serve any number of concurrent resolution sessions.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ...domain.errors import DuplicateAliasError
from ...domain.models import Alias, Facility, FacilityCategory
from ...normalization import normalize_alias


def _fold(text: Optional[str]) -> str:
    return (text or "").strip().casefold()


@dataclass
class InMemoryFacilityCatalog:
    """Read-only facility catalog held in memory.

    This adapter implements FacilityCatalogPort. Inactive facilities
    and inactive aliases may be passed in; they are kept for
    completeness but never returned by any query.

    Attributes:
        facilities: Facility rows, any order
        aliases: Alias rows; ``alias_normalized`` must be unique
    """

    facilities: Sequence[Facility] = field(default_factory=tuple)
    aliases: Sequence[Alias] = field(default_factory=tuple)

    _logger: logging.Logger = field(init=False, repr=False)

    # Indexes (active rows only, ascending id)
    _by_id: Dict[int, Facility] = field(init=False, repr=False)
    _by_unlocode: Mapping[str, Tuple[Facility, ...]] = field(init=False, repr=False)
    _by_iata: Mapping[str, Tuple[Facility, ...]] = field(init=False, repr=False)
    _by_icao: Mapping[str, Tuple[Facility, ...]] = field(init=False, repr=False)
    _by_code: Mapping[str, Tuple[Facility, ...]] = field(init=False, repr=False)
    _by_name: Mapping[str, Tuple[Facility, ...]] = field(init=False, repr=False)
    _by_cluster: Mapping[str, Tuple[Facility, ...]] = field(init=False, repr=False)
    _names_sorted: Tuple[Tuple[str, Facility], ...] = field(init=False, repr=False)
    _aliases: Dict[str, Alias] = field(init=False, repr=False)
    _aliases_sorted: Tuple[Alias, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.facilities = tuple(sorted(self.facilities, key=lambda f: f.id))
        self.aliases = tuple(self.aliases)
        self._build_indexes()
        self._logger.debug(
            "Catalog snapshot built",
            extra={
                "facilities": len(self.facilities),
                "active_facilities": len(self._by_id),
                "aliases": len(self._aliases),
            },
        )

    # ------------------------------------------------------------------
    # Index construction
    # ------------------------------------------------------------------

    def _build_indexes(self) -> None:
        active = [f for f in self.facilities if f.is_active]
        self._by_id = {f.id: f for f in active}

        self._by_unlocode = self._index(active, lambda f: (f.unlocode or "").upper())
        self._by_iata = self._index(
            (f for f in active if f.category is FacilityCategory.AIRPORT),
            lambda f: (f.iata_code or "").upper(),
        )
        self._by_icao = self._index(
            (f for f in active if f.category is FacilityCategory.AIRPORT),
            lambda f: (f.icao_code or "").upper(),
        )
        self._by_code = self._index(active, lambda f: f.code.strip().upper())
        self._by_name = self._index(active, lambda f: _fold(f.name))
        self._by_cluster = self._index(active, lambda f: (f.city_unlocode or "").upper())
        self._names_sorted = tuple(
            sorted(((_fold(f.name), f) for f in active), key=lambda p: (p[0], p[1].id))
        )

        aliases: Dict[str, Alias] = {}
        for alias in self.aliases:
            key = alias.alias_normalized or normalize_alias(alias.alias_text)
            if not alias.alias_normalized:
                alias = replace(alias, alias_normalized=key)
            if key in aliases:
                raise DuplicateAliasError(
                    f"Alias '{alias.alias_text}' collides with "
                    f"'{aliases[key].alias_text}'",
                    alias_normalized=key,
                )
            aliases[key] = alias
        self._aliases = {
            key: alias
            for key, alias in aliases.items()
            if alias.is_active and alias.facility_id in self._by_id
        }
        self._aliases_sorted = tuple(
            alias for _, alias in sorted(self._aliases.items())
        )

    @staticmethod
    def _index(rows: Iterable[Facility], key_fn) -> Mapping[str, Tuple[Facility, ...]]:
        index: Dict[str, List[Facility]] = defaultdict(list)
        for facility in rows:
            key = key_fn(facility)
            if key:
                index[key].append(facility)
        return {key: tuple(values) for key, values in index.items()}

    # ------------------------------------------------------------------
    # FacilityCatalogPort
    # ------------------------------------------------------------------

    def find_by_unlocode(self, code: str) -> Sequence[Facility]:
        return self._by_unlocode.get(code.strip().upper(), ())

    def find_by_iata(self, code: str) -> Optional[Facility]:
        matches = self._by_iata.get(code.strip().upper(), ())
        return matches[0] if matches else None

    def find_by_icao(self, code: str) -> Optional[Facility]:
        matches = self._by_icao.get(code.strip().upper(), ())
        return matches[0] if matches else None

    def find_by_code(self, code: str) -> Optional[Facility]:
        matches = self._by_code.get(code.strip().upper(), ())
        if len(matches) > 1:
            self._logger.warning(
                "Code shared by several active facilities",
                extra={"code": code, "facility_ids": [f.id for f in matches]},
            )
            return None
        return matches[0] if matches else None

    def find_by_exact_name(self, name: str) -> Sequence[Facility]:
        return self._by_name.get(_fold(name), ())

    def find_by_name_prefix(self, prefix: str, limit: int) -> Sequence[Facility]:
        folded = _fold(prefix)
        if not folded:
            return ()
        matches: List[Facility] = []
        for name, facility in self._names_sorted:
            if name.startswith(folded):
                matches.append(facility)
                if len(matches) >= limit:
                    break
        return tuple(matches)

    def find_alias_by_normalized(self, text: str) -> Optional[Alias]:
        return self._aliases.get(text)

    def find_alias_by_normalized_prefix(self, prefix: str, limit: int) -> Sequence[Alias]:
        if not prefix:
            return ()
        matches: List[Alias] = []
        for alias in self._aliases_sorted:
            if alias.alias_normalized.startswith(prefix):
                matches.append(alias)
                if len(matches) >= limit:
                    break
        return tuple(matches)

    def find_by_city_cluster(self, city_unlocode: str) -> Sequence[Facility]:
        return self._by_cluster.get(city_unlocode.strip().upper(), ())

    def get(self, facility_id: int) -> Optional[Facility]:
        return self._by_id.get(facility_id)

    def list_facilities(self) -> Sequence[Facility]:
        return tuple(self._by_id.values())
