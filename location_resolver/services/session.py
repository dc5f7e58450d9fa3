"""Resolution session - the caller-facing resolver API.

A session wraps the stateless ResolutionEngine with a cache owned by
the caller for the lifetime of one unit of work (one pricing run, one
document extraction pass). Sessions never share caches, so concurrent
sessions need no coordination.

No operation here raises for malformed input: empty, non-string or
unmatched input yields None or an empty result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..domain.errors import FacilityNotFoundError
from ..domain.models import Facility, Resolution, ResolutionReport, TransportMode
from ..normalization import normalize, split_compound
from ..ports.cache import CachePort
from .formatting import format_canonical
from .resolution_engine import ResolutionEngine


@dataclass
class ResolutionSession:
    """Cache-owning facade over the resolution engine.

    Usage:
        with service.open_session() as session:
            port = session.resolve_one("Antwerp", TransportMode.SEA)
            report = session.resolve_many_with_report("CAS/TFN/Atlantis")

    Attributes:
        engine: The resolution cascade
        cache: Session cache keyed by (mode, normalized input)
    """

    engine: ResolutionEngine
    cache: CachePort[Resolution]

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def __enter__(self) -> ResolutionSession:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Discard the session cache."""
        stats = self.cache.stats()
        self.cache.clear()
        self._logger.debug("Resolution session closed", extra={"cache": stats})

    # ------------------------------------------------------------------
    # Single references
    # ------------------------------------------------------------------

    def resolve(self, raw: Optional[str], mode: Optional[TransportMode] = None) -> Resolution:
        """Resolve one reference and explain which stage decided.

        Args:
            raw: Free-text place reference.
            mode: Optional SEA/AIR tie-break hint.

        Returns:
            The (possibly memoized) Resolution.
        """
        query = normalize(raw)
        if not query:
            return self.engine.resolve(query, mode)

        key = (mode.value if mode else None, query)
        return self.cache.get_or_compute(key, lambda: self.engine.resolve(query, mode))

    def resolve_one(
        self, raw: Optional[str], mode: Optional[TransportMode] = None
    ) -> Optional[Facility]:
        """Resolve one reference to exactly one facility, or None."""
        return self.resolve(raw, mode).facility

    def resolve_one_or_raise(
        self, raw: Optional[str], mode: Optional[TransportMode] = None
    ) -> Facility:
        """Like resolve_one, but raise when nothing matched.

        Raises:
            FacilityNotFoundError: If the input is unresolved.
        """
        resolution = self.resolve(raw, mode)
        if resolution.facility is None:
            reason = "ambiguous" if resolution.ambiguous else "no match"
            raise FacilityNotFoundError(
                f"Could not resolve '{resolution.query}' ({reason})",
                query=resolution.query,
                ambiguous=resolution.ambiguous,
            )
        return resolution.facility

    # ------------------------------------------------------------------
    # Compound references
    # ------------------------------------------------------------------

    def resolve_many(self, raw: Optional[str]) -> List[Facility]:
        """Resolve every token of a compound reference independently.

        ``"CAS/TFN"`` yields the Casablanca and Tenerife facilities.
        Unresolved tokens are dropped; facilities are unique by id.
        """
        return list(self.resolve_many_with_report(raw).facilities)

    def resolve_many_with_report(self, raw: Optional[str]) -> ResolutionReport:
        """Resolve a compound reference and list the tokens that failed.

        The unresolved tokens feed the alias-gap report used to seed
        new aliases.
        """
        facilities: Dict[int, Facility] = {}
        unresolved: List[str] = []

        for token in split_compound(raw):
            facility = self.resolve_one(token)
            if facility is None:
                unresolved.append(token)
            else:
                facilities.setdefault(facility.id, facility)

        if unresolved:
            self._logger.info(
                "Unresolved tokens in compound input",
                extra={"tokens": unresolved},
            )
        return ResolutionReport(
            facilities=tuple(facilities.values()),
            unresolved_tokens=tuple(unresolved),
        )

    # ------------------------------------------------------------------
    # Derived operations
    # ------------------------------------------------------------------

    def normalize_code(
        self, raw: Optional[str], mode: Optional[TransportMode] = None
    ) -> Optional[str]:
        """Upper-cased code of the resolved facility, or None."""
        facility = self.resolve_one(raw, mode)
        return facility.code.upper() if facility else None

    @staticmethod
    def format_canonical(facility: Facility) -> str:
        """Canonical display string, e.g. ``"Antwerp (ANR), Belgium"``."""
        return format_canonical(facility)

    def resolve_by_city(self, raw: Optional[str]) -> List[Facility]:
        """All active facilities in the resolved facility's city cluster.

        Returns the resolved facility alone when it has no cluster and
        an empty list when nothing resolves. Meant for exploratory
        lookups, not for pricing.
        """
        facility = self.resolve_one(raw)
        if facility is None:
            return []
        if not facility.city_unlocode:
            return [facility]
        cluster = list(self.engine.catalog.find_by_city_cluster(facility.city_unlocode))
        return cluster or [facility]

    def stats(self) -> Dict[str, Any]:
        """Cache statistics for this session."""
        return self.cache.stats()
