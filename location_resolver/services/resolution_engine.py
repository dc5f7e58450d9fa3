"""Resolution engine - ordered cascade of lookup stages.

Each stage receives the normalized query and the optional mode hint
and returns either a Resolution, which ends the cascade, or None to
fall through to the next stage. Stages run from the most specific
(structured codes) to the least specific (name prefixes).

A stage that sees several equally-qualified candidates returns an
unresolved, ``ambiguous`` Resolution: the cascade stops there instead
of letting a looser stage guess.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import ResolverConfig, get_config
from ..domain.models import (
    Facility,
    FacilityCategory,
    Resolution,
    ResolutionStage,
    TransportMode,
)
from ..normalization import (
    extract_parenthetical_codes,
    looks_like_code,
    looks_like_iata,
    looks_like_icao,
    looks_like_unlocode,
    normalize_alias,
)
from ..ports.catalog import FacilityCatalogPort

Stage = Callable[[str, Optional[TransportMode]], Optional[Resolution]]

_TRAILING_PUNCTUATION = ".,;:!?-"


def _unique_by_id(facilities: Sequence[Facility]) -> List[Facility]:
    seen: Dict[int, Facility] = {}
    for facility in facilities:
        seen.setdefault(facility.id, facility)
    return list(seen.values())


@dataclass
class ResolutionEngine:
    """Stateless cascade resolving one normalized string to a facility.

    The engine holds no per-request state; memoization belongs to the
    ResolutionSession that wraps it.

    Attributes:
        catalog: Read-only facility catalog
        config: Resolver tuning (prefix window, default cluster category)
    """

    catalog: FacilityCatalogPort
    config: ResolverConfig = field(default_factory=lambda: get_config().resolver)

    _logger: logging.Logger = field(init=False, repr=False)
    _stages: Tuple[Stage, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._stages = (
            self.match_unlocode,
            self.match_iata,
            self.match_icao,
            self.match_parenthetical_code,
            self.match_code,
            self.match_exact_name,
            self.match_alias,
            self.match_prefix,
        )

    @property
    def stages(self) -> Tuple[Stage, ...]:
        """Stages in cascade order."""
        return self._stages

    def resolve(self, query: str, mode: Optional[TransportMode] = None) -> Resolution:
        """Run the cascade on an already-normalized query.

        Args:
            query: Output of ``normalization.normalize``.
            mode: Optional SEA/AIR hint used only for tie-breaks.

        Returns:
            The first definitive Resolution, or an unresolved one.
        """
        if not query:
            return Resolution(query=query, facility=None, stage=ResolutionStage.EMPTY)

        for stage in self._stages:
            outcome = stage(query, mode)
            if outcome is not None:
                self._logger.debug(
                    "Stage decided",
                    extra={
                        "query": query,
                        "stage": outcome.stage.value,
                        "facility_id": outcome.facility.id if outcome.facility else None,
                        "ambiguous": outcome.ambiguous,
                    },
                )
                return outcome

        return Resolution(query=query, facility=None, stage=ResolutionStage.UNRESOLVED)

    # ------------------------------------------------------------------
    # Tie-break helpers
    # ------------------------------------------------------------------

    def _cluster_category(self, mode: Optional[TransportMode]) -> FacilityCategory:
        if mode is not None:
            return mode.preferred_category
        return FacilityCategory(self.config.default_cluster_category)

    def _ambiguous(
        self, query: str, stage: ResolutionStage, candidates: Sequence[Facility]
    ) -> Resolution:
        self._logger.warning(
            "Ambiguous match, leaving unresolved",
            extra={
                "query": query,
                "stage": stage.value,
                "facility_ids": [f.id for f in candidates],
            },
        )
        return Resolution(
            query=query,
            facility=None,
            stage=stage,
            ambiguous=True,
            candidates=len(candidates),
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def match_unlocode(self, query: str, mode: Optional[TransportMode]) -> Optional[Resolution]:
        """5-character UN/LOCODE; a shared code is settled by category.

        Without a mode the configured default (sea port) is preferred.
        If no member has the preferred category the first match wins.
        """
        if not looks_like_unlocode(query):
            return None
        matches = self.catalog.find_by_unlocode(query.upper())
        if not matches:
            return None
        if len(matches) == 1:
            return Resolution(query, matches[0], ResolutionStage.UNLOCODE, candidates=1)

        category = self._cluster_category(mode)
        preferred = [f for f in matches if f.category is category]
        chosen = preferred[0] if preferred else matches[0]
        return Resolution(query, chosen, ResolutionStage.UNLOCODE, candidates=len(matches))

    def match_iata(self, query: str, mode: Optional[TransportMode]) -> Optional[Resolution]:
        """3-letter IATA airport code; the mode hint is ignored."""
        if not looks_like_iata(query):
            return None
        facility = self.catalog.find_by_iata(query.upper())
        if facility is None:
            return None
        return Resolution(query, facility, ResolutionStage.IATA, candidates=1)

    def match_icao(self, query: str, mode: Optional[TransportMode]) -> Optional[Resolution]:
        """4-letter ICAO airport code."""
        if not looks_like_icao(query):
            return None
        facility = self.catalog.find_by_icao(query.upper())
        if facility is None:
            return None
        return Resolution(query, facility, ResolutionStage.ICAO, candidates=1)

    def match_parenthetical_code(
        self, query: str, mode: Optional[TransportMode]
    ) -> Optional[Resolution]:
        """Code inside parentheses, e.g. ``Antwerp (ANR), Belgium``.

        Groups are tried from the last one back, so a parenthesised
        word in the name does not hide the code that follows it.
        """
        for code in extract_parenthetical_codes(query):
            facility = self.catalog.find_by_code(code)
            if facility is not None:
                return Resolution(
                    query, facility, ResolutionStage.PARENTHETICAL_CODE, candidates=1
                )
        return None

    def match_code(self, query: str, mode: Optional[TransportMode]) -> Optional[Resolution]:
        """Bare 2-6 character carrier-style code."""
        if not looks_like_code(query):
            return None
        facility = self.catalog.find_by_code(query.upper())
        if facility is None:
            return None
        return Resolution(query, facility, ResolutionStage.CODE, candidates=1)

    def match_exact_name(
        self, query: str, mode: Optional[TransportMode]
    ) -> Optional[Resolution]:
        """Case-insensitive exact name.

        Duplicate names are only settled when they all belong to one
        city cluster and the caller gave a mode selecting exactly one
        of them. Anything else is ambiguous.
        """
        matches = _unique_by_id(self.catalog.find_by_exact_name(query))
        if not matches:
            return None
        if len(matches) == 1:
            return Resolution(query, matches[0], ResolutionStage.EXACT_NAME, candidates=1)

        clusters = {f.city_unlocode for f in matches}
        if mode is not None and len(clusters) == 1 and None not in clusters:
            preferred = [f for f in matches if f.category is mode.preferred_category]
            if len(preferred) == 1:
                return Resolution(
                    query, preferred[0], ResolutionStage.EXACT_NAME, candidates=len(matches)
                )

        return self._ambiguous(query, ResolutionStage.EXACT_NAME, matches)

    def match_alias(self, query: str, mode: Optional[TransportMode]) -> Optional[Resolution]:
        """Exact normalized alias.

        An alias may name a city served by several facilities; with a
        mode, the cluster member of the preferred category replaces the
        alias target when exactly one such member exists.
        """
        alias = self.catalog.find_alias_by_normalized(normalize_alias(query))
        if alias is None:
            return None
        facility = self.catalog.get(alias.facility_id)
        if facility is None:
            return None

        if mode is not None and facility.city_unlocode:
            cluster = self.catalog.find_by_city_cluster(facility.city_unlocode)
            if len(cluster) > 1:
                preferred = [f for f in cluster if f.category is mode.preferred_category]
                if len(preferred) == 1:
                    facility = preferred[0]

        return Resolution(query, facility, ResolutionStage.ALIAS, candidates=1)

    def match_prefix(self, query: str, mode: Optional[TransportMode]) -> Optional[Resolution]:
        """Starts-with on names, then aliases, accepted only when unique.

        Meant for trailing punctuation and truncated names, not for
        general fuzzy search.
        """
        window = self.config.prefix_window
        prefix = query.rstrip(_TRAILING_PUNCTUATION).strip() or query

        names = _unique_by_id(self.catalog.find_by_name_prefix(prefix, window))
        if len(names) == 1:
            return Resolution(query, names[0], ResolutionStage.NAME_PREFIX, candidates=1)

        aliases = self.catalog.find_alias_by_normalized_prefix(normalize_alias(prefix), window)
        targets = _unique_by_id(
            [f for f in (self.catalog.get(a.facility_id) for a in aliases) if f is not None]
        )
        if len(targets) == 1:
            return Resolution(query, targets[0], ResolutionStage.ALIAS_PREFIX, candidates=1)

        if len(names) > 1 or len(targets) > 1:
            return self._ambiguous(
                query,
                ResolutionStage.ALIAS_PREFIX if len(targets) > 1 else ResolutionStage.NAME_PREFIX,
                targets if len(targets) > 1 else names,
            )
        return None
