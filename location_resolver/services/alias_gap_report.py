"""Alias-gap report - unresolved tokens with seeding suggestions.

Runs a batch of raw references (e.g. yesterday's imported POL/POD
fields) through one session, counts the tokens that did not resolve
and attaches the closest catalog names as suggestions for whoever
seeds new aliases. Suggestions use rapidfuzz similarity and are
never fed back into resolution.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from rapidfuzz import fuzz, process

from ..config import GapReportConfig, get_config
from ..domain.models import Facility
from .location_resolver import LocationResolverService


@dataclass(frozen=True, slots=True)
class AliasSuggestion:
    """Catalog facility that looks like an unresolved token."""

    facility_id: int
    code: str
    name: str
    score: float


@dataclass(frozen=True, slots=True)
class AliasGap:
    """One unresolved token and how often it occurred."""

    token: str
    occurrences: int
    suggestions: Tuple[AliasSuggestion, ...] = ()


@dataclass(frozen=True, slots=True)
class AliasGapSummary:
    """Outcome of an alias-gap run.

    Attributes:
        inputs: Number of raw references processed
        tokens: Number of tokens resolved or not
        gaps: Unresolved tokens, most frequent first
    """

    inputs: int
    tokens: int
    gaps: Tuple[AliasGap, ...]

    @property
    def unresolved_tokens(self) -> List[str]:
        return [gap.token for gap in self.gaps]

    def to_dict(self) -> Dict[str, object]:
        """Plain structure, e.g. for a JSON audit file."""
        return {
            "inputs": self.inputs,
            "tokens": self.tokens,
            "unresolved": [
                {
                    "token": gap.token,
                    "occurrences": gap.occurrences,
                    "suggestions": [
                        {"facility_id": s.facility_id, "code": s.code, "name": s.name, "score": s.score}
                        for s in gap.suggestions
                    ],
                }
                for gap in self.gaps
            ],
        }


@dataclass
class AliasGapReport:
    """Builds alias-gap summaries over batches of raw references.

    Attributes:
        resolver: Service used to open the batch session
        config: Suggestion limits
    """

    resolver: LocationResolverService
    config: GapReportConfig = field(default_factory=lambda: get_config().gap_report)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def build(self, raw_inputs: Iterable[str]) -> AliasGapSummary:
        """Resolve every input and summarize the unresolved tokens.

        Args:
            raw_inputs: Raw, possibly compound, place references.

        Returns:
            AliasGapSummary with gaps sorted by descending frequency.
        """
        counts: Counter[str] = Counter()
        inputs = 0
        tokens = 0

        with self.resolver.open_session() as session:
            for raw in raw_inputs:
                inputs += 1
                report = session.resolve_many_with_report(raw)
                tokens += len(report.facilities) + len(report.unresolved_tokens)
                counts.update(report.unresolved_tokens)

        choices = {f.id: f.name for f in self.resolver.catalog.list_facilities()}
        by_id = {f.id: f for f in self.resolver.catalog.list_facilities()}
        gaps = tuple(
            AliasGap(
                token=token,
                occurrences=count,
                suggestions=self.suggest(token, choices, by_id),
            )
            for token, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        )

        self._logger.info(
            "Alias gap report built",
            extra={"inputs": inputs, "tokens": tokens, "gaps": len(gaps)},
        )
        return AliasGapSummary(inputs=inputs, tokens=tokens, gaps=gaps)

    def suggest(
        self,
        token: str,
        choices: Dict[int, str],
        by_id: Dict[int, Facility],
    ) -> Tuple[AliasSuggestion, ...]:
        """Closest facility names for one token, best first."""
        if not choices or self.config.max_suggestions <= 0:
            return ()

        matches = process.extract(
            token,
            choices,
            scorer=fuzz.WRatio,
            processor=str.lower,
            limit=self.config.max_suggestions,
            score_cutoff=self.config.min_suggestion_score,
        )
        suggestions = []
        for _name, score, facility_id in matches:
            facility = by_id[facility_id]
            suggestions.append(
                AliasSuggestion(
                    facility_id=facility.id,
                    code=facility.code,
                    name=facility.name,
                    score=round(float(score), 1),
                )
            )
        return tuple(suggestions)
