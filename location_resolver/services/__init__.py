"""Services layer - Application orchestration.

Available services:
- ResolutionEngine: Ordered cascade of lookup stages
- ResolutionSession: Session-scoped resolver API (single, compound, cluster)
- LocationResolverService: Long-lived session factory
- AliasGapReport: Unresolved-token summaries for alias seeding
"""

from .alias_gap_report import AliasGap, AliasGapReport, AliasGapSummary, AliasSuggestion
from .formatting import display_name, format_canonical, format_short
from .location_resolver import LocationResolverService
from .resolution_engine import ResolutionEngine
from .session import ResolutionSession

__all__ = [
    "ResolutionEngine",
    "ResolutionSession",
    "LocationResolverService",
    "AliasGapReport",
    "AliasGapSummary",
    "AliasGap",
    "AliasSuggestion",
    "format_canonical",
    "format_short",
    "display_name",
]
