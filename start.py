"""Interactive console for the location resolver.

Loads the catalog snapshot configured through LOCRES_CATALOG_* and
resolves references typed on stdin. Prefix a line with ``sea:`` or
``air:`` to pass a mode hint; an empty line quits.
"""

from __future__ import annotations

import sys
from typing import List, Optional, Tuple

from location_resolver.container import get_container
from location_resolver.domain.errors import LocationResolverError
from location_resolver.domain.models import TransportMode
from location_resolver.logging_setup import configure_logging
from location_resolver.services import LocationResolverService, ResolutionSession, display_name

_MODE_PREFIXES = {"sea:": TransportMode.SEA, "air:": TransportMode.AIR}


def _split_mode(line: str) -> Tuple[str, Optional[TransportMode]]:
    lowered = line.lower()
    for prefix, mode in _MODE_PREFIXES.items():
        if lowered.startswith(prefix):
            return line[len(prefix) :], mode
    return line, None


def describe(session: ResolutionSession, line: str) -> List[str]:
    """Output lines for one console input.

    The whole line is resolved first, so a canonical reference such as
    ``"Antwerp (ANR), Belgium"`` is not split on its comma. Only when
    that fails is the line read as a compound of several references.
    """
    text, mode = _split_mode(line)
    resolution = session.resolve(text, mode)
    if resolution.facility is not None:
        return [
            f"  {session.format_canonical(resolution.facility)}"
            f"  [{resolution.stage.value}]"
        ]

    report = session.resolve_many_with_report(text)
    if len(report.facilities) + len(report.unresolved_tokens) > 1:
        lines = [f"  {display_name(facility)}" for facility in report.facilities]
        lines.extend(f"  ? {token}" for token in report.unresolved_tokens)
        return lines

    reason = "ambiguous" if resolution.ambiguous else "no match"
    return [f"  unresolved ({reason}, stage={resolution.stage.value})"]


def main() -> None:
    configure_logging()
    container = get_container()

    try:
        service: LocationResolverService = container.resolve(LocationResolverService)
        service.catalog.list_facilities()
    except LocationResolverError as e:
        print(f"Could not load the facility catalog: {e}")
        sys.exit(1)

    print("=== Location resolver ===")
    print("Prefix with 'sea:' or 'air:' for a mode hint, empty line to quit.")

    with service.open_session() as session:
        while True:
            line = input("> ").strip()
            if not line:
                break
            for output in describe(session, line):
                print(output)

        print(f"Cache: {session.stats()}")


if __name__ == "__main__":
    main()
