"""Facility catalog port - Read-only query interface over facilities.

The catalog is produced by offline ingestion and is never mutated by
the resolution path. Every query implicitly filters out inactive
facilities and inactive aliases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import Alias, Facility


class FacilityCatalogPort(Protocol):
    """Port for facility lookups.

    Implementations:
    - adapters/catalog/memory_catalog.py (InMemoryFacilityCatalog)
    - adapters/catalog/csv_repository.py (CSVFacilityRepository)

    Implementations must be safe for concurrent readers. Multi-result
    queries return facilities in a stable order (ascending id).
    """

    def find_by_unlocode(self, code: str) -> Sequence[Facility]:
        """Find all active facilities whose UN/LOCODE equals ``code``.

        Args:
            code: 5-character UN/LOCODE, any case.

        Returns:
            Matching facilities; several when a city cluster shares one code.
        """
        ...

    def find_by_iata(self, code: str) -> Optional[Facility]:
        """Find the active airport with this IATA code."""
        ...

    def find_by_icao(self, code: str) -> Optional[Facility]:
        """Find the active airport with this ICAO code."""
        ...

    def find_by_code(self, code: str) -> Optional[Facility]:
        """Find the active facility with this carrier-style code.

        Case-insensitive, any category. Returns None when the code is
        unknown or shared by several active facilities.
        """
        ...

    def find_by_exact_name(self, name: str) -> Sequence[Facility]:
        """Find active facilities whose name equals ``name`` ignoring case."""
        ...

    def find_by_name_prefix(self, prefix: str, limit: int) -> Sequence[Facility]:
        """Find at most ``limit`` active facilities whose name starts with ``prefix``."""
        ...

    def find_alias_by_normalized(self, text: str) -> Optional[Alias]:
        """Find the active alias whose normalized text equals ``text``."""
        ...

    def find_alias_by_normalized_prefix(self, prefix: str, limit: int) -> Sequence[Alias]:
        """Find at most ``limit`` active aliases starting with ``prefix``."""
        ...

    def find_by_city_cluster(self, city_unlocode: str) -> Sequence[Facility]:
        """Find all active facilities sharing ``city_unlocode``."""
        ...

    def get(self, facility_id: int) -> Optional[Facility]:
        """Get an active facility by surrogate id."""
        ...

    def list_facilities(self) -> Sequence[Facility]:
        """List all active facilities."""
        ...
