"""Catalog adapters - Implementations of the FacilityCatalogPort.

Available implementations:
- InMemoryFacilityCatalog: Immutable indexed snapshot
- CSVFacilityRepository: Snapshot loaded from facilities/aliases CSV files
"""

from .csv_repository import CSVFacilityRepository
from .memory_catalog import InMemoryFacilityCatalog

__all__ = ["InMemoryFacilityCatalog", "CSVFacilityRepository"]
