"""Ingestion adapters - Offline readers producing catalog records.

Available readers:
- UnlocodeReader: UN/LOCODE code list CSV files
- AirportReader: OpenFlights .dat and headed airport CSV files
"""

from .airport_reader import AirportReader
from .unlocode_reader import UnlocodeReader, map_function_to_category, parse_coordinates

__all__ = [
    "UnlocodeReader",
    "AirportReader",
    "map_function_to_category",
    "parse_coordinates",
]
