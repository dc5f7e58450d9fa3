"""CSV facility repository adapter.

Loads a catalog snapshot exported by the offline ingestion job from
two CSV files and serves lookups from an InMemoryFacilityCatalog:

- ``facilities.csv``: id, code, name, country, region, category,
  unlocode, city_unlocode, iata_code, icao_code, country_code,
  latitude, longitude, is_active
- ``aliases.csv``: alias, alias_normalized (optional), facility_id,
  is_active
"""

from __future__ import annotations

import csv
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ...config import CatalogConfig, get_config
from ...domain.errors import CatalogError
from ...domain.models import Alias, Facility, FacilityCategory, GeoLocation
from ...normalization import normalize_alias
from .memory_catalog import InMemoryFacilityCatalog

_TRUE_VALUES = {"1", "true", "t", "yes", "y"}
_FALSE_VALUES = {"0", "false", "f", "no", "n"}

_REQUIRED_FACILITY_COLUMNS = ("id", "code", "name")
_REQUIRED_ALIAS_COLUMNS = ("alias", "facility_id")


def _parse_bool(value: Optional[str], default: bool = True) -> bool:
    text = (value or "").strip().lower()
    if not text:
        return default
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _optional(value: Optional[str], upper: bool = False) -> Optional[str]:
    text = (value or "").strip()
    if not text:
        return None
    return text.upper() if upper else text


@dataclass
class CSVFacilityRepository:
    """Facility catalog backed by CSV files.

    This adapter implements FacilityCatalogPort. The snapshot is read
    once on first use; clear_cache() drops it so the next query
    reloads from disk.

    Attributes:
        config: Catalog configuration (paths, file names)
    """

    config: CatalogConfig = field(default_factory=lambda: get_config().catalog)
    _logger: logging.Logger = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    # Cached data
    _catalog: Optional[InMemoryFacilityCatalog] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load(self) -> InMemoryFacilityCatalog:
        """Load the catalog snapshot from CSV files.

        Returns:
            The in-memory catalog built from the CSV rows.

        Raises:
            CatalogError: If a file cannot be read or a row is malformed.
        """
        if self._catalog is not None:
            return self._catalog

        with self._lock:
            if self._catalog is not None:
                return self._catalog

            self._logger.debug(
                "Loading facility catalog",
                extra={
                    "facilities_path": str(self.config.facilities_path),
                    "aliases_path": str(self.config.aliases_path),
                },
            )

            facilities = self._load_facilities(self.config.facilities_path)
            aliases = self._load_aliases(self.config.aliases_path)
            catalog = InMemoryFacilityCatalog(facilities=facilities, aliases=aliases)
            self._catalog = catalog
            self._logger.info(
                "Facility catalog loaded",
                extra={
                    "facilities": len(catalog.list_facilities()),
                    "aliases": len(aliases),
                },
            )
            return catalog

    def _load_facilities(self, path: Path) -> List[Facility]:
        facilities: List[Facility] = []
        try:
            with path.open(encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f)
                reader.fieldnames = self._normalize_columns(
                    reader.fieldnames, _REQUIRED_FACILITY_COLUMNS, path
                )
                for row in reader:
                    facility = self._parse_facility(row)
                    if facility is None:
                        continue
                    if not facility.is_active and not self.config.include_inactive_rows:
                        continue
                    facilities.append(facility)
        except OSError as e:
            raise CatalogError(
                "Failed to read facilities file", file_path=str(path), cause=e
            )
        except ValueError as e:
            raise CatalogError(
                f"Malformed facilities file (line {reader.line_num})",
                file_path=str(path),
                cause=e,
            )
        return facilities

    def _parse_facility(self, row: Dict[str, str]) -> Optional[Facility]:
        code = (row.get("code") or "").strip()
        name = (row.get("name") or "").strip()
        id_str = (row.get("id") or "").strip()
        if not id_str or not code or not name:
            return None

        lat_str = (row.get("latitude") or "").strip()
        lon_str = (row.get("longitude") or "").strip()
        coordinates = None
        if lat_str and lon_str:
            coordinates = GeoLocation(latitude=float(lat_str), longitude=float(lon_str))

        return Facility(
            id=int(id_str),
            code=code,
            name=name,
            country=(row.get("country") or "").strip(),
            region=(row.get("region") or "").strip(),
            category=FacilityCategory.parse(row.get("category")),
            unlocode=_optional(row.get("unlocode"), upper=True),
            city_unlocode=_optional(row.get("city_unlocode"), upper=True),
            iata_code=_optional(row.get("iata_code"), upper=True),
            icao_code=_optional(row.get("icao_code"), upper=True),
            country_code=_optional(row.get("country_code"), upper=True),
            coordinates=coordinates,
            is_active=_parse_bool(row.get("is_active")),
        )

    def _load_aliases(self, path: Path) -> List[Alias]:
        if not path.exists():
            self._logger.warning(
                "Aliases file not found, continuing without aliases",
                extra={"aliases_path": str(path)},
            )
            return []

        aliases: List[Alias] = []
        try:
            with path.open(encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f)
                reader.fieldnames = self._normalize_columns(
                    reader.fieldnames, _REQUIRED_ALIAS_COLUMNS, path
                )
                for row in reader:
                    text = (row.get("alias") or "").strip()
                    facility_id = (row.get("facility_id") or "").strip()
                    if not text or not facility_id:
                        continue
                    normalized = normalize_alias(row.get("alias_normalized") or text)
                    aliases.append(
                        Alias(
                            alias_text=text,
                            alias_normalized=normalized,
                            facility_id=int(facility_id),
                            is_active=_parse_bool(row.get("is_active")),
                        )
                    )
        except OSError as e:
            raise CatalogError(
                "Failed to read aliases file", file_path=str(path), cause=e
            )
        except ValueError as e:
            raise CatalogError(
                f"Malformed aliases file (line {reader.line_num})",
                file_path=str(path),
                cause=e,
            )
        return aliases

    @staticmethod
    def _normalize_columns(
        fieldnames: Optional[Sequence[str]], required: Sequence[str], path: Path
    ) -> List[str]:
        present = [name.strip().lower() for name in fieldnames or ()]
        missing = [name for name in required if name not in present]
        if missing:
            raise CatalogError(
                f"Missing columns: {', '.join(missing)}", file_path=str(path)
            )
        return present

    def clear_cache(self) -> None:
        """Drop the cached snapshot."""
        self._catalog = None
        self._logger.debug("Catalog cache cleared")

    # ------------------------------------------------------------------
    # FacilityCatalogPort (delegates to the snapshot)
    # ------------------------------------------------------------------

    def find_by_unlocode(self, code: str) -> Sequence[Facility]:
        return self.load().find_by_unlocode(code)

    def find_by_iata(self, code: str) -> Optional[Facility]:
        return self.load().find_by_iata(code)

    def find_by_icao(self, code: str) -> Optional[Facility]:
        return self.load().find_by_icao(code)

    def find_by_code(self, code: str) -> Optional[Facility]:
        return self.load().find_by_code(code)

    def find_by_exact_name(self, name: str) -> Sequence[Facility]:
        return self.load().find_by_exact_name(name)

    def find_by_name_prefix(self, prefix: str, limit: int) -> Sequence[Facility]:
        return self.load().find_by_name_prefix(prefix, limit)

    def find_alias_by_normalized(self, text: str) -> Optional[Alias]:
        return self.load().find_alias_by_normalized(text)

    def find_alias_by_normalized_prefix(self, prefix: str, limit: int) -> Sequence[Alias]:
        return self.load().find_alias_by_normalized_prefix(prefix, limit)

    def find_by_city_cluster(self, city_unlocode: str) -> Sequence[Facility]:
        return self.load().find_by_city_cluster(city_unlocode)

    def get(self, facility_id: int) -> Optional[Facility]:
        return self.load().get(facility_id)

    def list_facilities(self) -> Sequence[Facility]:
        return self.load().list_facilities()
