"""UN/LOCODE code list reader.

Parses UN/LOCODE CSV exports (CodeListPart1..3 or any file with a
recognisable header) into UnlocodeRecord values for the catalog
loader. Rows without a valid country/location pair are skipped.

Coordinates use the UN/LOCODE notation ``DDMM[SS]N DDDMM[SS]E``:

    >>> parse_coordinates("5113N 00425E")
    GeoLocation(latitude=51.21666..., longitude=4.41666...)
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Union

from ...config import IngestionConfig, get_config
from ...domain.errors import IngestionError
from ...domain.models import FacilityCategory, GeoLocation, UnlocodeRecord

# Header variations -> standard keys
HEADER_MAP: Dict[str, str] = {
    "country": "country_code",
    "country code": "country_code",
    "ch": "country_code",
    "location": "location_code",
    "location code": "location_code",
    "lo": "location_code",
    "name": "name",
    "name wo diacritics": "name",
    "namewodiacritics": "name",
    "namewithdiacritics": "name",
    "subdiv": "sub_div",
    "subdivision": "sub_div",
    "subdivision code": "sub_div",
    "function": "function",
    "function code": "function",
    "coordinates": "coordinates",
    "coordinates (wgs84)": "coordinates",
    "status": "status",
    "date": "date",
    "iata": "iata",
    "iata code": "iata",
}

_COORDINATES_RE = re.compile(r"^(\d{4}|\d{6})([NS])\s+(\d{5}|\d{7})([EW])$", re.IGNORECASE)


def map_function_to_category(function: Optional[str]) -> FacilityCategory:
    """Map a UN/LOCODE function classifier to a facility category.

    ``4`` (airport) wins over ``1`` (seaport), which wins over ``6``
    (multimodal) or ``8`` (inland) terminals.
    """
    function = (function or "").strip()
    if not function:
        return FacilityCategory.UNKNOWN
    if "4" in function:
        return FacilityCategory.AIRPORT
    if "1" in function:
        return FacilityCategory.SEA_PORT
    if "6" in function or "8" in function:
        return FacilityCategory.ICD
    return FacilityCategory.UNKNOWN


def _dms_to_decimal(digits: str, degree_width: int, negative: bool) -> float:
    degrees = int(digits[:degree_width])
    minutes = int(digits[degree_width : degree_width + 2])
    seconds = int(digits[degree_width + 2 :] or 0)
    if minutes >= 60 or seconds >= 60:
        raise ValueError(f"Invalid minutes/seconds in {digits!r}")
    decimal = degrees + minutes / 60.0 + seconds / 3600.0
    return -decimal if negative else decimal


def parse_coordinates(raw: Optional[str]) -> Optional[GeoLocation]:
    """Decode a UN/LOCODE coordinate string, or None if unparseable."""
    match = _COORDINATES_RE.match((raw or "").strip())
    if match is None:
        return None
    lat_digits, lat_dir, lon_digits, lon_dir = match.groups()
    try:
        return GeoLocation(
            latitude=_dms_to_decimal(lat_digits, 2, lat_dir.upper() == "S"),
            longitude=_dms_to_decimal(lon_digits, 3, lon_dir.upper() == "W"),
        )
    except ValueError:
        return None


@dataclass
class UnlocodeReader:
    """Reader for UN/LOCODE CSV files.

    Attributes:
        config: Ingestion configuration (encoding, strictness)
    """

    config: IngestionConfig = field(default_factory=lambda: get_config().ingestion)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def read_from_paths(self, paths: Iterable[Union[str, Path]]) -> Iterator[UnlocodeRecord]:
        """Lazily read records from several files, in order.

        Raises:
            IngestionError: If a file is missing or unreadable.
        """
        for path in paths:
            yield from self.read_from_path(path)

    def read_from_path(self, path: Union[str, Path]) -> Iterator[UnlocodeRecord]:
        """Lazily read records from one file.

        Raises:
            IngestionError: If the file is missing or unreadable.
        """
        path = Path(path)
        try:
            handle = path.open(encoding=self.config.encoding, newline="")
        except OSError as e:
            raise IngestionError(
                f"Cannot read UN/LOCODE file: {path}", file_path=str(path), cause=e
            )

        skipped = 0
        produced = 0
        with handle:
            reader = csv.reader(handle)
            header = next(reader, None)
            if header is None:
                return
            keys = [HEADER_MAP.get(h.strip().lower(), h.strip().lower()) for h in header]

            for row in reader:
                if len(row) < 2:
                    continue
                data = {key: (row[i].strip() if i < len(row) else "") for i, key in enumerate(keys)}
                record = self.parse_row(data)
                if record is None:
                    skipped += 1
                    if not self.config.skip_invalid_rows:
                        raise IngestionError(
                            "Invalid UN/LOCODE row",
                            file_path=str(path),
                            line_number=reader.line_num,
                        )
                    continue
                produced += 1
                yield record

        self._logger.info(
            "UN/LOCODE file read",
            extra={"path": str(path), "records": produced, "skipped": skipped},
        )

    @staticmethod
    def parse_row(data: Dict[str, str]) -> Optional[UnlocodeRecord]:
        """Build a record from a header-mapped row, or None if invalid."""
        country_code = data.get("country_code", "").strip().upper()
        location_code = data.get("location_code", "").strip().upper()

        if len(country_code) != 2 or not country_code.isalpha():
            return None
        if len(location_code) != 3 or not location_code.isalnum():
            return None

        coordinates_raw = data.get("coordinates", "").strip()
        function = data.get("function", "").strip()
        return UnlocodeRecord(
            country_code=country_code,
            location_code=location_code,
            name=data.get("name", "").strip(),
            category=map_function_to_category(function),
            sub_division=data.get("sub_div", "").strip(),
            function=function,
            coordinates=parse_coordinates(coordinates_raw),
            coordinates_raw=coordinates_raw,
            status=data.get("status", "").strip(),
            date=data.get("date", "").strip(),
            iata=data.get("iata", "").strip().upper(),
        )
