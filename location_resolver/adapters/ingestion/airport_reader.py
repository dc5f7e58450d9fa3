"""Airport reference file reader.

Supports two layouts:
- OpenFlights ``airports.dat`` style (tab-separated, positional:
  id, name, city, country, IATA, ICAO, latitude, longitude, ...)
- Delimited files with a header row whose column names vary
  (``IATA``/``iata code``, ``lat``/``latitude``, ``lng``/``longitude``...)

Rows carrying neither an IATA nor an ICAO code are skipped.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence, Union

from ...config import IngestionConfig, get_config
from ...domain.errors import IngestionError
from ...domain.models import AirportRecord, GeoLocation

HEADER_MAP: Dict[str, str] = {
    "iata": "iata_code",
    "iata code": "iata_code",
    "iata_code": "iata_code",
    "icao": "icao_code",
    "icao code": "icao_code",
    "icao_code": "icao_code",
    "name": "name",
    "city": "city",
    "country": "country",
    "latitude": "lat",
    "lat": "lat",
    "longitude": "lon",
    "lon": "lon",
    "lng": "lon",
}

# OpenFlights marks missing values with \N
_NULL_MARKERS = {"", "\\N"}


def _clean(value: Optional[str]) -> str:
    text = (value or "").strip().strip('"').strip()
    return "" if text in _NULL_MARKERS else text


def _parse_float(value: Optional[str]) -> Optional[float]:
    text = _clean(value)
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _build_coordinates(lat: Optional[str], lon: Optional[str]) -> Optional[GeoLocation]:
    latitude = _parse_float(lat)
    longitude = _parse_float(lon)
    if latitude is None or longitude is None:
        return None
    try:
        return GeoLocation(latitude=latitude, longitude=longitude)
    except ValueError:
        return None


@dataclass
class AirportReader:
    """Reader for airport reference files.

    Attributes:
        config: Ingestion configuration (encoding)
    """

    config: IngestionConfig = field(default_factory=lambda: get_config().ingestion)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def read_from_path(self, path: Union[str, Path]) -> Iterator[AirportRecord]:
        """Lazily read airport records, detecting the layout.

        ``.dat`` files and files whose first line contains a tab are
        read positionally; anything else as a headed CSV.

        Raises:
            IngestionError: If the file is missing or unreadable.
        """
        path = Path(path)
        try:
            with path.open(encoding=self.config.encoding) as f:
                first_line = f.readline()
        except OSError as e:
            raise IngestionError(
                f"Cannot read airport file: {path}", file_path=str(path), cause=e
            )

        if path.suffix.lower() == ".dat" or "\t" in first_line:
            records = self._read_positional(path)
        else:
            records = self._read_headed(path)

        produced = 0
        for record in records:
            produced += 1
            yield record

        self._logger.info(
            "Airport file read", extra={"path": str(path), "records": produced}
        )

    def _read_positional(self, path: Path) -> Iterator[AirportRecord]:
        with path.open(encoding=self.config.encoding) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                delimiter = "\t" if "\t" in line else ","
                fields = next(csv.reader([line], delimiter=delimiter))
                if len(fields) < 8:
                    continue
                record = self.parse_positional_row(fields)
                if record is not None:
                    yield record

    def _read_headed(self, path: Path) -> Iterator[AirportRecord]:
        with path.open(encoding=self.config.encoding, newline="") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None:
                return
            keys = [HEADER_MAP.get(h.strip().lower(), h.strip().lower()) for h in header]
            for row in reader:
                if len(row) < 2:
                    continue
                data = {key: (row[i] if i < len(row) else "") for i, key in enumerate(keys)}
                record = self.parse_headed_row(data)
                if record is not None:
                    yield record

    @staticmethod
    def parse_positional_row(fields: Sequence[str]) -> Optional[AirportRecord]:
        """Parse an OpenFlights row, or None when it has no codes."""
        iata = _clean(fields[4]).upper()
        icao = _clean(fields[5]).upper()
        if not iata and not icao:
            return None
        return AirportRecord(
            iata_code=iata,
            icao_code=icao,
            name=_clean(fields[1]),
            city=_clean(fields[2]),
            country=_clean(fields[3]),
            coordinates=_build_coordinates(fields[6], fields[7]),
        )

    @staticmethod
    def parse_headed_row(data: Dict[str, str]) -> Optional[AirportRecord]:
        """Parse a header-mapped row, or None when it has no codes."""
        iata = _clean(data.get("iata_code")).upper()
        icao = _clean(data.get("icao_code")).upper()
        if not iata and not icao:
            return None
        return AirportRecord(
            iata_code=iata,
            icao_code=icao,
            name=_clean(data.get("name")),
            city=_clean(data.get("city")),
            country=_clean(data.get("country")),
            coordinates=_build_coordinates(data.get("lat"), data.get("lon")),
        )
