"""Tests for the UN/LOCODE and airport reference readers."""

import pytest

from location_resolver.adapters.ingestion import (
    AirportReader,
    UnlocodeReader,
    map_function_to_category,
    parse_coordinates,
)
from location_resolver.config import IngestionConfig
from location_resolver.domain.errors import IngestionError
from location_resolver.domain.models import FacilityCategory

UNLOCODE_CSV = """\
Country,Location,Name,NameWoDiacritics,SubDiv,Function,Status,Date,IATA,Coordinates
BE,ANR,Antwerpen,Antwerpen,VAN,12345---,AI,0901,,5113N 00425E
US,NYC,New York,New York,NY,12345---,AI,0401,NYC,4042N 07400W
MA,CAS,Casablanca,Casablanca,,1-------,AI,9501,,
XX,A,Broken,Broken,,1-------,,,,
BR,SSZ,Santos,Santos,SP,1-------,AI,0001,,2356S 04619W
;
"""


# ----------------------------------------------------------------------------
# Coordinates and functions
# ----------------------------------------------------------------------------


def test_parse_coordinates_degrees_minutes():
    coords = parse_coordinates("5113N 00425E")
    assert coords.latitude == pytest.approx(51 + 13 / 60)
    assert coords.longitude == pytest.approx(4 + 25 / 60)


def test_parse_coordinates_south_west():
    coords = parse_coordinates("2356S 04619W")
    assert coords.latitude == pytest.approx(-(23 + 56 / 60))
    assert coords.longitude == pytest.approx(-(46 + 19 / 60))


def test_parse_coordinates_with_seconds():
    coords = parse_coordinates("511330N 0042530E")
    assert coords.latitude == pytest.approx(51 + 13 / 60 + 30 / 3600)
    assert coords.longitude == pytest.approx(4 + 25 / 60 + 30 / 3600)


def test_parse_coordinates_three_digit_longitude_degrees():
    coords = parse_coordinates("3554N 13946E")
    assert coords.longitude == pytest.approx(139 + 46 / 60)


@pytest.mark.parametrize("raw", [None, "", "garbage", "5199N 00425E", "5113N 00475E", "5113X 00425E"])
def test_parse_coordinates_invalid(raw):
    assert parse_coordinates(raw) is None


@pytest.mark.parametrize(
    "function, expected",
    [
        ("1-------", FacilityCategory.SEA_PORT),
        ("-2345---", FacilityCategory.AIRPORT),
        ("12345---", FacilityCategory.AIRPORT),
        ("------6-", FacilityCategory.ICD),
        ("-------8", FacilityCategory.ICD),
        ("-23-----", FacilityCategory.UNKNOWN),
        ("", FacilityCategory.UNKNOWN),
        (None, FacilityCategory.UNKNOWN),
    ],
)
def test_map_function_to_category(function, expected):
    assert map_function_to_category(function) is expected


# ----------------------------------------------------------------------------
# UnlocodeReader
# ----------------------------------------------------------------------------


def test_unlocode_reader_reads_valid_rows(tmp_path):
    path = tmp_path / "CodeListPart1.csv"
    path.write_text(UNLOCODE_CSV, encoding="utf-8")

    records = list(UnlocodeReader(IngestionConfig()).read_from_path(path))

    assert [r.unlocode for r in records] == ["BEANR", "USNYC", "MACAS", "BRSSZ"]
    antwerp = records[0]
    assert antwerp.name == "Antwerpen"
    assert antwerp.sub_division == "VAN"
    assert antwerp.category is FacilityCategory.AIRPORT
    assert antwerp.coordinates_raw == "5113N 00425E"
    assert antwerp.coordinates.latitude == pytest.approx(51.2167, abs=1e-3)
    assert records[1].iata == "NYC"
    assert records[2].category is FacilityCategory.SEA_PORT
    assert records[2].coordinates is None


def test_unlocode_reader_strict_mode_raises_with_line(tmp_path):
    path = tmp_path / "codes.csv"
    path.write_text(UNLOCODE_CSV, encoding="utf-8")
    reader = UnlocodeReader(IngestionConfig(skip_invalid_rows=False))

    with pytest.raises(IngestionError) as exc_info:
        list(reader.read_from_path(path))
    assert exc_info.value.line_number == 5
    assert exc_info.value.file_path == str(path)


def test_unlocode_reader_reads_several_files(tmp_path):
    first = tmp_path / "part1.csv"
    second = tmp_path / "part2.csv"
    first.write_text("Country,Location,Name\nBE,ANR,Antwerpen\n", encoding="utf-8")
    second.write_text("ch,lo,name\nNL,RTM,Rotterdam\n", encoding="utf-8")

    records = list(UnlocodeReader(IngestionConfig()).read_from_paths([first, second]))

    assert [r.unlocode for r in records] == ["BEANR", "NLRTM"]


def test_unlocode_reader_missing_file(tmp_path):
    with pytest.raises(IngestionError):
        list(UnlocodeReader(IngestionConfig()).read_from_path(tmp_path / "missing.csv"))


def test_unlocode_reader_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    assert list(UnlocodeReader(IngestionConfig()).read_from_path(path)) == []


# ----------------------------------------------------------------------------
# AirportReader
# ----------------------------------------------------------------------------


def test_airport_reader_openflights_layout(tmp_path):
    path = tmp_path / "airports.dat"
    path.write_text(
        "# OpenFlights extract\n"
        '1,"Charles de Gaulle International Airport","Paris","France","CDG","LFPG",49.0127,2.55,392,1,"E"\n'
        '2,"Unnamed Strip","Nowhere","Nowhere",\\N,\\N,10.0,10.0,0,0,"U"\n'
        '3,"Short row","X"\n'
        '4,"Heliport","Somewhere","France",\\N,"LFPI",48.83,2.27,0,1,"E"\n',
        encoding="utf-8",
    )

    records = list(AirportReader(IngestionConfig()).read_from_path(path))

    assert [(r.iata_code, r.icao_code) for r in records] == [("CDG", "LFPG"), ("", "LFPI")]
    cdg = records[0]
    assert cdg.name == "Charles de Gaulle International Airport"
    assert cdg.city == "Paris"
    assert cdg.country == "France"
    assert cdg.coordinates.latitude == pytest.approx(49.0127)


def test_airport_reader_tab_separated_layout(tmp_path):
    path = tmp_path / "airports.txt"
    path.write_text(
        "1\tJohn F Kennedy International Airport\tNew York\tUnited States\tJFK\tKJFK\t40.64\t-73.78\n",
        encoding="utf-8",
    )

    records = list(AirportReader(IngestionConfig()).read_from_path(path))

    assert len(records) == 1
    assert records[0].iata_code == "JFK"
    assert records[0].coordinates.longitude == pytest.approx(-73.78)


def test_airport_reader_headed_layout(tmp_path):
    path = tmp_path / "airports.csv"
    path.write_text(
        "IATA Code,ICAO,Name,City,Country,Lat,Lng\n"
        "cmn,gmmn,Mohammed V International Airport,Casablanca,Morocco,33.37,-7.59\n"
        ",,No codes,Nowhere,Nowhere,0,0\n"
        "XXX,,Bad coordinates,Nowhere,Nowhere,abc,200\n",
        encoding="utf-8",
    )

    records = list(AirportReader(IngestionConfig()).read_from_path(path))

    assert [r.iata_code for r in records] == ["CMN", "XXX"]
    assert records[0].icao_code == "GMMN"
    assert records[0].city == "Casablanca"
    assert records[1].coordinates is None


def test_airport_reader_missing_file(tmp_path):
    with pytest.raises(IngestionError):
        list(AirportReader(IngestionConfig()).read_from_path(tmp_path / "missing.dat"))
