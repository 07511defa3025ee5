"""Tests for the CSV stop directory."""

import pytest

from transi.adapters.stops import CSVStopDirectory
from transi.config import StopsConfig
from transi.domain.errors import ConfigMissing
from transi.domain.models import GeoLocation


@pytest.fixture
def directory():
    return CSVStopDirectory(StopsConfig())


def test_lookup_is_case_insensitive(directory):
    stop = directory.lookup("a4")

    assert stop.code == "A4"
    assert stop.atco_code == "1180PZA004"
    assert stop.name == "Royal Parade Stop A4"
    assert directory.lookup("Z9") is None


def test_codes(directory):
    assert {"a4", "c2", "e1"} <= directory.codes()


@pytest.mark.parametrize(
    "text, code",
    [
        ("next bus from A4", "A4"),
        ("when is the next bus at stop c2?", "C2"),
        ("bus from E1 please", "E1"),
        ("a4a is not a stop", None),
        ("where is the bus", None),
    ],
)
def test_find_in_text(directory, text, code):
    stop = directory.find_in_text(text)

    assert (stop.code if stop else None) == code


def test_nearest(directory):
    stop, distance = directory.nearest(GeoLocation(50.37023, -4.14301))

    assert stop.code == "A4"
    assert distance == pytest.approx(0.0, abs=0.001)


def test_nearest_respects_radius(directory):
    assert directory.nearest(GeoLocation(50.7264, -3.5275)) is None
    assert directory.nearest(GeoLocation(50.7264, -3.5275), max_km=100) is not None


def test_skips_bad_rows(tmp_path):
    stops_file = tmp_path / "stops.csv"
    stops_file.write_text(
        "code,atco_code,name,lat,lon\n"
        "X1,1180PZX001,Test Stop,50.1,-4.1\n"
        "X2,1180PZX002,Bad Stop,north,-4.1\n"
        ",1180PZX003,No Code,50.1,-4.1\n"
        "X4,1180PZX004,,50.2,-4.2\n",
        encoding="utf-8",
    )
    directory = CSVStopDirectory(StopsConfig(stops_file=stops_file))

    assert sorted(s.code for s in directory.list_stops()) == ["X1", "X4"]
    assert directory.lookup("x4").name == "X4"


def test_missing_file_is_config_missing(tmp_path):
    directory = CSVStopDirectory(StopsConfig(stops_file=tmp_path / "absent.csv"))

    with pytest.raises(ConfigMissing):
        directory.lookup("A4")
