"""Tests for the great-circle helpers."""

import pytest

from transi.geo import bounding_box, haversine_km


def test_haversine_zero():
    assert haversine_km(50.37, -4.14, 50.37, -4.14) == 0.0


def test_haversine_plymouth_to_exeter():
    # Plymouth station to Exeter St Davids, roughly 58 km as the crow flies
    assert haversine_km(50.3781, -4.1434, 50.7292, -3.5433) == pytest.approx(58, abs=2)


def test_bounding_box_contains_point():
    min_lon, min_lat, max_lon, max_lat = bounding_box(50.37, -4.14, 1.0)

    assert min_lat < 50.37 < max_lat
    assert min_lon < -4.14 < max_lon
    assert max_lat - min_lat == pytest.approx(2 * 0.008993, abs=1e-4)
