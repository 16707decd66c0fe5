from __future__ import annotations

import math

import numpy as np
import pytest

from match_kinematics.constants import EARTH_RADIUS_M
from match_kinematics.geodesic import haversine_distance, haversine_distance_array

EXTREME_PAIRS = [
    (0.0, 0.0, 0.0, 180.0),
    (-24.975, -66.6, 24.975, 113.4),
    (45.0, 10.0, -45.0, -170.0),
    (90.0, 0.0, -90.0, 0.0),
    (90.0, 0.0, 90.0, 123.0),
    (-90.0, -45.0, 89.9999, 135.0),
    (0.0, -180.0, 0.0, 180.0),
]


def test_same_point_is_zero() -> None:
    assert haversine_distance(-22.9, -43.23, -22.9, -43.23) == 0.0


def test_one_millidegree_of_longitude_at_equator() -> None:
    assert haversine_distance(0.0, 0.0, 0.0, 0.001) == pytest.approx(111.195, abs=1e-3)


def test_distance_is_symmetric() -> None:
    forward = haversine_distance(51.5007, -0.1246, 40.6892, -74.0445)
    backward = haversine_distance(40.6892, -74.0445, 51.5007, -0.1246)
    assert forward == pytest.approx(backward)
    assert forward == pytest.approx(5_574_840, rel=1e-3)


def test_array_variant_matches_scalar() -> None:
    lat1 = np.array([0.0, -22.9, 10.0])
    lon1 = np.array([0.0, -43.23, 20.0])
    lat2 = np.array([0.0, -22.9001, 10.5])
    lon2 = np.array([0.00005, -43.2299, 20.5])

    distances = haversine_distance_array(lat1, lon1, lat2, lon2)
    expected = [haversine_distance(*args) for args in zip(lat1, lon1, lat2, lon2)]

    assert distances.shape == (3,)
    assert distances.tolist() == pytest.approx(expected)


@pytest.mark.parametrize(("lat1", "lon1", "lat2", "lon2"), EXTREME_PAIRS)
def test_extreme_coordinates_stay_within_half_circumference(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> None:
    distance = haversine_distance(lat1, lon1, lat2, lon2)
    assert math.isfinite(distance)
    assert 0.0 <= distance <= math.pi * EARTH_RADIUS_M


def test_antipodal_points_are_half_circumference_apart() -> None:
    assert haversine_distance(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_M)
    assert haversine_distance(-24.975, -66.6, 24.975, 113.4) == pytest.approx(20_015_087, rel=1e-6)


def test_array_variant_handles_extreme_coordinates() -> None:
    lat1, lon1, lat2, lon2 = (np.array(column) for column in zip(*EXTREME_PAIRS))
    distances = haversine_distance_array(lat1, lon1, lat2, lon2)

    assert np.isfinite(distances).all()
    assert (distances <= math.pi * EARTH_RADIUS_M).all()
