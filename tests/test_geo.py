import math

import pytest

from siap.core.geo import EARTH_RADIUS_M, distance_m


def test_distance_is_zero_for_identical_points():
    assert distance_m(-6.2, 106.816666, -6.2, 106.816666) == pytest.approx(0.0, abs=1e-9)
    assert distance_m(89.9999, -179.5, 89.9999, -179.5) == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize(
    "a,b",
    [
        ((-6.2, 106.816666), (-6.2018, 106.816666)),
        ((0.0, 0.0), (10.0, 20.0)),
        ((51.5, -0.12), (-33.86, 151.2)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert distance_m(*a, *b) == pytest.approx(distance_m(*b, *a), rel=1e-12)


def test_meridian_arc_matches_radius_times_angle():
    dlat = 0.0018
    expected = EARTH_RADIUS_M * math.radians(dlat)
    assert distance_m(-6.2, 106.816666, -6.2018, 106.816666) == pytest.approx(expected, rel=1e-9)


def test_antipodal_points_are_half_circumference_without_nan():
    d = distance_m(0.0, 0.0, 0.0, 180.0)
    assert not math.isnan(d)
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9)

    pole = distance_m(90.0, 0.0, -90.0, 0.0)
    assert pole == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9)
