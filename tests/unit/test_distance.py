import pytest

from spotfinder.models.places import Coordinate
from spotfinder.services.distance import haversine_distance

POINTS = [
    Coordinate(0.0, 0.0),
    Coordinate(38.9897, -76.9378),
    Coordinate(35.68, 139.76),
    Coordinate(-33.8688, 151.2093),
    Coordinate(89.9, 179.9),
]


@pytest.mark.parametrize("point", POINTS)
def test_distance_to_self_is_zero(point):
    assert haversine_distance(point, point) == 0


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_is_symmetric(a, b):
    assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a))


def test_one_degree_of_longitude_on_equator():
    dist = haversine_distance(Coordinate(0, 0), Coordinate(0, 1))
    assert dist == pytest.approx(111195, abs=50)


def test_city_scale_distance():
    dist = haversine_distance(Coordinate(35.68, 139.76), Coordinate(35.69, 139.77))
    assert 1000 < dist < 2000
