import itertools

import pytest

from estate_router.models.domain import Coordinate
from estate_router.services.geospatial import distance_km, distance_matrix, haversine_km, km_to_miles

FLINT = Coordinate(43.0125, -83.6875)
GRAND_BLANC = Coordinate(42.9275, -83.6300)
DETROIT = Coordinate(42.3314, -83.0458)
SYDNEY = Coordinate(-33.8688, 151.2093)


def test_self_distance_is_zero():
    for point in (FLINT, DETROIT, SYDNEY, Coordinate(0.0, 0.0)):
        assert distance_km(point, point) == 0.0


def test_distance_is_symmetric():
    for a, b in itertools.permutations((FLINT, GRAND_BLANC, DETROIT, SYDNEY), 2):
        assert distance_km(a, b) == distance_km(b, a)


def test_triangle_inequality():
    points = (FLINT, GRAND_BLANC, DETROIT, SYDNEY)
    for a, b, c in itertools.permutations(points, 3):
        assert distance_km(a, c) <= distance_km(a, b) + distance_km(b, c) + 1e-9


def test_one_degree_of_latitude():
    # One degree along a meridian is R * pi / 180
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=1e-3)


def test_known_city_distance():
    assert distance_km(FLINT, DETROIT) == pytest.approx(92.0, abs=1.5)


def test_distance_matrix_shape_and_symmetry():
    points = [FLINT, GRAND_BLANC, DETROIT]
    matrix = distance_matrix(points)

    assert len(matrix) == 3
    assert all(len(row) == 3 for row in matrix)
    for i in range(3):
        assert matrix[i][i] == 0.0
        for j in range(3):
            assert matrix[i][j] == matrix[j][i]
    assert matrix[0][2] == distance_km(FLINT, DETROIT)


def test_distance_matrix_empty():
    assert distance_matrix([]) == []


def test_km_to_miles():
    assert km_to_miles(1.609344) == pytest.approx(1.0)
