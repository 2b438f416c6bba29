import pytest

from acs_tsp import TSPInstance


@pytest.fixture
def unit_square():
    return TSPInstance(coords=[(0, 0), (0, 1), (1, 1), (1, 0)], name="square")


@pytest.fixture
def random_instance():
    return TSPInstance.random_euclidean(n=30, seed=7, square_size=100.0)


def is_permutation(tour, n):
    return sorted(tour) == list(range(n))
