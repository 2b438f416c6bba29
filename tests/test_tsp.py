import logging

import pytest

from acs_tsp import CandidateIndex, TSPInstance, tsp


def test_distance_is_euclidean_and_symmetric():
    inst = TSPInstance(coords=[(0, 0), (3, 4), (6, 8)])
    assert inst.distance(0, 1) == 5.0
    assert inst.distance(1, 0) == 5.0
    assert inst.distance(0, 2) == 10.0
    for i in range(3):
        assert inst.distance(i, i) == 0.0


def test_distance_matrix_matches_distance():
    inst = TSPInstance.random_euclidean(n=12, seed=3)
    D = inst.distance_matrix()
    for i in range(12):
        for j in range(12):
            assert D[i][j] == inst.distance(i, j) == D[j][i]


def test_out_of_range_index_raises():
    inst = TSPInstance(coords=[(0, 0), (1, 1)])
    with pytest.raises(IndexError):
        inst.distance(0, 2)
    with pytest.raises(IndexError):
        inst.distance(-1, 0)


def test_tour_length_single_city():
    inst = TSPInstance(coords=[(2.5, -1.0)])
    assert inst.tour_length([0]) == 0.0


def test_tour_length_round_trip():
    inst = TSPInstance(coords=[(0, 0), (3, 4)])
    assert inst.tour_length([0, 1]) == 10.0


def test_from_file(tmp_path):
    path = tmp_path / "tsp_3"
    path.write_text("3\n0 0\n3 4\n1 2\n")
    inst = TSPInstance.from_file(str(path))
    assert inst.n_cities() == 3
    assert inst.coords == [(0.0, 0.0), (3.0, 4.0), (1.0, 2.0)]
    assert inst.name == "tsp_3"


def test_from_file_tolerates_bad_fields(tmp_path):
    path = tmp_path / "bad"
    path.write_text("3\nabc 1\n2 xyz\n7\n4 5 extra\n")
    inst = TSPInstance.from_file(str(path), name="bad")
    assert inst.coords == [(0.0, 1.0), (2.0, 0.0), (4.0, 5.0)]


def test_from_file_count_mismatch_warns(tmp_path, caplog):
    path = tmp_path / "short"
    path.write_text("5\n0 0\n1 1\n")
    with caplog.at_level(logging.WARNING, logger="acs_tsp.tsp"):
        inst = TSPInstance.from_file(str(path))
    assert inst.n_cities() == 2
    assert "Expected 5 points" in caplog.text


def test_from_file_unparseable_header(tmp_path):
    path = tmp_path / "noheader"
    path.write_text("cities\n1 2\n")
    inst = TSPInstance.from_file(str(path))
    assert inst.coords == [(1.0, 2.0)]


def test_from_file_missing():
    with pytest.raises(FileNotFoundError):
        TSPInstance.from_file("/nonexistent/tsp_file")


def test_large_instances_compute_distances_on_demand(monkeypatch):
    dense = TSPInstance.random_euclidean(n=10, seed=4)
    monkeypatch.setattr(tsp, "DENSE_DISTANCE_LIMIT", 3)
    lazy = TSPInstance(coords=dense.coords)
    assert lazy._dist is None
    assert dense._dist is not None
    for i in range(10):
        for j in range(10):
            assert lazy.distance(i, j) == dense.distance(i, j) == lazy.distance(j, i)
    assert lazy.distance_matrix() == dense.distance_matrix()
    with pytest.raises(IndexError):
        lazy.distance(0, 10)
    with pytest.raises(IndexError):
        lazy.distance(-1, 0)
    cands_lazy = CandidateIndex.build(lazy, k=4)
    cands_dense = CandidateIndex.build(dense, k=4)
    assert [cands_lazy[i] for i in range(10)] == [cands_dense[i] for i in range(10)]
