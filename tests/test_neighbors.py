import numpy as np
import pytest

from boids import BruteForceNeighbors, NeighborIndex, SpatialGrid


def within(positions, point, radius):
    d = np.linalg.norm(positions - point, axis=1)
    return set(np.nonzero(d < radius)[0].tolist())


def test_query_before_rebuild_raises():
    with pytest.raises(RuntimeError):
        SpatialGrid(100.0, 100.0, 10.0).query(np.zeros(2), 10.0)
    with pytest.raises(RuntimeError):
        BruteForceNeighbors().query(np.zeros(2), 10.0)


def test_cell_size_must_be_positive():
    with pytest.raises(ValueError):
        SpatialGrid(100.0, 100.0, 0.0)


def test_brute_force_returns_everyone():
    positions = np.random.default_rng(0).uniform(0, 500, size=(25, 2))
    index = BruteForceNeighbors()
    index.rebuild(positions)
    assert np.array_equal(index.query(positions[3], 1.0), np.arange(25))


@pytest.mark.parametrize("cell_size,radius", [(20.0, 20.0), (25.0, 60.0), (100.0, 30.0)])
def test_grid_candidates_cover_the_disc(cell_size, radius):
    rng = np.random.default_rng(1)
    positions = rng.uniform((0, 0), (400, 300), size=(300, 2))
    index = SpatialGrid(400.0, 300.0, cell_size)
    index.rebuild(positions)

    for point in positions[:60]:
        candidates = set(index.query(point, radius).tolist())
        assert within(positions, point, radius) <= candidates


def test_grid_prunes_far_boids():
    positions = np.array([[5.0, 5.0], [8.0, 5.0], [395.0, 295.0]])
    index = SpatialGrid(400.0, 300.0, 20.0)
    index.rebuild(positions)
    assert index.query(positions[0], 20.0).tolist() == [0, 1]


def test_grid_cells_are_contiguous():
    positions = np.array([[1.0, 1.0], [150.0, 1.0], [2.0, 2.0]])
    index = SpatialGrid(200.0, 100.0, 50.0)
    index.rebuild(positions)
    sorted_indices, starts, counts = index.cells

    assert counts.sum() == 3
    assert counts[0] == 2
    assert sorted(sorted_indices[starts[0]:starts[0] + counts[0]].tolist()) == [0, 2]


def test_neighbor_index_is_abstract():
    with pytest.raises(TypeError):
        NeighborIndex()


def test_partial_index_cannot_be_built():
    class RebuildOnly(NeighborIndex):
        def rebuild(self, positions):
            pass

    with pytest.raises(TypeError):
        RebuildOnly()
