import copy
import dataclasses

import numpy as np
import pytest

from boids import Boid, Flock, FlockSettings, SpatialGrid


@pytest.fixture
def dense_settings():
    # Small world so most boids have neighbors
    return FlockSettings(count=60, width=200.0, height=150.0)


def test_spawn_within_bounds_with_integer_velocities(settings):
    flock = Flock(settings, seed=11, backend="python")
    positions = flock.positions
    velocities = flock.velocities

    assert positions.shape == (settings.count, 2)
    assert (positions[:, 0] >= 0).all() and (positions[:, 0] < settings.width).all()
    assert (positions[:, 1] >= 0).all() and (positions[:, 1] < settings.height).all()
    assert np.array_equal(velocities, np.round(velocities))
    assert np.abs(velocities).max() <= settings.initial_velocity_range


def test_same_seed_same_flock(settings):
    a = Flock(settings, seed=5, backend="python")
    b = Flock(settings, seed=5, backend="python")
    assert np.array_equal(a.positions, b.positions)
    assert np.array_equal(a.velocities, b.velocities)


def test_unknown_backend_rejected(settings):
    with pytest.raises(ValueError):
        Flock(settings, backend="cuda")


def test_unknown_neighbor_index_rejected(settings):
    with pytest.raises(ValueError):
        Flock(settings, neighbor_index="kdtree")


def test_grid_index_uses_query_radius(settings):
    flock = Flock(settings, seed=0, neighbor_index="grid", backend="python")
    assert isinstance(flock.neighbor_index, SpatialGrid)
    assert flock.neighbor_index.cell_size == settings.query_radius


@pytest.mark.parametrize("backend", ["python", "numba"])
def test_tick_invariants(dense_settings, backend):
    flock = Flock(dense_settings, seed=2, backend=backend)
    moving = np.linalg.norm(flock.velocities, axis=1) > 0

    flock.run(5)

    s = dense_settings
    positions = flock.positions
    assert (positions[:, 0] >= 0).all() and (positions[:, 0] < s.width).all()
    assert (positions[:, 1] >= 0).all() and (positions[:, 1] < s.height).all()

    speeds = np.linalg.norm(flock.velocities, axis=1)
    np.testing.assert_allclose(speeds[moving], s.max_speed)
    assert all(np.array_equal(b.acceleration, np.zeros(2)) for b in flock.boids)
    assert flock.tick_count == 5


def test_single_isolated_boid_keeps_direction(settings):
    boid = Boid(position=np.array([600.0, 400.0]), velocity=np.array([0.0, -1.0]), settings=settings)
    flock = Flock.from_boids([boid], backend="python")

    flock.update()

    np.testing.assert_allclose(boid.velocity, [0.0, -settings.max_speed])
    np.testing.assert_allclose(boid.position, [600.0, 400.0 - settings.max_speed])
    assert flock.headings[0] == pytest.approx(-np.pi / 2)


def test_snapshot_update_is_order_independent(dense_settings):
    forward = Flock(dense_settings, seed=7, backend="python")
    reverse = Flock.from_boids(copy.deepcopy(forward.boids[::-1]), dense_settings, backend="python")

    forward.update()
    reverse.update()

    np.testing.assert_allclose(forward.positions, reverse.positions[::-1], atol=1e-9)
    np.testing.assert_allclose(forward.velocities, reverse.velocities[::-1], atol=1e-9)


def test_two_boids_see_each_other_before_either_moves(settings):
    a = Boid(position=np.array([100.0, 100.0]), velocity=np.array([1.0, 0.0]), settings=settings)
    b = Boid(position=np.array([105.0, 100.0]), velocity=np.array([-1.0, 0.0]), settings=settings)
    expected_b = b.separate([a, b]) * settings.separation_weight \
        + b.align([a, b]) * settings.alignment_weight \
        + b.cohere([a, b]) * settings.cohesion_weight

    flock = Flock.from_boids([a, b], backend="python")
    flock.update()

    start_velocity = np.array([-1.0, 0.0])
    np.testing.assert_allclose(
        b.velocity,
        (start_velocity + expected_b) / np.linalg.norm(start_velocity + expected_b) * settings.max_speed,
    )


def test_numba_backend_matches_boid_methods(dense_settings):
    python = Flock(dense_settings, seed=4, backend="python")
    numba = Flock.from_boids(copy.deepcopy(python.boids), dense_settings, backend="numba")

    for _ in range(3):
        python.update()
        numba.update()

    np.testing.assert_allclose(numba.positions, python.positions, atol=1e-8)
    np.testing.assert_allclose(numba.velocities, python.velocities, atol=1e-8)


@pytest.mark.parametrize("backend", ["python", "numba"])
def test_grid_matches_brute_force(dense_settings, backend):
    brute = Flock(dense_settings, seed=9, neighbor_index="brute", backend=backend)
    grid = Flock.from_boids(copy.deepcopy(brute.boids), dense_settings,
                            neighbor_index="grid", backend=backend)

    for _ in range(3):
        brute.update()
        grid.update()

    np.testing.assert_allclose(grid.positions, brute.positions, atol=1e-8)


def test_polarization(settings):
    aligned = [
        Boid(position=np.array([x, 10.0]), velocity=np.array([2.0, 0.0]), settings=settings)
        for x in (10.0, 300.0, 900.0)
    ]
    assert Flock.from_boids(aligned, backend="python").polarization() == pytest.approx(1.0)

    opposed = [
        Boid(position=np.array([10.0, 10.0]), velocity=np.array([1.0, 0.0]), settings=settings),
        Boid(position=np.array([900.0, 10.0]), velocity=np.array([-1.0, 0.0]), settings=settings),
    ]
    assert Flock.from_boids(opposed, backend="python").polarization() == pytest.approx(0.0)


def test_empty_flock_ticks(settings):
    flock = Flock.from_boids([], settings, backend="python")
    flock.update()
    assert flock.tick_count == 1
    assert flock.positions.shape == (0, 2)


@pytest.mark.parametrize("backend", ["python", "numba"])
def test_boids_must_share_the_flock_settings(settings, backend):
    boid = Boid(position=np.array([10.0, 10.0]), velocity=np.array([1.0, 0.0]), settings=settings)
    faster = dataclasses.replace(settings, max_speed=9.0)

    with pytest.raises(ValueError):
        Flock.from_boids([boid], faster, backend=backend)


def test_matching_settings_are_accepted(settings):
    boid = Boid(position=np.array([10.0, 10.0]), velocity=np.array([1.0, 0.0]),
                settings=dataclasses.replace(settings))
    flock = Flock.from_boids([boid], settings, backend="numba")
    flock.update()
    assert np.linalg.norm(boid.velocity) == pytest.approx(settings.max_speed)
