"""Flock management: per-tick orchestration over all boids, with a Numba batch kernel."""

import math
import numpy as np
from numba import njit, prange
from typing import Iterable, Optional

from config import boids as config
from .boid import Boid, Candidates
from .neighbors import BruteForceNeighbors, NeighborIndex, SpatialGrid
from .settings import FlockSettings


BACKENDS = ("python", "numba")


# ============================================================================
# NUMBA JIT-COMPILED FLOCKING FUNCTIONS
# ============================================================================

@njit(cache=True)
def steer_components(dx: float, dy: float, vx: float, vy: float,
                     max_speed: float, max_force: float):
    """Full-speed desired velocity minus current velocity, clamped to max_force."""
    mag = math.sqrt(dx * dx + dy * dy)
    if mag > 0:
        dx = (dx / mag) * max_speed
        dy = (dy / mag) * max_speed
    else:
        dx = 0.0
        dy = 0.0

    sx = dx - vx
    sy = dy - vy
    steer_mag = math.sqrt(sx * sx + sy * sy)
    if steer_mag > max_force:
        sx = (sx / steer_mag) * max_force
        sy = (sy / steer_mag) * max_force
    return sx, sy


@njit(parallel=True, cache=True)
def compute_flocking_spatial(
    positions: np.ndarray,
    velocities: np.ndarray,
    sorted_indices: np.ndarray,
    cell_starts: np.ndarray,
    cell_counts: np.ndarray,
    separation_forces: np.ndarray,
    alignment_forces: np.ndarray,
    cohesion_forces: np.ndarray,
    cell_size: float,
    cols: int,
    rows: int,
    neighbor_radius: float,
    separation_radius: float,
    separation_weight: float,
    alignment_weight: float,
    cohesion_weight: float,
    max_speed: float,
    max_force: float,
    num_boids: int
):
    """Numba JIT-compiled flocking over a snapshot of positions and velocities."""
    query_radius = max(neighbor_radius, separation_radius)
    cell_range = int(math.ceil(query_radius / cell_size))

    for i in prange(num_boids):
        px = positions[i, 0]
        py = positions[i, 1]
        vx = velocities[i, 0]
        vy = velocities[i, 1]

        cx = max(0, min(int(px / cell_size), cols - 1))
        cy = max(0, min(int(py / cell_size), rows - 1))

        sep_x, sep_y = 0.0, 0.0
        align_x, align_y = 0.0, 0.0
        coh_x, coh_y = 0.0, 0.0

        sep_count = 0
        neighbor_count = 0

        for dcy in range(-cell_range, cell_range + 1):
            ncy = cy + dcy
            if ncy < 0 or ncy >= rows:
                continue

            for dcx in range(-cell_range, cell_range + 1):
                ncx = cx + dcx
                if ncx < 0 or ncx >= cols:
                    continue

                cell_idx = ncx + ncy * cols
                start = cell_starts[cell_idx]
                if start == -1:
                    continue

                for k in range(cell_counts[cell_idx]):
                    j = sorted_indices[start + k]

                    dx = px - positions[j, 0]
                    dy = py - positions[j, 1]
                    dist = math.sqrt(dx * dx + dy * dy)

                    # Excludes self and coincident boids alike
                    if dist <= 0.0:
                        continue

                    if dist < separation_radius:
                        sep_x += dx / (dist * dist)
                        sep_y += dy / (dist * dist)
                        sep_count += 1

                    if dist < neighbor_radius:
                        align_x += velocities[j, 0]
                        align_y += velocities[j, 1]
                        coh_x += positions[j, 0]
                        coh_y += positions[j, 1]
                        neighbor_count += 1

        separation_forces[i, 0] = 0.0
        separation_forces[i, 1] = 0.0
        alignment_forces[i, 0] = 0.0
        alignment_forces[i, 1] = 0.0
        cohesion_forces[i, 0] = 0.0
        cohesion_forces[i, 1] = 0.0

        if sep_count > 0:
            sep_x /= sep_count
            sep_y /= sep_count
            if math.sqrt(sep_x * sep_x + sep_y * sep_y) > 0:
                sx, sy = steer_components(sep_x, sep_y, vx, vy, max_speed, max_force)
                separation_forces[i, 0] = sx * separation_weight
                separation_forces[i, 1] = sy * separation_weight

        if neighbor_count > 0:
            ax, ay = steer_components(
                align_x / neighbor_count, align_y / neighbor_count,
                vx, vy, max_speed, max_force
            )
            alignment_forces[i, 0] = ax * alignment_weight
            alignment_forces[i, 1] = ay * alignment_weight

            hx, hy = steer_components(
                coh_x / neighbor_count - px, coh_y / neighbor_count - py,
                vx, vy, max_speed, max_force
            )
            cohesion_forces[i, 0] = hx * cohesion_weight
            cohesion_forces[i, 1] = hy * cohesion_weight


# ============================================================================
# FLOCK CLASS
# ============================================================================

class Flock:
    """
    Owns every boid and advances them one tick at a time.

    A tick has snapshot semantics: all steering forces are computed from
    the state at the end of the previous tick, then every boid integrates
    and wraps. The result does not depend on boid order.

    Args:
        settings: Simulation constants (defaults to config.boids)
        seed: Seed for spawning; None draws fresh entropy
        neighbor_index: Candidate search; "brute", "grid" or a NeighborIndex
        backend: "python" runs the Boid methods, "numba" the batch kernel
    """

    def __init__(
        self,
        settings: Optional[FlockSettings] = None,
        seed: Optional[int] = None,
        neighbor_index=None,
        backend: Optional[str] = None,
        boids: Optional[Iterable[Boid]] = None,
    ):
        self.settings = settings if settings is not None else FlockSettings.from_config()
        self.rng = np.random.default_rng(seed)

        backend = backend if backend is not None else config.SIMULATION["backend"]
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend {backend!r}, expected one of {BACKENDS}")
        self.backend = backend
        self.neighbor_index = self._make_index(
            neighbor_index if neighbor_index is not None else config.SIMULATION["neighbors"]
        )

        if boids is None:
            self.boids = [self._spawn() for _ in range(self.settings.count)]
        else:
            self.boids = list(boids)
            for i, boid in enumerate(self.boids):
                if boid.settings != self.settings:
                    raise ValueError(
                        f"Boid {i} carries settings that differ from the flock's; "
                        "a flock runs under a single FlockSettings"
                    )
        self.num_boids = len(self.boids)
        self.tick_count = 0

        # Weighted force arrays, rewritten every tick
        self._sep_forces = np.zeros((self.num_boids, 2), dtype=np.float64)
        self._align_forces = np.zeros((self.num_boids, 2), dtype=np.float64)
        self._coh_forces = np.zeros((self.num_boids, 2), dtype=np.float64)

    @classmethod
    def from_boids(cls, boids: Iterable[Boid], settings: Optional[FlockSettings] = None,
                   neighbor_index=None, backend: Optional[str] = None) -> "Flock":
        """Wrap an explicit list of boids instead of spawning random ones."""
        boids = list(boids)
        if settings is None:
            settings = boids[0].settings if boids else FlockSettings.from_config()
        return cls(settings=settings, neighbor_index=neighbor_index, backend=backend, boids=boids)

    def _make_index(self, kind) -> NeighborIndex:
        if isinstance(kind, NeighborIndex):
            return kind
        if kind == "brute":
            return BruteForceNeighbors()
        if kind == "grid":
            return SpatialGrid(self.settings.width, self.settings.height, self.settings.query_radius)
        raise ValueError(f"Unknown neighbor index {kind!r}, expected 'brute' or 'grid'")

    def _spawn(self) -> Boid:
        """Uniform position inside the world, small random integer velocity."""
        s = self.settings
        position = self.rng.uniform((0.0, 0.0), (s.width, s.height))
        n = s.initial_velocity_range
        velocity = self.rng.integers(-n, n + 1, size=2).astype(np.float64)
        return Boid(position=position, velocity=velocity, settings=s)

    # ------------------------------------------------------------------
    # Renderable state
    # ------------------------------------------------------------------

    @property
    def positions(self) -> np.ndarray:
        return np.array([b.position for b in self.boids], dtype=np.float64).reshape(-1, 2)

    @property
    def velocities(self) -> np.ndarray:
        return np.array([b.velocity for b in self.boids], dtype=np.float64).reshape(-1, 2)

    @property
    def headings(self) -> np.ndarray:
        return np.array([b.heading for b in self.boids], dtype=np.float64)

    def polarization(self) -> float:
        """Length of the mean unit velocity: 1 when all boids fly the same way."""
        velocities = self.velocities
        speeds = np.linalg.norm(velocities, axis=1)
        moving = speeds > 0
        if not moving.any():
            return 0.0
        units = velocities[moving] / speeds[moving][:, None]
        return float(np.linalg.norm(units.mean(axis=0)))

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def _steer_objects(self, positions: np.ndarray):
        """Evaluate the three rules through each Boid's own methods."""
        s = self.settings
        radius = s.query_radius
        velocities = self.velocities
        for i, boid in enumerate(self.boids):
            idx = self.neighbor_index.query(positions[i], radius)
            nearby = Candidates(positions[idx], velocities[idx])
            self._sep_forces[i] = boid.separate(nearby) * s.separation_weight
            self._align_forces[i] = boid.align(nearby) * s.alignment_weight
            self._coh_forces[i] = boid.cohere(nearby) * s.cohesion_weight

    def _steer_numba(self, positions: np.ndarray):
        """Evaluate the three rules for every boid in one compiled pass."""
        s = self.settings
        index = self.neighbor_index
        sorted_indices, cell_starts, cell_counts = index.cells
        compute_flocking_spatial(
            positions,
            self.velocities,
            sorted_indices,
            cell_starts,
            cell_counts,
            self._sep_forces,
            self._align_forces,
            self._coh_forces,
            float(index.cell_size),
            index.cols,
            index.rows,
            float(s.neighbor_radius),
            float(s.separation_radius),
            float(s.separation_weight),
            float(s.alignment_weight),
            float(s.cohesion_weight),
            float(s.max_speed),
            float(s.max_force),
            self.num_boids
        )

    def update(self):
        """Advance every boid by one tick."""
        if self.num_boids == 0:
            self.tick_count += 1
            return

        positions = self.positions
        self.neighbor_index.rebuild(positions)

        if self.backend == "numba":
            if not isinstance(self.neighbor_index, SpatialGrid):
                raise ValueError("The numba backend needs a SpatialGrid-based neighbor index")
            self._steer_numba(positions)
        else:
            self._steer_objects(positions)

        for i, boid in enumerate(self.boids):
            boid.apply_force(self._sep_forces[i])
            boid.apply_force(self._align_forces[i])
            boid.apply_force(self._coh_forces[i])
            boid.integrate()
            boid.apply_boundary()

        self.tick_count += 1

    def run(self, ticks: int):
        """Advance the flock by several ticks."""
        for _ in range(ticks):
            self.update()
