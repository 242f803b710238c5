"""Neighbor queries: brute-force scan and a uniform spatial grid."""

import math
from abc import ABC, abstractmethod
import numpy as np
from numba import njit, prange


# ============================================================================
# NUMBA JIT-COMPILED SPATIAL GRID FUNCTIONS
# ============================================================================

@njit(cache=True)
def get_cell_index(x: float, y: float, cell_size: float, cols: int, rows: int) -> int:
    """Convert 2D position to 1D cell index."""
    cx = int(x / cell_size)
    cy = int(y / cell_size)

    cx = max(0, min(cx, cols - 1))
    cy = max(0, min(cy, rows - 1))

    return cx + cy * cols


@njit(parallel=True, cache=True)
def assign_cells(
    positions: np.ndarray,
    cell_indices: np.ndarray,
    cell_size: float,
    cols: int,
    rows: int,
    num_boids: int
):
    """Assign each boid to a cell."""
    for i in prange(num_boids):
        cell_indices[i] = get_cell_index(
            positions[i, 0], positions[i, 1], cell_size, cols, rows
        )


@njit(cache=True)
def build_cell_lists(
    cell_indices: np.ndarray,
    sorted_indices: np.ndarray,
    cell_starts: np.ndarray,
    cell_counts: np.ndarray,
    num_boids: int,
    num_cells: int
):
    """Build cell start indices and counts after sorting."""
    for i in range(num_cells):
        cell_starts[i] = -1
        cell_counts[i] = 0

    for i in range(num_boids):
        cell = cell_indices[sorted_indices[i]]
        if cell_starts[cell] == -1:
            cell_starts[cell] = i
        cell_counts[cell] += 1


# ============================================================================
# NEIGHBOR INDEXES
# ============================================================================

class NeighborIndex(ABC):
    """
    Neighbor-query capability used by the flock.

    query() returns a superset of the boids within radius; the strict
    0 < d < radius test stays in the steering rules.
    """

    @abstractmethod
    def rebuild(self, positions: np.ndarray):
        raise NotImplementedError

    @abstractmethod
    def query(self, point: np.ndarray, radius: float) -> np.ndarray:
        raise NotImplementedError


class SpatialGrid(NeighborIndex):
    """
    Uniform grid over the world rectangle.

    Boids are sorted by cell so each cell is a contiguous slice of
    sorted_indices.
    """

    def __init__(self, width: float, height: float, cell_size: float):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = float(cell_size)
        self.cols = int(math.ceil(width / self.cell_size)) + 1
        self.rows = int(math.ceil(height / self.cell_size)) + 1
        self.num_cells = self.cols * self.rows

        self._cell_starts = np.zeros(self.num_cells, dtype=np.int32)
        self._cell_counts = np.zeros(self.num_cells, dtype=np.int32)
        self._cell_indices = None
        self._sorted_indices = None

    def rebuild(self, positions: np.ndarray):
        positions = np.ascontiguousarray(positions, dtype=np.float64)
        num_boids = len(positions)
        self._cell_indices = np.zeros(num_boids, dtype=np.int32)

        assign_cells(
            positions, self._cell_indices,
            self.cell_size, self.cols, self.rows, num_boids
        )

        # Stable sort keeps flock order inside each cell
        self._sorted_indices = np.argsort(self._cell_indices, kind="stable").astype(np.int32)

        build_cell_lists(
            self._cell_indices, self._sorted_indices,
            self._cell_starts, self._cell_counts,
            num_boids, self.num_cells
        )

    def query(self, point: np.ndarray, radius: float) -> np.ndarray:
        if self._sorted_indices is None:
            raise RuntimeError("Neighbor index queried before rebuild()")

        home = get_cell_index(float(point[0]), float(point[1]), self.cell_size, self.cols, self.rows)
        cy, cx = divmod(home, self.cols)
        cell_range = int(math.ceil(radius / self.cell_size))

        chunks = []
        for ncy in range(max(0, cy - cell_range), min(self.rows, cy + cell_range + 1)):
            for ncx in range(max(0, cx - cell_range), min(self.cols, cx + cell_range + 1)):
                cell = ncx + ncy * self.cols
                start = self._cell_starts[cell]
                if start == -1:
                    continue
                chunks.append(self._sorted_indices[start:start + self._cell_counts[cell]])

        if not chunks:
            return np.zeros(0, dtype=np.int32)
        return np.sort(np.concatenate(chunks))

    @property
    def cells(self) -> tuple:
        """(sorted_indices, cell_starts, cell_counts) for the flocking kernel."""
        if self._sorted_indices is None:
            raise RuntimeError("Neighbor index queried before rebuild()")
        return self._sorted_indices, self._cell_starts, self._cell_counts


class BruteForceNeighbors(SpatialGrid):
    """A single cell spanning the world: every boid is a candidate."""

    def __init__(self):
        super().__init__(1.0, 1.0, math.inf)
