"""2D boids flocking core."""

from .settings import FlockSettings
from .boid import Boid, Candidates
from .neighbors import BruteForceNeighbors, NeighborIndex, SpatialGrid
from .flock import Flock

__all__ = ["FlockSettings", "Boid", "Candidates", "BruteForceNeighbors", "NeighborIndex", "SpatialGrid", "Flock"]
