"""Individual boid entity with position, velocity, and behaviors."""

import numpy as np
from dataclasses import dataclass, field
from typing import NamedTuple, Sequence

from .settings import FlockSettings
from . import vector


class Candidates(NamedTuple):
    """Positions and velocities of boids that may be neighbors."""
    positions: np.ndarray
    velocities: np.ndarray

    @classmethod
    def from_boids(cls, others: Sequence["Boid"]) -> "Candidates":
        if len(others) == 0:
            empty = np.zeros((0, 2))
            return cls(empty, empty)
        return cls(
            np.array([o.position for o in others], dtype=np.float64),
            np.array([o.velocity for o in others], dtype=np.float64),
        )


class Neighborhood(NamedTuple):
    """Other boids strictly inside a radius, as parallel arrays."""
    offsets: np.ndarray      # self.position - other.position
    distances: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray

    @property
    def count(self) -> int:
        return len(self.distances)


@dataclass
class Boid:
    """
    A single boid (bird-oid object) in the simulation.

    Attributes:
        position: 2D position vector
        velocity: 2D velocity vector
        settings: Shared, immutable simulation constants
        acceleration: 2D acceleration vector (reset each tick)
        heading: Direction of velocity in radians, for rendering only
    """
    position: np.ndarray = field(default_factory=vector.zero)
    velocity: np.ndarray = field(default_factory=vector.zero)
    settings: FlockSettings = field(default_factory=FlockSettings)
    acceleration: np.ndarray = field(default_factory=vector.zero)
    heading: float = 0.0

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)
        self.acceleration = np.array(self.acceleration, dtype=np.float64)
        if vector.magnitude(self.velocity) > 0:
            self.heading = vector.heading(self.velocity)

    def apply_force(self, force: np.ndarray):
        """Add a force to the boid's acceleration."""
        self.acceleration += force

    def neighborhood(self, others, radius: float) -> Neighborhood:
        """
        Collect the boids within radius of this one.

        others is either a sequence of Boids or prebuilt Candidates arrays.
        Self and exactly coincident boids are excluded by the distance > 0
        test, never by identity.
        """
        if not isinstance(others, Candidates):
            others = Candidates.from_boids(others)

        offsets = self.position - others.positions
        distances = np.sqrt(np.sum(offsets * offsets, axis=1))
        mask = (distances > 0) & (distances < radius)
        return Neighborhood(offsets[mask], distances[mask], others.positions[mask], others.velocities[mask])

    def separate(self, others) -> np.ndarray:
        """Steer away from crowding neighbors, weighted by 1/distance."""
        near = self.neighborhood(others, self.settings.separation_radius)
        if near.count == 0:
            return vector.zero()

        # Unit offset scaled by 1/d, i.e. offset / d^2
        away = near.offsets / (near.distances * near.distances)[:, None]
        steer = away.sum(axis=0) / near.count
        if vector.magnitude(steer) == 0:
            return vector.zero()

        return vector.steer_towards(
            steer, self.velocity, self.settings.max_speed, self.settings.max_force
        )

    def align(self, others) -> np.ndarray:
        """Steer towards the average heading of neighbors."""
        near = self.neighborhood(others, self.settings.neighbor_radius)
        if near.count == 0:
            return vector.zero()

        average = near.velocities.sum(axis=0) / near.count
        return vector.steer_towards(
            average, self.velocity, self.settings.max_speed, self.settings.max_force
        )

    def cohere(self, others) -> np.ndarray:
        """Steer towards the centroid of neighbors."""
        near = self.neighborhood(others, self.settings.neighbor_radius)
        if near.count == 0:
            return vector.zero()

        target = near.positions.sum(axis=0) / near.count
        return vector.steer_towards(
            target - self.position, self.velocity,
            self.settings.max_speed, self.settings.max_force
        )

    def integrate(self):
        """Advance one tick: velocity is always rescaled to full speed."""
        self.velocity = vector.normalize(self.velocity + self.acceleration) * self.settings.max_speed
        self.position = self.position + self.velocity

        # Reset acceleration for next tick
        self.acceleration = vector.zero()

        # A stalled boid keeps its last heading
        if vector.magnitude(self.velocity) > 0:
            self.heading = vector.heading(self.velocity)

    def apply_boundary(self):
        """
        Wrap the position back into [0, width) x [0, height).

        Past the far edge snaps to exactly 0 (no modulo); below 0 snaps to
        the largest float under the bound.
        """
        bounds = (self.settings.width, self.settings.height)
        for axis, upper in enumerate(bounds):
            if self.position[axis] >= upper:
                self.position[axis] = 0.0
            elif self.position[axis] < 0:
                self.position[axis] = np.nextafter(upper, 0.0)
