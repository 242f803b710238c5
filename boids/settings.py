"""Immutable flock settings built from the config module."""

from dataclasses import dataclass, fields, replace

from config import boids as config


@dataclass(frozen=True)
class FlockSettings:
    """
    Tunable constants for one simulation.

    Attributes:
        count: Number of boids spawned by the flock
        width: World width; x stays in [0, width)
        height: World height; y stays in [0, height)
        max_speed: Speed every boid is renormalized to after integration
        max_force: Magnitude clamp for each steering rule
        neighbor_radius: Alignment and cohesion range
        separation_radius: Crowding range
        separation_weight: Scale applied to the separation force
        alignment_weight: Scale applied to the alignment force
        cohesion_weight: Scale applied to the cohesion force
        initial_velocity_range: Initial velocity components are integers in [-n, n]
    """
    count: int = 1000
    width: float = 1200.0
    height: float = 800.0
    max_speed: float = 2.5
    max_force: float = 0.1
    neighbor_radius: float = 100.0
    separation_radius: float = 20.0
    separation_weight: float = 0.2
    alignment_weight: float = 0.1
    cohesion_weight: float = 0.5
    initial_velocity_range: int = 2

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "initial_velocity_range":
                if value < 0:
                    raise ValueError(f"{f.name} must be non-negative, got {value}")
            elif value <= 0:
                raise ValueError(f"{f.name} must be positive, got {value}")

    @property
    def query_radius(self) -> float:
        """Radius that covers every rule's neighborhood."""
        return max(self.neighbor_radius, self.separation_radius)

    @classmethod
    def from_config(cls, **overrides) -> "FlockSettings":
        """Build settings from config.boids, then apply keyword overrides."""
        settings = cls(
            count=int(config.BOIDS["count"]),
            width=float(config.WINDOW["width"]),
            height=float(config.WINDOW["height"]),
            max_speed=float(config.BOIDS["max_speed"]),
            max_force=float(config.BOIDS["max_force"]),
            neighbor_radius=float(config.BOIDS["neighbor_radius"]),
            separation_radius=float(config.BOIDS["separation_radius"]),
            separation_weight=float(config.BOIDS["separation_weight"]),
            alignment_weight=float(config.BOIDS["alignment_weight"]),
            cohesion_weight=float(config.BOIDS["cohesion_weight"]),
            initial_velocity_range=int(config.BOIDS["initial_velocity_range"]),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(settings, **overrides) if overrides else settings
