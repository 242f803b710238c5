"""Zero-safe 2D vector helpers on numpy arrays."""

import math
import numpy as np


def zero() -> np.ndarray:
    return np.zeros(2, dtype=np.float64)


def magnitude(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along v. The zero vector normalizes to the zero vector."""
    mag = magnitude(v)
    if mag == 0:
        return zero()
    return v / mag


def limit(v: np.ndarray, max_magnitude: float) -> np.ndarray:
    """Scale v down to max_magnitude if it is longer; direction is kept."""
    mag = magnitude(v)
    if mag > max_magnitude:
        return (v / mag) * max_magnitude
    return np.array(v, dtype=np.float64)


def steer_towards(desired: np.ndarray, velocity: np.ndarray,
                  max_speed: float, max_force: float) -> np.ndarray:
    """Reynolds steering: full-speed desired velocity minus current, clamped."""
    steer = normalize(desired) * max_speed - velocity
    return limit(steer, max_force)


def heading(v: np.ndarray) -> float:
    """Direction of v in radians."""
    return math.atan2(v[1], v[0])
