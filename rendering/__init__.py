"""Rendering components for the 2D boids simulation."""

from .flock_renderer import FlockRenderer
from .text import TextRenderer

__all__ = ["FlockRenderer", "TextRenderer"]
