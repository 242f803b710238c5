"""Flock rendering: two triangles per boid, built with Numba and drawn from VBOs."""

import math
import numpy as np
from numba import njit, prange
from OpenGL.GL import *
from OpenGL.arrays import vbo

from config import boids as config


@njit(parallel=True, cache=True)
def build_vertices_numba(
    positions: np.ndarray,
    headings: np.ndarray,
    vertices: np.ndarray,
    nose_length: float,
    wing_length: float,
    num_boids: int
):
    """Numba JIT-compiled vertex building."""
    wing_angle = math.pi / 3.0

    for i in prange(num_boids):
        px = positions[i, 0]
        py = positions[i, 1]
        h = headings[i]

        nose_x = px + math.cos(h) * nose_length
        nose_y = py + math.sin(h) * nose_length
        left_x = px + math.cos(h + wing_angle) * wing_length
        left_y = py + math.sin(h + wing_angle) * wing_length
        right_x = px + math.cos(h - wing_angle) * wing_length
        right_y = py + math.sin(h - wing_angle) * wing_length

        base = i * 6

        # Triangle 1: body, nose, left wing
        vertices[base, 0] = px
        vertices[base, 1] = py
        vertices[base + 1, 0] = nose_x
        vertices[base + 1, 1] = nose_y
        vertices[base + 2, 0] = left_x
        vertices[base + 2, 1] = left_y

        # Triangle 2: body, nose, right wing
        vertices[base + 3, 0] = px
        vertices[base + 3, 1] = py
        vertices[base + 4, 0] = nose_x
        vertices[base + 4, 1] = nose_y
        vertices[base + 5, 0] = right_x
        vertices[base + 5, 1] = right_y


class FlockRenderer:
    """Draws a flock from its positions and headings."""

    verts_per_boid = 6

    def __init__(self, num_boids: int):
        self.num_boids = num_boids
        self.nose_length = float(config.BOIDS["size"])
        self.wing_length = float(config.BOIDS["size"]) * 0.6
        self.color = config.COLORS["boid"]

        self._vertices = np.zeros((num_boids * self.verts_per_boid, 2), dtype=np.float32)
        self._vbo_vertices = None
        self._vbo_initialized = False
        self._vbo_failed = False

    def _init_vbo(self):
        """Initialize the VBO for fast GPU rendering."""
        if self._vbo_initialized or self._vbo_failed:
            return

        try:
            self._vbo_vertices = vbo.VBO(self._vertices, usage=GL_DYNAMIC_DRAW)
            self._vbo_initialized = True
        except Exception as e:
            print(f"[Render] VBO unavailable, using client arrays: {e}")
            self._vbo_failed = True

    def draw(self, positions: np.ndarray, headings: np.ndarray):
        """Render every boid as a pair of triangles."""
        if not self._vbo_initialized:
            self._init_vbo()

        if self.num_boids == 0:
            return

        build_vertices_numba(
            np.ascontiguousarray(positions, dtype=np.float64),
            np.ascontiguousarray(headings, dtype=np.float64),
            self._vertices,
            self.nose_length,
            self.wing_length,
            self.num_boids
        )
        total_verts = self.num_boids * self.verts_per_boid

        glColor3f(*self.color)

        if self._vbo_initialized and self._vbo_vertices is not None:
            # VBO rendering path (faster)
            self._vbo_vertices.set_array(self._vertices)
            self._vbo_vertices.bind()
            glEnableClientState(GL_VERTEX_ARRAY)
            glVertexPointer(2, GL_FLOAT, 0, None)

            glDrawArrays(GL_TRIANGLES, 0, total_verts)

            self._vbo_vertices.unbind()
            glDisableClientState(GL_VERTEX_ARRAY)
        else:
            # Fallback to client-side arrays
            glEnableClientState(GL_VERTEX_ARRAY)
            glVertexPointer(2, GL_FLOAT, 0, self._vertices)
            glDrawArrays(GL_TRIANGLES, 0, total_verts)
            glDisableClientState(GL_VERTEX_ARRAY)
