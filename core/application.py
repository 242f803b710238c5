"""Main application class that ties everything together."""

import pygame
from pygame.locals import *
from OpenGL.GL import *

from config import boids as config
from .input_handler import InputHandler
from rendering import FlockRenderer, TextRenderer
from boids import Flock


class Application:
    """Main application managing the frame loop and rendering."""

    def __init__(self, flock: Flock):
        self.flock = flock
        self.width = int(flock.settings.width)
        self.height = int(flock.settings.height)

        pygame.init()
        pygame.display.set_mode((self.width, self.height), DOUBLEBUF | OPENGL)
        pygame.display.set_caption(config.WINDOW["title"])

        self.input_handler = InputHandler()
        self.flock_renderer = FlockRenderer(flock.num_boids)
        self.text_renderer = TextRenderer(color=config.COLORS["text"])

        # State
        self.clock = pygame.time.Clock()
        self.target_fps = config.WINDOW["fps"]
        self.running = True
        self.fps = 0

        self._setup_gl()
        print(f"[Boids] {flock.num_boids} boids, {self.width}x{self.height}, "
              f"backend={flock.backend}")

    def _setup_gl(self):
        """Orthographic projection in window pixels, y pointing down."""
        glClearColor(*config.COLORS["background"])
        glDisable(GL_DEPTH_TEST)

        glViewport(0, 0, self.width, self.height)
        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        glOrtho(0, self.width, self.height, 0, -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()

    def _render(self):
        """Render the scene."""
        glClear(GL_COLOR_BUFFER_BIT)

        self.flock_renderer.draw(self.flock.positions, self.flock.headings)

        self.text_renderer.draw_lines(
            [
                f"Boids: {self.flock.num_boids}  |  FPS: {self.fps:.0f}",
                f"Tick: {self.flock.tick_count}  |  Polarization: {self.flock.polarization():.2f}",
            ],
            10, 10
        )

        pygame.display.flip()

    def run(self):
        """Main application loop: one simulation tick per frame."""
        while self.running:
            self.clock.tick(self.target_fps)
            self.fps = self.clock.get_fps()

            self.running = self.input_handler.poll()
            self.flock.update()
            self._render()

        print(f"[Boids] Stopped after {self.flock.tick_count} ticks")
        pygame.quit()
