"""HUD text drawn with pygame fonts into the OpenGL framebuffer."""

import pygame
from OpenGL.GL import *


class TextRenderer:
    """
    Blits pygame-rendered text lines onto the GL frame.

    Assumes the y-down orthographic projection set up by the application,
    so (x, y) is the top-left corner of the first line in window pixels.
    """

    def __init__(self, font_name: str = "monospace", font_size: int = 16,
                 color: tuple = (40, 40, 40), line_spacing: int = 4):
        pygame.font.init()
        self.font = pygame.font.SysFont(font_name, font_size)
        self.color = color
        self.line_spacing = line_spacing

    def draw_lines(self, lines, x: int, y: int):
        """Draw each string in lines below the previous one."""
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)

        for text in lines:
            surface = self.font.render(text, True, self.color)
            w, h = surface.get_size()
            # Rows come out bottom-first, so the raster origin is the bottom-left
            pixels = pygame.image.tostring(surface, "RGBA", True)
            glRasterPos2f(x, y + h)
            glDrawPixels(w, h, GL_RGBA, GL_UNSIGNED_BYTE, pixels)
            y += h + self.line_spacing

        glDisable(GL_BLEND)
