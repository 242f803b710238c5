"""Input handling: the simulation only listens for quit."""

import pygame
from pygame.locals import *


class InputHandler:
    """Turns pygame events into a keep-running flag."""

    quit_keys = (K_ESCAPE, K_q)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        if event.type == QUIT:
            return False
        if event.type == KEYDOWN and event.key in self.quit_keys:
            return False
        return True

    def poll(self) -> bool:
        """Drain the event queue; False once any event asks to quit."""
        running = True
        for event in pygame.event.get():
            if not self.handle_event(event):
                running = False
        return running
