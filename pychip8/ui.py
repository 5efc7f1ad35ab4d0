#!/usr/bin/env python

"""
pychip8.ui - Pygame wrapper for PyChip8.
"""

# Standard library imports
import sys
from collections import namedtuple

# PyGame Imports
import pygame
from pygame.locals import *

# PyChip8 imports
from pychip8.constants import KEY_COUNT, FRAME_RATE

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
DEFAULT_SCALE = 6

MonoPalette = namedtuple("MonoPalette", ["off", "on"])
PALETTE_WHITE = MonoPalette((0x00, 0x00, 0x00), (0xFF, 0xFF, 0xFF))
PALETTE_GREEN = MonoPalette((0x00, 0x00, 0x00), (0x55, 0xFF, 0x55))
PALETTE_AMBER = MonoPalette((0x28, 0x28, 0x28), (0xFF, 0xB0, 0x00))
MONO_PALETTES = {
    "white" : PALETTE_WHITE,
    "green" : PALETTE_GREEN,
    "amber" : PALETTE_AMBER,
}

# The 4x4 hex keypad laid out on the left side of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  <=  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
PYGAME_KEY_TO_KEYPAD = {
    # Pylint cannot infer the constants from Pygame.
    # pylint: disable=undefined-variable
    K_1 : 0x1, K_2 : 0x2, K_3 : 0x3, K_4 : 0xC,
    K_q : 0x4, K_w : 0x5, K_e : 0x6, K_r : 0xD,
    K_a : 0x7, K_s : 0x8, K_d : 0x9, K_f : 0xE,
    K_z : 0xA, K_x : 0x0, K_c : 0xB, K_v : 0xF,
    # pylint: enable=undefined-variable
}

assert len(PYGAME_KEY_TO_KEYPAD) == KEY_COUNT

# Classes
class KeypadState(object):
    """ Tracks the 16 keypad keys from key down/up events. """
    def __init__(self):
        self.pressed = [False] * KEY_COUNT

    def key_event(self, pygame_key, down):
        """ Update the state from a Pygame key, returns True if the key is on the keypad. """
        key = PYGAME_KEY_TO_KEYPAD.get(pygame_key, None)
        if key is None:
            return False

        self.pressed[key] = down
        return True

    def snapshot(self):
        """ Returns an immutable copy of the current state for one frame. """
        return tuple(self.pressed)

class PygameManager(object):
    """ Manages interactions with the Pygame UI for PyChip8. """
    def __init__(self, machine, scale = DEFAULT_SCALE, palette = PALETTE_WHITE):
        self.machine = machine
        self.scale = scale
        self.palette = palette
        self.keypad = KeypadState()
        self.clock = None
        self.screen = None

    def reset(self):
        pygame.init()
        width, height = self.machine.framebuffer.get_resolution()
        self.screen = pygame.display.set_mode((width * self.scale, height * self.scale))
        pygame.display.set_caption("PyChip8")
        self.clock = pygame.time.Clock()
        self.machine.framebuffer.needs_draw = True

    def poll(self):
        """ Run one iteration of the Pygame machine. """
        for event in pygame.event.get():
            if event.type == QUIT:
                log.critical("Pygame QUIT detected, powering down...")
                sys.exit()

            elif event.type == KEYDOWN:
                if event.key == K_ESCAPE:
                    log.critical("Escape pressed, powering down...")
                    sys.exit()
                self.keypad.key_event(event.key, True)

            elif event.type == KEYUP:
                self.keypad.key_event(event.key, False)

        return self.keypad.snapshot()

    def draw(self):
        """ Update the "physical" display if necessary. """
        framebuffer = self.machine.framebuffer
        if not framebuffer.needs_draw:
            return

        scale = self.scale
        self.screen.fill(self.palette.off)
        for x, y in framebuffer.lit_pixels():
            self.screen.fill(self.palette.on, (x * scale, y * scale, scale, scale))

        pygame.display.flip()
        framebuffer.needs_draw = False

    def run(self):
        """ Run the machine at the fixed frame rate until the window is closed. """
        self.reset()

        while True:
            key_state = self.poll()
            self.machine.advance_frame(key_state)
            self.draw()
            self.clock.tick(FRAME_RATE)
