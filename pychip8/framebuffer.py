"""
pychip8.framebuffer - Monochrome 64x32 display memory for PyChip8.
"""

# Standard library imports
import array

# PyChip8 imports
from pychip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT

# Constants
PIXEL_OFF = 0x00
PIXEL_ON = 0xFF

SPRITE_WIDTH = 8

# Classes
class Framebuffer(object):
    """ Grid of lit/unlit pixels, stored one byte per pixel in row-major order. """
    def __init__(self, width = SCREEN_WIDTH, height = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = array.array("B", (0,) * (width * height))
        
        # Flag to indicate the host should redisplay the grid.
        self.needs_draw = True
        
    def __repr__(self):
        return "<%s(%dx%d)>" % (self.__class__.__name__, self.width, self.height)
        
    def get_resolution(self):
        """ Returns a tuple (width, height) of the display size. """
        return self.width, self.height
        
    def get_pixel(self, x, y):
        """ Returns True if the pixel at (x, y) is lit. """
        return self.pixels[(y * self.width) + x] == 1
        
    def is_blank(self):
        return not any(self.pixels)
        
    def clear(self):
        """ Turn every pixel off. """
        for index in range(len(self.pixels)):
            self.pixels[index] = 0
        self.needs_draw = True
        
    def draw_sprite(self, x, y, rows):
        """
        XOR a sprite onto the display and return True if any lit pixel was turned off.
        
        The origin is wrapped to the screen and every pixel of the sprite is
        wrapped again individually, so a sprite crossing an edge reappears on
        the opposite side.
        """
        width = self.width
        height = self.height
        pixels = self.pixels
        collision = False
        
        x = x % width
        y = y % height
        
        for row_index, row in enumerate(rows):
            line = ((y + row_index) % height) * width
            for bit in range(SPRITE_WIDTH):
                if row & (0x80 >> bit):
                    offset = line + ((x + bit) % width)
                    if pixels[offset]:
                        collision = True
                    pixels[offset] ^= 1
                    
        if rows:
            self.needs_draw = True
            
        return collision
        
    def to_bytes(self, on = PIXEL_ON, off = PIXEL_OFF):
        """ Returns the display as one byte per pixel, suitable for an 8-bit texture. """
        return bytes(on if pixel else off for pixel in self.pixels)
        
    def lit_pixels(self):
        """ Yields (x, y) for every lit pixel. """
        width = self.width
        for index, pixel in enumerate(self.pixels):
            if pixel:
                yield index % width, index // width
