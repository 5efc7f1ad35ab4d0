"""
pychip8.font - Built-in hexadecimal digit sprites.

Each glyph is 4 pixels wide (stored in the high nibble) and 5 rows tall.
"""

# PyChip8 imports
from pychip8.constants import FONT_LOCATION

# Constants
GLYPH_HEIGHT = 5

FONT_SPRITES = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0, # 0
    0x20, 0x60, 0x20, 0x20, 0x70, # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0, # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0, # 3
    0x90, 0x90, 0xF0, 0x10, 0x10, # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0, # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0, # 6
    0xF0, 0x10, 0x20, 0x40, 0x40, # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0, # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0, # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90, # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0, # B
    0xF0, 0x80, 0x80, 0x80, 0xF0, # C
    0xE0, 0x90, 0x90, 0x90, 0xE0, # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0, # E
    0xF0, 0x80, 0xF0, 0x80, 0x80, # F
))

assert len(FONT_SPRITES) == 16 * GLYPH_HEIGHT

# Functions
def glyph_address(value, base = FONT_LOCATION):
    """ Address of the sprite for a digit, value is not limited to a single nibble. """
    return base + (value * GLYPH_HEIGHT)
    
def install_font(ram, base = FONT_LOCATION):
    """ Copy the font table into RAM at the given base address. """
    ram.load(FONT_SPRITES, base)
