import unittest

from pychip8.constants import FONT_LOCATION
from pychip8.memory import RAM
from pychip8.font import *

class FontTests(unittest.TestCase):
    def test_table_size(self):
        self.assertEqual(len(FONT_SPRITES), 80)
        
    def test_glyphs_are_four_pixels_wide(self):
        for byte in FONT_SPRITES:
            self.assertEqual(byte & 0x0F, 0)
            
    def test_zero_glyph(self):
        self.assertEqual(FONT_SPRITES[0:5], b"\xF0\x90\x90\x90\xF0")
        
    def test_f_glyph(self):
        self.assertEqual(FONT_SPRITES[75:80], b"\xF0\x80\xF0\x80\x80")
        
    def test_glyph_address(self):
        self.assertEqual(glyph_address(0x0), FONT_LOCATION)
        self.assertEqual(glyph_address(0xA), FONT_LOCATION + 50)
        self.assertEqual(glyph_address(0xF, base = 0x000), 75)
        
    def test_install_font(self):
        ram = RAM()
        install_font(ram)
        for index, byte in enumerate(FONT_SPRITES):
            self.assertEqual(ram.mem_read_byte(FONT_LOCATION + index), byte)
        self.assertEqual(ram.mem_read_byte(FONT_LOCATION - 1), 0)
        self.assertEqual(ram.mem_read_byte(FONT_LOCATION + 80), 0)
