"""
pychip8.constants - A collection of constants used throughout PyChip8.
"""

MEMORY_SIZE = 0x1000
ADDRESS_MASK = 0x0FFF

FONT_LOCATION = 0x050
PROGRAM_LOCATION = 0x200

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF

STACK_DEPTH = 16

KEY_COUNT = 16

FRAME_RATE = 60
DEFAULT_CYCLES_PER_FRAME = 8
