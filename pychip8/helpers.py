"""
pychip8.helpers - A collection of helper functions used throughout PyChip8.
"""

# Standard library imports
from collections import namedtuple

# Constants
Instruction = namedtuple("Instruction", ["opcode", "x", "y", "n", "kk", "nnn"])

# Functions
def word_to_bytes(value):
    """ Convert a word into a tuple of 2 bytes, high byte first. """
    if value < 0 or value > 0xFFFF:
        raise ValueError("value must be in the range [0, 0xFFFF]!")
    return ((value & 0xFF00) >> 8), (value & 0x00FF)
    
def bytes_to_word(data):
    """ Convert a sequence of 2 bytes (high byte first) into a word. """
    if len(data) != 2:
        raise ValueError("data must be a sequence of 2 bytes!")
    return ((data[0] & 0xFF) << 8) | (data[1] & 0xFF)
    
def decode_instruction(opcode):
    """
    Split a 16-bit instruction into its operand fields.
    
    The high nibble selects the instruction group, x and y are the second and
    third nibbles, n is the low nibble, kk the low byte and nnn the low 12 bits.
    """
    return Instruction(
        opcode,
        (opcode & 0x0F00) >> 8,
        (opcode & 0x00F0) >> 4,
        opcode & 0x000F,
        opcode & 0x00FF,
        opcode & 0x0FFF,
    )
    
def decimal_digits(value):
    """ Returns the (hundreds, tens, units) decimal digits of a byte. """
    if value < 0 or value > 0xFF:
        raise ValueError("value must be in the range [0, 0xFF]!")
    return value // 100, (value // 10) % 10, value % 10
