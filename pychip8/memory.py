"""
pychip8.memory - Main memory for PyChip8.
"""

# Standard library imports
import array

# PyChip8 imports
from pychip8.constants import MEMORY_SIZE, ADDRESS_MASK
from pychip8.exceptions import OutOfBoundsException

# Classes
class RAM(object):
    """ 4KB of byte addressable memory, all addresses are wrapped to 12 bits. """
    def __init__(self, size = MEMORY_SIZE):
        self.contents = array.array("B", (0,) * size)
        
    def __repr__(self):
        return "<%s(size=0x%x)>" % (self.__class__.__name__, len(self.contents))
        
    def __len__(self):
        return len(self.contents)
        
    def mem_read_byte(self, address):
        return self.contents[address & ADDRESS_MASK]
        
    def mem_write_byte(self, address, value):
        self.contents[address & ADDRESS_MASK] = value & 0xFF
        
    def get_memory_size(self):
        return len(self.contents)
        
    def clear(self):
        """ Zero the entire contents. """
        for index in range(len(self.contents)):
            self.contents[index] = 0
            
    def load(self, data, offset = 0):
        """ Copy a block of bytes into memory, the block must fit without wrapping. """
        capacity = len(self.contents) - offset
        if len(data) > capacity:
            raise OutOfBoundsException(len(data), capacity)
            
        self.contents[offset:offset + len(data)] = array.array("B", data)
