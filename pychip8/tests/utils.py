"""
pychip8.tests.utils - Helpers for writing unit tests.
"""

from pychip8.constants import KEY_COUNT
from pychip8.helpers import word_to_bytes
from pychip8.machine import Machine

NO_KEYS = (False,) * KEY_COUNT

def assemble(*words):
    """ Build a program image from a list of 16-bit instructions. """
    data = bytearray()
    for word in words:
        data.extend(word_to_bytes(word))
    return bytes(data)
    
def keys(*pressed):
    """ Build a key state vector with the given keys held down. """
    return tuple(key in pressed for key in range(KEY_COUNT))
    
class FixedRandom(object):
    """ Stands in for random.Random and always returns the same value. """
    def __init__(self, value):
        self.value = value
        self.calls = []
        
    def randint(self, low, high):
        self.calls.append((low, high))
        return self.value
        
class MachineTestable(Machine):
    """ Machine with a helper to run a fixed number of cycles. """
    def __init__(self, *words, **kwargs):
        super(MachineTestable, self).__init__(assemble(*words), **kwargs)
        
    def run(self, count, key_state = NO_KEYS):
        for _ in range(count):
            self.step(key_state)
