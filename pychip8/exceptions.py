"""
pychip8.exceptions - PyChip8-specific exceptions.
"""

# Classes
class PyChip8Exception(Exception):
    """ Base class for all PyChip8 exceptions. """
    
class OutOfBoundsException(PyChip8Exception):
    """ Exception raised when a program image does not fit in memory. """
    def __init__(self, size, capacity):
        super(OutOfBoundsException, self).__init__()
        self.size = size
        self.capacity = capacity
        
    def __str__(self):
        return "Program of %d bytes exceeds the %d bytes available" % (self.size, self.capacity)
        
class StackException(PyChip8Exception):
    """ Base class for call stack misuse by the guest program. """
    DESCRIPTION = "Stack fault"
    
    def __init__(self, pc):
        super(StackException, self).__init__()
        self.pc = pc
        
    def __str__(self):
        return "%s at PC 0x%03x" % (self.DESCRIPTION, self.pc)
        
class StackOverflowException(StackException):
    """ Exception raised when a call is made with a full stack. """
    DESCRIPTION = "Stack overflow"
    
class StackUnderflowException(StackException):
    """ Exception raised when a return is made with an empty stack. """
    DESCRIPTION = "Stack underflow"
