"""
pychip8.timer - Delay and sound countdown timers for PyChip8.
"""

# Classes
class CountdownTimer(object):
    """
    An 8-bit counter that counts down once per clock until it reaches zero.
    
    The output is active while the counter is non-zero, the optional callback
    is called with the new output state whenever it changes.
    """
    def __init__(self, output_changed_callback = None):
        self.output_changed_callback = output_changed_callback
        self.__value = 0
        self.__output = False
        
    def __repr__(self):
        return "<%s(value=%d)>" % (self.__class__.__name__, self.__value)
        
    @property
    def value(self):
        """ Returns the current count. """
        return self.__value
        
    @value.setter
    def value(self, value):
        """ Loads the counter, only the low 8 bits are kept. """
        self.__value = value & 0xFF
        self.output = self.__value > 0
        
    @property
    def output(self):
        """ Returns True while the counter is running. """
        return self.__output
        
    @output.setter
    def output(self, value):
        """ Sets the output state and calls the callback. """
        if self.__output != value:
            self.__output = value
            if callable(self.output_changed_callback):
                self.output_changed_callback(self.__output)
                
    def clock(self):
        """ Count down by one, stopping at zero. """
        if self.__value > 0:
            self.value = self.__value - 1
            
    def reset(self):
        self.value = 0
