#!/usr/bin/env python

"""
pychip8 - Main application for running a CHIP-8 program.
"""

# Standard library imports
import os
import sys
from optparse import OptionParser

# PyChip8 imports
from pychip8.constants import DEFAULT_CYCLES_PER_FRAME
from pychip8.exceptions import PyChip8Exception
from pychip8.machine import Machine
from pychip8.ui import PygameManager, MONO_PALETTES, DEFAULT_SCALE

# Logging setup
import logging
log = logging.getLogger("pychip8")

# Functions
def parse_cmdline(argv = None):
    """ Parse the command line arguments. """
    parser = OptionParser(usage = "%prog [options] PROGRAM")
    parser.add_option("--debug", action = "store_true", dest = "debug",
                      help = "Enable DEBUG log level.")
    parser.add_option("--shift-quirk", action = "store_true", dest = "shift_quirk", default = False,
                      help = "Shift Vx in place for 8xy6/8xyE instead of shifting Vy into Vx.")
    parser.add_option("--cycles-per-frame", action = "store", type = "int", dest = "cycles_per_frame",
                      default = DEFAULT_CYCLES_PER_FRAME,
                      help = "Instructions executed per 60Hz frame, default: %d." % DEFAULT_CYCLES_PER_FRAME)
    parser.add_option("--scale", action = "store", type = "int", dest = "scale", default = DEFAULT_SCALE,
                      help = "Window pixels per display pixel, default: %d." % DEFAULT_SCALE)
    parser.add_option("--palette", action = "store", type = "choice", dest = "palette", default = "white",
                      choices = sorted(MONO_PALETTES),
                      help = "Display colors: %s, default: white." % ", ".join(sorted(MONO_PALETTES)))
    parser.add_option("--log-file", action = "store", dest = "log_file",
                      help = "File to output debugging log.")
    parser.add_option("--log-filter", action = "store", dest = "log_filter",
                      help = "Log filter to apply to stderr handler.")

    options, args = parser.parse_args(argv)
    if len(args) != 1:
        parser.error("exactly one PROGRAM file is required")
    if options.cycles_per_frame < 1:
        parser.error("--cycles-per-frame must be at least 1")
    if options.scale < 1:
        parser.error("--scale must be at least 1")

    return options, args

def setup_logging(options):
    """ Configure the root logger from the command line options. """
    log_level = logging.DEBUG if options.debug else logging.INFO
    log_formatter = logging.Formatter("%(asctime)s.%(msecs)03d %(name)s(%(levelname)s): %(message)s", "%m/%d %H:%M:%S")
    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(log_formatter)
    if options.log_filter:
        stderr_handler.addFilter(logging.Filter(options.log_filter))
    root_logger = logging.root
    root_logger.setLevel(log_level)
    root_logger.addHandler(stderr_handler)

    if options.log_file:
        file_handler = logging.FileHandler(options.log_file)
        file_handler.setFormatter(log_formatter)
        log.addHandler(file_handler)

def read_program(filename):
    """ Read a program image from disk. """
    with open(filename, "rb") as fileptr:
        return fileptr.read()

def sound_changed(active):
    """ Audio is not emulated, just note when the tone would start and stop. """
    log.debug("Sound %s", "on" if active else "off")

def main(argv = None):
    """ Main application that runs the PyChip8 machine. """
    options, args = parse_cmdline(argv)
    setup_logging(options)

    log.info("PyChip8 starting with %s", args[0])

    try:
        program = read_program(args[0])
        machine = Machine(
            program,
            shift_quirk = options.shift_quirk,
            cycles_per_frame = options.cycles_per_frame,
            sound_callback = sound_changed,
        )
    except (IOError, PyChip8Exception) as error:
        log.error("Unable to load %s: %s", args[0], error)
        return 1

    pygame_manager = PygameManager(machine, options.scale, MONO_PALETTES[options.palette])

    try:
        pygame_manager.run()
    except Exception:
        machine.dump_state(logging.ERROR)
        log.exception("Unhandled exception at PC 0x%03x", machine.program_counter)
        return 1

    return 0

if __name__ == "__main__":
    if os.environ.get("PYCHIP8_PROFILING"):
        import cProfile
        cProfile.run("main()", sort = "time")
    else:
        sys.exit(main())
