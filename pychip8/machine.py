"""
pychip8.machine - CHIP-8 interpreter core for PyChip8.

The machine owns all of the emulated state and exposes two entry points to
the host: load() to start a session and advance_frame() to run one display
frame worth of instructions.
"""

# Standard library imports
import array
import random

# PyChip8 imports
from pychip8.constants import *
from pychip8.exceptions import OutOfBoundsException, StackOverflowException, StackUnderflowException
from pychip8.font import install_font, glyph_address
from pychip8.framebuffer import Framebuffer
from pychip8.helpers import decode_instruction, decimal_digits
from pychip8.memory import RAM
from pychip8.timer import CountdownTimer

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
NO_KEYS = (False,) * KEY_COUNT

# Classes
class Machine(object):
    def __init__(self, program = b"", shift_quirk = False, cycles_per_frame = DEFAULT_CYCLES_PER_FRAME,
                 rng = None, sound_callback = None):
        if not isinstance(cycles_per_frame, int) or cycles_per_frame < 1:
            raise ValueError("cycles_per_frame must be a positive integer!")

        # Configuration.
        self.shift_quirk = shift_quirk
        self.cycles_per_frame = cycles_per_frame
        self.rng = rng if rng is not None else random.Random()

        # Main memory, font and program.
        self.memory = RAM(MEMORY_SIZE)

        # V0 - VF, VF doubles as the carry/borrow/collision flag.
        self.registers = array.array("B", (0,) * REGISTER_COUNT)
        self.index_register = 0x0000
        self.program_counter = PROGRAM_LOCATION

        # Return addresses for 2nnn/00EE, stack_pointer is the number of entries in use.
        self.stack = array.array("H", (0,) * STACK_DEPTH)
        self.stack_pointer = 0

        self.framebuffer = Framebuffer(SCREEN_WIDTH, SCREEN_HEIGHT)

        self.delay = CountdownTimer()
        self.sound = CountdownTimer(sound_callback)

        # Register index waiting for a key press (Fx0A), None while running normally.
        self.awaiting_key = None

        # Key state snapshot supplied for the current cycle.
        self.key_state = NO_KEYS

        # Address of the instruction currently executing.
        self.instruction_address = PROGRAM_LOCATION

        # Instruction decoding, indexed by the high nibble.
        self.opcode_vector = [
            self.opcode_group_system,   # 0x0nnn
            self.opcode_jp,             # 0x1nnn
            self.opcode_call,           # 0x2nnn
            self.opcode_se_imm,         # 0x3xkk
            self.opcode_sne_imm,        # 0x4xkk
            self.opcode_se_reg,         # 0x5xy0
            self.opcode_ld_imm,         # 0x6xkk
            self.opcode_add_imm,        # 0x7xkk
            self.opcode_group_alu,      # 0x8xyn
            self.opcode_sne_reg,        # 0x9xy0
            self.opcode_ld_i,           # 0xAnnn
            self.opcode_jp_v0,          # 0xBnnn
            self.opcode_rnd,            # 0xCxkk
            self.opcode_drw,            # 0xDxyn
            self.opcode_group_keys,     # 0xExkk
            self.opcode_group_misc,     # 0xFxkk
        ]

        # 0nnn, keyed by nnn.
        self.system_vector_table = {
            0x0E0 : self.opcode_cls,
            0x0EE : self.opcode_ret,
        }

        # 8xyn, keyed by n.
        self.alu_vector_table = {
            0x0 : self.opcode_ld_reg,
            0x1 : self.opcode_or,
            0x2 : self.opcode_and,
            0x3 : self.opcode_xor,
            0x4 : self.opcode_add_reg,
            0x5 : self.opcode_sub,
            0x6 : self.opcode_shr,
            0x7 : self.opcode_subn,
            0xE : self.opcode_shl,
        }

        # Exkk, keyed by kk.
        self.keys_vector_table = {
            0x9E : self.opcode_skp,
            0xA1 : self.opcode_sknp,
        }

        # Fxkk, keyed by kk.
        self.misc_vector_table = {
            0x07 : self.opcode_ld_vx_dt,
            0x0A : self.opcode_ld_vx_key,
            0x15 : self.opcode_ld_dt_vx,
            0x18 : self.opcode_ld_st_vx,
            0x1E : self.opcode_add_i_vx,
            0x29 : self.opcode_ld_f_vx,
            0x33 : self.opcode_ld_b_vx,
            0x55 : self.opcode_ld_mem_vx,
            0x65 : self.opcode_ld_vx_mem,
        }

        self.load(program)

    def __repr__(self):
        return "<%s(pc=0x%03x, I=0x%04x, sp=%d)>" % (
            self.__class__.__name__, self.program_counter, self.index_register, self.stack_pointer,
        )

    # ********** Host interface. **********
    def load(self, program):
        """
        Reset the machine and load a program image at 0x200.

        Raises OutOfBoundsException without touching any state if the image
        does not fit in memory.
        """
        capacity = MEMORY_SIZE - PROGRAM_LOCATION
        if len(program) > capacity:
            log.error("Program of %d bytes does not fit in %d bytes of memory!", len(program), capacity)
            raise OutOfBoundsException(len(program), capacity)

        self.memory.clear()
        install_font(self.memory, FONT_LOCATION)
        self.memory.load(program, PROGRAM_LOCATION)

        for index in range(REGISTER_COUNT):
            self.registers[index] = 0
        self.index_register = 0x0000
        self.program_counter = PROGRAM_LOCATION
        self.instruction_address = PROGRAM_LOCATION

        for index in range(STACK_DEPTH):
            self.stack[index] = 0
        self.stack_pointer = 0

        self.framebuffer.clear()
        self.delay.reset()
        self.sound.reset()
        self.awaiting_key = None
        self.key_state = NO_KEYS

        log.info("Loaded %d byte program at 0x%03x", len(program), PROGRAM_LOCATION)

    def advance_frame(self, key_state):
        """ Run one frame worth of cycles, then count down the delay and sound timers. """
        for _ in range(self.cycles_per_frame):
            self.step(key_state)

        self.delay.clock()
        self.sound.clock()

    def step(self, key_state):
        """
        Run a single cycle.

        While waiting for a key (Fx0A) the cycle only polls key_state and no
        instruction is fetched.
        """
        if len(key_state) != KEY_COUNT:
            raise ValueError("key_state must contain %d entries!" % KEY_COUNT)
        self.key_state = key_state

        if self.awaiting_key is not None:
            self.poll_awaited_key()
            return

        self.instruction_address = self.program_counter
        instruction = decode_instruction(self.read_instruction_word())
        self.opcode_vector[instruction.opcode >> 12](instruction)

    @property
    def delay_timer(self):
        return self.delay.value

    @delay_timer.setter
    def delay_timer(self, value):
        self.delay.value = value

    @property
    def sound_timer(self):
        return self.sound.value

    @sound_timer.setter
    def sound_timer(self, value):
        self.sound.value = value

    @property
    def sound_active(self):
        """ True while the sound timer is non-zero and a tone should be playing. """
        return self.sound.output

    def dump_state(self, level = logging.DEBUG):
        """ Dump all registers to the log. """
        log.log(level, "PC = 0x%03x  I = 0x%04x  SP = %d  DT = %d  ST = %d",
                self.program_counter, self.index_register, self.stack_pointer,
                self.delay.value, self.sound.value)
        for base in (0x0, 0x8):
            log.log(level, "  ".join("V%X = 0x%02x" % (index, self.registers[index]) for index in range(base, base + 8)))
        if self.stack_pointer:
            log.log(level, "Stack: %s", " ".join("%03x" % address for address in self.stack[:self.stack_pointer]))
        if self.awaiting_key is not None:
            log.log(level, "Waiting for a key press into V%X", self.awaiting_key)

    # ********** Cycle helpers. **********
    def read_instruction_word(self):
        """ Read the big endian word at PC and advance PC to the next instruction. """
        pc = self.program_counter
        opcode = (self.memory.mem_read_byte(pc) << 8) | self.memory.mem_read_byte(pc + 1)
        self.program_counter = (pc + 2) & ADDRESS_MASK
        return opcode

    def poll_awaited_key(self):
        """ Store the lowest numbered pressed key, if any, and resume execution. """
        for key, pressed in enumerate(self.key_state):
            if pressed:
                self.registers[self.awaiting_key] = key
                log.debug("Key 0x%x pressed, stored in V%X", key, self.awaiting_key)
                self.awaiting_key = None
                return

    def skip_next_instruction(self):
        self.program_counter = (self.program_counter + 2) & ADDRESS_MASK

    def set_flag(self, value):
        self.registers[FLAG_REGISTER] = value

    def signal_unknown_instruction(self, instruction):
        """ Unknown instructions are ignored. """
        log.debug("Ignoring unknown instruction 0x%04x at 0x%03x", instruction.opcode, self.instruction_address)

    def signal_stack_fault(self, exception_class):
        """ Rewind to the faulting instruction and raise. """
        self.program_counter = self.instruction_address
        log.error("%s at PC 0x%03x with %d entries on the stack!",
                  exception_class.DESCRIPTION, self.instruction_address, self.stack_pointer)
        raise exception_class(self.instruction_address)

    # ********** Group dispatchers. **********
    def opcode_group_system(self, instruction):
        handler = self.system_vector_table.get(instruction.nnn)
        if handler is None:
            self.signal_unknown_instruction(instruction)
        else:
            handler(instruction)

    def opcode_group_alu(self, instruction):
        handler = self.alu_vector_table.get(instruction.n)
        if handler is None:
            self.signal_unknown_instruction(instruction)
        else:
            handler(instruction)

    def opcode_group_keys(self, instruction):
        handler = self.keys_vector_table.get(instruction.kk)
        if handler is None:
            self.signal_unknown_instruction(instruction)
        else:
            handler(instruction)

    def opcode_group_misc(self, instruction):
        handler = self.misc_vector_table.get(instruction.kk)
        if handler is None:
            self.signal_unknown_instruction(instruction)
        else:
            handler(instruction)

    # ********** Flow control opcodes. **********
    def opcode_cls(self, _instruction):
        """ 00E0 - CLS - Clear the display. """
        self.framebuffer.clear()

    def opcode_ret(self, _instruction):
        """ 00EE - RET - Pop the return address into PC. """
        if self.stack_pointer == 0:
            self.signal_stack_fault(StackUnderflowException)

        self.stack_pointer -= 1
        self.program_counter = self.stack[self.stack_pointer]
        log.debug("RET to 0x%03x", self.program_counter)

    def opcode_jp(self, instruction):
        """ 1nnn - JP addr - Jump to nnn. """
        self.program_counter = instruction.nnn

    def opcode_call(self, instruction):
        """ 2nnn - CALL addr - Push the address of the next instruction and jump to nnn. """
        if self.stack_pointer >= STACK_DEPTH:
            self.signal_stack_fault(StackOverflowException)

        self.stack[self.stack_pointer] = self.program_counter
        self.stack_pointer += 1
        self.program_counter = instruction.nnn
        log.debug("CALL 0x%03x from 0x%03x", instruction.nnn, self.instruction_address)

    def opcode_jp_v0(self, instruction):
        """ Bnnn - JP V0, addr - Jump to nnn + V0. """
        self.program_counter = (instruction.nnn + self.registers[0]) & ADDRESS_MASK

    # ********** Conditional skip opcodes. **********
    def opcode_se_imm(self, instruction):
        """ 3xkk - SE Vx, byte - Skip if Vx == kk. """
        if self.registers[instruction.x] == instruction.kk:
            self.skip_next_instruction()

    def opcode_sne_imm(self, instruction):
        """ 4xkk - SNE Vx, byte - Skip if Vx != kk. """
        if self.registers[instruction.x] != instruction.kk:
            self.skip_next_instruction()

    def opcode_se_reg(self, instruction):
        """ 5xy0 - SE Vx, Vy - Skip if Vx == Vy. """
        if instruction.n != 0:
            self.signal_unknown_instruction(instruction)
        elif self.registers[instruction.x] == self.registers[instruction.y]:
            self.skip_next_instruction()

    def opcode_sne_reg(self, instruction):
        """ 9xy0 - SNE Vx, Vy - Skip if Vx != Vy. """
        if instruction.n != 0:
            self.signal_unknown_instruction(instruction)
        elif self.registers[instruction.x] != self.registers[instruction.y]:
            self.skip_next_instruction()

    def opcode_skp(self, instruction):
        """ Ex9E - SKP Vx - Skip if the key in Vx is pressed. """
        if self.key_state[self.registers[instruction.x] & 0x0F]:
            self.skip_next_instruction()

    def opcode_sknp(self, instruction):
        """ ExA1 - SKNP Vx - Skip if the key in Vx is not pressed. """
        if not self.key_state[self.registers[instruction.x] & 0x0F]:
            self.skip_next_instruction()

    # ********** Register load and arithmetic opcodes. **********
    def opcode_ld_imm(self, instruction):
        """ 6xkk - LD Vx, byte. """
        self.registers[instruction.x] = instruction.kk

    def opcode_add_imm(self, instruction):
        """ 7xkk - ADD Vx, byte - Wraps at 8 bits, VF is not touched. """
        self.registers[instruction.x] = (self.registers[instruction.x] + instruction.kk) & 0xFF

    def opcode_ld_reg(self, instruction):
        """ 8xy0 - LD Vx, Vy. """
        self.registers[instruction.x] = self.registers[instruction.y]

    def opcode_or(self, instruction):
        """ 8xy1 - OR Vx, Vy. """
        self.registers[instruction.x] |= self.registers[instruction.y]

    def opcode_and(self, instruction):
        """ 8xy2 - AND Vx, Vy. """
        self.registers[instruction.x] &= self.registers[instruction.y]

    def opcode_xor(self, instruction):
        """ 8xy3 - XOR Vx, Vy. """
        self.registers[instruction.x] ^= self.registers[instruction.y]

    # The flag is written before the result in the following opcodes, so with x == F
    # the result is what remains in VF.
    def opcode_add_reg(self, instruction):
        """ 8xy4 - ADD Vx, Vy - VF = carry. """
        total = self.registers[instruction.x] + self.registers[instruction.y]
        self.set_flag(1 if total > 0xFF else 0)
        self.registers[instruction.x] = total & 0xFF

    def opcode_sub(self, instruction):
        """ 8xy5 - SUB Vx, Vy - VF = NOT borrow (Vx > Vy). """
        vx = self.registers[instruction.x]
        vy = self.registers[instruction.y]
        self.set_flag(1 if vx > vy else 0)
        self.registers[instruction.x] = (vx - vy) & 0xFF

    def opcode_subn(self, instruction):
        """ 8xy7 - SUBN Vx, Vy - Vx = Vy - Vx, VF = NOT borrow (Vy > Vx). """
        vx = self.registers[instruction.x]
        vy = self.registers[instruction.y]
        self.set_flag(1 if vy > vx else 0)
        self.registers[instruction.x] = (vy - vx) & 0xFF

    def shift_operand(self, instruction):
        """ The shift source is Vy, or Vx when the shift quirk is enabled. """
        return self.registers[instruction.x if self.shift_quirk else instruction.y]

    def opcode_shr(self, instruction):
        """ 8xy6 - SHR Vx {, Vy} - VF = bit shifted out. """
        operand = self.shift_operand(instruction)
        self.set_flag(operand & 0x01)
        self.registers[instruction.x] = operand >> 1

    def opcode_shl(self, instruction):
        """ 8xyE - SHL Vx {, Vy} - VF = the masked high bit, 0x80 or 0x00. """
        operand = self.shift_operand(instruction)
        self.set_flag(operand & 0x80)
        self.registers[instruction.x] = (operand << 1) & 0xFF

    def opcode_rnd(self, instruction):
        """ Cxkk - RND Vx, byte - Vx = random byte AND kk. """
        self.registers[instruction.x] = self.rng.randint(0, 0xFF) & instruction.kk

    # ********** Index register and memory opcodes. **********
    def opcode_ld_i(self, instruction):
        """ Annn - LD I, addr. """
        self.index_register = instruction.nnn

    def opcode_add_i_vx(self, instruction):
        """ Fx1E - ADD I, Vx - 16-bit add, memory accesses mask I to 12 bits. """
        self.index_register = (self.index_register + self.registers[instruction.x]) & 0xFFFF

    def opcode_ld_f_vx(self, instruction):
        """ Fx29 - LD F, Vx - Point I at the font sprite for digit Vx. """
        self.index_register = glyph_address(self.registers[instruction.x], FONT_LOCATION)

    def opcode_ld_b_vx(self, instruction):
        """ Fx33 - LD B, Vx - Store the decimal digits of Vx at I, I+1 and I+2. """
        for offset, digit in enumerate(decimal_digits(self.registers[instruction.x])):
            self.memory.mem_write_byte(self.index_register + offset, digit)

    def opcode_ld_mem_vx(self, instruction):
        """ Fx55 - LD [I], Vx - Store V0 through Vx starting at I, I is unchanged. """
        for index in range(instruction.x + 1):
            self.memory.mem_write_byte(self.index_register + index, self.registers[index])

    def opcode_ld_vx_mem(self, instruction):
        """ Fx65 - LD Vx, [I] - Load V0 through Vx starting at I, I is unchanged. """
        for index in range(instruction.x + 1):
            self.registers[index] = self.memory.mem_read_byte(self.index_register + index)

    # ********** Display opcodes. **********
    def opcode_drw(self, instruction):
        """ Dxyn - DRW Vx, Vy, n - XOR an n row sprite from I at (Vx, Vy), VF = collision. """
        rows = [self.memory.mem_read_byte(self.index_register + row) for row in range(instruction.n)]
        collision = self.framebuffer.draw_sprite(self.registers[instruction.x], self.registers[instruction.y], rows)
        self.set_flag(1 if collision else 0)

    # ********** Timer and keyboard opcodes. **********
    def opcode_ld_vx_dt(self, instruction):
        """ Fx07 - LD Vx, DT. """
        self.registers[instruction.x] = self.delay.value

    def opcode_ld_dt_vx(self, instruction):
        """ Fx15 - LD DT, Vx. """
        self.delay.value = self.registers[instruction.x]

    def opcode_ld_st_vx(self, instruction):
        """ Fx18 - LD ST, Vx. """
        self.sound.value = self.registers[instruction.x]

    def opcode_ld_vx_key(self, instruction):
        """ Fx0A - LD Vx, K - Suspend execution until a key is pressed, then store it in Vx. """
        self.awaiting_key = instruction.x
        log.debug("Waiting for a key press into V%X", instruction.x)
