# CHIP-8 / SUPER-CHIP machine state
# https://chip-8.github.io/extensions/#super-chip-with-fixes
#
# the Machine is plain data: the interpreter in cpu.py is the only thing
# supposed to mutate it, the front end only reads it


from .display import Display
from .keywait import RUNNING


# ******************** STATIC SECTION
C8_FONTS = (0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80)  # F

# 8x10 glyphs used by Fx30, digits from SUPER-CHIP 1.1, letters from Octo
SCHIP_FONTS = (0x3C, 0x7E, 0xE7, 0xC3, 0xC3, 0xC3, 0xC3, 0xE7, 0x7E, 0x3C,  # 0
               0x18, 0x38, 0x58, 0x18, 0x18, 0x18, 0x18, 0x18, 0x18, 0x3C,  # 1
               0x3E, 0x7F, 0xC3, 0x06, 0x0C, 0x18, 0x30, 0x60, 0xFF, 0xFF,  # 2
               0x3C, 0x7E, 0xC3, 0x03, 0x0E, 0x0E, 0x03, 0xC3, 0x7E, 0x3C,  # 3
               0x06, 0x0E, 0x1E, 0x36, 0x66, 0xC6, 0xFF, 0xFF, 0x06, 0x06,  # 4
               0xFF, 0xFF, 0xC0, 0xC0, 0xFC, 0xFE, 0x03, 0xC3, 0x7E, 0x3C,  # 5
               0x3E, 0x7C, 0xC0, 0xC0, 0xFC, 0xFE, 0xC3, 0xC3, 0x7E, 0x3C,  # 6
               0xFF, 0xFF, 0x03, 0x06, 0x0C, 0x18, 0x30, 0x60, 0x60, 0x60,  # 7
               0x3C, 0x7E, 0xC3, 0xC3, 0x7E, 0x7E, 0xC3, 0xC3, 0x7E, 0x3C,  # 8
               0x3C, 0x7E, 0xC3, 0xC3, 0x7F, 0x3F, 0x03, 0x03, 0x3E, 0x7C,  # 9
               0x7E, 0xFF, 0xC3, 0xC3, 0xC3, 0xFF, 0xFF, 0xC3, 0xC3, 0xC3,  # A
               0xFC, 0xFC, 0xC3, 0xC3, 0xFC, 0xFC, 0xC3, 0xC3, 0xFC, 0xFC,  # B
               0x3C, 0xFF, 0xC3, 0xC0, 0xC0, 0xC0, 0xC0, 0xC3, 0xFF, 0x3C,  # C
               0xFC, 0xFE, 0xC3, 0xC3, 0xC3, 0xC3, 0xC3, 0xC3, 0xFE, 0xFC,  # D
               0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF,  # E
               0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF, 0xC0, 0xC0, 0xC0, 0xC0)  # F

MEMORY_SIZE = 4096
ADDRESS_MASK = 0xFFF
ROM_START_ADDRESS = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - ROM_START_ADDRESS     # 3584 bytes
FONT_ADDRESS = 0x050
FONT_GLYPH_SIZE = 5
HIRES_FONT_ADDRESS = 0x0A0
HIRES_FONT_GLYPH_SIZE = 10
STACK_SIZE = 16
REGISTERS_COUNT = 16
PERSISTENT_REGISTERS_COUNT = 8
KEYS_COUNT = 16


# ******************** MEMORY SECTION
# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY, EVERY ADDRESS IS MASKED TO 12 BITS
class Memory:
    def __init__(self):
        self.inner = bytearray(MEMORY_SIZE)
        self.inner[FONT_ADDRESS:FONT_ADDRESS+len(C8_FONTS)] = bytes(C8_FONTS)
        self.inner[HIRES_FONT_ADDRESS:HIRES_FONT_ADDRESS+len(SCHIP_FONTS)] = bytes(SCHIP_FONTS)

    def __setitem__(self, address, value):
        self.inner[address & ADDRESS_MASK] = value & 0xFF

    def __getitem__(self, address):
        return self.inner[address & ADDRESS_MASK]

    def __len__(self):
        return len(self.inner)

    def word(self, address):
        """big endian 16 bit word made of the bytes at address and address+1"""
        return self[address] << 8 | self[address + 1]

    def load(self, data):
        """copy data starting at ROM_START_ADDRESS, whatever doesn't fit in memory is dropped"""
        data = bytes(data[:MAX_ROM_SIZE])
        self.inner[ROM_START_ADDRESS:ROM_START_ADDRESS+len(data)] = data
        return len(data)


# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self):
        self.addr_list = []

    @property
    def size(self):
        return len(self.addr_list)

    def full(self):
        return self.size >= STACK_SIZE

    def empty(self):
        return self.size == 0

    def append(self, address):
        """push an address, return False without touching the stack when it's full"""
        if self.full():
            return False
        self.addr_list.append(address & ADDRESS_MASK)
        return True

    def pop(self):
        """pop the last pushed address, None when the stack is empty"""
        if self.empty():
            return None
        return self.addr_list.pop()

    def __repr__(self):
        return "Stack([" + ", ".join(f"0x{a:03x}" for a in self.addr_list) + "])"


# ******************** MACHINE SECTION
class Machine:
    """
    registers, memory, stack, timers and display of a single CHIP-8 / SUPER-CHIP machine
    plus the capabilities injected by whoever drives it (keyboard and speaker)
    """
    def __init__(self):
        self.key_poller = None      # callable(key: int) -> bool
        self.speaker = None         # callable(enabled: bool)
        self.reset()

    def reset(self):
        """zero the whole state and seed the fonts, injected capabilities survive a reset"""
        self.mem = Memory()
        self.stack = Stack()
        self.v_regs = [0] * REGISTERS_COUNT
        self.r_regs = [0] * PERSISTENT_REGISTERS_COUNT    # SUPER-CHIP RPL user flags
        self.pc = ROM_START_ADDRESS
        self.idx = 0                # I register, specify where the sprites reside in memory
        self.dt = 0                 # delay timer, active when non-zero
        self.st = 0                 # sound timer, active when non-zero
        self.display = Display()
        self.wait_key = RUNNING
        self.halt_requested = False
        self.timer_accumulator = 0  # in sixtieths of a millisecond
        self.speaker_on = False     # last level sent to the speaker

    @property
    def sp(self):
        return self.stack.size

    @property
    def extended_mode(self):
        return self.display.extended

    @extended_mode.setter
    def extended_mode(self, value):
        self.display.extended = bool(value)

    def key_down(self, key):
        """ask the injected keyboard whether the key (0x0-0xF) is pressed, no keyboard means no key is"""
        # ExA1 always skips and Fx0A keeps waiting without a keyboard
        if self.key_poller is None:
            return False
        return bool(self.key_poller(key & 0xF))

    def __str__(self):
        registers = f"PC_REGISTER:0x{self.pc:03x} | IDX_REGISTER:0x{self.idx:03x} | VARIABLE_REGISTERS:{self.v_regs}"
        persistent = f"PERSISTENT_REGISTERS:{self.r_regs}"
        stack = f"STACK:{self.stack}"
        timers = f"DT:{self.dt} | ST:{self.st}"
        flags = f"EXTENDED:{self.extended_mode} | WAIT_KEY:{self.wait_key} | HALTED:{self.halt_requested}"
        return f"{registers}\n{persistent}\n{stack}\n{timers}\n{flags}"
