# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# SUPER-CHIP
# https://chip-8.github.io/extensions/#super-chip-with-fixes
#
# MASTERING CHIP-8
# https://github.com/mattmikolay/chip-8/wiki/Mastering-CHIP%E2%80%908


import os
import random
from functools import wraps

from .decoder import decode
from .keywait import RUNNING, WaitingForKey
from .machine import (
    ADDRESS_MASK,
    FONT_ADDRESS,
    FONT_GLYPH_SIZE,
    HIRES_FONT_ADDRESS,
    HIRES_FONT_GLYPH_SIZE,
    KEYS_COUNT,
    PERSISTENT_REGISTERS_COUNT,
    Machine,
)
from .timers import update_time


DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False

# masks are tried in order, the first one turning the opcode into a known key wins
MASKS = (
    (0xFFFF, (0x00E0, 0x00EE, 0x00FB, 0x00FC, 0x00FD, 0x00FE, 0x00FF)),
    (0xFFF0, (0x00C0,)),
    (0xF0FF, (0xE09E, 0xE0A1, 0xF007, 0xF00A, 0xF015, 0xF018, 0xF01E, 0xF029,
              0xF030, 0xF033, 0xF055, 0xF065, 0xF075, 0xF085)),
    (0xF00F, (0x8000, 0x8001, 0x8002, 0x8003, 0x8004, 0x8005, 0x8006, 0x8007, 0x800E)),
    (0xF000, (0x1000, 0x2000, 0x3000, 0x4000, 0x5000, 0x6000, 0x7000, 0x9000,
              0xA000, 0xB000, 0xC000, 0xD000)),
)


# ******************** UTILITIES SECTION
def set_debug(enabled):
    global DEBUG
    DEBUG = bool(enabled)


def debug(msg):
    if DEBUG: print(msg)


def asm(msg):
    """decorator to print out the ASM of the instruction being called"""
    def decorator(fn):
        @wraps(fn)
        def wrapper_fn(*args, **kwargs):
            # args[0] equals self of the decorated method, pc already points to the next instruction
            mem_addr = (args[0].machine.pc - 2) & ADDRESS_MASK
            vals = fn(*args, **kwargs)  # use the locals() values of each decorated function in the print
            vals['mem_addr'] = mem_addr
            if DEBUG: print(msg.format(**vals))
        return wrapper_fn
    return decorator


# ******************** CPU SECTION
class Chip8:
    """
    SUPER-CHIP interpreter driving a Machine

    the driver is expected to call step() once per emulated cycle and update_time() once per frame
    step() never raises: malformed opcodes, stack overflows/underflows and out of range addresses
    all degrade to no-ops
    """
    def __init__(self, machine=None, rng=None):
        self.machine = machine if machine is not None else Machine()
        self.rng = rng if rng is not None else random.Random()
        self.instructions = {
            0x00C0: self._scroll_down,
            0x00E0: self._clear_screen,
            0x00EE: self._return,
            0x00FB: self._scroll_right,
            0x00FC: self._scroll_left,
            0x00FD: self._exit,
            0x00FE: self._low,
            0x00FF: self._high,
            0x1000: self._jump,
            0x2000: self._call_addr,
            0x3000: self._skip_if_eq,
            0x4000: self._skip_if_not_eq,
            0x5000: self._skip_if_eq_regs,
            0x6000: self._set_vk,
            0x7000: self._add_to_vk,
            0x8000: self._set_vx_to_vy,
            0x8001: self._set_vx_or_vy,
            0x8002: self._set_vx_and_vy,
            0x8003: self._set_vx_xor_vy,
            0x8004: self._add_vx_vy,
            0x8005: self._sub_vx_vy,
            0x8006: self._shr,
            0x8007: self._subn_vx_vy,
            0x800E: self._shl,
            0x9000: self._skip_if_not_eq_regs,
            0xA000: self._set_idx,
            0xB000: self._jump_plus,
            0xC000: self._random_byte_and,
            0xD000: self._to_screen,
            0xE09E: self._skip_if_pressed,
            0xE0A1: self._skip_if_not_pressed,
            0xF007: self._set_vx_dt,
            0xF00A: self._wait_keypress,
            0xF015: self._set_dt_vx,
            0xF018: self._set_st,
            0xF01E: self._add_to_idx,
            0xF029: self._select_char,
            0xF030: self._select_big_char,
            0xF033: self._bcd_repr,
            0xF055: self._store_vregs,
            0xF065: self._load_vregs,
            0xF075: self._store_rregs,
            0xF085: self._load_rregs,
        }

    def __str__(self):
        return str(self.machine)

    # ********** ENTRY POINTS
    def reset(self):
        """zero the machine, reload the fonts and point pc back to 0x200"""
        self.machine.reset()
        debug("The machine has been initialized")

    def load(self, rom):
        """copy rom bytes at 0x200, the caller is responsible for checking its size beforehand"""
        loaded = self.machine.mem.load(rom)
        debug(f"{loaded} bytes loaded at 0x200")

    def set_key_poller(self, poller):
        """poller(key) must return True while the key (0x0-0xF) is down"""
        self.machine.key_poller = poller

    def set_speaker(self, speaker):
        """speaker(enabled) is called by the sound timer to start/stop the tone"""
        self.machine.speaker = speaker

    def update_time(self, delta_ms):
        return update_time(self.machine, delta_ms)

    def step(self):
        """execute one instruction, or keep waiting for a key, or do nothing at all once halted"""
        m = self.machine
        if m.halt_requested:
            return
        if isinstance(m.wait_key, WaitingForKey):
            self._poll_keypad()
            return
        # fetch (each instruction is two bytes long)
        opcode = m.mem.word(m.pc)
        self._goto_next_instruction()
        # decode + execute
        self._lookup(opcode)(decode(opcode))

    # ********** READ ONLY ACCESSORS
    @property
    def display(self):
        return self.machine.display

    @property
    def delay_timer(self):
        return self.machine.dt

    @property
    def sound_timer(self):
        return self.machine.st

    @property
    def halted(self):
        return self.machine.halt_requested

    @property
    def waiting_for_key(self):
        return isinstance(self.machine.wait_key, WaitingForKey)

    # ********** INTERNALS
    def _lookup(self, opcode):
        """decode opcodes using masks and return respective function"""
        for mask, ops in MASKS:
            if (opcode & mask) in ops:
                return self.instructions[opcode & mask]
        return self._no_op

    def _goto_next_instruction(self):
        self.machine.pc = (self.machine.pc + 0x2) & ADDRESS_MASK

    def _poll_keypad(self):
        m = self.machine
        for key in range(KEYS_COUNT):
            if m.key_down(key):
                m.v_regs[m.wait_key.register] = key
                debug(f"key 0x{key:x} pressed, stored in V{m.wait_key.register:X}")
                m.wait_key = RUNNING
                return

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ??? 0x{ins.opcode:04x} (ignored)")
    def _no_op(self, ins):
        """SYS calls and unknown opcodes"""
        return locals()

    # ********** 0 FAMILY
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CLS")
    def _clear_screen(self, ins):
        self.machine.display.clear()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RET")
    def _return(self, ins):
        """return from a subroutine, an empty stack leaves pc where it is"""
        address = self.machine.stack.pop()
        if address is None:
            debug("stack underflow, RET ignored")
        else:
            self.machine.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SCD {ins.n}")
    def _scroll_down(self, ins):
        self.machine.display.scroll_down(ins.n)
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SCR")
    def _scroll_right(self, ins):
        self.machine.display.scroll_right(4)
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SCL")
    def _scroll_left(self, ins):
        self.machine.display.scroll_left(4)
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: EXIT")
    def _exit(self, ins):
        self.machine.halt_requested = True
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LOW")
    def _low(self, ins):
        """disable extended screen mode"""
        self.machine.extended_mode = False
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: HIGH")
    def _high(self, ins):
        """enable extended screen mode"""
        self.machine.extended_mode = True
        return locals()

    # ********** FLOW CONTROL
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP 0x{ins.nnn:03x}")
    def _jump(self, ins):
        self.machine.pc = ins.nnn
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CALL 0x{ins.nnn:03x}")
    def _call_addr(self, ins):
        if self.machine.stack.append(self.machine.pc):
            self.machine.pc = ins.nnn
        else:
            debug("stack overflow, CALL ignored")
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP V0, 0x{ins.nnn:03x}")
    def _jump_plus(self, ins):
        self.machine.pc = (self.machine.v_regs[0x0] + ins.nnn) & ADDRESS_MASK
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{ins.x:X}, 0x{ins.kk:02x}")
    def _skip_if_eq(self, ins):
        if self.machine.v_regs[ins.x] == ins.kk:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{ins.x:X}, 0x{ins.kk:02x}")
    def _skip_if_not_eq(self, ins):
        if self.machine.v_regs[ins.x] != ins.kk:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{ins.x:X}, V{ins.y:X}")
    def _skip_if_eq_regs(self, ins):
        if self.machine.v_regs[ins.x] == self.machine.v_regs[ins.y]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{ins.x:X}, V{ins.y:X}")
    def _skip_if_not_eq_regs(self, ins):
        if self.machine.v_regs[ins.x] != self.machine.v_regs[ins.y]:
            self._goto_next_instruction()
        return locals()

    # ********** REGISTERS
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{ins.x:X}, 0x{ins.kk:02x}")
    def _set_vk(self, ins):
        """set the value of one of the 16 variable registers, Vx"""
        self.machine.v_regs[ins.x] = ins.kk
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{ins.x:X}, 0x{ins.kk:02x}")
    def _add_to_vk(self, ins):
        """add to the value already present in one of the variable registers, VF is untouched"""
        v = self.machine.v_regs
        v[ins.x] = (v[ins.x] + ins.kk) & 0xFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{ins.x:X}, V{ins.y:X}")
    def _set_vx_to_vy(self, ins):
        v = self.machine.v_regs
        v[ins.x] = v[ins.y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: OR V{ins.x:X}, V{ins.y:X}")
    def _set_vx_or_vy(self, ins):
        v = self.machine.v_regs
        v[ins.x] |= v[ins.y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: AND V{ins.x:X}, V{ins.y:X}")
    def _set_vx_and_vy(self, ins):
        v = self.machine.v_regs
        v[ins.x] &= v[ins.y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: XOR V{ins.x:X}, V{ins.y:X}")
    def _set_vx_xor_vy(self, ins):
        v = self.machine.v_regs
        v[ins.x] ^= v[ins.y]
        return locals()

    # VF is always written last, so that it holds the flag even when x is F
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{ins.x:X}, V{ins.y:X}")
    def _add_vx_vy(self, ins):
        """set Vx = Vx + Vy, VF = carry"""
        v = self.machine.v_regs
        total = v[ins.x] + v[ins.y]
        v[ins.x] = total & 0xFF     # keep only the lowest 8 bits from the result and store them in Vx
        v[0xF] = 1 if total > 0xFF else 0
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUB V{ins.x:X}, V{ins.y:X}")
    def _sub_vx_vy(self, ins):
        """set Vx = Vx - Vy, VF = NOT borrow"""
        v = self.machine.v_regs
        flag = 1 if v[ins.x] > v[ins.y] else 0
        v[ins.x] = (v[ins.x] - v[ins.y]) & 0xFF
        v[0xF] = flag
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHR V{ins.x:X}")
    def _shr(self, ins):
        """set Vx = Vx SHR 1, VF = the bit shifted out"""
        v = self.machine.v_regs
        lsb = v[ins.x] & 0x1
        v[ins.x] >>= 1
        v[0xF] = lsb
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUBN V{ins.x:X}, V{ins.y:X}")
    def _subn_vx_vy(self, ins):
        """set Vx = Vy - Vx, VF = NOT borrow"""
        v = self.machine.v_regs
        flag = 1 if v[ins.y] > v[ins.x] else 0
        v[ins.x] = (v[ins.y] - v[ins.x]) & 0xFF
        v[0xF] = flag
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHL V{ins.x:X}")
    def _shl(self, ins):
        """set Vx = Vx SHL 1, VF = the bit shifted out"""
        v = self.machine.v_regs
        msb = (v[ins.x] & 0x80) >> 7
        v[ins.x] = (v[ins.x] << 1) & 0xFF
        v[0xF] = msb
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RND V{ins.x:X}, 0x{ins.kk:02x}")
    def _random_byte_and(self, ins):
        self.machine.v_regs[ins.x] = self.rng.randint(0, 255) & ins.kk
        return locals()

    # ********** DISPLAY
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: DRW V{ins.x:X}, V{ins.y:X}, {ins.n}")
    def _to_screen(self, ins):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        m = self.machine
        x, y = m.v_regs[ins.x], m.v_regs[ins.y]
        m.v_regs[0xF] = m.display.draw_sprite(m.mem, m.idx, x, y, ins.n)
        return locals()

    # ********** KEYBOARD
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKP V{ins.x:X}")
    def _skip_if_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        if self.machine.key_down(self.machine.v_regs[ins.x]):
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKNP V{ins.x:X}")
    def _skip_if_not_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        if not self.machine.key_down(self.machine.v_regs[ins.x]):
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{ins.x:X}, K")
    def _wait_keypress(self, ins):
        """stop fetching until a key is pressed, its value will be stored in Vx"""
        self.machine.wait_key = WaitingForKey(ins.x)
        return locals()

    # ********** TIMERS
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{ins.x:X}, DT")
    def _set_vx_dt(self, ins):
        self.machine.v_regs[ins.x] = self.machine.dt
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD DT, V{ins.x:X}")
    def _set_dt_vx(self, ins):
        self.machine.dt = self.machine.v_regs[ins.x]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD ST, V{ins.x:X}")
    def _set_st(self, ins):
        self.machine.st = self.machine.v_regs[ins.x]
        return locals()

    # ********** INDEX REGISTER AND MEMORY
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD I, 0x{ins.nnn:03x}")
    def _set_idx(self, ins):
        self.machine.idx = ins.nnn
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD I, V{ins.x:X}")
    def _add_to_idx(self, ins):
        m = self.machine
        m.idx = (m.idx + m.v_regs[ins.x]) & ADDRESS_MASK
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD F, V{ins.x:X}")
    def _select_char(self, ins):
        """set I to location of the 8x5 sprite for digit Vx"""
        m = self.machine
        m.idx = FONT_ADDRESS + (m.v_regs[ins.x] & 0xF) * FONT_GLYPH_SIZE
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD HF, V{ins.x:X}")
    def _select_big_char(self, ins):
        """set I to location of the 8x10 sprite for digit Vx"""
        m = self.machine
        m.idx = HIRES_FONT_ADDRESS + (m.v_regs[ins.x] & 0xF) * HIRES_FONT_GLYPH_SIZE
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD B, V{ins.x:X}")
    def _bcd_repr(self, ins):
        """store the hundreds digit of Vx in memory at I, the tens digit at I+1, the ones digit at I+2"""
        m = self.machine
        value = m.v_regs[ins.x]
        m.mem[m.idx] = value // 100
        m.mem[m.idx + 1] = (value // 10) % 10
        m.mem[m.idx + 2] = value % 10
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD [I], V{ins.x:X}")
    def _store_vregs(self, ins):
        """store registers V0 through Vx (included) in memory starting at location I, I is left as is"""
        m = self.machine
        for reg in range(ins.x + 1):
            m.mem[m.idx + reg] = m.v_regs[reg]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{ins.x:X}, [I]")
    def _load_vregs(self, ins):
        """read registers V0 through Vx (included) from memory starting at location I, I is left as is"""
        m = self.machine
        for reg in range(ins.x + 1):
            m.v_regs[reg] = m.mem[m.idx + reg]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD R, V{ins.x:X}")
    def _store_rregs(self, ins):
        """store V0 through Vx in the persistent registers, there are only 8 of them"""
        m = self.machine
        last = min(ins.x, PERSISTENT_REGISTERS_COUNT - 1)
        m.r_regs[:last+1] = m.v_regs[:last+1]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{ins.x:X}, R")
    def _load_rregs(self, ins):
        """read V0 through Vx back from the persistent registers"""
        m = self.machine
        last = min(ins.x, PERSISTENT_REGISTERS_COUNT - 1)
        m.v_regs[:last+1] = m.r_regs[:last+1]
        return locals()
