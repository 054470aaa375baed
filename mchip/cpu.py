#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8 and Super-CHIP)

Like a real computer, this is where most of the processing happens.  Each call
to tick() runs exactly one instruction: fetch the opcode at the program
counter, advance the program counter, decode the opcode, then execute it.

The CPU never waits on the host.  Timers are advanced separately through
tick_timer(), and input and randomness are pulled from the two callables given
to tick().  Instructions that would block on real hardware (waiting for a key)
put the CPU into a waiting state instead, and each later tick() polls for the
key until it arrives.

Anything that differs between CHIP-8 and Super-CHIP opcodes shared by both is
looked up in the quirks record rather than checked against the architecture.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import (
    APP_INTRO, ARCH_SUPERCHIP, MEM_MASK, NUM_REGISTERS, NUM_RPL_REGISTERS, PROGRAM_LOC, SYSFONT_BG_LOC, SYSFONT_SM_LOC
)
from .decoder import decode, describe, get_kinds, get_mnemonics
from .quirks import get_quirks

INDEX_MASK = 0xFFFF  # I is a 16-bit register, even though only 12 bits can address memory
SCROLL_COLS = 4      # Horizontal scroll distance in pixels


class CPUError(Exception):
    pass


class IllegalInstruction(CPUError):
    def __init__(self, opcode, address, debug_info=""):
        super().__init__(
            (
                "Emulation halted.\n\n" +
                "{}Debug info:\n" +
                "{}\n\nOpcode 0x{:04x} at address 0x{:03x} is not emulated for the selected architecture."
            ).format(APP_INTRO, debug_info, opcode, address)
        )
        self.opcode = opcode
        self.address = address


class ProgramExited(CPUError):
    # Raised by the Super-CHIP EXIT instruction.  This is a normal end to the program, not a fault.
    def __init__(self, address):
        super().__init__("Program exited at address 0x{:03x}".format(address))
        self.address = address


class CPU:
    def __init__(self, arch, ram, stack, framebuffer, debugger, quirks=None):
        self.arch = arch
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.quirks = get_quirks(arch) if quirks is None else quirks
        self.kinds = get_kinds(arch)
        self.mnemonics = get_mnemonics(self.quirks)

        # One handler for each instruction kind the decoder can produce
        self.instructions = {
            "00E0": self._00E0,
            "00EE": self._00EE,
            "1nnn": self._1nnn,
            "2nnn": self._2nnn,
            "3xnn": self._3xnn,
            "4xnn": self._4xnn,
            "5xy0": self._5xy0,
            "6xnn": self._6xnn,
            "7xnn": self._7xnn,
            "8xy0": self._8xy0,
            "8xy1": self._8xy1,
            "8xy2": self._8xy2,
            "8xy3": self._8xy3,
            "8xy4": self._8xy4,
            "8xy5": self._8xy5,
            "8xy6": self._8xy6,
            "8xy7": self._8xy7,
            "8xyE": self._8xyE,
            "9xy0": self._9xy0,
            "Annn": self._Annn,
            "Bnnn": self._Bnnn,
            "Cxnn": self._Cxnn,
            "Dxyn": self._Dxyn,
            "Ex9E": self._Ex9E,
            "ExA1": self._ExA1,
            "Fx07": self._Fx07,
            "Fx0A": self._Fx0A,
            "Fx15": self._Fx15,
            "Fx18": self._Fx18,
            "Fx1E": self._Fx1E,
            "Fx29": self._Fx29,
            "Fx33": self._Fx33,
            "Fx55": self._Fx55,
            "Fx65": self._Fx65
        }

        if arch >= ARCH_SUPERCHIP:
            self.instructions.update(
                {
                    "00Cn": self._00Cn,
                    "00FB": self._00FB,
                    "00FC": self._00FC,
                    "00FD": self._00FD,
                    "00FE": self._00FE,
                    "00FF": self._00FF,
                    "Fx30": self._Fx30,
                    "Fx75": self._Fx75,
                    "Fx85": self._Fx85
                }
            )

        # Initialise registers
        self.v = memoryview(bytearray(NUM_REGISTERS))
        self.i = 0  # Index register
        self.rpl = memoryview(bytearray(NUM_RPL_REGISTERS))  # Super-CHIP user flags

        # Initialise timers
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer

        # Initialise program counter and the instruction being executed
        self.pc = PROGRAM_LOC
        self.debug_pc = PROGRAM_LOC
        self.opcode = 0
        self.instruction = None

        # Display-related vars.  Super-CHIP boots in low resolution, doubling every pixel.
        self.hi_res = False
        self.framebuffer.set_scale(1 if arch < ARCH_SUPERCHIP else 2)

        # Input-related vars.  awaiting_key holds the target register while Fx0A is waiting.
        self.awaiting_key = None
        self.previous_keystate = 0

        # Host callbacks for the instruction being executed
        self.held_keys = None
        self.random = None

    def tick(self, held_keys, random):
        """
        Run one instruction.  held_keys() returns a 16-bit mask of keys being
        held, and random() returns a byte.  Returns True if the framebuffer
        changed.
        """
        self.held_keys = held_keys
        self.random = random

        if self.awaiting_key is not None:
            self._poll_keypress()
            return False

        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch, but before execute
        self.decode_exec()
        return self.framebuffer.take_updated()

    def tick_timer(self):
        if self.dt > 0:
            self.dt -= 1

        if self.st > 0:
            self.st -= 1

    def fetch(self):
        return self.ram.read_word(self.pc)

    def decode_exec(self):
        instruction = decode(self.opcode, self.kinds)

        if instruction is None:
            self._opcode_unsupported()

        self.instruction = instruction

        if self.live_debug:
            self.debug(describe(instruction, self.mnemonics))

        self.instructions[instruction.kind]()

    def inc_pc(self):
        self.pc = (self.pc + 2) & MEM_MASK

    def dec_pc(self):
        # Only used to re-run instructions (e.g. exit)
        self.pc = (self.pc - 2) & MEM_MASK

    # Opcode fields of the instruction being executed
    @property
    def vx(self):
        return self.instruction.x

    @property
    def vy(self):
        return self.instruction.y

    @property
    def addr(self):
        return self.instruction.nnn

    @property
    def byte(self):
        return self.instruction.nn

    @property
    def nibble(self):
        return self.instruction.n

    def _opcode_unsupported(self):
        raise IllegalInstruction(self.opcode, self.debug_pc, self.debugger.debug(self, "???", verbose=True))

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _00E0(self):  # CLS
        self.framebuffer.clear()

    def _00EE(self):  # RET
        # Returning with nothing on the stack restarts the program
        self.pc = self.stack.pop()

    def _1nnn(self):  # JP addr
        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        self.stack.push(self.pc)
        self.pc = self.addr

    def _post_skip(self):
        self.inc_pc()

    def _3xnn(self):  # SE Vx, byte
        if self.v[self.vx] == self.byte:
            self._post_skip()

    def _4xnn(self):  # SNE Vx, byte
        if self.v[self.vx] != self.byte:
            self._post_skip()

    def _5xy0(self):  # SE Vx, Vy
        if self.v[self.vx] == self.v[self.vy]:
            self._post_skip()

    def _6xnn(self):  # LD Vx, byte
        self.v[self.vx] = self.byte

    def _7xnn(self):  # ADD Vx, byte
        vx = self.vx
        self.v[vx] = (self.v[vx] + self.byte) & 0xFF  # Vf is left alone

    def _8xy0(self):  # LD Vx, Vy
        self.v[self.vx] = self.v[self.vy]

    def _post_8xy1_8xy2_8xy3(self):
        if self.quirks.logic:
            self.v[0xF] = 0

    def _8xy1(self):  # OR Vx, Vy
        self.v[self.vx] |= self.v[self.vy]
        self._post_8xy1_8xy2_8xy3()

    def _8xy2(self):  # AND Vx, Vy
        self.v[self.vx] &= self.v[self.vy]
        self._post_8xy1_8xy2_8xy3()

    def _8xy3(self):  # XOR Vx, Vy
        self.v[self.vx] ^= self.v[self.vy]
        self._post_8xy1_8xy2_8xy3()

    def _8xy4(self):  # ADD Vx, Vy
        val = self.v[self.vx] + self.v[self.vy]
        self.v[self.vx] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, val):  # Post-SUB/SUBN
        self.v[self.vx] = val & 0xFF
        # Vf is set when NOT borrowing, and this must happen AFTER Vx is set, in case Vf was an operand
        self.v[0xF] = int(val >= 0)

    def _8xy5(self):  # SUB Vx, Vy
        self._post_8xy5_8xy7(self.v[self.vx] - self.v[self.vy])

    def _8xy6(self):  # SHR Vx {, Vy}
        val = self.v[self.vx if self.quirks.shift else self.vy]
        self.v[self.vx] = val >> 1  # The result is put in Vx either way
        self.v[0xF] = val & 1

    def _8xy7(self):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(self.v[self.vy] - self.v[self.vx])

    def _8xyE(self):  # SHL Vx {, Vy}
        val = self.v[self.vx if self.quirks.shift else self.vy]
        self.v[self.vx] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7

    def _9xy0(self):  # SNE Vx, Vy
        if self.v[self.vx] != self.v[self.vy]:
            self._post_skip()

    def _Annn(self):  # LD I, addr
        self.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        # With jump quirks, the register is taken from the top nibble of the address
        vr = self.vx if self.quirks.jump else 0
        self.pc = (self.v[vr] + self.addr) & MEM_MASK

    def _Cxnn(self):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = self.random() & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        # Main sprite drawing routine.  If nibble == 0 and in high resolution, then draw a 16x16 sprite.
        height = self.nibble

        if height == 0 and self.hi_res:
            height = 16
            width = 16
        else:
            width = 8

        # The sprite's start always wraps, but anything running off the right or bottom is clipped
        framebuffer = self.framebuffer
        vid_width, vid_height = framebuffer.get_vid_size()
        vx_pos = self.v[self.vx] % vid_width
        vy_pos = self.v[self.vy] % vid_height
        big_sprite = width > 8
        row_bytes = 2 if big_sprite else 1
        top_bit = 1 << (width - 1)
        visible_width = min(width, vid_width - vx_pos)
        rows_collided = 0
        rows_clipped = 0
        i = self.i

        for y in range(height):
            scr_y = vy_pos + y

            if scr_y >= vid_height:
                rows_clipped = height - y
                break

            row_loc = i + y * row_bytes
            spr_data = self.ram.read(row_loc & MEM_MASK)

            if big_sprite:
                spr_data = (spr_data << 8) | self.ram.read((row_loc + 1) & MEM_MASK)

            row_collided = False

            for x in range(visible_width):
                if spr_data & (top_bit >> x) and framebuffer.xor_pixel(vx_pos + x, scr_y):
                    # Don't stop drawing.  Set the flag, and never unset it for this row.
                    row_collided = True

            if row_collided:
                rows_collided += 1

        if self.hi_res:
            # High resolution reports the number of rows collided, plus rows lost off the bottom
            self.v[0xF] = rows_collided + rows_clipped
        else:
            self.v[0xF] = int(rows_collided > 0)

    def _is_key_down(self, key):
        return (self.held_keys() >> (key & 0xF)) & 1 == 1

    def _Ex9E(self):  # SKP Vx
        if self._is_key_down(self.v[self.vx]):
            self._post_skip()

    def _ExA1(self):  # SKNP Vx
        if not self._is_key_down(self.v[self.vx]):
            self._post_skip()

    def _Fx07(self):  # LD Vx, DT
        self.v[self.vx] = self.dt

    def _Fx0A(self):  # LD Vx, K
        # Waits for a key to be released.  Timers still need to expire and the host still needs control, so rather
        # than blocking here, remember what's held and let tick() poll until one of those keys goes up.
        self.awaiting_key = self.vx
        self.previous_keystate = self.held_keys() & 0xFFFF

    def _poll_keypress(self):
        current_keystate = self.held_keys() & 0xFFFF
        released = self.previous_keystate & ~current_keystate

        if released:
            # Lowest-numbered key that was held last time, but isn't now
            self.v[self.awaiting_key] = (released & -released).bit_length() - 1
            self.awaiting_key = None
            self.previous_keystate = 0
        else:
            self.previous_keystate = current_keystate

    def _Fx15(self):  # LD DT, Vx
        self.dt = self.v[self.vx]

    def _Fx18(self):  # LD ST, Vx
        self.st = self.v[self.vx]

    def _Fx1E(self):  # ADD I, Vx
        self.i = (self.i + self.v[self.vx]) & INDEX_MASK

    def _Fx29(self):  # LD F, Vx
        self.i = SYSFONT_SM_LOC + 5 * (self.v[self.vx] & 0xF)

    def _Fx33(self):  # LD B, Vx
        val = self.v[self.vx]
        i = self.i
        self.ram.write(i & MEM_MASK, val // 100)                # Most-significant digit
        self.ram.write((i + 1) & MEM_MASK, (val // 10) % 10)    # Middle digit
        self.ram.write((i + 2) & MEM_MASK, val % 10)            # Least-significant digit

    def _post_Fx55_Fx65(self):
        if self.quirks.load:
            self.i = (self.i + self.vx + 1) & INDEX_MASK

    def _Fx55(self):  # LD [I], Vx
        i = self.i

        for reg in range(self.vx + 1):
            self.ram.write((i + reg) & MEM_MASK, self.v[reg])

        self._post_Fx55_Fx65()

    def _Fx65(self):  # LD Vx, [I]
        i = self.i

        for reg in range(self.vx + 1):
            self.v[reg] = self.ram.read((i + reg) & MEM_MASK)

        self._post_Fx55_Fx65()

    # Instructions for Super-CHIP

    def _00FD(self):  # EXIT
        # Stay on this instruction, so ticking an exited program keeps exiting
        self.dec_pc()
        raise ProgramExited(self.debug_pc)

    def _00FE(self):  # LOW
        self.hi_res = False
        self.framebuffer.set_scale(2)

    def _00FF(self):  # HIGH
        self.hi_res = True
        self.framebuffer.set_scale(1)

    def _00FB(self):  # SCR
        self.framebuffer.scroll_right(SCROLL_COLS * self.framebuffer.scale)

    def _00FC(self):  # SCL
        self.framebuffer.scroll_left(SCROLL_COLS * self.framebuffer.scale)

    def _00Cn(self):  # SCD n
        # In low resolution, the distance is in logical pixels, so it doubles in the buffer
        self.framebuffer.scroll_down(self.nibble * self.framebuffer.scale)

    def _Fx30(self):  # LD HF, Vx
        self.i = SYSFONT_BG_LOC + 10 * (self.v[self.vx] & 0xF)

    def _Fx75(self):  # LD R, Vx
        vx = self.vx

        if vx >= NUM_RPL_REGISTERS:
            self._opcode_unsupported()

        # User flags only last as long as this CPU.  Ensure with +1s that the final register is copied.
        self.rpl[:vx + 1] = self.v[:vx + 1]

    def _Fx85(self):  # LD Vx, R
        vx = self.vx

        if vx >= NUM_RPL_REGISTERS:
            self._opcode_unsupported()

        self.v[:vx + 1] = self.rpl[:vx + 1]
