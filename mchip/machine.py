#!/usr/bin/env python3

"""
Machine

Wires RAM, the stack, the framebuffer and the CPU together for one emulation
session, and exposes the small surface a host needs:

    machine = Machine(ARCH_SUPERCHIP)
    machine.load_default_fonts()
    machine.load_program(rom)

    # Then, repeatedly
    machine.tick_timer()                  # At 60Hz
    changed = machine.tick(keys, rand)    # At the chosen clock speed
    machine.display_buffer, machine.sound_timer

The architecture is fixed once the machine is built.  The machine holds no
locks, so a host driving it from more than one thread must serialise calls to
tick() and tick_timer() itself.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import ARCH_SUPERCHIP, DISPLAY_SIZES, MEM_SIZE, PROGRAM_LOC, STACK_SIZE, SYSFONT_BG_LOC, SYSFONT_SM_LOC
from .cpu import CPU
from .debugger import Debugger
from .fonts import BIG_FONT, SMALL_FONT
from .framebuffer import Framebuffer
from .quirks import get_quirks
from .ram import RAM
from .stack import Stack


class MachineError(Exception):
    pass


class Machine:
    def __init__(self, arch, quirks=None, debugger=None):
        display_size = DISPLAY_SIZES.get(arch)

        if display_size is None:
            raise MachineError("Unsupported architecture {}".format(arch))

        self.arch = arch
        self.ram = RAM(MEM_SIZE)
        self.stack = Stack(STACK_SIZE)
        self.framebuffer = Framebuffer(*display_size)
        self.debugger = Debugger() if debugger is None else debugger
        self.cpu = CPU(
            arch, self.ram, self.stack, self.framebuffer, self.debugger,
            get_quirks(arch) if quirks is None else quirks
        )

    def load_font(self, font):
        if len(font) != len(SMALL_FONT):
            raise MachineError("Small font must be {} bytes, not {}".format(len(SMALL_FONT), len(font)))

        self.ram.write_block(SYSFONT_SM_LOC, font)

    def load_big_font(self, font):
        if self.arch < ARCH_SUPERCHIP:
            raise MachineError("The big font is only available on Super-CHIP")

        if len(font) != len(BIG_FONT):
            raise MachineError("Big font must be {} bytes, not {}".format(len(BIG_FONT), len(font)))

        self.ram.write_block(SYSFONT_BG_LOC, font)

    def load_default_fonts(self):
        self.load_font(SMALL_FONT)

        if self.arch >= ARCH_SUPERCHIP:
            self.load_big_font(BIG_FONT)

    def load_program(self, program):
        # Programs too big for memory are rejected by RAM rather than truncated
        self.ram.write_block(PROGRAM_LOC, program)

    def tick_timer(self):
        self.cpu.tick_timer()

    def tick(self, held_keys, random):
        return self.cpu.tick(held_keys, random)

    @property
    def display_buffer(self):
        return self.framebuffer.get_buffer()

    @property
    def display_size(self):
        return self.framebuffer.vid_width, self.framebuffer.vid_height

    @property
    def high_res(self):
        return self.cpu.hi_res

    @property
    def sound_timer(self):
        return self.cpu.st

    @property
    def delay_timer(self):
        return self.cpu.dt

    @property
    def awaiting_key(self):
        return self.cpu.awaiting_key is not None
