#!/usr/bin/env python3

"""
CPU Debugger

If enabled, this will output information before each instruction executed:
    * All 16 of the [V] registers, starting with most significant (Vf) and
      reducing to least significant (V0)
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * PC - Program counter
    * OP - OpCode number
    * IN - Decoded instruction

If a crash occurs, all of the above will be outputted, with the addition of:
    * RPL   - User flag registers (if Super-CHIP)
    * Stack - Stack contents

The framebuffer can also be dumped as text, which is the only way of seeing
the screen when running without a display.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import ARCH_SUPERCHIP

PIXEL_ON = "█"
PIXEL_OFF = " "


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, instruction, verbose=False):
        debug_str = (
            "V: 0x" + ("{:02x}" * 16) + " I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x} IN: {}"
        ).format(
            *[cpu.v[reg_num] for reg_num in range(15, -1, -1)] +
            [cpu.i, cpu.dt, cpu.st, cpu.debug_pc, cpu.opcode, instruction]
        )

        if verbose:
            if cpu.arch >= ARCH_SUPERCHIP:
                num_rpl = len(cpu.rpl)
                debug_str += ("\nRPL: 0x" + "{:02x}" * num_rpl).format(
                    *[cpu.rpl[reg_num] for reg_num in range(num_rpl - 1, -1, -1)]
                )

            stack_items = cpu.stack.get_items()
            stack_str = (" 0x{:03x}" * len(stack_items)).format(*stack_items)
            debug_str += ("\nStack:{}").format(stack_str or " (Empty)")

        return debug_str

    def set_live(self, enabled):
        self.live = enabled

    def is_live(self):
        return self.live

    def output(self, cpu, instruction):
        print(self.debug(cpu, instruction))

    def dump_display(self, framebuffer):
        # One text line per framebuffer row, with a border either side
        vid_width = framebuffer.vid_width
        return "\n".join(
            "|{}|".format(
                "".join(PIXEL_ON if framebuffer.get_pixel(x, y) else PIXEL_OFF for x in range(vid_width))
            )
            for y in range(framebuffer.vid_height)
        )
