#!/usr/bin/env python3

"""
Framebuffer Emulator

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method, one pixel at a time, and
the host reads the finished buffer back after each instruction.

The buffer has a fixed physical size for the lifetime of the machine: 64x32
for CHIP-8, 128x64 for Super-CHIP.  Super-CHIP's low resolution mode is
emulated with a scale factor, so each logical pixel covers a 2x2 block of the
physical buffer and programs see a 64x32 screen.

Collisions (where a set pixel is unset by an XOR) are reported back to the
caller.  Pixels beyond the right or bottom edge are clipped rather than
wrapped, and are reported as None so the caller can tell them apart.

Each pixel is stored as a byte in a RAM bank, row by row, so scrolling is just
a memory move followed by zeroing the vacated strip.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, vid_width, vid_height):
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.plane = RAM(self.vid_size)
        self.scale = 1
        self.updated = False

    def set_scale(self, scale):
        if scale < 1 or self.vid_width % scale or self.vid_height % scale:
            raise FramebufferError(
                "Scale {} does not fit a {}x{} display".format(scale, self.vid_width, self.vid_height)
            )

        self.scale = scale

    def get_vid_size(self):
        # Size as seen by the running program
        return self.vid_width // self.scale, self.vid_height // self.scale

    def clear(self):
        self.plane.clear()
        self.updated = True

    def xor_pixel(self, x, y):
        # Takes logical coordinates.  Returns None if clipped, otherwise whether a lit pixel was unset.
        scale = self.scale
        phys_x = x * scale
        phys_y = y * scale

        if phys_x >= self.vid_width or phys_y >= self.vid_height:
            return None

        mem = self.plane.mem
        vid_width = self.vid_width
        collision = mem[phys_y * vid_width + phys_x] != 0

        for block_y in range(phys_y, phys_y + scale):
            row_loc = block_y * vid_width

            for block_x in range(phys_x, phys_x + scale):
                mem[row_loc + block_x] ^= 0xFF

        self.updated = True
        return collision

    def scroll_left(self, cols):
        cols = min(cols, self.vid_width)
        vid_width = self.vid_width
        self.plane.move_mem(-cols)

        for y in range(1, self.vid_height + 1):
            self.plane.zero_block(vid_width * y - cols, cols)  # Erase strip at the right of each line

        self.updated = True

    def scroll_right(self, cols):
        cols = min(cols, self.vid_width)
        vid_width = self.vid_width
        self.plane.move_mem(cols)

        for y in range(self.vid_height):
            self.plane.zero_block(vid_width * y, cols)  # Erase strip at the left of each line

        self.updated = True

    def scroll_down(self, rows):
        mem_offset = min(rows, self.vid_height) * self.vid_width
        self.plane.move_mem(mem_offset)
        self.plane.zero_block(0, mem_offset)  # Erase the top strip
        self.updated = True

    def get_pixel(self, x, y):
        # Physical coordinates
        return self.plane.read(y * self.vid_width + x) != 0

    def get_buffer(self):
        # Rows of booleans, indexed [y][x], at physical resolution
        vid_width = self.vid_width
        return [
            [pixel != 0 for pixel in self.plane.read_block(row_loc, vid_width)]
            for row_loc in range(0, self.vid_size, vid_width)
        ]

    def take_updated(self):
        # Returns whether anything changed since the last call, and resets the flag
        updated = self.updated
        self.updated = False
        return updated
