#!/usr/bin/env python3

"""
RAM Emulator

Byte-addressed storage used both for the 4K system address space and for the
framebuffer's pixel store.  Supports reading and writing individual bytes,
blocks and big-endian words, as well as fast moving (copying) and zeroing of
memory blocks for screen scrolling.

Addresses produced by the running program should be masked by the caller.
Anything still out of range here is a host bug, so it is reported rather than
wrapped.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size=0):
        self.resize(mem_size)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        return self.mem[location]

    def read_block(self, location, size=1):
        return self.mem[location:location + size]

    def read_word(self, location):
        # Big-endian.  The second byte wraps to the start of memory, so fetching at the very top can't fail.
        return (self.mem[location] << 8) | self.mem[(location + 1) % self.mem_size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)

        if not block_size:
            return

        block_top = location + block_size
        self.check_overflow(block_top - 1)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location > self.mem_top or location < 0:
            raise RAMError("Memory overflow at 0x{:04x}".format(location))

    def move_mem(self, offset):
        # Fast slice-based memory mover.  Leaves original data behind.
        if offset < 0:
            self.mem[:offset] = self.mem[-offset:]
        elif offset > 0:
            self.mem[offset:] = self.mem[:-offset]

    def zero_block(self, offset, size):
        if size <= 0:
            return

        block_top = offset + size
        self.check_overflow(block_top - 1)
        self.mem[offset:block_top] = bytes(size)

    def clear(self):
        self.zero_block(0, self.mem_size)
