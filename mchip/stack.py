#!/usr/bin/env python3

"""
Stack Emulator

There is no specified location for the call stack in system RAM, and no stack
pointer register is exposed to the running program, so the stack is kept in
host memory as a plain list.

The original hardware allows 16 return addresses.  Pushing a 17th is fatal to
the running program.  Popping an empty stack is not: an over-returning program
resumes at the restart vector instead.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import PROGRAM_LOC, STACK_SIZE


class StackError(Exception):
    pass


class StackOverflow(StackError):
    def __init__(self, size):
        super().__init__("Stack overflow (more than {} nested calls)".format(size))
        self.size = size


class Stack:
    def __init__(self, size=STACK_SIZE, restart_location=PROGRAM_LOC):
        self.items = []
        self.size = size
        self.restart_location = restart_location

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackOverflow(self.size)

        self.items.append(item)

    def pop(self):
        if not self.items:
            return self.restart_location

        return self.items.pop()

    def get_items(self):
        # For debugging
        return self.items

    def __len__(self):
        return len(self.items)
