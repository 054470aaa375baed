#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries and base system fonts for later writing into RAM,
and picks an architecture for a ROM based on its file extension.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from os import path
from .constants import ARCH_CHIP8, ARCH_EXTENSIONS
from .fonts import SYSTEM_FONTS


class LoaderError(Exception):
    pass


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_system_font(self, name):
        font = SYSTEM_FONTS.get(name)

        if font is None:
            raise LoaderError("No system font named '{}'".format(name))

        return font

    def guess_arch(self, filename, default=ARCH_CHIP8):
        return ARCH_EXTENSIONS.get(path.splitext(filename)[1].lower(), default)
