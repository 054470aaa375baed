#!/usr/bin/env python3

"""
Instruction Decoder

Turns a 16-bit opcode into an Instruction: the kind of instruction plus the
fields every handler reads (x, y, n, nn, nnn).  References to these fields are
always in the same opcode position, so they are pulled out once here instead
of in each handler.

Kinds are named after the opcode pattern they decode from (e.g. "8xy4") and
form a closed set per architecture.  The CPU maps each kind onto exactly one
handler, so an opcode either decodes to a kind the CPU can run, or doesn't
decode at all.

Lookup is done on a masked opcode.  The first nibble decides how much of the
opcode identifies the instruction:

    0x0           - whole opcode (0xFFFF)
    0x5, 0x8, 0x9 - first and last nibbles (0xF00F)
    0xE, 0xF      - first nibble and low byte (0xF0FF)
    anything else - first nibble only (0xF000)
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from .constants import ARCH_SUPERCHIP

Instruction = namedtuple("Instruction", ["opcode", "kind", "x", "y", "n", "nn", "nnn"])

FAMILY_MASKS = {
    0x0: 0xFFFF,
    0x5: 0xF00F,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xE: 0xF0FF,
    0xF: 0xF0FF
}

DEFAULT_MASK = 0xF000

CHIP8_KINDS = {
    0x00E0: "00E0",
    0x00EE: "00EE",
    0x1000: "1nnn",
    0x2000: "2nnn",
    0x3000: "3xnn",
    0x4000: "4xnn",
    0x5000: "5xy0",
    0x6000: "6xnn",
    0x7000: "7xnn",
    0x8000: "8xy0",
    0x8001: "8xy1",
    0x8002: "8xy2",
    0x8003: "8xy3",
    0x8004: "8xy4",
    0x8005: "8xy5",
    0x8006: "8xy6",
    0x8007: "8xy7",
    0x800E: "8xyE",
    0x9000: "9xy0",
    0xA000: "Annn",
    0xB000: "Bnnn",
    0xC000: "Cxnn",
    0xD000: "Dxyn",
    0xE09E: "Ex9E",
    0xE0A1: "ExA1",
    0xF007: "Fx07",
    0xF00A: "Fx0A",
    0xF015: "Fx15",
    0xF018: "Fx18",
    0xF01E: "Fx1E",
    0xF029: "Fx29",
    0xF033: "Fx33",
    0xF055: "Fx55",
    0xF065: "Fx65"
}

SUPERCHIP_KINDS = dict(CHIP8_KINDS)
SUPERCHIP_KINDS.update(
    {
        0x00FB: "00FB",
        0x00FC: "00FC",
        0x00FD: "00FD",
        0x00FE: "00FE",
        0x00FF: "00FF",
        0xF030: "Fx30",
        0xF075: "Fx75",
        0xF085: "Fx85"
    }
)

# Not worth having a separate mask for these, as there are only 16
for scroll_rows in range(0x10):
    SUPERCHIP_KINDS[0x00C0 | scroll_rows] = "00Cn"

MNEMONICS = {
    "00E0": "CLS",
    "00EE": "RET",
    "1nnn": "JP 0x{nnn:03x}",
    "2nnn": "CALL 0x{nnn:03x}",
    "3xnn": "SE V{x:01x}, 0x{nn:02x}",
    "4xnn": "SNE V{x:01x}, 0x{nn:02x}",
    "5xy0": "SE V{x:01x}, V{y:01x}",
    "6xnn": "LD V{x:01x}, 0x{nn:02x}",
    "7xnn": "ADD V{x:01x}, 0x{nn:02x}",
    "8xy0": "LD V{x:01x}, V{y:01x}",
    "8xy1": "OR V{x:01x}, V{y:01x}",
    "8xy2": "AND V{x:01x}, V{y:01x}",
    "8xy3": "XOR V{x:01x}, V{y:01x}",
    "8xy4": "ADD V{x:01x}, V{y:01x}",
    "8xy5": "SUB V{x:01x}, V{y:01x}",
    "8xy6": "SHR V{x:01x}, V{y:01x}",
    "8xy7": "SUBN V{x:01x}, V{y:01x}",
    "8xyE": "SHL V{x:01x}, V{y:01x}",
    "9xy0": "SNE V{x:01x}, V{y:01x}",
    "Annn": "LD I, 0x{nnn:03x}",
    "Bnnn": "JP V0, 0x{nnn:03x}",
    "Cxnn": "RND V{x:01x}, 0x{nn:02x}",
    "Dxyn": "DRW V{x:01x}, V{y:01x}, 0x{n:01x}",
    "Ex9E": "SKP V{x:01x}",
    "ExA1": "SKNP V{x:01x}",
    "Fx07": "LD V{x:01x}, DT",
    "Fx0A": "LD V{x:01x}, K",
    "Fx15": "LD DT, V{x:01x}",
    "Fx18": "LD ST, V{x:01x}",
    "Fx1E": "ADD I, V{x:01x}",
    "Fx29": "LD F, V{x:01x}",
    "Fx33": "LD B, V{x:01x}",
    "Fx55": "LD [I], V{x:01x}",
    "Fx65": "LD V{x:01x}, [I]",
    "00Cn": "SCD 0x{n:01x}",
    "00FB": "SCR",
    "00FC": "SCL",
    "00FD": "EXIT",
    "00FE": "LOW",
    "00FF": "HIGH",
    "Fx30": "LD HF, V{x:01x}",
    "Fx75": "LD R, V{x:01x}",
    "Fx85": "LD V{x:01x}, R"
}

# Mnemonics that read differently when the matching quirk is enabled
QUIRK_MNEMONICS = {
    "shift": {
        "8xy6": "SHR V{x:01x}",
        "8xyE": "SHL V{x:01x}"
    },
    "jump": {
        "Bnnn": "JP V{x:01x}, 0x{nnn:03x}"
    }
}


def get_kinds(arch):
    return SUPERCHIP_KINDS if arch >= ARCH_SUPERCHIP else CHIP8_KINDS


def get_mnemonics(quirks):
    mnemonics = dict(MNEMONICS)

    for quirk_name, overrides in QUIRK_MNEMONICS.items():
        if getattr(quirks, quirk_name):
            mnemonics.update(overrides)

    return mnemonics


def decode(opcode, kinds):
    """
    Decode an opcode against a kind table from get_kinds().  Returns None if the
    opcode isn't an instruction on that architecture.
    """
    kind = kinds.get(opcode & FAMILY_MASKS.get(opcode >> 12, DEFAULT_MASK))

    if kind is None:
        return None

    return Instruction(
        opcode, kind, (opcode & 0xF00) >> 8, (opcode & 0xF0) >> 4, opcode & 0xF, opcode & 0xFF, opcode & 0xFFF
    )


def describe(instruction, mnemonics):
    return mnemonics[instruction.kind].format(**instruction._asdict())
