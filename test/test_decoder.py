#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from mchip.constants import ARCH_CHIP8, ARCH_SUPERCHIP
from mchip.decoder import (
    CHIP8_KINDS, MNEMONICS, SUPERCHIP_KINDS, Instruction, decode, describe, get_kinds, get_mnemonics
)
from mchip.quirks import get_quirks


class TestDecoder(unittest.TestCase):
    def test_decoder_fields(self):
        self.assertEqual(Instruction(0x8124, "8xy4", 0x1, 0x2, 0x4, 0x24, 0x124), decode(0x8124, CHIP8_KINDS))
        self.assertEqual(Instruction(0xDABF, "Dxyn", 0xA, 0xB, 0xF, 0xBF, 0xABF), decode(0xDABF, CHIP8_KINDS))

    def test_decoder_kinds(self):
        for opcode, kind in (
            (0x00E0, "00E0"), (0x00EE, "00EE"), (0x1234, "1nnn"), (0x5120, "5xy0"), (0x800E, "8xyE"),
            (0x9AB0, "9xy0"), (0xE19E, "Ex9E"), (0xE2A1, "ExA1"), (0xF30A, "Fx0A"), (0xFF65, "Fx65")
        ):
            self.assertEqual(kind, decode(opcode, CHIP8_KINDS).kind)

    def test_decoder_chip8_invalid(self):
        for opcode in (
            0x0000, 0x0001, 0x00E1, 0x5001, 0x8008, 0x800F, 0x9001, 0xE09F, 0xE0A2, 0xF100, 0xFFFF,
            0x00C1, 0x00FB, 0x00FC, 0x00FD, 0x00FE, 0x00FF, 0xF030, 0xF075, 0xF085
        ):
            self.assertIsNone(decode(opcode, CHIP8_KINDS), "0x{:04x}".format(opcode))

    def test_decoder_superchip(self):
        for opcode, kind in (
            (0x00C0, "00Cn"), (0x00CF, "00Cn"), (0x00FB, "00FB"), (0x00FC, "00FC"), (0x00FD, "00FD"),
            (0x00FE, "00FE"), (0x00FF, "00FF"), (0xF130, "Fx30"), (0xF775, "Fx75"), (0xF785, "Fx85"),
            (0x8124, "8xy4")
        ):
            self.assertEqual(kind, decode(opcode, SUPERCHIP_KINDS).kind)

        self.assertIsNone(decode(0x00D1, SUPERCHIP_KINDS))
        self.assertIsNone(decode(0xF002, SUPERCHIP_KINDS))

    def test_decoder_get_kinds(self):
        self.assertIs(CHIP8_KINDS, get_kinds(ARCH_CHIP8))
        self.assertIs(SUPERCHIP_KINDS, get_kinds(ARCH_SUPERCHIP))

    def test_decoder_all_kinds_have_mnemonics(self):
        for kind in set(SUPERCHIP_KINDS.values()):
            self.assertIn(kind, MNEMONICS)

    def test_decoder_describe(self):
        chip8_mnemonics = get_mnemonics(get_quirks(ARCH_CHIP8))
        schip_mnemonics = get_mnemonics(get_quirks(ARCH_SUPERCHIP))
        self.assertEqual("CLS", describe(decode(0x00E0, CHIP8_KINDS), chip8_mnemonics))
        self.assertEqual("LD V3, 0x2a", describe(decode(0x632A, CHIP8_KINDS), chip8_mnemonics))
        self.assertEqual("SHR V1, V2", describe(decode(0x8126, CHIP8_KINDS), chip8_mnemonics))
        self.assertEqual("SHR V1", describe(decode(0x8126, SUPERCHIP_KINDS), schip_mnemonics))
        self.assertEqual("JP V0, 0x123", describe(decode(0xB123, CHIP8_KINDS), chip8_mnemonics))
        self.assertEqual("JP V1, 0x123", describe(decode(0xB123, SUPERCHIP_KINDS), schip_mnemonics))
        self.assertEqual("SCD 0x4", describe(decode(0x00C4, SUPERCHIP_KINDS), schip_mnemonics))
