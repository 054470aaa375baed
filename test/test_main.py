#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from mchip import StartupError, main, run
from mchip.constants import ARCH_CHIP8
from mchip.cpu import IllegalInstruction
from mchip.machine import Machine
import minichip


class TestMain(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def _write_rom(self, name, program):
        filename = os.path.join(self.temp_dir.name, name)

        with open(filename, "wb") as f:
            f.write(program)

        return filename

    def _args(self, filename, **overrides):
        args = vars(minichip.parse_args([filename, "-c", "0"]))
        args.update(overrides)
        return args

    def _main(self, args):
        output = io.StringIO()

        with redirect_stdout(output):
            cycles = main(args)

        return cycles, output.getvalue()

    def test_main_runs_until_exit(self):
        filename = self._write_rom("exit.sc8", b"\x00\xFF\x00\xFD")
        cycles, output = self._main(self._args(filename))
        self.assertEqual(2, cycles)
        self.assertIn("MiniChip Emulator", output)
        self.assertIn("Stopped after 2 instructions.", output)

    def test_main_max_cycles(self):
        filename = self._write_rom("loop.ch8", b"\x12\x00")
        cycles, output = self._main(self._args(filename, max_cycles=25))
        self.assertEqual(25, cycles)
        self.assertIn("Stopped after 25 instructions.", output)

    def test_main_dump(self):
        filename = self._write_rom("exit.sc8", b"\x00\xFF\x00\xFD")
        cycles, output = self._main(self._args(filename, dump=True))
        lines = [line for line in output.splitlines() if line.startswith("|")]
        self.assertEqual(64, len(lines))
        self.assertEqual("|{}|".format(" " * 128), lines[0])

    def test_main_dump_after_crash(self):
        filename = self._write_rom("bad.ch8", b"\x00\xE0\xFF\xFF")
        args = self._args(filename, dump=True)
        output = io.StringIO()

        with redirect_stdout(output):
            with self.assertRaises(IllegalInstruction):
                main(args)

        self.assertIn("|{}|".format(" " * 64), output.getvalue())

    def test_main_debug(self):
        filename = self._write_rom("exit.rom", b"\x00\xFF\x00\xFD")
        cycles, output = self._main(self._args(filename, arch="schip", debug=True))
        self.assertIn("IN: HIGH", output)
        self.assertIn("IN: EXIT", output)

    def test_main_arch_from_extension(self):
        # 00FF is only an instruction on Super-CHIP
        filename = self._write_rom("exit.ch8", b"\x00\xFF\x00\xFD")
        self.assertRaises(IllegalInstruction, self._main, self._args(filename))

    def test_main_unknown_arch(self):
        filename = self._write_rom("exit.sc8", b"\x00\xFD")
        self.assertRaises(StartupError, self._main, self._args(filename, arch="xochip"))

    def test_main_seed(self):
        # RND V0, 0xff then LD [I], V0 stores it at I = 0x300 for comparison
        program = b"\xA3\x00\xC0\xFF\xF0\x55\x00\xFD"
        filename = self._write_rom("rnd.sc8", program)
        first = self._main(self._args(filename, seed=42))
        second = self._main(self._args(filename, seed=42))
        self.assertEqual(first, second)

    def test_main_quirk_override(self):
        # Quirk settings can be forced from the command line
        program = b"\xA3\x00\x60\x07\xF0\x55\xF0\x55\x00\xFD"
        filename = self._write_rom("quirk.sc8", program)
        cycles, output = self._main(self._args(filename, load_quirks=1))
        self.assertEqual(5, cycles)


class TestRun(unittest.TestCase):
    def _machine(self, program):
        machine = Machine(ARCH_CHIP8)
        machine.load_default_fonts()
        machine.load_program(program)
        return machine

    def test_run_max_cycles(self):
        machine = self._machine(b"\x12\x00")
        self.assertEqual(50, run(machine, clock_speed=0, max_cycles=50))
        self.assertEqual(0x200, machine.cpu.pc)

    def test_run_keys_and_random(self):
        # SKP V0 then RND V1, 0xff
        machine = self._machine(b"\x60\x03\xE0\x9E\x00\x00\xC1\xFF\x12\x08")
        run(machine, clock_speed=0, max_cycles=4, held_keys=lambda: 1 << 3, random=lambda: 0x42)
        self.assertEqual(0x42, machine.cpu.v[0x1])

    def test_run_timers(self):
        machine = self._machine(b"\x60\xFF\xF0\x15\x12\x04")
        run(machine, clock_speed=600, max_cycles=60)
        # About 0.1 seconds at 600 instructions per second, so a few 60Hz ticks
        self.assertLess(machine.delay_timer, 0xFF)

    def test_run_interrupted(self):
        def held_keys():
            raise KeyboardInterrupt

        machine = self._machine(b"\xE0\x9E")
        output = io.StringIO()

        with redirect_stdout(output):
            cycles = run(machine, clock_speed=0, held_keys=held_keys)

        self.assertEqual(1, cycles)
        self.assertIn("Interrupted after 1 instructions.", output.getvalue())


class TestArgs(unittest.TestCase):
    def test_args_defaults(self):
        args = vars(minichip.parse_args(["game.ch8"]))
        self.assertEqual("game.ch8", args["filename"])
        self.assertIsNone(args["arch"])
        self.assertIsNone(args["clock_speed"])
        self.assertEqual(0, args["max_cycles"])
        self.assertIsNone(args["seed"])
        self.assertFalse(args["debug"])
        self.assertFalse(args["dump"])

        for quirk in ("logic", "shift", "jump", "load"):
            self.assertIsNone(args["{}_quirks".format(quirk)])

    def test_args_options(self):
        args = vars(
            minichip.parse_args(
                ["game.sc8", "-a", "schip", "-c", "1000", "-n", "99", "--seed", "7", "--shift_quirks", "0", "-d"]
            )
        )
        self.assertEqual("schip", args["arch"])
        self.assertEqual(1000, args["clock_speed"])
        self.assertEqual(99, args["max_cycles"])
        self.assertEqual(7, args["seed"])
        self.assertEqual(0, args["shift_quirks"])
        self.assertTrue(args["debug"])
