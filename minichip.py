#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

from argparse import ArgumentParser
from mchip import main
from mchip.constants import SUPPORTED_CPUS, CPU_QUIRKS


def parse_args(argv=None):
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8, .c8 or .sc8)")
    parser.add_argument(
        "-a", "--arch", choices=list(SUPPORTED_CPUS.keys()),
        help="set CPU instructions and quirks for CHIP-8 or Super-CHIP (chosen by file extension by default)"
    )
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="set the CPU speed in operations/second (default 600, 0 = uncapped)"
    )
    parser.add_argument(
        "-n", "--max_cycles", type=int, default=0,
        help="stop after this many instructions (default 0 = run until the program exits)"
    )
    parser.add_argument(
        "--seed", type=int,
        help="seed the random number source, so runs can be repeated exactly"
    )

    for cpu_quirk in CPU_QUIRKS:
        parser.add_argument(
            "--{}_quirks".format(cpu_quirk), type=int, choices=[0, 1],
            help="manually disable or enable {} quirks".format(cpu_quirk)
        )

    parser.add_argument(
        "--dump", action="store_true", default=False,
        help="print the screen as text when emulation stops"
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output for every instruction.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


if __name__ == "__main__":
    args = vars(parse_args())
    # It is possible to start the emulator from another program by calling this with a dictionary
    main(args)
