#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or another program.

All options must be supplied.  Defaults can be specified with a 'None'.

There is no display, keyboard or audio attached.  Keys are never held, and the
screen can be printed as text when the program finishes.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from time import perf_counter
from .constants import (
    APP_INTRO, APP_COPYRIGHT, ARCH_SUPERCHIP, CPU_QUIRKS, DEFAULT_CLOCK_SPEED, SUPPORTED_CPUS, TIMER_FREQ
)
from .cpu import ProgramExited
from .debugger import Debugger
from .hostio import Loader
from .machine import Machine
from .quirks import get_quirks

TIMER_INTERVAL = 1.0 / TIMER_FREQ


class StartupError(Exception):
    pass


def no_keys_held():
    return 0


def run(machine, clock_speed=DEFAULT_CLOCK_SPEED, max_cycles=0, held_keys=no_keys_held, random=None):
    """
    Drive a machine until its program exits, max_cycles instructions have run
    (0 = no limit), or the user interrupts.  Timers are ticked at 60Hz of real
    time, and instructions at clock_speed per second (0 = as fast as possible).
    Returns the number of instructions run.
    """
    if random is None:
        rng = Random()

        def random():
            return rng.randint(0, 0xFF)

    core_interval = None if clock_speed <= 0 else 1.0 / clock_speed
    next_timer_time = perf_counter() + TIMER_INTERVAL
    cycles = 0

    try:
        while not max_cycles or cycles < max_cycles:
            this_time = perf_counter()  # Do this first for maximum precision

            # If the CPU gets lagged, the timers will jump to catch up with real time
            while this_time >= next_timer_time:
                machine.tick_timer()
                next_timer_time += TIMER_INTERVAL

            cycles += 1
            machine.tick(held_keys, random)

            if core_interval is not None:
                # Wait for next CPU instruction.  Takes into account time spent on this instruction.
                next_time = this_time + core_interval

                while perf_counter() < next_time:
                    pass
    except ProgramExited:
        pass
    except KeyboardInterrupt:
        print("Interrupted after {} instructions.".format(cycles))

    return cycles


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    quirk_settings = {}

    for cpu_quirk in CPU_QUIRKS:
        quirk_setting = args["{}_quirks".format(cpu_quirk)]
        quirk_settings[cpu_quirk] = None if quirk_setting is None else bool(quirk_setting)

    loader = Loader()
    filename = args["filename"]
    arch_name = args["arch"]

    if arch_name is None:
        arch = loader.guess_arch(filename)
    elif arch_name in SUPPORTED_CPUS:
        arch = SUPPORTED_CPUS[arch_name]
    else:
        raise StartupError("Unknown architecture '{}'".format(arch_name))

    clock_speed = args["clock_speed"]
    max_cycles = args["max_cycles"]

    # Set up debugger and live output if necessary
    debugger = Debugger()
    debugger.set_live(bool(args["debug"]))

    machine = Machine(arch, quirks=get_quirks(arch, **quirk_settings), debugger=debugger)

    # Write system fonts into RAM
    machine.load_font(loader.load_system_font("8"))

    if arch >= ARCH_SUPERCHIP:
        machine.load_big_font(loader.load_system_font("16"))

    # Read ROM binary and write it into RAM
    machine.load_program(loader.load_binary(filename))

    rng = Random(args["seed"])

    def random_byte():
        return rng.randint(0, 0xFF)

    try:
        cycles = run(
            machine,
            clock_speed=DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed,
            max_cycles=0 if max_cycles is None else max_cycles,
            random=random_byte
        )
    finally:
        # Show the screen even if the program crashed, as it often explains why
        if args["dump"]:
            print(debugger.dump_display(machine.framebuffer))

    print("Stopped after {} instructions.".format(cycles))
    return cycles
