#!/usr/bin/env python3

"""
CPU Quirks

CHIP-8 and Super-CHIP decode the same opcodes, but a handful behave slightly
differently depending on the machine.  Rather than testing the architecture
inside each instruction, the CPU looks up one Quirks record when it is built
and consults its flags at exactly four points:

- Logic quirks : 8xy1/8xy2/8xy3 reset Vf afterwards.  CHIP-8 only.
- Shift quirks : 8xy6/8xyE shift Vx in place instead of reading Vy.  Super-CHIP only.
- Jump quirks  : Bnnn adds Vx (x taken from the address) instead of V0.  Super-CHIP only.
- Load quirks  : Fx55/Fx65 leave I pointing past the last register.  CHIP-8 only.

Adding another machine only needs another entry in ARCH_QUIRKS.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from .constants import ARCH_CHIP8, ARCH_SUPERCHIP, CPU_QUIRKS


class QuirksError(Exception):
    pass


Quirks = namedtuple("Quirks", CPU_QUIRKS)

ARCH_QUIRKS = {
    ARCH_CHIP8:     Quirks(logic=True, shift=False, jump=False, load=True),
    ARCH_SUPERCHIP: Quirks(logic=False, shift=True, jump=True, load=False)
}


def get_quirks(arch, **overrides):
    """
    Return the quirks for an architecture.  Overrides are keyed by quirk name,
    and a value of None keeps the architecture's default.
    """
    quirks = ARCH_QUIRKS.get(arch)

    if quirks is None:
        raise QuirksError("No quirks are defined for architecture {}".format(arch))

    unknown = set(overrides) - set(CPU_QUIRKS)

    if unknown:
        raise QuirksError("Unknown quirks: {}".format(", ".join(sorted(unknown))))

    return quirks._replace(**{name: bool(value) for name, value in overrides.items() if value is not None})
