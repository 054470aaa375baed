#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "MiniChip Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Emulated system architectures
ARCH_CHIP8 = 0       # Classic
ARCH_SUPERCHIP = 10  # Extended

# Memory map
MEM_SIZE = 0x1000
MEM_MASK = 0xFFF
SYSFONT_SM_LOC = 0x50
SYSFONT_BG_LOC = 0xA0
PROGRAM_LOC = 0x200  # Also the restart vector when returning from an empty stack

# Hardware limits
STACK_SIZE = 16
NUM_REGISTERS = 0x10
NUM_RPL_REGISTERS = 8  # Super-CHIP user flags

# Display sizes (width, height) of the physical buffer for each architecture
DISPLAY_SIZES = {
    ARCH_CHIP8:     (64, 32),
    ARCH_SUPERCHIP: (128, 64)
}

# Real-time rates used by the host loop
TIMER_FREQ = 60.0            # 60Hz emulated system timer refresh
DEFAULT_CLOCK_SPEED = 600    # 10 instructions per 60Hz frame

# Startup
SUPPORTED_CPUS = {
    "chip8": ARCH_CHIP8,      # Base CPU architecture
    "schip": ARCH_SUPERCHIP   # High res mode, scrolling, large font, user flags
}

# ROM extensions used to pick an architecture when none is given
ARCH_EXTENSIONS = {
    ".ch8": ARCH_CHIP8,
    ".c8":  ARCH_CHIP8,
    ".sc8": ARCH_SUPERCHIP
}

# CPU quirks consulted by the instruction handlers
CPU_QUIRKS = ["logic", "shift", "jump", "load"]
