"""CHIP-8 interpreter package."""

from octet.state import EmulatorState, Status, create_state
from octet.emulator import (
    execute, fetch, cycle, step, run_cycles, tick_timers, set_key, load_program, load_rom, read_rom,
)
from octet.decode import DecodedInstruction, Op, decode
from octet.frame import FrameView
from octet.config import MachineConfig, Quirks, load_config
from octet.errors import (
    Chip8Error, InvalidKeyError, InvalidSizeError, StackFaultError, StackOverflowError,
    StackUnderflowError,
)
from octet.machine import Machine
from octet.constants import *

__all__ = [
    "EmulatorState",
    "Status",
    "create_state",
    "fetch",
    "execute",
    "cycle",
    "step",
    "run_cycles",
    "tick_timers",
    "set_key",
    "load_program",
    "load_rom",
    "read_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "FrameView",
    "MachineConfig",
    "Quirks",
    "load_config",
    "Chip8Error",
    "InvalidKeyError",
    "InvalidSizeError",
    "StackFaultError",
    "StackOverflowError",
    "StackUnderflowError",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "MAX_PROGRAM_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
