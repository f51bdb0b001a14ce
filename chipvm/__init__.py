"""CHIP-8 virtual machine package."""

from chipvm.state import EmulatorState, create_state
from chipvm.emulator import Interpreter, execute, fetch, load_program, load_rom
from chipvm.decode import DecodedInstruction, Opcode, decode
from chipvm.errors import (
    Chip8Error, DecodeError, RomLoadError, StackError, StackOverflowError, StackUnderflowError
)
from chipvm.timers import Timers
from chipvm.clock import Pacer, TimerClock
from chipvm.constants import *
from chipvm.rendering import COLOR_SCHEMES, create_color_scheme, frame_to_pixels

__all__ = [
    "EmulatorState",
    "create_state",
    "Interpreter",
    "fetch",
    "execute",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Opcode",
    "decode",
    "Chip8Error",
    "DecodeError",
    "RomLoadError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "Timers",
    "TimerClock",
    "Pacer",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "COLOR_SCHEMES",
    "create_color_scheme",
    "frame_to_pixels",
]
