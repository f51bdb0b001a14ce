"""Exceptions raised by the CHIP-8 engine."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every fatal engine fault."""


class RomLoadError(Chip8Error):
    """Program image could not be loaded into memory."""


class DecodeError(Chip8Error):
    """Fetched word does not match any defined instruction."""

    def __init__(self, raw: int, address: Optional[int] = None):
        self.raw = raw
        self.address = address
        location = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Unknown instruction 0x{raw:04X}{location}")


class StackError(Chip8Error):
    """Call/return discipline violated by the running program."""


class StackOverflowError(StackError):
    """Call issued while the stack is full."""


class StackUnderflowError(StackError):
    """Return issued with an empty stack."""
