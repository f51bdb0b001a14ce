"""CHIP-8 instruction decoding."""

from enum import IntEnum, auto
from typing import Optional

from chex import dataclass

from chipvm.errors import DecodeError


class Opcode(IntEnum):
    """Every instruction kind the interpreter knows how to execute."""
    CLEAR_SCREEN = auto()  # 00E0
    RETURN = auto()        # 00EE
    JUMP = auto()          # 1NNN
    CALL = auto()          # 2NNN
    SKIP_EQ_IMM = auto()   # 3XNN
    SKIP_NE_IMM = auto()   # 4XNN
    SKIP_EQ_REG = auto()   # 5XY0
    SET_IMM = auto()       # 6XNN
    ADD_IMM = auto()       # 7XNN
    ALU_SET = auto()       # 8XY0
    ALU_OR = auto()        # 8XY1
    ALU_AND = auto()       # 8XY2
    ALU_XOR = auto()       # 8XY3
    ALU_ADD = auto()       # 8XY4
    ALU_SUB = auto()       # 8XY5
    ALU_SHR = auto()       # 8XY6
    ALU_SUBN = auto()      # 8XY7
    ALU_SHL = auto()       # 8XYE
    SKIP_NE_REG = auto()   # 9XY0
    SET_INDEX = auto()     # ANNN
    JUMP_OFFSET = auto()   # BNNN
    RANDOM = auto()        # CXNN
    DRAW = auto()          # DXYN
    SKIP_KEY = auto()      # EX9E
    SKIP_NOT_KEY = auto()  # EXA1
    GET_DELAY = auto()     # FX07
    WAIT_KEY = auto()      # FX0A
    SET_DELAY = auto()     # FX15
    SET_SOUND = auto()     # FX18
    ADD_INDEX = auto()     # FX1E
    FONT_CHAR = auto()     # FX29
    BCD = auto()           # FX33
    STORE_REGS = auto()    # FX55
    LOAD_REGS = auto()     # FX65


# (mask, pattern, kind) checked in order; first match wins.
PATTERNS = (
    (0xFFFF, 0x00E0, Opcode.CLEAR_SCREEN),
    (0xFFFF, 0x00EE, Opcode.RETURN),
    (0xF000, 0x1000, Opcode.JUMP),
    (0xF000, 0x2000, Opcode.CALL),
    (0xF000, 0x3000, Opcode.SKIP_EQ_IMM),
    (0xF000, 0x4000, Opcode.SKIP_NE_IMM),
    (0xF00F, 0x5000, Opcode.SKIP_EQ_REG),
    (0xF000, 0x6000, Opcode.SET_IMM),
    (0xF000, 0x7000, Opcode.ADD_IMM),
    (0xF00F, 0x8000, Opcode.ALU_SET),
    (0xF00F, 0x8001, Opcode.ALU_OR),
    (0xF00F, 0x8002, Opcode.ALU_AND),
    (0xF00F, 0x8003, Opcode.ALU_XOR),
    (0xF00F, 0x8004, Opcode.ALU_ADD),
    (0xF00F, 0x8005, Opcode.ALU_SUB),
    (0xF00F, 0x8006, Opcode.ALU_SHR),
    (0xF00F, 0x8007, Opcode.ALU_SUBN),
    (0xF00F, 0x800E, Opcode.ALU_SHL),
    (0xF00F, 0x9000, Opcode.SKIP_NE_REG),
    (0xF000, 0xA000, Opcode.SET_INDEX),
    (0xF000, 0xB000, Opcode.JUMP_OFFSET),
    (0xF000, 0xC000, Opcode.RANDOM),
    (0xF000, 0xD000, Opcode.DRAW),
    (0xF0FF, 0xE09E, Opcode.SKIP_KEY),
    (0xF0FF, 0xE0A1, Opcode.SKIP_NOT_KEY),
    (0xF0FF, 0xF007, Opcode.GET_DELAY),
    (0xF0FF, 0xF00A, Opcode.WAIT_KEY),
    (0xF0FF, 0xF015, Opcode.SET_DELAY),
    (0xF0FF, 0xF018, Opcode.SET_SOUND),
    (0xF0FF, 0xF01E, Opcode.ADD_INDEX),
    (0xF0FF, 0xF029, Opcode.FONT_CHAR),
    (0xF0FF, 0xF033, Opcode.BCD),
    (0xF0FF, 0xF055, Opcode.STORE_REGS),
    (0xF0FF, 0xF065, Opcode.LOAD_REGS),
)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    kind: Opcode
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    def nibble(self, index: int) -> int:
        """Return nibble ``index`` counted from the most significant (0..3)."""
        return nibble(self.raw, index)

    def __str__(self) -> str:
        return f"{self.raw:04X} {self.kind.name}"


def nibble(instruction: int, index: int) -> int:
    """Extract 4-bit field ``index`` (0 = most significant) of a 16-bit word."""
    if not 0 <= index <= 3:
        raise IndexError(f"nibble index must be in 0..3, got {index}")
    return (instruction >> (12 - 4 * index)) & 0xF


def classify(instruction: int) -> Optional[Opcode]:
    """Map a raw word to its instruction kind, or None if it is undefined."""
    for mask, pattern, kind in PATTERNS:
        if instruction & mask == pattern:
            return kind
    return None


def decode(instruction: int, address: Optional[int] = None) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Raises:
        DecodeError: if the word matches no defined instruction.
    """
    instruction = int(instruction) & 0xFFFF
    kind = classify(instruction)
    if kind is None:
        raise DecodeError(instruction, address)
    return DecodedInstruction(
        raw=instruction,
        kind=kind,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
