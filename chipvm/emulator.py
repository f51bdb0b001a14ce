"""Main CHIP-8 emulator execution engine."""

from typing import Optional, Protocol, Union

import jax.numpy as jnp
import numpy as np

from chipvm.state import EmulatorState, create_state
from chipvm.decode import DecodedInstruction, Opcode, decode
from chipvm.constants import ADDRESS_MASK, MAX_PROGRAM_SIZE, NUM_KEYS, PROGRAM_START
from chipvm.display import snapshot
from chipvm.errors import RomLoadError
from chipvm.timers import Timers
from chipvm.instructions.system import execute_clear_screen, execute_return
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipvm.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub, execute_alu_subn, execute_shift_right, execute_shift_left
)
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


HANDLERS = {
    Opcode.CLEAR_SCREEN: execute_clear_screen,
    Opcode.RETURN: execute_return,
    Opcode.JUMP: execute_jump,
    Opcode.CALL: execute_call,
    Opcode.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Opcode.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    Opcode.SKIP_EQ_REG: execute_skip_if_equal_register,
    Opcode.SET_IMM: execute_set,
    Opcode.ADD_IMM: execute_add,
    Opcode.ALU_SET: execute_alu_set,
    Opcode.ALU_OR: execute_alu_or,
    Opcode.ALU_AND: execute_alu_and,
    Opcode.ALU_XOR: execute_alu_xor,
    Opcode.ALU_ADD: execute_alu_add,
    Opcode.ALU_SUB: execute_alu_sub,
    Opcode.ALU_SHR: execute_shift_right,
    Opcode.ALU_SUBN: execute_alu_subn,
    Opcode.ALU_SHL: execute_shift_left,
    Opcode.SKIP_NE_REG: execute_skip_if_not_equal_register,
    Opcode.SET_INDEX: execute_set_index,
    Opcode.JUMP_OFFSET: execute_jump_with_offset,
    Opcode.RANDOM: execute_random,
    Opcode.DRAW: execute_display,
    Opcode.SKIP_KEY: execute_skip_if_key,
    Opcode.SKIP_NOT_KEY: execute_skip_if_not_key,
    Opcode.GET_DELAY: execute_get_delay_timer,
    Opcode.WAIT_KEY: execute_wait_for_key,
    Opcode.SET_DELAY: execute_set_delay_timer,
    Opcode.SET_SOUND: execute_set_sound_timer,
    Opcode.ADD_INDEX: execute_add_to_index,
    Opcode.FONT_CHAR: execute_font_character,
    Opcode.BCD: execute_bcd_conversion,
    Opcode.STORE_REGS: execute_store_registers,
    Opcode.LOAD_REGS: execute_load_registers,
}

_unhandled = set(Opcode) - set(HANDLERS)
if _unhandled:
    raise ImportError(f"No handler for opcodes: {sorted(op.name for op in _unhandled)}")

KEYPAD_OPCODES = frozenset({Opcode.SKIP_KEY, Opcode.SKIP_NOT_KEY, Opcode.WAIT_KEY})


def execute(state: EmulatorState, instruction: Union[int, DecodedInstruction]) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Raises:
        DecodeError: if ``instruction`` is not a defined opcode.
        StackError: on call/return with a full/empty stack.
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)
    return HANDLERS[instruction.kind](state, instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    pc = state.pc & ADDRESS_MASK
    instruction = _pack_u16(state.memory[pc], state.memory[(pc + 1) & ADDRESS_MASK])
    return state.replace(pc=state.pc + 2), instruction


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy a raw program image into memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomLoadError(
            f"Program is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} bytes fit in memory"
        )
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise RomLoadError(f"Failed to read ROM {filename!r}: {e}") from e
    return load_program(state, rom_data)


class Keypad(Protocol):
    """Input layer: reports whether a hex key 0x0..0xF is held."""

    def is_pressed(self, key: int) -> bool:
        ...


class NullKeypad:
    """Keypad with every key released."""

    def is_pressed(self, key: int) -> bool:
        return False


class Interpreter:
    """Stateful driver around the pure fetch/decode/execute functions.

    Holds the current :class:`EmulatorState`, the input layer and the shared
    timers. Nothing here is thread-safe except the timers, which the 60Hz
    clock driver may touch concurrently.
    """

    def __init__(self, state: Optional[EmulatorState] = None, keypad: Optional[Keypad] = None):
        self.state = state if state is not None else create_state()
        self.keypad = keypad if keypad is not None else NullKeypad()
        self.instruction_count = 0

    @classmethod
    def from_rom(cls, filename: str, keypad: Optional[Keypad] = None, **state_kwargs) -> "Interpreter":
        """Build an interpreter with ``filename`` loaded at 0x200."""
        return cls(load_rom(create_state(**state_kwargs), filename), keypad)

    @classmethod
    def from_bytes(cls, data: bytes, keypad: Optional[Keypad] = None, **state_kwargs) -> "Interpreter":
        return cls(load_program(create_state(**state_kwargs), data), keypad)

    @property
    def timers(self) -> Timers:
        return self.state.timers

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    def poll_keypad(self) -> jnp.ndarray:
        return jnp.array([bool(self.keypad.is_pressed(key)) for key in range(NUM_KEYS)], dtype=jnp.bool_)

    def step(self) -> DecodedInstruction:
        """Fetch, decode and execute one instruction."""
        address = self.pc & ADDRESS_MASK
        state, raw = fetch(self.state)
        instruction = decode(int(raw), address)
        if instruction.kind in KEYPAD_OPCODES:
            state = state.replace(previous_keypad=state.keypad, keypad=self.poll_keypad())
        self.state = execute(state, instruction)
        self.instruction_count += 1
        return instruction

    def run(self, steps: int) -> None:
        for _ in range(steps):
            self.step()

    def take_frame(self) -> Optional[np.ndarray]:
        """Display snapshot if the screen changed since the last call."""
        if not bool(self.state.draw_flag):
            return None
        self.state = self.state.replace(draw_flag=jnp.bool_(False))
        return snapshot(self.state.display)
