"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import ADDRESS_MASK, FONT_START, FONT_GLYPH_SIZE


def font_address(digit: int) -> int:
    """Base address of the 5-byte glyph for hex digit ``digit``."""
    return FONT_START + (int(digit) & 0xF) * FONT_GLYPH_SIZE


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.timers.delay))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    state.timers.set_delay(int(state.V[instruction.x]))
    return state


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    state.timers.set_sound(int(state.V[instruction.x]))
    return state


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register (16-bit wraparound, VF unaffected)."""
    new_i = jnp.astype(state.I, jnp.int32) + state.V[instruction.x]
    return state.replace(I=jnp.astype(new_i & 0xFFFF, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Only a key that went from released to pressed between the last two
    polls counts; a key held since before the wait does not. Until one
    arrives the program counter is rewound so the instruction runs again on
    the next step, and the driver keeps servicing timers meanwhile.
    """
    presses = state.keypad & ~state.previous_keypad
    if not jnp.any(presses):
        return state.replace(pc=state.pc - 2)
    pressed_key = jnp.astype(jnp.argmax(presses), jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(pressed_key))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    return state.replace(I=jnp.astype(font_address(state.V[instruction.x]), jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.arange(3) + state.I) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I; I unchanged."""
    count = instruction.x + 1
    indices = (state.I + jnp.arange(count)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(state.V[:count]))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I; I unchanged."""
    count = instruction.x + 1
    indices = (state.I + jnp.arange(count)) & ADDRESS_MASK
    return state.replace(V=state.V.at[:count].set(state.memory[indices]))
