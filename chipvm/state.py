"""CHIP-8 emulator state structures."""

import time

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipvm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from chipvm.timers import Timers


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Everything except ``timers`` is immutable and replaced by each
    instruction. ``timers`` is a shared object that the 60Hz clock driver
    decrements from another thread, so it is carried by reference.
    ``previous_keypad`` is the keypad as of the poll before ``keypad``.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stack: StackState = StackState()
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    previous_keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    timers: Timers = field(pytree_node=False, default_factory=Timers)
    sprite_wrap: bool = field(pytree_node=False, default=False)


def create_state(
    rng: jax.random.PRNGKey = None,
    timers: Timers = None,
    sprite_wrap: bool = False,
) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Without an explicit ``rng`` the key is seeded from the wall clock, so
    CXNN differs between sessions.
    """
    if rng is None:
        rng = jax.random.PRNGKey(time.time_ns() & 0xFFFFFFFF)
    state = EmulatorState(rng, timers=timers or Timers(), sprite_wrap=sprite_wrap)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
