"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import ADDRESS_MASK, FLAG_REGISTER
from chipvm.display import draw_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N; VF = collision."""
    rows = state.memory[(state.I + jnp.arange(16)) & ADDRESS_MASK]
    display, collision = draw_sprite(
        state.display,
        rows,
        state.V[instruction.x],
        state.V[instruction.y],
        instruction.n,
        wrap=state.sprite_wrap,
    )
    return state.replace(
        display=display,
        draw_flag=jnp.bool_(True),
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
    )
