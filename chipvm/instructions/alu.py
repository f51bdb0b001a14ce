"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FLAG_REGISTER


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 0 on borrow."""
    not_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = jnp.astype(vx, jnp.int32) - vy
    return jnp.astype(result & 0xFF, jnp.uint8), not_borrow


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 0 on borrow."""
    return alu_sub_xy(vy, vx)


def make_alu_instruction(operation):
    """Factory for two-operand ALU instructions.

    ``operation`` maps (VX, VY) to (result, flag); the result is written to
    VX first and the flag, when not None, to VF afterwards.
    """
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result, flag = operation(state.V[instruction.x], state.V[instruction.y])
        new_V = state.V.at[instruction.x].set(result)
        if flag is not None:
            new_V = new_V.at[FLAG_REGISTER].set(flag)
        return state.replace(V=new_V)
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub = make_alu_instruction(alu_sub_xy)
execute_alu_subn = make_alu_instruction(alu_sub_yx)


def execute_shift_right(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY6 - VF = VY & 1, VY >>= 1, VX = VY.

    VY itself is shifted and then copied into VX, in that order.
    """
    V = state.V
    V = V.at[FLAG_REGISTER].set(V[instruction.y] & 1)
    V = V.at[instruction.y].set(V[instruction.y] >> 1)
    V = V.at[instruction.x].set(V[instruction.y])
    return state.replace(V=V)


def execute_shift_left(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYE - VF = MSB of VY, VY <<= 1, VX = VY."""
    V = state.V
    V = V.at[FLAG_REGISTER].set((V[instruction.y] & 0x80) >> 7)
    V = V.at[instruction.y].set(V[instruction.y] << 1)
    V = V.at[instruction.x].set(V[instruction.y])
    return state.replace(V=V)
