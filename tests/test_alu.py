"""Tests for ALU operations (8xxx)."""

import pytest
from chipvm import execute, DecodeError


def with_registers(state, **values):
    """Return ``state`` with registers set, e.g. ``with_registers(s, v1=3)``."""
    V = state.V
    for name, value in values.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = with_registers(fresh_state, v1=0x42, v2=0x99)
        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = with_registers(fresh_state, v1=0xF0, v2=0x0F)
        state = execute(state, 0x8121)  # V1 |= V2
        assert state.V[1] == 0xFF

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = with_registers(fresh_state, v1=0xF0, v2=0xF1)
        state = execute(state, 0x8122)  # V1 &= V2
        assert state.V[1] == 0xF0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = with_registers(fresh_state, v1=0xFF, v2=0xF0)
        state = execute(state, 0x8123)  # V1 ^= V2
        assert state.V[1] == 0x0F

    @pytest.mark.parametrize("instruction", [0x8120, 0x8121, 0x8122, 0x8123])
    def test_logic_ops_leave_flag_alone(self, fresh_state, instruction):
        """8XY0-8XY3 do not write VF."""
        state = with_registers(fresh_state, v1=0x0C, v2=0x0A, vf=0x55)
        state = execute(state, instruction)
        assert state.V[15] == 0x55


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    @pytest.mark.parametrize("a, b", [(0x10, 0x20), (0xFF, 0x01), (0x80, 0x80), (0xFF, 0xFF), (0, 0), (200, 55), (200, 56)])
    def test_alu_add(self, fresh_state, a, b):
        """8XY4 - VX = (a + b) mod 256, VF = carry."""
        state = with_registers(fresh_state, v1=a, v2=b)
        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == (a + b) % 256
        assert state.V[15] == int(a + b > 255)

    @pytest.mark.parametrize("a, b", [(0x30, 0x10), (0x10, 0x30), (0x42, 0x42), (0, 1), (0xFF, 0)])
    def test_alu_sub_xy(self, fresh_state, a, b):
        """8XY5 - VX = (a - b) mod 256, VF = 0 on borrow."""
        state = with_registers(fresh_state, v3=a, v4=b)
        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == (a - b) % 256
        assert state.V[15] == int(a >= b)

    @pytest.mark.parametrize("a, b", [(0x10, 0x30), (0x30, 0x10), (0x42, 0x42)])
    def test_alu_sub_yx(self, fresh_state, a, b):
        """8XY7 - VX = (VY - VX) mod 256, VF = 0 on borrow."""
        state = with_registers(fresh_state, v1=a, v2=b)
        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == (b - a) % 256
        assert state.V[15] == int(b >= a)

    def test_flag_overrides_result_when_target_is_vf(self, fresh_state):
        """8FY4 - The carry is written after the sum."""
        state = with_registers(fresh_state, vf=0xFF, v1=0x02)
        state = execute(state, 0x8F14)
        assert state.V[15] == 1


class TestALUShifts:
    """Shifts operate on VY and copy the result into VX."""

    def test_shift_right_uses_vy(self, fresh_state):
        """8XY6 - VF = VY & 1, VY >>= 1, VX = VY."""
        state = with_registers(fresh_state, v5=0x08, v6=0x03)
        state = execute(state, 0x8566)

        assert state.V[5] == 0x01
        assert state.V[6] == 0x01
        assert state.V[15] == 1

    def test_shift_right_even(self, fresh_state):
        state = with_registers(fresh_state, v1=0xFF, v2=0x04)
        state = execute(state, 0x8126)

        assert state.V[1] == 0x02
        assert state.V[2] == 0x02
        assert state.V[15] == 0

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - VF = MSB of VY, VY <<= 1, VX = VY."""
        state = with_registers(fresh_state, v3=0x00, v4=0x81)
        state = execute(state, 0x834E)

        assert state.V[3] == 0x02
        assert state.V[4] == 0x02
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        state = with_registers(fresh_state, v3=0xFF, v4=0x41)
        state = execute(state, 0x834E)

        assert state.V[3] == 0x82
        assert state.V[4] == 0x82
        assert state.V[15] == 0

    def test_shift_same_register(self, fresh_state):
        """8XX6 - Shifting a register into itself."""
        state = with_registers(fresh_state, v7=0x05)
        state = execute(state, 0x8776)

        assert state.V[7] == 0x02
        assert state.V[15] == 1


class TestALUEdgeCases:
    """Test edge cases and comprehensive scenarios."""

    @pytest.mark.parametrize("op", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_alu_undefined_operations(self, fresh_state, op):
        """Undefined 8XYN variants are fatal."""
        with pytest.raises(DecodeError):
            execute(fresh_state, 0x8120 | op)

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = with_registers(fresh_state, v5=0xAA)

        state = execute(state, 0x8553)
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        state = with_registers(state, v5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_register_operations(self, fresh_state):
        """Test that operations on VF work correctly."""
        state = with_registers(fresh_state, vf=0x42, v1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52, "Addition with VF as source failed"
        assert state.V[15] == 0, "VF should be overwritten by operation result"
