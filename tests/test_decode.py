"""Tests for instruction decoding."""

import pytest
from chipvm import decode, DecodeError, Opcode
from chipvm.decode import nibble, classify, PATTERNS
from chipvm.emulator import HANDLERS


class TestFields:
    """Pure field extraction."""

    def test_fields(self):
        inst = decode(0xD12F)
        assert inst.raw == 0xD12F
        assert inst.kind == Opcode.DRAW
        assert (inst.x, inst.y, inst.n) == (1, 2, 0xF)
        assert inst.nn == 0x2F
        assert inst.nnn == 0x12F

    def test_nibbles_most_significant_first(self):
        inst = decode(0xA5B7)
        assert [inst.nibble(i) for i in range(4)] == [0xA, 0x5, 0xB, 0x7]

    def test_nibble_out_of_range(self):
        with pytest.raises(IndexError):
            nibble(0x1234, 4)

    def test_str(self):
        assert str(decode(0x00E0)) == "00E0 CLEAR_SCREEN"


class TestClassification:
    """Mapping raw words to instruction kinds."""

    @pytest.mark.parametrize("word, kind", [
        (0x00E0, Opcode.CLEAR_SCREEN),
        (0x00EE, Opcode.RETURN),
        (0x1ABC, Opcode.JUMP),
        (0x2ABC, Opcode.CALL),
        (0x3A12, Opcode.SKIP_EQ_IMM),
        (0x4A12, Opcode.SKIP_NE_IMM),
        (0x5AB0, Opcode.SKIP_EQ_REG),
        (0x6A12, Opcode.SET_IMM),
        (0x7A12, Opcode.ADD_IMM),
        (0x8AB0, Opcode.ALU_SET),
        (0x8AB1, Opcode.ALU_OR),
        (0x8AB2, Opcode.ALU_AND),
        (0x8AB3, Opcode.ALU_XOR),
        (0x8AB4, Opcode.ALU_ADD),
        (0x8AB5, Opcode.ALU_SUB),
        (0x8AB6, Opcode.ALU_SHR),
        (0x8AB7, Opcode.ALU_SUBN),
        (0x8ABE, Opcode.ALU_SHL),
        (0x9AB0, Opcode.SKIP_NE_REG),
        (0xAABC, Opcode.SET_INDEX),
        (0xBABC, Opcode.JUMP_OFFSET),
        (0xCA12, Opcode.RANDOM),
        (0xDAB5, Opcode.DRAW),
        (0xEA9E, Opcode.SKIP_KEY),
        (0xEAA1, Opcode.SKIP_NOT_KEY),
        (0xFA07, Opcode.GET_DELAY),
        (0xFA0A, Opcode.WAIT_KEY),
        (0xFA15, Opcode.SET_DELAY),
        (0xFA18, Opcode.SET_SOUND),
        (0xFA1E, Opcode.ADD_INDEX),
        (0xFA29, Opcode.FONT_CHAR),
        (0xFA33, Opcode.BCD),
        (0xFA55, Opcode.STORE_REGS),
        (0xFA65, Opcode.LOAD_REGS),
    ])
    def test_every_opcode(self, word, kind):
        assert decode(word).kind == kind

    def test_every_kind_has_a_pattern_and_handler(self):
        assert {kind for _, _, kind in PATTERNS} == set(Opcode)
        assert set(HANDLERS) == set(Opcode)

    def test_undefined_words(self):
        undefined = [w for w in range(0x10000) if classify(w) is None]
        # 0NNN (4094) + 5XYn/9XYn (2*3840) + 8XYn (7*256) + EXnn (4064) + FXnn (3952)
        assert len(undefined) == 4094 + 7680 + 1792 + 4064 + 3952

    def test_decode_error_carries_word_and_address(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(0xFFFF, 0x2A4)
        assert excinfo.value.raw == 0xFFFF
        assert excinfo.value.address == 0x2A4
        assert "0xFFFF" in str(excinfo.value)
        assert "0x2A4" in str(excinfo.value)

    def test_decode_error_without_address(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(0x5121)
        assert excinfo.value.address is None
        assert str(excinfo.value) == "Unknown instruction 0x5121"
