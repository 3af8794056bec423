"""
Decoder Tests for the Intcode VM.

Instruction cells are decoded by hand from the ABCDE layout:
DE = opcode, C/B/A = modes of parameters 1/2/3.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode_vm.cpu.decoder import (
    Opcode, ParameterMode, PARAMETER_COUNT, decode_instruction,
)
from intcode_vm.errors import UnrecognizedOpcode, UnrecognizedParameterMode

POS = ParameterMode.POSITION
IMM = ParameterMode.IMMEDIATE
REL = ParameterMode.RELATIVE


class TestOpcodeDecoding:
    def test_multiply_with_immediate_second_parameter(self):
        """1002 -> MUL, modes [0, 1, 0]"""
        inst = decode_instruction(1002)
        assert inst.opcode == Opcode.MUL
        assert inst.modes == (POS, IMM, POS)

    def test_missing_digits_default_to_position(self):
        inst = decode_instruction(1)
        assert inst.opcode == Opcode.ADD
        assert inst.modes == (POS, POS, POS)

    def test_all_three_modes(self):
        """21101 -> ADD, modes [1, 1, 2]"""
        inst = decode_instruction(21101)
        assert inst.opcode == Opcode.ADD
        assert inst.modes == (IMM, IMM, REL)

    def test_output_immediate(self):
        inst = decode_instruction(104)
        assert inst.opcode == Opcode.OUT
        assert inst.modes[0] == IMM

    def test_halt(self):
        inst = decode_instruction(99)
        assert inst.opcode == Opcode.HALT
        assert inst.length == 1

    def test_every_opcode_decodes(self):
        for op in Opcode:
            assert decode_instruction(op.value).opcode == op

    def test_instruction_lengths(self):
        cases = [
            (1, 4), (2, 4), (3, 2), (4, 2), (5, 3),
            (6, 3), (7, 4), (8, 4), (9, 2), (99, 1),
        ]
        for value, length in cases:
            assert decode_instruction(value).length == length, value
            assert PARAMETER_COUNT[Opcode(value)] == length - 1

    def test_digits_above_third_mode_ignored(self):
        inst = decode_instruction(1000001)
        assert inst.opcode == Opcode.ADD
        assert inst.modes == (POS, POS, POS)


class TestDecodeErrors:
    def test_unrecognized_opcode(self):
        with pytest.raises(UnrecognizedOpcode) as exc:
            decode_instruction(5555, address=12)
        assert exc.value.value == 5555
        assert exc.value.address == 12
        assert "at address 12" in str(exc.value)

    def test_zero_is_not_an_opcode(self):
        with pytest.raises(UnrecognizedOpcode):
            decode_instruction(0)

    def test_negative_cell_is_not_an_instruction(self):
        """-1 % 100 would be 99 (HALT) if negatives were not rejected."""
        with pytest.raises(UnrecognizedOpcode):
            decode_instruction(-1)

    def test_bad_mode_first_parameter(self):
        with pytest.raises(UnrecognizedParameterMode) as exc:
            decode_instruction(301, address=4)
        assert exc.value.mode == 3
        assert exc.value.parameter == 1
        assert exc.value.address == 4

    def test_bad_mode_second_parameter(self):
        with pytest.raises(UnrecognizedParameterMode) as exc:
            decode_instruction(3001)
        assert exc.value.parameter == 2
