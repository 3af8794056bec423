"""
Disassembler Tests for the Intcode VM.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from intcode_vm.disassembler import DATA, decode_one, disassemble, listing
from intcode_vm.mem.memory import Memory


class TestDecodeOne:
    def test_operand_notation(self):
        inst = decode_one([1002, 4, 3, 4, 33], 0)
        assert inst.mnemonic == 'MUL'
        assert inst.operands == ['[4]', '#3', '[4]']
        assert inst.raw == (1002, 4, 3, 4)
        assert inst.length == 4

    def test_relative_operands(self):
        assert decode_one([204, -3, 99], 0).operands == ['rb-3']
        assert decode_one([209, 5], 0).operands == ['rb+5']
        assert decode_one([109, 5], 0).operands == ['#5']

    def test_undecodable_cell_is_data(self):
        inst = decode_one([33], 0)
        assert inst.is_data
        assert inst.operands == ['33']

    def test_truncated_instruction_is_data(self):
        inst = decode_one([1, 0], 0)
        assert inst.mnemonic == DATA
        assert inst.length == 1

    def test_truncated_instruction_read_as_executed(self):
        inst = decode_one([1, 0], 0, past_end_as_zero=True)
        assert inst.mnemonic == 'ADD'
        assert inst.raw == (1, 0, 0, 0)
        assert inst.operands == ['[0]', '[0]', '[0]']

    def test_reads_machine_memory(self):
        inst = decode_one(Memory([99]), 0)
        assert inst.mnemonic == 'HALT'


class TestDisassemble:
    def test_linear_walk(self):
        results = disassemble([1002, 4, 3, 4, 33])
        assert [r.address for r in results] == [0, 4]
        assert [r.mnemonic for r in results] == ['MUL', DATA]

    def test_start_offset(self):
        results = disassemble([0, 0, 104, 7, 99], start=2)
        assert [r.mnemonic for r in results] == ['OUT', 'HALT']

    def test_format(self):
        inst = decode_one([1002, 4, 3, 4, 33], 0)
        assert inst.format() == "     0: " + "1002 4 3 4".ljust(20) + " MUL  [4], #3, [4]"

    def test_format_without_operands(self):
        assert str(decode_one([99], 0)) == "     0: " + "99".ljust(20) + " HALT"

    def test_listing(self):
        text = listing([3, 0, 4, 0, 99])
        lines = text.split('\n')
        assert len(lines) == 3
        assert lines[0].endswith("IN   [0]")
        assert lines[1].endswith("OUT  [0]")
        assert lines[2].endswith("HALT")
