"""
Memory Tests for the Intcode VM.

Memory is an infinite zero-filled tape: reads past the end see 0,
writes past the end grow the list.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode_vm.mem.memory import Memory
from intcode_vm.errors import MalformedProgram, NegativeAddress, OutOfMemory


class TestReadWrite:
    def test_read_loaded_program(self):
        mem = Memory([1, 2, 3])
        assert mem.read(0) == 1
        assert mem[2] == 3
        assert len(mem) == 3

    def test_read_past_end_is_zero_and_does_not_grow(self):
        mem = Memory([1, 2, 3])
        assert mem.read(1000) == 0
        assert len(mem) == 3

    def test_write_past_end_zero_fills(self):
        """Growth preserves every earlier cell and zero-fills the gap."""
        mem = Memory([1, 2, 3])
        mem.write(6, 9)
        assert mem.snapshot() == (1, 2, 3, 0, 0, 0, 9)

    def test_write_in_range_does_not_grow(self):
        mem = Memory([1, 2, 3])
        mem.write(1, 42)
        assert mem.snapshot() == (1, 42, 3)

    def test_large_values_kept_exactly(self):
        mem = Memory()
        mem.write(0, 1125899906842624 * 1000)
        assert mem.read(0) == 1125899906842624000

    def test_negative_read(self):
        with pytest.raises(NegativeAddress) as exc:
            Memory([1]).read(-1, pc=7)
        assert exc.value.target == -1
        assert exc.value.address == 7

    def test_negative_write(self):
        mem = Memory([1])
        with pytest.raises(NegativeAddress):
            mem.write(-5, 0)
        assert mem.snapshot() == (1,)

    def test_program_is_copied(self):
        program = [1, 2, 3]
        mem = Memory(program)
        mem.write(0, 99)
        assert program[0] == 1

    def test_write_beyond_addressable_range(self):
        mem = Memory([1])
        with pytest.raises(OutOfMemory) as exc:
            mem.write(2 ** 70, 5, pc=3)
        assert exc.value.requested == 2 ** 70 + 1
        assert exc.value.address == 3
        assert mem.snapshot() == (1,)

    def test_float_cell_rejected(self):
        with pytest.raises(MalformedProgram) as exc:
            Memory([1, 1.5, 99])
        assert exc.value.index == 1

    def test_bool_cell_rejected(self):
        with pytest.raises(MalformedProgram):
            Memory([True])


class TestBulkAndDebug:
    def test_ensure_len_never_shrinks(self):
        mem = Memory([1, 2, 3])
        mem.ensure_len(1)
        assert len(mem) == 3
        mem.ensure_len(5)
        assert len(mem) == 5

    def test_diff_snapshots(self):
        mem = Memory([1, 2, 3])
        before = mem.snapshot()
        mem.write(1, 20)
        mem.write(4, 5)
        assert Memory.diff_snapshots(before, mem.snapshot()) == {
            1: (2, 20),
            4: (0, 5),
        }

    def test_dump_rows(self):
        mem = Memory(range(12))
        lines = mem.dump().split('\n')
        assert lines == [
            '     0  0 1 2 3 4 5 6 7 8 9',
            '    10  10 11',
        ]

    def test_dump_window_reads_past_end_as_zero(self):
        mem = Memory([5])
        assert mem.dump(0, 3) == '     0  5 0 0'
