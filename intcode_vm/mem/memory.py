"""
Intcode VM - Growable Memory

Memory is a flat list of Python ints, logically infinite upward:

  - reading past the end returns 0 and does not grow the list
  - writing past the end zero-fills up to and including the target
  - negative addresses are a fault in both directions

Cells are unbounded Python ints, so there is no word width to overflow.
Growth is monotonic; the list never shrinks while a machine runs.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import MalformedProgram, NegativeAddress, OutOfMemory


class Memory:
    """Zero-filled, auto-growing integer memory."""

    def __init__(self, program: Iterable[int] = ()):
        self._mem: List[int] = list(program)
        for index, value in enumerate(self._mem):
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedProgram("Not an integer", repr(value), index)

    def __len__(self) -> int:
        return len(self._mem)

    def __getitem__(self, addr: int) -> int:
        return self.read(addr)

    # --- Core read/write ---

    def read(self, addr: int, pc: Optional[int] = None) -> int:
        """Read the cell at addr. Unwritten cells past the end read as 0.

        ``pc`` is the instruction address reported if the read faults.
        """
        if addr < 0:
            raise NegativeAddress(addr, pc)
        if addr >= len(self._mem):
            return 0
        return self._mem[addr]

    def write(self, addr: int, value: int, pc: Optional[int] = None):
        """Store value at addr, growing memory first if needed."""
        if addr < 0:
            raise NegativeAddress(addr, pc)
        self.ensure_len(addr + 1, pc)
        self._mem[addr] = value

    def ensure_len(self, length: int, pc: Optional[int] = None):
        """Zero-extend memory so that it holds at least ``length`` cells."""
        missing = length - len(self._mem)
        if missing <= 0:
            return
        try:
            self._mem.extend([0] * missing)
        except (MemoryError, OverflowError):
            raise OutOfMemory(length, pc) from None

    # --- Snapshots ---

    def snapshot(self) -> Tuple[int, ...]:
        """Capture every cell for later inspection or diffing."""
        return tuple(self._mem)

    @staticmethod
    def diff_snapshots(snap_a: Tuple[int, ...],
                       snap_b: Tuple[int, ...]) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changes.

        Cells present in only one snapshot compare against 0.
        """
        changes = {}
        for addr in range(max(len(snap_a), len(snap_b))):
            old = snap_a[addr] if addr < len(snap_a) else 0
            new = snap_b[addr] if addr < len(snap_b) else 0
            if old != new:
                changes[addr] = (old, new)
        return changes

    # --- Dump ---

    def dump(self, start: int = 0, length: Optional[int] = None,
             width: int = 10) -> str:
        """Produce a decimal dump of memory, ``width`` cells per row."""
        if length is None:
            length = max(len(self._mem) - start, 0)
        lines = []
        for offset in range(0, length, width):
            addr = start + offset
            count = min(width, length - offset)
            cells = ' '.join(str(self.read(addr + i)) for i in range(count))
            lines.append(f'{addr:6d}  {cells}')
        return '\n'.join(lines)
