"""
Intcode VM - Register Set

  IP     instruction pointer, index of the next instruction cell
  RB     relative base, signed, changed only by ARB (opcode 9)
  steps  instructions executed since reset
"""


class Registers:
    """Intcode machine registers."""

    __slots__ = ('IP', 'RB', 'steps')

    def __init__(self):
        self.IP: int = 0
        self.RB: int = 0
        self.steps: int = 0

    def display(self) -> str:
        """Format register state for trace output."""
        return f"IP={self.IP} RB={self.RB} steps={self.steps}"
