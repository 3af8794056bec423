"""
Intcode VM - Instruction Decoder

An instruction cell packs the opcode into its two low decimal digits and
one parameter mode per higher digit:

    ABCDE
     1002
    DE = 02  opcode (multiply)
    C  = 0   mode of parameter 1
    B  = 1   mode of parameter 2
    A  = 0   mode of parameter 3 (leading zero omitted)

Parameter modes:
  POSITION   the parameter is the address of the cell to read or write
  IMMEDIATE  the parameter is the value itself (never a write target)
  RELATIVE   the parameter plus the relative base is the address

Digits above the third mode are ignored.
"""

from enum import IntEnum
from typing import NamedTuple, Optional, Tuple

from ..errors import UnrecognizedOpcode, UnrecognizedParameterMode


class Opcode(IntEnum):
    ADD = 1
    MUL = 2
    IN = 3
    OUT = 4
    JNZ = 5
    JZ = 6
    LT = 7
    EQ = 8
    ARB = 9
    HALT = 99


class ParameterMode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


MODES_PER_INSTRUCTION = 3

# opcode -> number of parameter cells following the instruction cell
PARAMETER_COUNT = {
    Opcode.ADD:  3,
    Opcode.MUL:  3,
    Opcode.IN:   1,
    Opcode.OUT:  1,
    Opcode.JNZ:  2,
    Opcode.JZ:   2,
    Opcode.LT:   3,
    Opcode.EQ:   3,
    Opcode.ARB:  1,
    Opcode.HALT: 0,
}

_VALID_OPCODES = {op.value: op for op in Opcode}
_VALID_MODES = {mode.value: mode for mode in ParameterMode}


class Instruction(NamedTuple):
    opcode: Opcode
    modes: Tuple[ParameterMode, ParameterMode, ParameterMode]

    @property
    def parameter_count(self) -> int:
        return PARAMETER_COUNT[self.opcode]

    @property
    def length(self) -> int:
        """Cells occupied by the instruction, including the opcode cell."""
        return 1 + self.parameter_count


def decode_instruction(value: int, address: Optional[int] = None) -> Instruction:
    """Split an instruction cell into its opcode and parameter modes.

    Raises UnrecognizedOpcode for an opcode outside the instruction set
    (negative cells included) and UnrecognizedParameterMode for a mode
    digit other than 0, 1 or 2. ``address`` is only used for error context.
    """
    if value < 0:
        raise UnrecognizedOpcode(value, address)

    opcode = _VALID_OPCODES.get(value % 100)
    if opcode is None:
        raise UnrecognizedOpcode(value, address)

    modes = []
    digits = value // 100
    for parameter in range(1, MODES_PER_INSTRUCTION + 1):
        digit = digits % 10
        digits //= 10
        mode = _VALID_MODES.get(digit)
        if mode is None:
            raise UnrecognizedParameterMode(digit, parameter, address)
        modes.append(mode)

    return Instruction(opcode, tuple(modes))
