"""
Intcode VM - Disassembler

Renders a program as a listing of decoded instructions:

    from intcode_vm.disassembler import disassemble

    for inst in disassemble([1002, 4, 3, 4, 33]):
        print(inst.format())
    #      0: 1002 4 3 4           MUL  [4], #3, [4]
    #      4: 33                   DATA 33

Operand notation:
  [n]      position mode, the cell at address n
  #n       immediate mode, the literal n
  rb+n     relative mode, the cell at relative base + n

Intcode freely mixes code and data, so the walk is linear: a cell that
does not decode (or an instruction whose parameters run past the end of
the program) is emitted as DATA and the walk moves on by one cell.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .cpu.decoder import ParameterMode, decode_instruction
from .errors import MachineFault

DATA = 'DATA'


@dataclass
class DisassembledInstruction:
    """One decoded instruction (or data cell) with its formatting data."""
    address: int
    raw: Tuple[int, ...]
    mnemonic: str
    operands: List[str] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.raw)

    @property
    def is_data(self) -> bool:
        return self.mnemonic == DATA

    def format(self) -> str:
        raw_str = ' '.join(str(v) for v in self.raw)
        text = f"{self.address:6d}: {raw_str:<20s} {self.mnemonic:4s} {', '.join(self.operands)}"
        return text.rstrip()

    def __str__(self) -> str:
        return self.format()


def format_operand(mode: ParameterMode, raw: int) -> str:
    if mode == ParameterMode.IMMEDIATE:
        return f"#{raw}"
    if mode == ParameterMode.RELATIVE:
        return f"rb+{raw}" if raw >= 0 else f"rb{raw}"
    return f"[{raw}]"


def _cell(program: Sequence[int], addr: int) -> int:
    if addr >= len(program):
        return 0
    return program[addr]


def decode_one(program: Sequence[int], address: int,
               past_end_as_zero: bool = False) -> DisassembledInstruction:
    """Decode the instruction at ``address``. Undecodable cells become DATA.

    An instruction whose parameters run past the end of the program is
    DATA for a static listing. With ``past_end_as_zero`` the missing
    parameters read as 0, which is what the machine executes.
    """
    value = _cell(program, address)
    try:
        inst = decode_instruction(value, address)
    except MachineFault:
        return DisassembledInstruction(address, (value,), DATA, [str(value)])

    if not past_end_as_zero and address + inst.length > len(program):
        return DisassembledInstruction(address, (value,), DATA, [str(value)])

    params = [_cell(program, address + i) for i in range(1, inst.length)]
    operands = [format_operand(mode, raw)
                for mode, raw in zip(inst.modes, params)]
    return DisassembledInstruction(
        address, (value, *params), inst.opcode.name, operands)


def disassemble(program: Sequence[int], start: int = 0) -> List[DisassembledInstruction]:
    """Disassemble from ``start`` to the end of the program."""
    results = []
    address = start
    while address < len(program):
        inst = decode_one(program, address)
        results.append(inst)
        address += inst.length
    return results


def listing(program: Sequence[int], start: int = 0) -> str:
    return '\n'.join(inst.format() for inst in disassemble(program, start))
