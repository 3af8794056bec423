"""
Intcode VM
==========
An interpreter for Intcode, the integer instruction set in which a
program is a flat list of signed integers that is both code and data.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐
    │ Program  │───>│  Loader  │───>│ Machine  │───>│ Console  │
    │ (1,0,..) │    │ (ints)   │    │ (run)    │    │ (chars)  │
    └──────────┘    └──────────┘    └──────────┘    └──────────┘

    - loader.py:          comma-separated text -> list of ints
    - cpu/decoder.py:     instruction cell -> opcode + parameter modes
    - cpu/regs.py:        instruction pointer, relative base, step count
    - mem/memory.py:      zero-filled memory that grows on write
    - emu.py:             fetch/decode/execute loop + opcode handlers
    - periph/console.py:  input sources and output sinks
    - disassembler.py:    program listing for debugging
"""

__version__ = "0.1.0"

from .errors import (
    IntcodeError, MalformedProgram, MachineFault, UnrecognizedOpcode,
    UnrecognizedParameterMode, NegativeAddress, InvalidInput, OutOfMemory,
)
from .cpu.decoder import Opcode, ParameterMode, Instruction, decode_instruction
from .mem.memory import Memory
from .emu import Machine, StopReason, RunResult, Advance, JumpTo, run_program
from .loader import parse_program, load_program
from .periph.console import ScriptedConsole, TerminalConsole
from .disassembler import disassemble


def run_source(text: str, inputs=(), max_steps=None) -> RunResult:
    """Parse program text and run it against a scripted input queue."""
    return run_program(parse_program(text), inputs, max_steps=max_steps)
