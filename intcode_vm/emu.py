"""
Intcode VM - Machine

Integrates:
  - Registers (cpu/regs.py)
  - Memory (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - I/O channels (periph/console.py), passed in as plain callables

Execution model:
  1. Fetch the instruction cell at IP
  2. Decode opcode + parameter modes
  3. Dispatch to the opcode handler, which resolves parameter addresses,
     updates memory/registers and returns Advance(n) or JumpTo(address)
  4. Move IP: past the instruction for Advance, to the target for JumpTo
  5. Stop on HALT, on a fault, or when the optional step limit is reached

Stop reasons:
  - HALTED:   opcode 99
  - FAULTED:  MachineFault raised while decoding or executing
  - TIMEOUT:  max_steps exceeded (only when a limit was given)

A machine runs to completion once. After it stops it stays stopped, and
further step()/run() calls report the same stop reason without executing.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .cpu.decoder import Instruction, Opcode, ParameterMode, decode_instruction
from .cpu.regs import Registers
from .disassembler import decode_one
from .errors import MachineFault, NegativeAddress
from .mem.memory import Memory
from .periph.console import InputValue, ScriptedConsole, parse_input

logger = logging.getLogger(__name__)

InputSource = Callable[[], Optional[InputValue]]
OutputSink = Callable[[int], None]


class StopReason(Enum):
    HALTED = 'HALTED'
    FAULTED = 'FAULTED'
    TIMEOUT = 'TIMEOUT'


@dataclass(frozen=True)
class Advance:
    """Handler result: move IP past the instruction and ``count`` parameters."""
    count: int


@dataclass(frozen=True)
class JumpTo:
    """Handler result: set IP to ``address``."""
    address: int


HandlerResult = Union[Advance, JumpTo]


@dataclass
class RunResult:
    reason: StopReason
    steps: int
    instruction_pointer: int
    output: List[int] = field(default_factory=list)
    fault: Optional[MachineFault] = None

    @property
    def ok(self) -> bool:
        return self.reason == StopReason.HALTED

    def raise_for_fault(self):
        """Re-raise the captured fault, if the run ended with one."""
        if self.fault is not None:
            raise self.fault


class Machine:
    """Intcode virtual machine.

    Usage:
        machine = Machine([3, 0, 4, 0, 99])
        result = machine.run(lambda: 42)
        result.reason   # StopReason.HALTED
        result.output   # [42]

    Outputs are kept in result.output only when no output_sink is given,
    unless collect_output=True.
    """

    DEFAULT_MAX_STEPS = None

    def __init__(self, program: Sequence[int]):
        self.regs = Registers()
        self.mem = Memory(program)

        self.input_source: Optional[InputSource] = None
        self.output_sink: Optional[OutputSink] = None
        self.output: List[int] = []
        self.collect_output = True

        self.stop_reason: Optional[StopReason] = None
        self.fault: Optional[MachineFault] = None

        self._trace = False
        self._trace_output: List[str] = []

        self._dispatch = self._build_dispatch()

    @property
    def instruction_pointer(self) -> int:
        return self.regs.IP

    @property
    def relative_base(self) -> int:
        return self.regs.RB

    @property
    def running(self) -> bool:
        return self.stop_reason is None

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns a StopReason once stopped, else None."""
        if self.stop_reason is not None:
            return self.stop_reason

        pc = self.regs.IP
        try:
            inst = decode_instruction(self.mem.read(pc, pc), pc)

            if self._trace:
                self._trace_instruction(pc)

            result = self._execute(inst)
        except _HaltException:
            self.regs.steps += 1
            return self._stop(StopReason.HALTED)
        except MachineFault as e:
            self.fault = e
            logger.warning(f"Machine fault: {e}")
            return self._stop(StopReason.FAULTED)

        self.regs.steps += 1
        if isinstance(result, JumpTo):
            self.regs.IP = result.address
        else:
            self.regs.IP = pc + 1 + result.count
        return None

    def run(self, input_source: Optional[InputSource] = None,
            output_sink: Optional[OutputSink] = None,
            max_steps: Optional[int] = None,
            collect_output: Optional[bool] = None) -> RunResult:
        """Run until HALT, a fault, or the step limit.

        Args:
            input_source: zero-arg callable, one value per IN instruction
            output_sink: one-arg callable, one int per OUT instruction
            max_steps: instruction limit for this call, None for unbounded
            collect_output: keep outputs in RunResult.output; defaults to
                True only when there is no output_sink

        Returns:
            RunResult describing why execution stopped
        """
        if max_steps is None:
            max_steps = self.DEFAULT_MAX_STEPS

        if self.stop_reason is None:
            self.input_source = input_source
            self.output_sink = output_sink
            if collect_output is None:
                collect_output = output_sink is None
            self.collect_output = collect_output

        executed = 0
        while self.stop_reason is None:
            if max_steps is not None and executed >= max_steps:
                self._stop(StopReason.TIMEOUT)
                break
            self.step()
            executed += 1

        return RunResult(
            reason=self.stop_reason,
            steps=self.regs.steps,
            instruction_pointer=self.regs.IP,
            output=list(self.output),
            fault=self.fault,
        )

    def _stop(self, reason: StopReason) -> StopReason:
        self.stop_reason = reason
        logger.debug(f"Stopped: {reason.value} at IP={self.regs.IP} "
                     f"after {self.regs.steps} steps")
        return reason

    # ══════════════════════════════════════════════
    # Address resolution
    # ══════════════════════════════════════════════

    def resolve(self, parameter: int, mode: ParameterMode) -> int:
        """Address of parameter ``parameter`` (1-based) of the current instruction.

        Immediate mode resolves to the parameter cell itself, so reading the
        returned address yields the literal.
        """
        pc = self.regs.IP
        slot = pc + parameter
        if mode == ParameterMode.IMMEDIATE:
            return slot

        raw = self.mem.read(slot, pc)
        if mode == ParameterMode.RELATIVE:
            addr = self.regs.RB + raw
        else:
            addr = raw

        if addr < 0:
            raise NegativeAddress(addr, pc)
        return addr

    def _load(self, modes, parameter: int) -> int:
        addr = self.resolve(parameter, modes[parameter - 1])
        return self.mem.read(addr, self.regs.IP)

    def _store(self, modes, parameter: int, value: int):
        addr = self.resolve(parameter, modes[parameter - 1])
        self.mem.write(addr, value, self.regs.IP)

    # ══════════════════════════════════════════════
    # Instruction execution
    # ══════════════════════════════════════════════

    def _execute(self, inst: Instruction) -> HandlerResult:
        return self._dispatch[inst.opcode](inst.modes)

    def _build_dispatch(self) -> dict:
        """Build opcode -> handler dispatch table.

        Handler signature: handler(modes) -> Advance | JumpTo
        """
        return {
            Opcode.ADD:  self._op_add,
            Opcode.MUL:  self._op_mul,
            Opcode.IN:   self._op_in,
            Opcode.OUT:  self._op_out,
            Opcode.JNZ:  self._op_jnz,
            Opcode.JZ:   self._op_jz,
            Opcode.LT:   self._op_lt,
            Opcode.EQ:   self._op_eq,
            Opcode.ARB:  self._op_arb,
            Opcode.HALT: self._op_halt,
        }

    # ── Arithmetic ──

    def _op_add(self, modes) -> HandlerResult:
        self._store(modes, 3, self._load(modes, 1) + self._load(modes, 2))
        return Advance(3)

    def _op_mul(self, modes) -> HandlerResult:
        self._store(modes, 3, self._load(modes, 1) * self._load(modes, 2))
        return Advance(3)

    # ── I/O ──

    def _op_in(self, modes) -> HandlerResult:
        pc = self.regs.IP
        token = self.input_source() if self.input_source is not None else None
        self._store(modes, 1, parse_input(token, pc))
        return Advance(1)

    def _op_out(self, modes) -> HandlerResult:
        value = self._load(modes, 1)
        if self.collect_output:
            self.output.append(value)
        if self.output_sink is not None:
            self.output_sink(value)
        return Advance(1)

    # ── Control transfer ──

    def _jump(self, target: int) -> JumpTo:
        if target < 0:
            raise NegativeAddress(target, self.regs.IP)
        return JumpTo(target)

    def _op_jnz(self, modes) -> HandlerResult:
        if self._load(modes, 1) != 0:
            return self._jump(self._load(modes, 2))
        return Advance(2)

    def _op_jz(self, modes) -> HandlerResult:
        if self._load(modes, 1) == 0:
            return self._jump(self._load(modes, 2))
        return Advance(2)

    # ── Comparison ──

    def _op_lt(self, modes) -> HandlerResult:
        self._store(modes, 3, 1 if self._load(modes, 1) < self._load(modes, 2) else 0)
        return Advance(3)

    def _op_eq(self, modes) -> HandlerResult:
        self._store(modes, 3, 1 if self._load(modes, 1) == self._load(modes, 2) else 0)
        return Advance(3)

    # ── Relative base / halt ──

    def _op_arb(self, modes) -> HandlerResult:
        self.regs.RB += self._load(modes, 1)
        return Advance(1)

    def _op_halt(self, modes) -> HandlerResult:
        raise _HaltException("HALT")

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record every executed instruction (also logged at DEBUG)."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def _trace_instruction(self, pc: int):
        inst = decode_one(self.mem, pc, past_end_as_zero=True)
        line = f"{inst.format():<60s} {self.regs.display()}"
        self._trace_output.append(line)
        logger.debug(line)


def run_program(program: Sequence[int], inputs: Iterable[InputValue] = (),
                max_steps: Optional[int] = None) -> RunResult:
    """Run a program to completion against a scripted input queue."""
    console = ScriptedConsole(inputs)
    machine = Machine(program)
    return machine.run(console.read, max_steps=max_steps)


# Internal exception for flow control
class _HaltException(Exception):
    pass
