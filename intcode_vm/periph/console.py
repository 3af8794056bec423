"""
Intcode VM - Console I/O Channels

The machine talks to the outside world through two callables:

  input_source()       -> one value per IN instruction (int or str),
                          or None when no more input will ever arrive
  output_sink(value)   <- one int per OUT instruction, in program order

Two channel implementations are provided:

  ScriptedConsole   in-memory queue + tx buffer, for tests and scripted runs
  TerminalConsole   line-per-input text stream, character-per-output stream

Output values are character codes. A value that is not a valid Unicode
code point (negative, a UTF-16 surrogate, or large results some
programs print as their answer) is rendered as its decimal
representation on a line of its own.
"""

import sys
from collections import deque
from typing import Iterable, List, Optional, TextIO, Union

from ..errors import InvalidInput
from ..loader import INTEGER_RE

MAX_CODE_POINT = 0x10FFFF
SURROGATES = range(0xD800, 0xE000)

InputValue = Union[int, str]


def parse_input(token: Optional[InputValue], pc: Optional[int] = None) -> int:
    """Turn one value from an input source into an integer.

    Strings are whitespace-trimmed and parsed as base-10 integers.
    None means the source is exhausted.
    """
    if token is None:
        raise InvalidInput(None, pc)
    if isinstance(token, bool):
        raise InvalidInput(token, pc)
    if isinstance(token, int):
        return token
    if isinstance(token, str):
        text = token.strip()
        if not INTEGER_RE.fullmatch(text):
            raise InvalidInput(token, pc)
        return int(text)
    raise InvalidInput(token, pc)


def render_char(value: int) -> str:
    """Render one output value for a terminal."""
    if 0 <= value <= MAX_CODE_POINT and value not in SURROGATES:
        return chr(value)
    return f"{value}\n"


def render_output(values: Iterable[int]) -> str:
    return ''.join(render_char(v) for v in values)


class ScriptedConsole:
    """In-memory I/O channel.

    Inputs are queued up front (or later via feed()); every output value
    is appended to tx_buffer for inspection.

    Usage:
        console = ScriptedConsole([42])
        machine.run(console.read, console.write)
        console.tx_buffer   # [42]
    """

    def __init__(self, inputs: Iterable[InputValue] = ()):
        self._rx_queue: deque = deque(inputs)
        self.tx_buffer: List[int] = []

    def feed(self, *values: InputValue):
        """Queue more input values."""
        self._rx_queue.extend(values)

    @property
    def pending(self) -> int:
        return len(self._rx_queue)

    def read(self) -> Optional[InputValue]:
        if not self._rx_queue:
            return None
        return self._rx_queue.popleft()

    def write(self, value: int):
        self.tx_buffer.append(value)

    @property
    def text(self) -> str:
        """All output rendered as characters."""
        return render_output(self.tx_buffer)

    def reset(self):
        self._rx_queue.clear()
        self.tx_buffer.clear()


class TerminalConsole:
    """Text-stream I/O channel, stdin/stdout by default.

    Each IN instruction consumes one line. End of stream means no more
    input. Each OUT instruction writes one character and flushes, so
    interactive programs show their prompts before blocking on input.
    """

    def __init__(self, stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None,
                 prompt: str = ''):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.prompt = prompt

    def read(self) -> Optional[str]:
        if self.prompt:
            self.stdout.write(self.prompt)
            self.stdout.flush()
        line = self.stdin.readline()
        if line == '':
            return None
        return line

    def write(self, value: int):
        self.stdout.write(render_char(value))
        self.stdout.flush()
