"""
Intcode VM - Exception Hierarchy

All errors raised by the loader and the machine derive from IntcodeError.
Runtime faults derive from MachineFault and carry the address of the
instruction that triggered them, so the caller can report where the
program went wrong.

    IntcodeError
      MalformedProgram            loader: bad token in program text
      MachineFault                runtime, fatal to the current run
        UnrecognizedOpcode
        UnrecognizedParameterMode
        NegativeAddress
        InvalidInput
        OutOfMemory
"""

from typing import Optional


class IntcodeError(Exception):
    """Base class for every Intcode error."""
    pass


class MalformedProgram(IntcodeError):
    """Raised by the loader when program text is not a list of integers."""

    def __init__(self, message: str, token: Optional[str] = None,
                 index: Optional[int] = None):
        self.token = token
        self.index = index
        if index is not None:
            message = f"{message} (token #{index}: {token!r})"
        super().__init__(message)


class MachineFault(IntcodeError):
    """A fatal runtime condition. Stops the run loop."""

    def __init__(self, message: str, address: Optional[int] = None):
        self.address = address
        if address is not None:
            message = f"{message} at address {address}"
        super().__init__(message)


class UnrecognizedOpcode(MachineFault):
    def __init__(self, value: int, address: Optional[int] = None):
        self.value = value
        super().__init__(f"Unrecognized opcode {value}", address)


class UnrecognizedParameterMode(MachineFault):
    def __init__(self, mode: int, parameter: int,
                 address: Optional[int] = None):
        self.mode = mode
        self.parameter = parameter
        super().__init__(
            f"Unrecognized parameter mode {mode} for parameter {parameter}",
            address)


class NegativeAddress(MachineFault):
    def __init__(self, target: int, address: Optional[int] = None):
        self.target = target
        super().__init__(f"Negative memory address {target}", address)


class InvalidInput(MachineFault):
    """Input instruction received something that is not an integer."""

    def __init__(self, token, address: Optional[int] = None):
        self.token = token
        if token is None:
            message = "Input exhausted"
        else:
            message = f"Invalid input {token!r}"
        super().__init__(message, address)


class OutOfMemory(MachineFault):
    def __init__(self, requested: int, address: Optional[int] = None):
        self.requested = requested
        super().__init__(
            f"Cannot grow memory to {requested} cells", address)
