#!/usr/bin/env python3
"""
intcode - Intcode interpreter CLI

Usage:
    python intcode.py -f <program.txt> [--input N ...] [--max-steps N]
                      [--trace] [--dump] [--disassemble] [--verbose]

Outputs are written to stdout as characters. Input instructions read one
line from stdin each, unless values are supplied with --input.

Examples:
    python intcode.py -f day9.txt --input 1
    python intcode.py -f day9.txt --disassemble
    python intcode.py -f game.txt --max-steps 1000000 --trace

Exit status:
    0  program halted
    1  load error or runtime fault
    2  internal error
    3  step limit reached
"""

import argparse
import logging
import sys

from intcode_vm import __version__
from intcode_vm.disassembler import listing
from intcode_vm.emu import Machine, StopReason
from intcode_vm.errors import MachineFault, MalformedProgram
from intcode_vm.loader import load_program
from intcode_vm.periph.console import ScriptedConsole, TerminalConsole

logger = logging.getLogger("intcode")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERNAL = 2
EXIT_TIMEOUT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intcode",
        description="Intcode interpreter",
    )
    parser.add_argument("-f", "--filename", required=True,
                        help="Name of the Intcode program file")
    parser.add_argument("-i", "--input", action="append", default=None,
                        metavar="N",
                        help="Input value (repeatable); stdin is used if omitted")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop after this many instructions (default: unbounded)")
    parser.add_argument("--trace", action="store_true",
                        help="Log every executed instruction")
    parser.add_argument("--dump", action="store_true",
                        help="Print memory after the run")
    parser.add_argument("--disassemble", action="store_true",
                        help="Print a program listing and exit")
    parser.add_argument("--prompt", default="",
                        help="Prompt shown before each stdin read")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging")
    parser.add_argument("--version", action="version",
                        version=f"intcode {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or args.trace) else logging.INFO,
        format='%(levelname)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        program = load_program(args.filename)
    except FileNotFoundError:
        logger.error(f"File not found: {args.filename}")
        return EXIT_ERROR
    except OSError as e:
        logger.error(f"Error reading {args.filename}: {e}")
        return EXIT_ERROR
    except MalformedProgram as e:
        logger.error(f"Malformed program: {e}")
        return EXIT_ERROR

    if args.disassemble:
        print(listing(program))
        return EXIT_OK

    terminal = TerminalConsole(prompt=args.prompt)
    if args.input is not None:
        input_source = ScriptedConsole(args.input).read
    else:
        input_source = terminal.read

    machine = Machine(program)
    machine.enable_trace(args.trace)

    try:
        result = machine.run(input_source, terminal.write, max_steps=args.max_steps)
    except Exception as e:
        logger.error(f"Internal interpreter error: {e}")
        if args.verbose:
            logger.exception("Traceback")
        return EXIT_INTERNAL

    sys.stdout.flush()
    if args.dump:
        print(machine.mem.dump(), file=sys.stderr)

    logger.debug(f"{result.reason.value}: {result.steps} steps")

    if result.reason == StopReason.FAULTED:
        fault: MachineFault = result.fault
        logger.error(f"Runtime fault: {fault}")
        return EXIT_ERROR
    if result.reason == StopReason.TIMEOUT:
        logger.error(f"Step limit reached at IP={result.instruction_pointer} "
                     f"after {result.steps} steps")
        return EXIT_TIMEOUT
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
