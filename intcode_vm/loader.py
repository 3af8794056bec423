"""
Intcode VM - Program Loader

Program text is a comma-separated list of signed base-10 integers.
Whitespace anywhere in the text (including inside the list, e.g. line
breaks in long programs) is ignored. A single trailing comma is accepted.
"""

import logging
import re
from pathlib import Path
from typing import List, Union

from .errors import MalformedProgram

logger = logging.getLogger(__name__)

# Plain ASCII decimal: no underscores, no non-ASCII digits
INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_program(text: str) -> List[int]:
    """Parse program text into a list of integers.

    Raises MalformedProgram for empty text, empty tokens (``1,,2``) or
    tokens that are not integers.
    """
    data = ''.join(text.split())
    if not data:
        raise MalformedProgram("Empty program")

    tokens = data.split(',')
    if len(tokens) > 1 and tokens[-1] == '':
        tokens.pop()

    program = []
    for index, token in enumerate(tokens):
        if not INTEGER_RE.fullmatch(token):
            raise MalformedProgram("Not an integer", token, index)
        program.append(int(token))
    return program


def load_program(path: Union[str, Path]) -> List[int]:
    """Read and parse a program file."""
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise MalformedProgram(
            f"{path.name} is not UTF-8 text: {e.reason} at byte {e.start}") from None
    program = parse_program(text)
    logger.info(f"Loaded program: {path.name} ({len(program)} cells)")
    return program
