"""Generate the assembly source of the 256 interrupt entry vectors."""

import sys
from typing import Iterator, Optional, Sequence

__all__ = ["generate_vectors", "main"]

_VECTOR_COUNT = 256


def _pushes_error_code(trapno: int) -> bool:
    """True for the traps where the processor itself pushes an error code."""
    return 8 <= trapno <= 14 or trapno == 17


def _lines() -> Iterator[str]:
    yield "# handler"
    yield ".text"
    yield ".globl __alltraps"
    for i in range(_VECTOR_COUNT):
        yield f".globl vector{i}"
        yield f"vector{i}:"
        if not _pushes_error_code(i):
            yield "  pushl $0"
        yield f"  pushl ${i}"
        yield "  jmp __alltraps"
    yield ""
    yield "# vector table"
    yield ".data"
    yield ".globl __vectors"
    yield "__vectors:"
    for i in range(_VECTOR_COUNT):
        yield f"  .long vector{i}"


def generate_vectors() -> str:
    """Return the complete assembly text, ending with a newline."""
    return "\n".join(_lines()) + "\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Write the assembly text to standard output."""
    sys.stdout.write(generate_vectors())
    return 0