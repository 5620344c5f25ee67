"""Small worked examples: checked arithmetic, a magic adder and hello world."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import TextIO

U32_MAX = 0xFFFF_FFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

STDOUT = 1
"""0 for standard input, 1 for standard output, 2 for standard error."""

MESSAGE = "Hello, world!"


def _check_range(name: str, value: int, limit: int) -> None:
    if not 0 <= value <= limit:
        raise OverflowError(f"{name} {value} is outside 0..={limit}")


def add(left: int, right: int) -> int:
    """Add two unsigned 64-bit numbers, raising on overflow."""
    _check_range("left", left, U64_MAX)
    _check_range("right", right, U64_MAX)
    result = left + right
    if result > U64_MAX:
        raise OverflowError(f"attempt to add with overflow: {left} + {right}")
    return result


@dataclass(frozen=True)
class MagicAdder:
    """Makes numbers larger by a fixed amount."""

    amount: int

    def __post_init__(self) -> None:
        _check_range("amount", self.amount, U32_MAX)

    def process_value(self, value: int) -> int:
        """Add the fixed amount to an unsigned 32-bit value, raising on overflow."""
        _check_range("value", value, U32_MAX)
        result = self.amount + value
        if result > U32_MAX:
            raise OverflowError(
                f"attempt to add with overflow: {self.amount} + {value}"
            )
        return result


def magicadder_process_value(adder: MagicAdder | None, value: int) -> int:
    """Process ``value`` with ``adder``; a missing adder gives 0."""
    if adder is None:
        return 0
    return adder.process_value(value)


def hello_print() -> str:
    """Print the greeting on standard output and return the line printed."""
    line = f"{MESSAGE}\n"
    print(MESSAGE, file=sys.stdout, flush=True)
    return line


def hello_to_stream(stream: TextIO | None = None) -> None:
    """Write the greeting and a newline to a text stream (stdout by default)."""
    target = sys.stdout if stream is None else stream
    target.write(f"{MESSAGE}\n")
    target.flush()


def write_fd(fd: int, data: bytes) -> int:
    """Write bytes to a file descriptor and return how many were written."""
    return os.write(fd, data)


def hello_to_fd(fd: int = STDOUT) -> int:
    """Write the greeting to a file descriptor, returning the byte count."""
    return write_fd(fd, f"{MESSAGE}\n".encode("utf-8"))