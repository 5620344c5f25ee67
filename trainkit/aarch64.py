"""Support code for the QEMU Aarch64 ``virt`` machine.

It covers exception levels, an interrupt mask that acts as a critical
section, and a driver for the PL011 UART.
"""

from __future__ import annotations

import enum
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

DAIF_I_BIT = 1 << 7
"""The IRQ bit in the DAIF register."""

_DAIF_MASK_BITS = 0b111 << 6
"""The A, I and F bits, which ``DAIFset #7`` sets and ``DAIFclr #7`` clears."""

UART0_ADDR = 0x0900_0000
"""Address of UART0 on the QEMU ``virt`` machine."""


class ExceptionLevel(enum.Enum):
    """An Aarch64 exception level."""

    EL0 = 0
    """User code."""
    EL1 = 1
    """Kernel code."""
    EL2 = 2
    """Hypervisor code."""
    EL3 = 3
    """Secure kernel code."""


def exception_level(current_el: int) -> ExceptionLevel:
    """Decode the exception level from a ``CurrentEL`` register value."""
    return ExceptionLevel((current_el >> 2) & 0b11)


def interrupts_enabled(daif: int) -> bool:
    """Report the IRQ bit of a DAIF register value."""
    return daif & DAIF_I_BIT != 0


@dataclass
class InterruptMask:
    """The DAIF register of a single core, used to build critical sections."""

    daif: int = 0
    _lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def acquire(self) -> bool:
        """Mask interrupts and return the previous state of the IRQ bit."""
        was_active = interrupts_enabled(self.daif)
        self.daif |= _DAIF_MASK_BITS
        return was_active

    def release(self, was_active: bool) -> None:
        """Unmask interrupts, but only if ``was_active`` says they were on before."""
        if was_active:
            self.daif &= ~_DAIF_MASK_BITS

    @contextmanager
    def critical_section(self) -> Iterator[None]:
        """Run the body with interrupts masked, restoring the state afterwards."""
        with self._lock:
            was_active = self.acquire()
            try:
                yield
            finally:
                self.release(was_active)


@dataclass
class Pl011Registers:
    """The registers of a PL011 UART that this driver touches.

    Every byte written to the data register is recorded in ``transmitted``.
    """

    base_addr: int = UART0_ADDR
    data: int = 0
    flags: int = 0
    control: int = 0
    transmitted: bytearray = field(default_factory=bytearray)


class Pl011Uart:
    """A driver for a virtual PL011 UART.

    It skips almost all the real initialisation, which QEMU does not need.
    """

    FLAG_TXFF = 1 << 5
    CONTROL_UARTEN = 1 << 0
    CONTROL_TXE = 1 << 8

    DATA_OFFSET = 0x000 >> 2
    FLAG_OFFSET = 0x018 >> 2
    CONTROL_OFFSET = 0x030 >> 2

    def __init__(self, registers: Pl011Registers) -> None:
        self.registers = registers

    @classmethod
    def new_uart0(cls, registers: Pl011Registers | None = None) -> "Pl011Uart":
        """Create a driver for UART0 and enable the UART and its transmitter."""
        uart = cls(registers if registers is not None else Pl011Registers())
        uart._set_control(cls.CONTROL_UARTEN | cls.CONTROL_TXE)
        return uart

    def write(self, byte: int) -> None:
        """Write a byte, waiting while the TX FIFO is full."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte out of range: {byte}")
        while self._get_flags() & self.FLAG_TXFF:
            time.sleep(0)
        self._write_data(byte)

    def write_str(self, s: str) -> None:
        """Send a string as UTF-8."""
        for byte in s.encode("utf-8"):
            self.write(byte)

    def _write_data(self, value: int) -> None:
        self.registers.data = value
        self.registers.transmitted.append(value)

    def _get_flags(self) -> int:
        return self.registers.flags

    def _set_control(self, value: int) -> None:
        self.registers.control = value