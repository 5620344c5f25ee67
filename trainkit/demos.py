"""Demo programs for the QEMU boards, run against simulated UARTs.

Each demo prints through a UART driver and ends the way the firmware does,
by panicking. Here a panic is a :class:`DemoPanic`.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator, Protocol, Sequence

from trainkit.boards import MPS2_UART0_ADDR, MPS2_UART_ADDRS
from trainkit.cmsdk.basic import CmsdkUart, RegisterBlock
from trainkit.cmsdk.buffered import BufferedUart
from trainkit.cmsdk.mutex import MutexUart
from trainkit.cmsdk.registers import Control

logger = logging.getLogger(__name__)

PERIPHERAL_CLOCK = 25_000_000
"""Clock speed of the peripheral subsystem on an SSE-300 SoC on an MPS3 board."""

SYSTEM_CLOCK = 25_000_000
"""System clock speed of the MPS2 boards."""

BAUD_RATE = 115200

QLEN = 256
"""Transmit queue size for the buffered demo."""

GREETING = "Hello, this is Rust!"


class TextWriter(Protocol):
    def write_str(self, s: str) -> None: ...


class DemoPanic(Exception):
    """The demo reached the point where the firmware panics."""


class GlobalUart:
    """A UART slot that can be shared before a UART is stored in it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._uart: TextWriter | None = None

    def store(self, uart: TextWriter) -> TextWriter | None:
        """Store a UART, returning the one stored before, if any."""
        with self._lock:
            old, self._uart = self._uart, uart
        return old

    def write_str(self, s: str) -> None:
        """Write to the stored UART while holding the lock."""
        with self._lock:
            if self._uart is None:
                raise RuntimeError("no UART has been stored")
            self._uart.write_str(s)


def table_rows() -> Iterator[str]:
    """Yield the rows of the 10 by 10 multiplication table, as printed."""
    for x in range(1, 11):
        yield "".join(f"{float(x * y):>8.2f} " for y in range(1, 11))


def _write_table(writer: TextWriter, greeting: str) -> None:
    writer.write_str(f"{greeting}\n")
    for row in table_rows():
        writer.write_str(row)
        writer.write_str("\n")


def print_stuff(writer: TextWriter) -> None:
    """Write the greeting and the multiplication table."""
    _write_table(writer, GREETING)


def run_table_demo(writer: TextWriter, greeting: str = GREETING) -> None:
    """Write a greeting and the table, then panic, reporting it on ``writer``."""
    _write_table(writer, greeting)
    message = "I am a panic"
    writer.write_str(f"PANIC: {message}\n")
    raise DemoPanic(message)


def _panic_at_end() -> None:
    message = "Got to end of fn main()!"
    logger.error("Panic! %s", message)
    raise DemoPanic(message)


def uart_basic_demo(
    uarts: Sequence[CmsdkUart] | None = None, system_clock: int = SYSTEM_CLOCK
) -> None:
    """Check, initialise and greet on every UART, then panic."""
    logger.info("Running uart_basic - printing to all five UARTs")
    if uarts is None:
        uarts = [CmsdkUart(RegisterBlock.cmsdk(addr)) for addr in MPS2_UART_ADDRS]
    for idx, uart in enumerate(uarts):
        uart.check()
        uart.init(BAUD_RATE, system_clock)
        uart.write_str(f"Hello, UART{idx}!\r\n")
    _panic_at_end()


def _default_uart0() -> CmsdkUart:
    return CmsdkUart(RegisterBlock.cmsdk(MPS2_UART0_ADDR))


def uart_mutex_demo(
    uart: CmsdkUart | None = None, system_clock: int = SYSTEM_CLOCK
) -> None:
    """Greet through a lock-guarded global UART, then panic."""
    logger.info("Running uart_mutex - printing to global UART0")
    if uart is None:
        uart = _default_uart0()
    shared = MutexUart()
    shared.init(uart, BAUD_RATE, system_clock)
    shared.write_str("Hello, this is on a static UART0!\r\n")
    _panic_at_end()


def uart_buffered_demo(
    uart: CmsdkUart | None = None,
    system_clock: int = SYSTEM_CLOCK,
    capacity: int = QLEN,
) -> None:
    """Greet through an interrupt-driven buffered UART, flush it, then panic.

    The second line is queued with interrupts masked, so it must fit in the
    queue; if it does not, waiting for an interrupt raises RuntimeError.
    """
    logger.info("Running uart_irq - printing to global UART0")
    if uart is None:
        uart = _default_uart0()
    buffered = BufferedUart(capacity)
    buffered.init(uart, BAUD_RATE, system_clock)

    masked = False

    def fire_interrupt() -> None:
        if masked:
            raise RuntimeError(
                "waiting for an interrupt inside a critical section would never end"
            )
        if Control.TXIE in uart.registers.control:
            buffered.tx_isr()

    buffered.wait_for_interrupt = fire_interrupt

    buffered.write_str("Hello, this is on a static UART0!\r\n")
    masked = True
    try:
        buffered.write_str("Hello, this another string on a static UART0!\r\n")
    finally:
        masked = False
    buffered.flush()
    _panic_at_end()