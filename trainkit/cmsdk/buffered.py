"""An interrupt-driven, buffered CMSDK UART driver.

The CMSDK UART raises its TX interrupt when the TX buffer goes from full to
not full; the interrupt handler then feeds it the next queued byte.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator

from trainkit.cmsdk.basic import CmsdkUart, WouldBlock
from trainkit.cmsdk.registers import Control, IntStatus, Status

logger = logging.getLogger(__name__)


def _no_interrupt_source() -> None:
    raise RuntimeError("waiting for an interrupt, but nothing will ever raise one")


@dataclass
class _Inner:
    uart: CmsdkUart
    buffer: deque[int] = field(default_factory=deque)


class BufferedUart:
    """A CMSDK UART with a transmit queue drained by the TX interrupt.

    Like a ring buffer that keeps one slot free, the queue holds at most
    ``capacity - 1`` bytes. ``wait_for_interrupt`` is called whenever the
    driver must sleep until an interrupt arrives.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._limit = capacity - 1
        self._lock = threading.RLock()
        self._inner: _Inner | None = None
        self.wait_for_interrupt: Callable[[], None] = _no_interrupt_source

    def init(self, uart: CmsdkUart, baud_rate: int, system_clock: int) -> None:
        """Initialise ``uart`` and store it with an empty queue."""
        uart.init(baud_rate, system_clock)
        with self._lock:
            self._inner = _Inner(uart)

    @contextmanager
    def _locked(self) -> Iterator[_Inner]:
        with self._lock:
            if self._inner is None:
                raise RuntimeError("UART not initialised!")
            yield self._inner

    def tx_blocking(self, data: Iterable[int]) -> None:
        """Queue every byte, blocking while the queue is full.

        Bytes may still be queued when this returns.
        """
        for byte in data:
            self.tx_byte_blocking(byte)

    def tx_byte_blocking(self, byte: int) -> None:
        """Queue one byte, or send it at once if the TX interrupt is off."""
        while True:
            with self._locked() as inner:
                full = len(inner.buffer) >= self._limit
            if not full:
                break
            logger.debug("Buffer full, sleeping...")
            self.wait_for_interrupt()

        with self._locked() as inner:
            regs = inner.uart.registers
            if Control.TXIE not in regs.control:
                logger.debug("Sending 0x%02x and turning TXIE on", byte)
                regs.modify_control(lambda c: c | Control.TXIE)
                try:
                    inner.uart.write(byte)
                except WouldBlock:
                    pass
            else:
                logger.debug("Queued byte 0x%02x", byte)
                inner.buffer.append(byte)

    def flush(self) -> None:
        """Block until the queue is empty and the UART has sent its last byte."""
        while True:
            with self._locked() as inner:
                pending = len(inner.buffer)
            if not pending:
                break
            self.wait_for_interrupt()
        while True:
            with self._locked() as inner:
                transmitting = Status.TXF in inner.uart.registers.status
            if not transmitting:
                break
            self.wait_for_interrupt()

    def tx_isr(self) -> None:
        """Handle the TX interrupt: send the next byte or turn the interrupt off."""
        logger.debug("TX ISR")
        with self._locked() as inner:
            uart = inner.uart
            uart.clear_interrupts(IntStatus.TXI)
            if not inner.buffer:
                logger.debug("Turning TXIE off")
                uart.registers.modify_control(
                    lambda c: Control(int(c) & ~int(Control.TXIE))
                )
            elif Status.TXF not in uart.registers.status:
                byte = inner.buffer.popleft()
                logger.debug("Auto send 0x%02x", byte)
                uart.write(byte)
            else:
                logger.warning("Duff ISR - TX is full")

    def write_str(self, s: str) -> None:
        """Queue a string as UTF-8."""
        self.tx_blocking(s.encode("utf-8"))