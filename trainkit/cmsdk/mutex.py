"""A CMSDK UART guarded by a lock, suitable for sharing as a global."""

from __future__ import annotations

import logging
import threading

from trainkit.cmsdk.basic import CmsdkUart, WouldBlock
from trainkit.cmsdk.registers import Control, Status

logger = logging.getLogger(__name__)


class MutexUart:
    """A CMSDK UART that may be stored before it is initialised."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._uart: CmsdkUart | None = None

    def init(self, uart: CmsdkUart, baud_rate: int, system_clock: int) -> None:
        """Initialise ``uart`` and store it for later use."""
        uart.init(baud_rate, system_clock)
        with self._lock:
            self._uart = uart

    def _require(self, message: str) -> CmsdkUart:
        if self._uart is None:
            raise RuntimeError(message)
        return self._uart

    def tx_full(self) -> bool:
        """Whether the TX buffer is full; an uninitialised UART counts as full."""
        with self._lock:
            if self._uart is None:
                return True
            return Status.TXF in self._uart.registers.status

    def write(self, byte: int) -> None:
        """Write a byte, raising :class:`WouldBlock` if the TX buffer is full."""
        with self._lock:
            self._require("TX on uninitialised UART!").write(byte)

    def set_tx_interrupt(self, enabled: bool) -> None:
        """Turn the TX interrupt on or off."""
        with self._lock:
            uart = self._require("tx_interrupts_on on uninit MutexUart")
            if enabled:
                uart.registers.modify_control(lambda c: c | Control.TXIE)
            else:
                uart.registers.modify_control(
                    lambda c: Control(int(c) & ~int(Control.TXIE))
                )

    def dump_info(self) -> None:
        """Log the control, status and interrupt status registers."""
        with self._lock:
            if self._uart is None:
                logger.debug("UART is not initialised")
                return
            regs = self._uart.registers
            logger.debug(
                "Control %r, Status %r, IntStatus %r",
                regs.control,
                regs.status,
                regs.int_status,
            )

    def write_str(self, s: str) -> None:
        """Send a string, retrying each byte until it fits.

        An uninitialised UART drops the text quietly.
        """
        for byte in s.encode("utf-8"):
            while True:
                with self._lock:
                    if self._uart is None:
                        return
                    try:
                        self._uart.write(byte)
                    except WouldBlock:
                        continue
                    break