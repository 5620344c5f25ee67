"""Basic CMSDK UART driver over an in-memory register block."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from trainkit.cmsdk.registers import (
    Control,
    IntStatus,
    InvalidBaudRate,
    InvalidInstance,
    Status,
)

logger = logging.getLogger(__name__)

_VALID_CID = (0x0D, 0xF0, 0x05, 0xB1)
"""Expected contents of the CID registers."""

_VALID_PID = 0x821
"""Expected contents of PID0 and the low nibble of PID1."""

_MIN_DIVISOR = 16


class WouldBlock(Exception):
    """The operation cannot complete now; try again later."""


@dataclass
class RegisterBlock:
    """The memory-mapped registers of one CMSDK UART.

    Every byte written to the data register is recorded in ``transmitted``.
    """

    base_addr: int = 0
    data: int = 0
    status: Status = Status(0)
    control: Control = Control(0)
    int_status: IntStatus = IntStatus(0)
    pid0: int = 0
    pid1: int = 0
    cid0: int = 0
    cid1: int = 0
    cid2: int = 0
    cid3: int = 0
    transmitted: bytearray = field(default_factory=bytearray)

    @classmethod
    def cmsdk(cls, base_addr: int) -> "RegisterBlock":
        """Registers of a freshly reset CMSDK UART at ``base_addr``."""
        cid0, cid1, cid2, cid3 = _VALID_CID
        return cls(
            base_addr=base_addr,
            pid0=_VALID_PID & 0xFF,
            pid1=_VALID_PID >> 8,
            cid0=cid0,
            cid1=cid1,
            cid2=cid2,
            cid3=cid3,
        )

    def write_data(self, value: int) -> None:
        """Write the data register, sending its low byte."""
        self.data = value & 0xFFFF_FFFF
        self.transmitted.append(value & 0xFF)

    def modify_control(self, func: Callable[[Control], Control]) -> None:
        """Read, change and write back the control register."""
        self.control = Control(func(self.control))


class CmsdkUart:
    """A CMSDK UART driver."""

    def __init__(self, registers: RegisterBlock) -> None:
        self.registers = registers

    def init(self, baud_rate: int, system_clock: int) -> None:
        """Enable TX and RX.

        Most CMSDK UARTs power up disabled, which leaves the TX FIFO full forever.
        """
        logger.debug(
            "Init UART @ %08x, baud_rate=%d, system_clock=%d",
            self.registers.base_addr,
            baud_rate,
            system_clock,
        )
        if baud_rate <= 0 or system_clock // baud_rate < _MIN_DIVISOR:
            raise InvalidBaudRate(
                f"baud rate {baud_rate} is too fast for a {system_clock} Hz clock"
            )
        self.registers.modify_control(lambda c: c | Control.TXE | Control.RXE)

    def write(self, byte: int) -> None:
        """Write a byte, raising :class:`WouldBlock` if the TX buffer is full."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte out of range: {byte}")
        status = self.registers.status
        if Status.TXF in status:
            logger.debug(
                "Blocking on UART @ %08x Status: %r", self.registers.base_addr, status
            )
            raise WouldBlock
        self.registers.write_data(byte)

    def write_blocking(self, byte: int) -> None:
        """Write a byte, retrying until there is space."""
        while True:
            try:
                self.write(byte)
            except WouldBlock:
                continue
            return

    def check(self) -> None:
        """Raise :class:`InvalidInstance` unless this is a CMSDK UART."""
        regs = self.registers
        logger.debug("Checking UART @ 0x%08x", regs.base_addr)
        cid_read = (regs.cid0, regs.cid1, regs.cid2, regs.cid3)
        logger.debug("CIDS: %r vs %r", cid_read, _VALID_CID)
        if cid_read != _VALID_CID:
            raise InvalidInstance(f"unexpected CID registers {cid_read!r}")
        pid0 = regs.pid0 & 0xFF
        pid1 = regs.pid1 & 0x0F
        pid = (pid1 << 8) | pid0
        logger.debug("PID0 %02x PID1 %02X PID %04x", pid0, pid1, pid)
        if pid != _VALID_PID:
            raise InvalidInstance(f"unexpected PID {pid:#06x}")

    def clear_interrupts(self, mask: IntStatus) -> None:
        """Clear the given interrupt bits (the register is write-one-to-clear)."""
        regs = self.registers
        regs.int_status = IntStatus(int(regs.int_status) & ~int(mask))

    def write_str(self, s: str) -> None:
        """Send a string as UTF-8, blocking on each byte."""
        for byte in s.encode("utf-8"):
            self.write_blocking(byte)