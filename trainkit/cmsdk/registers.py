"""Register bit definitions and errors for the CMSDK UART.

Registers:

* DATA: bits 7-0 hold the data value
* STATE: TX full, RX full, TX overflow, RX overflow
* CTRL: TX/RX enable, TX/RX interrupt enable, TX/RX overflow interrupt enable
* INTSTATUS: TX, RX, TX overflow and RX overflow interrupts (write 1 to clear)
* BAUDDIV: bits 19-0 hold the divider, minimum 16

The UART has a one byte buffer.
"""

from __future__ import annotations

import enum


class Status(enum.IntFlag):
    """UART status register."""

    TXF = 1
    """TX full."""
    RXF = 2
    """RX full."""
    TXO = 4
    """TX overflow."""
    RXO = 8
    """RX overflow."""


class Control(enum.IntFlag):
    """UART control register."""

    TXE = 1
    """TX enabled."""
    RXE = 2
    """RX enabled."""
    TXIE = 4
    """TX interrupt enabled."""
    RXIE = 8
    """RX interrupt enabled."""
    TXOIE = 16
    """TX overflow interrupt enabled."""
    RXOIE = 32
    """RX overflow interrupt enabled."""


class IntStatus(enum.IntFlag):
    """UART interrupt status register."""

    TXI = 1
    """TX interrupt."""
    RXI = 2
    """RX interrupt."""
    TXOI = 4
    """TX overflow interrupt."""
    RXOI = 8
    """RX overflow interrupt."""


class UartError(Exception):
    """Base class for CMSDK UART errors."""


class InvalidInstance(UartError):
    """The identification registers do not match a CMSDK UART."""


class InvalidBaudRate(UartError):
    """The baud rate needs a clock divisor below the minimum of 16."""