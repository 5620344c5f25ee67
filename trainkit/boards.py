"""Board definitions for the Arm QEMU machines.

It holds the MPS2-AN505 interrupt numbers and vector table, and the UART
addresses of the MPS2 and MPS3-AN536 boards.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Mapping

IrqFunction = Callable[[], None]

MPS2_UART0_ADDR = 0x4000_4000
"""UART 0 on the MPS2-AN385 and compatibles."""
MPS2_UART1_ADDR = 0x4000_5000
"""UART 1 on the MPS2-AN385 and compatibles."""
MPS2_UART2_ADDR = 0x4000_6000
"""UART 2 on the MPS2-AN385 and compatibles."""
MPS2_UART3_ADDR = 0x4000_7000
"""UART 3 on the MPS2-AN385 and compatibles."""
MPS2_UART4_ADDR = 0x4000_9000
"""UART 4 on the MPS2-AN385 and compatibles."""

MPS2_UART_ADDRS: tuple[int, ...] = (
    MPS2_UART0_ADDR,
    MPS2_UART1_ADDR,
    MPS2_UART2_ADDR,
    MPS2_UART3_ADDR,
    MPS2_UART4_ADDR,
)

MPS3_AN536_UART0_ADDR = 0xE7C0_0000
"""UART 0 on an MPS3-AN536."""


class Interrupts(enum.IntEnum):
    """The peripheral interrupts of the MPS2-AN505."""

    Uart0Rx = 0
    Uart0Tx = 1
    Uart1Rx = 2
    Uart1Tx = 3
    Uart2Rx = 4
    Uart2Tx = 5
    Gpio0Combined = 6
    Gpio1Combined = 7
    Timer0 = 8
    Timer1 = 9
    DualTimer = 10
    Spi01 = 11
    Uart012Overflow = 12
    Ethernet = 13
    AudioI2S = 14
    TouchScreen = 15
    Gpio2Combined = 16
    Gpio3Combined = 17
    Uart3Rx = 18
    Uart3Tx = 19
    Uart4Rx = 20
    Uart4Tx = 21
    Spi2 = 22
    Spi34 = 23
    Gpio0_0 = 24
    Gpio0_1 = 25
    Gpio0_2 = 26
    Gpio0_3 = 27
    Gpio0_4 = 28
    Gpio0_5 = 29
    Gpio0_6 = 30
    Gpio0_7 = 31

    def number(self) -> int:
        """The interrupt number the NVIC uses."""
        return int(self)


@dataclass(frozen=True)
class Vector:
    """An interrupt vector: a handler, or a reserved (empty) slot."""

    handler: IrqFunction | None = None

    @classmethod
    def reserved(cls) -> "Vector":
        """A reserved slot."""
        return cls(None)

    @classmethod
    def function(cls, handler: IrqFunction) -> "Vector":
        """A slot pointing at ``handler``."""
        if not callable(handler):
            raise TypeError(f"interrupt handler must be callable, got {handler!r}")
        return cls(handler)

    @property
    def is_reserved(self) -> bool:
        return self.handler is None

    def __call__(self) -> None:
        if self.handler is None:
            raise RuntimeError("jumped to a reserved interrupt vector")
        self.handler()


def _default_interrupt() -> None:
    raise RuntimeError("Unexpected interrupt in bagging area.")


def vector_table(
    handlers: Mapping[Interrupts | int, IrqFunction] | None = None,
) -> tuple[Vector, ...]:
    """Build the 32-entry peripheral vector table, one slot per interrupt.

    Interrupts without a handler go to a default handler that raises.
    """
    chosen: dict[Interrupts, IrqFunction] = {}
    for key, handler in (handlers or {}).items():
        chosen[Interrupts(key)] = handler
    return tuple(
        Vector.function(chosen.get(irq, _default_interrupt)) for irq in Interrupts
    )