import logging

import pytest

from trainkit.cmsdk.basic import CmsdkUart, RegisterBlock
from trainkit.cmsdk.buffered import BufferedUart
from trainkit.cmsdk.registers import Control, IntStatus, InvalidBaudRate, Status

SYSTEM_CLOCK = 25_000_000


@pytest.fixture
def regs():
    return RegisterBlock.cmsdk(0x4000_4000)


def _ready(regs, capacity):
    buffered = BufferedUart(capacity)
    buffered.init(CmsdkUart(regs), 115200, SYSTEM_CLOCK)
    return buffered


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        BufferedUart(0)


def test_uninitialised_raises():
    with pytest.raises(RuntimeError, match="not initialised"):
        BufferedUart(8).tx_byte_blocking(0x41)


def test_init_failure_propagates(regs):
    with pytest.raises(InvalidBaudRate):
        BufferedUart(8).init(CmsdkUart(regs), 115200, 1_000_000)


def test_first_byte_is_sent_and_enables_interrupt(regs):
    buffered = _ready(regs, 8)
    buffered.tx_byte_blocking(0x41)
    assert regs.transmitted == bytearray(b"A")
    assert Control.TXIE in regs.control


def test_write_str_then_flush_sends_everything(regs):
    buffered = _ready(regs, 256)
    buffered.wait_for_interrupt = buffered.tx_isr
    buffered.write_str("Hello, this another string on a static UART0!\r\n")
    assert regs.transmitted == bytearray(b"H")
    buffered.flush()
    assert bytes(regs.transmitted) == b"Hello, this another string on a static UART0!\r\n"


def test_full_queue_waits_for_interrupt(regs):
    buffered = _ready(regs, 4)
    waits = []

    def interrupt():
        waits.append(True)
        buffered.tx_isr()

    buffered.wait_for_interrupt = interrupt
    buffered.tx_blocking(b"abcde")
    assert len(waits) == 1
    assert regs.transmitted == bytearray(b"ab")
    buffered.flush()
    assert regs.transmitted == bytearray(b"abcde")


def test_waiting_without_interrupt_source_raises(regs):
    buffered = _ready(regs, 2)
    buffered.tx_blocking(b"ab")
    with pytest.raises(RuntimeError):
        buffered.tx_byte_blocking(ord("c"))


def test_isr_with_empty_queue_turns_interrupt_off(regs):
    buffered = _ready(regs, 8)
    buffered.tx_byte_blocking(0x41)
    regs.int_status = IntStatus.TXI | IntStatus.RXI
    buffered.tx_isr()
    assert Control.TXIE not in regs.control
    assert regs.int_status == IntStatus.RXI


def test_isr_when_tx_full_keeps_byte_queued(regs, caplog):
    caplog.set_level(logging.WARNING, logger="trainkit.cmsdk.buffered")
    buffered = _ready(regs, 8)
    buffered.tx_blocking(b"xy")
    regs.status = Status.TXF
    buffered.tx_isr()
    assert regs.transmitted == bytearray(b"x")
    assert "Duff ISR" in caplog.text
    regs.status = Status(0)
    buffered.tx_isr()
    assert regs.transmitted == bytearray(b"xy")


def test_flush_waits_while_tx_full(regs):
    buffered = _ready(regs, 8)
    regs.status = Status.TXF
    waits = []

    def interrupt():
        waits.append(True)
        regs.status = Status(0)

    buffered.wait_for_interrupt = interrupt
    buffered.flush()
    assert len(waits) == 1
    assert regs.status == Status(0)