import threading

import pytest

from trainkit.aarch64 import (
    DAIF_I_BIT,
    UART0_ADDR,
    ExceptionLevel,
    InterruptMask,
    Pl011Registers,
    Pl011Uart,
    exception_level,
    interrupts_enabled,
)


@pytest.mark.parametrize("level", list(ExceptionLevel))
def test_exception_level_decodes_bits_2_and_3(level):
    assert exception_level(level.value << 2) is level


def test_exception_level_ignores_other_bits():
    assert exception_level((1 << 2) | 0b11 | (1 << 8)) is ExceptionLevel.EL1


def test_interrupts_enabled_reads_i_bit():
    assert interrupts_enabled(DAIF_I_BIT) is True
    assert interrupts_enabled(0) is False
    assert interrupts_enabled(~DAIF_I_BIT & 0x3FF) is False


def test_acquire_reports_previous_state_and_masks():
    mask = InterruptMask(daif=DAIF_I_BIT)
    assert mask.acquire() is True
    assert interrupts_enabled(mask.daif)
    second = InterruptMask(daif=0)
    assert second.acquire() is False
    assert interrupts_enabled(second.daif)


def test_release_only_unmasks_when_previously_active():
    mask = InterruptMask(daif=0)
    mask.acquire()
    masked = mask.daif
    mask.release(False)
    assert mask.daif == masked
    mask.release(True)
    assert not interrupts_enabled(mask.daif)


def test_critical_section_masks_inside_body():
    mask = InterruptMask(daif=DAIF_I_BIT)
    with mask.critical_section():
        assert interrupts_enabled(mask.daif)
    assert not interrupts_enabled(mask.daif)


def test_critical_section_releases_on_exception():
    mask = InterruptMask(daif=DAIF_I_BIT)
    with pytest.raises(KeyError):
        with mask.critical_section():
            raise KeyError("boom")
    assert not interrupts_enabled(mask.daif)


def test_new_uart0_enables_uart_and_tx():
    uart = Pl011Uart.new_uart0()
    assert uart.registers.base_addr == UART0_ADDR
    assert uart.registers.control == Pl011Uart.CONTROL_UARTEN | Pl011Uart.CONTROL_TXE


def test_write_str_sends_utf8_bytes():
    uart = Pl011Uart.new_uart0(Pl011Registers())
    uart.write_str("Hello, this is Rust @ EL1\n")
    assert bytes(uart.registers.transmitted) == b"Hello, this is Rust @ EL1\n"


def test_write_rejects_out_of_range_byte():
    uart = Pl011Uart.new_uart0()
    with pytest.raises(ValueError):
        uart.write(256)
    assert uart.registers.transmitted == bytearray()


def test_write_waits_for_fifo_space():
    regs = Pl011Registers(flags=Pl011Uart.FLAG_TXFF)
    uart = Pl011Uart.new_uart0(regs)

    def drain():
        regs.flags = 0

    timer = threading.Timer(0.05, drain)
    timer.start()
    uart.write(ord("A"))
    timer.join()
    assert bytes(regs.transmitted) == b"A"