import pytest

from trainkit.aarch64 import Pl011Uart
from trainkit.cmsdk.basic import CmsdkUart, RegisterBlock
from trainkit.cmsdk.registers import Control, InvalidBaudRate, InvalidInstance
from trainkit.demos import (
    GlobalUart,
    DemoPanic,
    print_stuff,
    run_table_demo,
    table_rows,
    uart_basic_demo,
    uart_buffered_demo,
    uart_mutex_demo,
)

FIRST = "Hello, this is on a static UART0!\r\n"
SECOND = "Hello, this another string on a static UART0!\r\n"


def _cmsdk(addr=0x4000_4000):
    return CmsdkUart(RegisterBlock.cmsdk(addr))


def test_table_rows_shape():
    rows = list(table_rows())
    assert len(rows) == 10
    assert len({len(row) for row in rows}) == 1
    assert rows[0].startswith("    1.00 ")
    assert rows[-1].endswith("  100.00 ")
    for x, row in enumerate(rows, start=1):
        fields = row.split()
        assert len(fields) == 10
        assert float(fields[0]) == x


def test_print_stuff_to_pl011():
    uart = Pl011Uart.new_uart0()
    print_stuff(uart)
    text = uart.registers.transmitted.decode()
    assert text.startswith("Hello, this is Rust!\n")
    assert text.count("\n") == 11
    assert text.splitlines()[1:] == list(table_rows())


def test_run_table_demo_panics_and_reports():
    uart = Pl011Uart.new_uart0()
    with pytest.raises(DemoPanic, match="I am a panic"):
        run_table_demo(uart, "Hello, this is Rust @ EL1")
    text = uart.registers.transmitted.decode()
    assert text.startswith("Hello, this is Rust @ EL1\n")
    assert text.endswith("PANIC: I am a panic\n")


def test_global_uart_requires_store():
    shared = GlobalUart()
    with pytest.raises(RuntimeError):
        shared.write_str("x")


def test_global_uart_store_returns_previous():
    shared = GlobalUart()
    first = Pl011Uart.new_uart0()
    second = Pl011Uart.new_uart0()
    assert shared.store(first) is None
    assert shared.store(second) is first
    shared.write_str("hi")
    assert second.registers.transmitted == b"hi"
    assert first.registers.transmitted == b""


def test_global_uart_print_stuff():
    shared = GlobalUart()
    uart = Pl011Uart.new_uart0()
    shared.store(uart)
    print_stuff(shared)
    assert uart.registers.transmitted.decode().splitlines()[0] == "Hello, this is Rust!"


def test_uart_basic_demo_greets_every_uart():
    uarts = [_cmsdk(0x4000_4000 + i * 0x1000) for i in range(5)]
    with pytest.raises(DemoPanic, match="Got to end of fn main"):
        uart_basic_demo(uarts)
    for idx, uart in enumerate(uarts):
        assert uart.registers.transmitted == f"Hello, UART{idx}!\r\n".encode()
        assert Control.TXE in uart.registers.control
        assert Control.RXE in uart.registers.control


def test_uart_basic_demo_rejects_invalid_instance():
    bogus = CmsdkUart(RegisterBlock())
    with pytest.raises(InvalidInstance):
        uart_basic_demo([bogus])
    assert bogus.registers.transmitted == b""


def test_uart_basic_demo_rejects_slow_clock():
    with pytest.raises(InvalidBaudRate):
        uart_basic_demo([_cmsdk()], system_clock=115200)


def test_uart_mutex_demo():
    uart = _cmsdk()
    with pytest.raises(DemoPanic):
        uart_mutex_demo(uart)
    assert uart.registers.transmitted == FIRST.encode()


def test_uart_buffered_demo_sends_everything_in_order():
    uart = _cmsdk()
    with pytest.raises(DemoPanic):
        uart_buffered_demo(uart)
    assert uart.registers.transmitted == (FIRST + SECOND).encode()


def test_uart_buffered_demo_small_queue_first_line_drains():
    uart = _cmsdk()
    with pytest.raises(RuntimeError, match="critical section"):
        uart_buffered_demo(uart, capacity=8)
    sent = bytes(uart.registers.transmitted)
    assert FIRST.encode().startswith(sent)
    assert len(sent) < len(FIRST)