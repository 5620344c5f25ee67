# trainkit

Tooling for keeping language cheatsheets in step with a set of training
slides, plus simulated embedded-systems building blocks (UART drivers,
interrupt tables, exception levels) and small worked examples used as
teaching material.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Cheatsheets

The slides are expected under `./training-slides/src/`, relative to the
current directory, with a `SUMMARY.md` listing the slide decks. Only the part
of `SUMMARY.md` between `# Rust Fundamentals` and `# No-Std Rust` is read.
Both headers must be present. Within that part, each `# ` heading starts a
section and each `* [Title](./file.md)` line names a deck in it.

Create a skeleton cheatsheet for a language. It is written to
`./training-slides/src/<lang>-cheatsheet.md`. If that file already exists, it
is checked instead of being overwritten:

```
trainkit make-cheatsheet python
```

Check that an existing cheatsheet is in sync with `SUMMARY.md`:

```
trainkit test-cheatsheet python
```

A cheatsheet is in sync when all of these hold:

- it contains `# Python Cheatsheet`;
- it has the headers `# Rust Fundamentals`, `# Applied Rust`, `# Advanced Rust` and `# Rust and Web Assembly`, in that order;
- every deck of each section appears as a `## Title` line under its header.

Extra decks are allowed.

Check every cheatsheet that exists, for each supported language:

```
trainkit test-all-cheatsheets
```

Supported languages: python, go, ruby, swift, java, julia, c and cpp.

Progress and every problem found are reported on standard error. The command
exits with one of these statuses:

| Status | Meaning |
| --- | --- |
| 0 | success |
| 1 | a cheatsheet or `SUMMARY.md` problem |
| 2 | wrong arguments or an unsupported language |

The same operations are available from Python in `trainkit.tasks`:

- `make_cheatsheet(lang, root=".")`
- `setup_cheatsheet_tester(lang, root=".")`
- `check_all_cheatsheets(root=".")`

The building blocks are also available:

- `focus_regions(text)`
- `get_deck_title(line)`
- `SlidesSection` with `SlidesSection.from_chunk`
- `render_cheatsheet(sections)`
- `cheatsheet_tester(lang, sections, text)`

Problems raise `CheatsheetError`. `trainkit.cli` provides `main(argv=None)`,
`help_text()` and `join_str(items)`.

## Simulated peripherals

`trainkit.cmsdk` models the Arm CMSDK UART:

- `trainkit.cmsdk.registers` holds the register flags `Status`, `Control` and `IntStatus`. It also holds the errors `InvalidInstance` and `InvalidBaudRate`, both subclasses of `UartError`.
- `trainkit.cmsdk.basic` holds `RegisterBlock`, an in-memory register set that records every transmitted byte in `transmitted`. It also holds the `CmsdkUart` driver. When the TX buffer is full, `CmsdkUart.write` raises `WouldBlock`.
- `trainkit.cmsdk.mutex` holds `MutexUart`, a lock-guarded UART that can exist before it is initialised. Writing a string to it before initialisation drops the text.
- `trainkit.cmsdk.buffered` holds `BufferedUart`, an interrupt-driven UART with a queue of `capacity - 1` bytes that `tx_isr` drains. Set its `wait_for_interrupt` attribute to the callable that should run while the driver waits.

```python
from trainkit.cmsdk.basic import CmsdkUart, RegisterBlock

uart = CmsdkUart(RegisterBlock.cmsdk(0x4000_4000))
uart.check()
uart.init(115200, 25_000_000)
uart.write_str("Hello, UART0!\r\n")
print(bytes(uart.registers.transmitted))
```

`trainkit.aarch64` covers the following:

- `ExceptionLevel` and `exception_level(current_el)`;
- `interrupts_enabled(daif)`;
- `InterruptMask`, whose `critical_section()` context manager masks interrupts and restores them afterwards;
- a PL011 UART driver, `Pl011Uart`, over `Pl011Registers`.

`trainkit.boards` holds the MPS2 UART addresses, the MPS2-AN505 `Interrupts`
enumeration, `Vector`, and `vector_table(handlers)`. That function builds the
32-entry peripheral table. Any interrupt without a handler raises
`RuntimeError` when called.

`trainkit.demos` runs the demo programs against these simulated devices:

- `print_stuff`
- `run_table_demo`
- `uart_basic_demo`
- `uart_mutex_demo`
- `uart_buffered_demo`

It also provides `GlobalUart` and `table_rows`, which yields a 10×10
multiplication table. Each demo ends by raising `DemoPanic`.

## Small examples

`trainkit.examples` contains the following:

- `add(left, right)`: unsigned 64-bit addition that raises `OverflowError` on overflow.
- `MagicAdder` and `magicadder_process_value(adder, value)`: unsigned 32-bit addition. A missing adder gives 0.
- Several ways of printing "Hello, world!": `hello_print`, `hello_to_stream`, `hello_to_fd` and `write_fd`.

## What this package does not do

The peripherals here are in-memory models only. Nothing talks to real or
emulated hardware, and nothing loads firmware or starts an emulator.