"""Command-line entry point for making and checking language cheatsheets."""

from __future__ import annotations

import sys
from typing import Sequence

from trainkit.tasks import (
    LANG_LIST,
    CheatsheetError,
    check_all_cheatsheets,
    make_cheatsheet,
    setup_cheatsheet_tester,
)

_HELP_TEMPLATE = """trainkit

USAGE:
    trainkit [COMMAND]

COMMANDS:
    make-cheatsheet [LANG]      make LANG cheatsheet by scraping slides names in `SUMMARY.md`
    test-cheatsheet [LANG]      test LANG's cheatsheet (all `SUMMARY.md` items are in sheet)
    test-all-cheatsheets        test all LANGs' cheatsheets

LANG:

    We support $$LANG_LIST$$
"""


def join_str(items: Sequence[str]) -> str:
    """Join items as ``a, b, or c``; the last item is always preceded by ``or``."""
    if not items:
        return ""
    *head, last = items
    return "".join(f"{item}, " for item in head) + f"or {last}"


def help_text() -> str:
    """Return the usage text with the supported languages filled in."""
    return _HELP_TEMPLATE.replace("$$LANG_LIST$$", join_str(LANG_LIST))


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 2


def main(argv: Sequence[str] | None = None) -> int:
    """Run a cheatsheet command and return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    printed_help = help_text()

    if not args or (len(args) != 2 and args[0] != "test-all-cheatsheets"):
        return _fail(f"Incorrect number of arguments.\n\n{printed_help}")

    try:
        if args[0] == "test-all-cheatsheets":
            check_all_cheatsheets()
            return 0

        command, lang = args
        if lang not in LANG_LIST:
            langs = join_str(LANG_LIST)
            return _fail(
                f"{lang} is not a valid language name. \n\nExpected one of:\n{langs}\n"
                f"\n===========\n{printed_help}"
            )

        if command == "make-cheatsheet":
            make_cheatsheet(lang)
        elif command == "test-cheatsheet":
            setup_cheatsheet_tester(lang)
    except CheatsheetError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())