"""Generate cheatsheet skeletons from SUMMARY.md and check that they stay in sync.

A cheatsheet is a Markdown file holding one ``# Header`` for every top-level
section of the training material, with a ``## Deck Title`` line for every
slide deck listed under that section in ``SUMMARY.md``. Extra decks are allowed.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

LANG_LIST: tuple[str, ...] = ("python", "go", "ruby", "swift", "java", "julia", "c", "cpp")

INITIAL_HEADER = "# Rust Fundamentals"
"""Anything before this header is ignored. It must be present."""

LAST_HEADER = "# No-Std Rust"
"""Anything after this header is ignored. It must be present."""

HEADERS: tuple[str, ...] = (
    INITIAL_HEADER,
    "# Applied Rust",
    "# Advanced Rust",
    "# Rust and Web Assembly",
)

NUM_HEADERS = len(HEADERS)


class CheatsheetError(Exception):
    """Raised when SUMMARY.md or a cheatsheet is malformed or out of sync."""


@dataclass
class SlidesSection:
    """A heading from SUMMARY.md and the human-readable deck titles under it."""

    header: str
    deck_titles: list[str] = field(default_factory=list)

    @classmethod
    def from_chunk(cls, chunk: Sequence[str]) -> "SlidesSection":
        """Build a section from a heading line followed by deck entry lines."""
        if len(chunk) < 2:
            raise CheatsheetError(f"Section {list(chunk)!r} has no slide decks")
        first = chunk[0]
        if not first.startswith("# "):
            raise CheatsheetError(f"Malformed header {first!r}")
        return cls(
            header=first[2:],
            deck_titles=[get_deck_title(line) for line in chunk[1:]],
        )


def get_deck_title(line: str) -> str:
    """Turn ``* [Overview](./overview.md)`` into ``Overview``."""
    if not line.startswith("* [") or not line.endswith(".md)"):
        raise CheatsheetError(f"Not a well-formed deck entry: {line!r}")
    top = line.rfind("]")
    bottom = line.find("[")
    if top < 0:
        raise CheatsheetError("the markdown file entry did not have a ']'")
    return line[bottom + 1 : top]


def _chunk_by_header(lines: Iterable[str]) -> list[list[str]]:
    chunks: list[list[str]] = []
    current: list[str] = []
    for line in lines:
        if line.startswith("# ") and current:
            chunks.append(current)
            current = []
        current.append(line)
    if current:
        chunks.append(current)
    return chunks


def focus_regions(text: str) -> list[list[str]]:
    """Extract headings and deck entries between the first and last header.

    Each inner list starts with the heading line, followed by its deck lines.
    """
    if INITIAL_HEADER not in text:
        raise CheatsheetError(
            f"Your INITIAL_HEADER ({INITIAL_HEADER!r}) is not part of the input. "
            f"Check your `SUMMARY.md` for {INITIAL_HEADER}"
        )
    if LAST_HEADER not in text:
        raise CheatsheetError(
            f"Your LAST_HEADER ({LAST_HEADER!r}) is not part of the text input. "
            f"CHECK your `SUMMARY.md` for {LAST_HEADER}"
        )
    first = text.find(INITIAL_HEADER)
    last = text.rfind(LAST_HEADER)
    if last < first:
        raise CheatsheetError(
            f"{LAST_HEADER!r} appears before {INITIAL_HEADER!r}. Check your `SUMMARY.md`."
        )

    stripped = (line.strip() for line in text[first:last].split("\n"))
    relevant = (line for line in stripped if line and line[0] in "*#")
    return _chunk_by_header(relevant)


def render_cheatsheet(slide_sections: Iterable[SlidesSection]) -> str:
    """Format sections as a Markdown cheatsheet skeleton."""
    parts = []
    for section in slide_sections:
        lines = [f"# {section.header}\n"]
        lines.extend(f"## {title}\n" for title in section.deck_titles)
        lines.append("\n")
        parts.append("".join(lines))
    return "".join(parts)


def _capitalise(lang: str) -> str:
    if not lang:
        raise CheatsheetError("language name must not be empty")
    return lang[0].upper() + lang[1:]


def _warn(message: str) -> None:
    print(message, file=sys.stderr)


def cheatsheet_tester(
    lang: str, slide_sections: Sequence[SlidesSection], cheatsheet_text: str
) -> None:
    """Check a cheatsheet against the sections from SUMMARY.md.

    The cheatsheet must start with ``# Lang Cheatsheet``, hold every header in
    ``HEADERS`` in order, and list every deck under its header. Every problem
    is reported on stderr before a :class:`CheatsheetError` is raised.
    """
    cheatsheet_name = f"# {_capitalise(lang)} Cheatsheet"
    if cheatsheet_name not in cheatsheet_text:
        raise CheatsheetError(
            f"{lang}-cheatsheet.md does not contain a starting header `{cheatsheet_name}`"
        )

    lines = (line.removesuffix("\r") for line in cheatsheet_text.split("\n"))
    relevant = (
        line for line in lines if line.startswith("#") and line != cheatsheet_name
    )
    chunks = _chunk_by_header(relevant)
    if not chunks:
        raise CheatsheetError("Cheatsheet should not be empty")

    missing = False
    if len(chunks) != NUM_HEADERS:
        _warn(f"You are missing headers in {lang}-cheatsheet.md")
        missing = True

    for idx, section in enumerate(chunks):
        if idx >= NUM_HEADERS:
            raise CheatsheetError(
                f"{lang}-cheatsheet.md has more than {NUM_HEADERS} headers"
            )
        expected = HEADERS[idx]
        if section[0] != expected:
            _warn(f"Header Error: '{expected}' should be in {lang}-cheatsheet.md")
            missing = True

        if len(section) == 1:
            _warn(f"You are missing *ALL* the slide decks under the {expected} header")
            missing = True
            continue

        if idx >= len(slide_sections):
            raise CheatsheetError(f"No slide section from SUMMARY.md for {expected}")
        present = set(section[1:])
        for deck in slide_sections[idx].deck_titles:
            if f"## {deck}" not in present:
                _warn(
                    f"Slide Section '{deck}' in {lang}-cheatsheet.md "
                    f"is not under header {expected}"
                )
                missing = True

    if missing:
        raise CheatsheetError(f"You have missing slides in {lang}-cheatsheet.md")
    _warn(f"Neat! {lang}-cheatsheet.md is in sync")


def _slides_dir(root: str | Path) -> Path:
    return Path(root) / "training-slides" / "src"


def _read_summary(root: str | Path) -> str:
    path = _slides_dir(root) / "SUMMARY.md"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CheatsheetError(f"SUMMARY.md not found at {path}") from exc


def _cheatsheet_path(root: str | Path, lang: str) -> Path:
    return _slides_dir(root) / f"{lang}-cheatsheet.md"


def setup_cheatsheet_tester(lang: str, root: str | Path = ".") -> None:
    """Check ``<root>/training-slides/src/<lang>-cheatsheet.md`` against SUMMARY.md."""
    regions = focus_regions(_read_summary(root))
    sections = [SlidesSection.from_chunk(chunk) for chunk in regions]

    path = _cheatsheet_path(root, lang)
    try:
        cheatsheet_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CheatsheetError(f"{lang}-cheatsheet.md not found.") from exc

    cheatsheet_tester(lang, sections, cheatsheet_text)


def make_cheatsheet(lang: str, root: str | Path = ".") -> None:
    """Write a new cheatsheet skeleton, or check the existing one is in sync."""
    regions = focus_regions(_read_summary(root))
    sections = [SlidesSection(header=f"{_capitalise(lang)} Cheatsheet")]
    sections.extend(SlidesSection.from_chunk(chunk) for chunk in regions)

    path = _cheatsheet_path(root, lang)
    try:
        handle = path.open("x", encoding="utf-8")
    except OSError:
        _warn(f"File {lang}-cheatsheet.md already exists - checking it's in sync")
        setup_cheatsheet_tester(lang, root)
        return

    with handle:
        handle.write(render_cheatsheet(sections))
    _warn(f"Cheatsheat for {lang} written at {path}")
    _warn("Make sure to add it to SUMMARY.md!")


def check_all_cheatsheets(root: str | Path = ".") -> None:
    """Check every existing cheatsheet for the supported languages."""
    for lang in LANG_LIST:
        if _cheatsheet_path(root, lang).exists():
            setup_cheatsheet_tester(lang, root)