"""Quotes shown on the home screen.

Quotes are loaded from ``QUOTES.md`` at the project root, one per bullet in
the form ``- Quote text -- Author``. If the file is missing, the built-in
list is used.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Optional

from lifetrack.models import Quote

_FALLBACK_QUOTES: list[Quote] = [
    Quote(text="The only way to do great work is to love what you do.", author="Steve Jobs"),
    Quote(
        text="Discipline is choosing between what you want now and what you want most.",
        author="Abraham Lincoln",
    ),
    Quote(text="Focus on the step in front of you, not the whole staircase.", author="Unknown"),
    Quote(
        text="Your future is created by what you do today, not tomorrow.",
        author="Robert Kiyosaki",
    ),
]


def _parse_line(line: str) -> Optional[Quote]:
    stripped = line.strip()
    if not stripped.startswith("- "):
        return None
    body = stripped[2:].strip()
    text, sep, author = body.rpartition(" -- ")
    if not sep:
        text, author = body, "Unknown"
    text = text.strip().strip('"')
    if not text:
        return None
    return Quote(text=text, author=author.strip() or "Unknown")


def _load_quotes() -> list[Quote]:
    """Parse bullet points from QUOTES.md, falling back to built-in list."""
    md_path = Path(__file__).resolve().parent.parent / "QUOTES.md"
    if not md_path.exists():
        return _FALLBACK_QUOTES

    quotes: list[Quote] = []
    for line in md_path.read_text(encoding="utf-8").splitlines():
        quote = _parse_line(line)
        if quote is not None:
            quotes.append(quote)
    return quotes if quotes else _FALLBACK_QUOTES


QUOTES: list[Quote] = _load_quotes()


def pick_quote(quotes: list[Quote], rng: Optional[random.Random] = None) -> Quote:
    """Return one quote, chosen pseudo-randomly."""
    return (rng or random).choice(quotes)
