"""Plain-text helpers for stored case study fields."""
from __future__ import annotations

from typing import Iterable

from portfolio.utils.html_sanitizer import strip_tags

ELLIPSIS = "…"


def split_technologies(value: str | None) -> list[str]:
    """Split a comma separated technologies string into trimmed, non-empty tokens."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def join_technologies(technologies: Iterable[str]) -> str:
    return ", ".join(t.strip() for t in technologies if t and t.strip())


def trim_words(content: str | None, num_words: int = 30, more: str = ELLIPSIS) -> str:
    """
    Return the first ``num_words`` words of ``content`` with HTML removed.

    ``more`` is appended only when words were actually dropped.
    """
    words = strip_tags(content).split()
    if len(words) > num_words:
        return " ".join(words[:num_words]) + more
    return " ".join(words)
