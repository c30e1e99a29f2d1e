"""Text helpers shared by rendering and retrieval."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_SEPARATOR_RE = re.compile(r"[-_]+")

ELLIPSIS = "…"


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def first_line(text: str | None) -> str:
    if not text:
        return ""
    return text.split("\n", 1)[0].strip()


def title_case_from_slug(slug: str) -> str:
    """``data-lifecycle`` -> ``Data Lifecycle``."""
    words = [word for word in _SLUG_SEPARATOR_RE.split(slug) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def count_occurrences(haystack: str, needle: str) -> int:
    """Count non-overlapping occurrences of ``needle``."""
    if not needle:
        return 0
    return haystack.count(needle)


def make_snippet(text: str, query: str, *, before: int = 60, after: int = 120, fallback: int = 140) -> str:
    """Excerpt ``text`` around the first case-insensitive match of ``query``.

    Works on whitespace-collapsed text. Keeps up to ``before`` characters ahead of
    the match and ``len(query) + after`` from its start, marking truncation with an
    ellipsis. Without a match the first ``fallback`` characters are returned.
    """
    clean = collapse_whitespace(text)
    needle = collapse_whitespace(query).lower()
    idx = clean.lower().find(needle) if needle else -1
    if idx == -1:
        return clean[:fallback]

    start = max(0, idx - before)
    end = min(len(clean), idx + len(needle) + after)
    head = ELLIPSIS if start > 0 else ""
    tail = ELLIPSIS if end < len(clean) else ""
    return f"{head}{clean[start:end]}{tail}"


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
