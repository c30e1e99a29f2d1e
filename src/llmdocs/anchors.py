"""Heading slugs and anchor-based section extraction for generated Markdown.

Chunk anchors are member names written verbatim as sub-heading text, so an
anchor matches a heading either by its raw text or by its slug. Slugs follow
the usual Markdown-renderer rule: lowercase, strip punctuation, whitespace to
hyphens, and ``-1``, ``-2``, ... suffixes for repeated headings on one page.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t]*$")
_FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")
_WHITESPACE_RE = re.compile(r"\s+")

STRIPPED_PUNCTUATION = "".join(ch for ch in string.punctuation if ch not in "-_")
_STRIP_TABLE = str.maketrans("", "", STRIPPED_PUNCTUATION)


@dataclass(slots=True, frozen=True)
class Heading:
    line_index: int
    level: int
    text: str
    slug: str


def slugify(text: str) -> str:
    value = text.strip().lower().translate(_STRIP_TABLE)
    value = _WHITESPACE_RE.sub("-", value)
    return value.strip("-")


def iter_headings(lines: List[str]) -> Iterator[Heading]:
    """Yield headings outside fenced code blocks with collision-suffixed slugs."""
    seen: Dict[str, int] = {}
    fence: Optional[str] = None
    for index, line in enumerate(lines):
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            token = fence_match.group(1)
            if fence is None:
                fence = token[0] * 3
            elif token.startswith(fence):
                fence = None
            continue
        if fence is not None:
            continue

        match = _HEADING_RE.match(line)
        if not match:
            continue
        text = match.group(2)
        base = slugify(text)
        count = seen.get(base, 0)
        seen[base] = count + 1
        slug = base if count == 0 else f"{base}-{count}"
        yield Heading(line_index=index, level=len(match.group(1)), text=text, slug=slug)


def heading_slugs(markdown: str) -> List[str]:
    return [heading.slug for heading in iter_headings(markdown.split("\n"))]


def extract_section(markdown: str, anchor: str) -> Optional[str]:
    """Return the section owned by the heading matching ``anchor``, or ``None``.

    A heading whose raw text equals ``anchor`` wins over one that only matches by
    slug. The section ends before the next heading of the same or a higher level.
    """
    lines = markdown.split("\n")
    headings = list(iter_headings(lines))

    match = next((h for h in headings if h.text == anchor), None)
    if match is None:
        match = next((h for h in headings if h.slug == anchor), None)
    if match is None:
        return None

    end = len(lines)
    for heading in headings:
        if heading.line_index > match.line_index and heading.level <= match.level:
            end = heading.line_index
            break
    return "\n".join(lines[match.line_index:end]).rstrip() + "\n"
