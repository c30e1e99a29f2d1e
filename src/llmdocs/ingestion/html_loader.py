"""Auxiliary HTML page loading and conversion to Markdown.

Uses BeautifulSoup with the stdlib ``html.parser`` backend. Links keep their
original ``href`` so the resolver can map legacy site URLs onto generated pages.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from llmdocs.utils.text import normalize_newlines, title_case_from_slug

LOGGER = logging.getLogger(__name__)

_SPECIAL_TITLES = {
    "json-docs-runtime": "Runtime JSON Format",
    "json-docs-prototype": "Prototype JSON Format",
}
_HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}
_BLANK_RUNS_RE = re.compile(r"\n{3,}")


def auxiliary_title(base: str) -> str:
    return _SPECIAL_TITLES.get(base, title_case_from_slug(base))


def _strip_chrome(soup: BeautifulSoup) -> None:
    for element in soup.find_all(["script", "style", "nav"]):
        element.decompose()
    for element in soup.select("div.footer, div[class*=docs-sidebar]"):
        element.decompose()


def _render_children(node: Tag) -> str:
    return "".join(_render_node(child) for child in node.children)


def _render_node(node) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return str(node)
    if not isinstance(node, Tag):
        return ""

    name = node.name
    if name == "pre":
        return f"\n```\n{node.get_text()}\n```\n"
    if name == "code":
        text = node.get_text()
        if "\n" in text:
            return f"\n```\n{text}\n```\n"
        return f"`{text}`"
    if name == "a":
        text = node.get_text().strip()
        href = node.get("href")
        if not text:
            return ""
        return f"[{text}]({href})" if href else text
    if name in _HEADING_TAGS:
        text = node.get_text().strip()
        if not text:
            return ""
        return f"\n{'#' * _HEADING_TAGS[name]} {text}\n"
    if name == "li":
        return f"- {_render_children(node)}\n"
    if name == "p":
        return f"{_render_children(node)}\n\n"
    if name == "br":
        return "\n"
    return _render_children(node)


def html_to_markdown(html: str) -> str:
    """Convert one auxiliary page to Markdown, starting at its first ``h2``."""
    soup = BeautifulSoup(normalize_newlines(html), "html.parser")
    _strip_chrome(soup)
    root = soup.body or soup
    markdown = _render_children(root)

    lines = markdown.split("\n")
    for index, line in enumerate(lines):
        if line.startswith("## "):
            markdown = "\n".join(lines[index:])
            break

    return _BLANK_RUNS_RE.sub("\n\n", markdown).strip() + "\n"


def strip_leading_duplicate_heading(markdown: str, title: str) -> str:
    """Drop an opening ``# title`` / ``## title`` that repeats the page title."""
    lines = normalize_newlines(markdown).split("\n")
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    if index < len(lines) and lines[index] in (f"# {title.strip()}", f"## {title.strip()}"):
        index += 1
        while index < len(lines) and not lines[index].strip():
            index += 1
        return "\n".join(lines[index:]).strip() + "\n"
    return markdown


def load_auxiliary_page(path: Path) -> tuple[str, str]:
    """Return ``(title, markdown body)`` for an auxiliary HTML page."""
    base = path.stem
    title = auxiliary_title(base)
    html = path.read_text(encoding="utf-8")
    LOGGER.debug("Converting auxiliary page %s", path)
    return title, strip_leading_duplicate_heading(html_to_markdown(html), title)
