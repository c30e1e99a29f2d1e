"""Tests for auxiliary HTML loading."""

from __future__ import annotations

from pathlib import Path

from conftest import STORAGE_HTML
from llmdocs.ingestion.html_loader import (
    auxiliary_title,
    html_to_markdown,
    load_auxiliary_page,
    strip_leading_duplicate_heading,
)


class TestAuxiliaryTitle:
    """Test auxiliary_title function."""

    def test_special_titles(self) -> None:
        """Should use fixed titles for the JSON format pages."""
        assert auxiliary_title("json-docs-runtime") == "Runtime JSON Format"
        assert auxiliary_title("json-docs-prototype") == "Prototype JSON Format"

    def test_title_case(self) -> None:
        """Should title-case other page names."""
        assert auxiliary_title("data-lifecycle") == "Data Lifecycle"


class TestHtmlToMarkdown:
    """Test html_to_markdown function."""

    def test_strips_chrome(self) -> None:
        """Should drop scripts, sidebars and footers."""
        markdown = html_to_markdown(STORAGE_HTML)

        assert "var x" not in markdown
        assert "Sidebar" not in markdown
        assert "Footer" not in markdown

    def test_starts_at_first_h2(self) -> None:
        """Should drop everything before the first h2."""
        markdown = html_to_markdown(STORAGE_HTML)
        assert markdown.startswith("## Storage\n")

    def test_inline_markup(self) -> None:
        """Should render code spans and keep raw link targets."""
        markdown = html_to_markdown(STORAGE_HTML)

        assert "`storage`" in markdown
        assert "[LuaFoo.teleport](classes/LuaFoo.html#teleport)" in markdown
        assert "### Details" in markdown

    def test_pre_and_lists(self) -> None:
        """Should fence preformatted blocks and bullet list items."""
        html = "<h2>X</h2><pre>local a = 1</pre><ul><li>one</li><li>two</li></ul>"
        markdown = html_to_markdown(html)

        assert "```\nlocal a = 1\n```" in markdown
        assert "- one\n- two" in markdown

    def test_collapses_blank_runs(self) -> None:
        """Should never leave more than one blank line."""
        markdown = html_to_markdown("<h2>A</h2><p>x</p><p></p><p></p><p>y</p>")
        assert "\n\n\n" not in markdown

    def test_without_h2(self) -> None:
        """Should keep the whole body when there is no h2."""
        assert html_to_markdown("<p>Only text.</p>") == "Only text.\n"


class TestStripLeadingDuplicateHeading:
    """Test strip_leading_duplicate_heading function."""

    def test_strips_repeat(self) -> None:
        """Should drop an opening heading equal to the title."""
        assert strip_leading_duplicate_heading("## Storage\n\nBody.\n", "Storage") == "Body.\n"

    def test_keeps_other_heading(self) -> None:
        """Should keep headings that differ from the title."""
        markdown = "## Overview\n\nBody.\n"
        assert strip_leading_duplicate_heading(markdown, "Storage") == markdown


class TestLoadAuxiliaryPage:
    """Test load_auxiliary_page function."""

    def test_load(self, tmp_path: Path) -> None:
        """Should return the derived title and the cleaned body."""
        path = tmp_path / "storage.html"
        path.write_text(STORAGE_HTML, encoding="utf-8")

        title, body = load_auxiliary_page(path)

        assert title == "Storage"
        assert body.startswith("The `storage` table persists.")
        assert "## Storage" not in body
