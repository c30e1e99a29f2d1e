"""Tests for the manifest, symbols table and landing pages."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from llmdocs.catalog.catalog import build_catalog
from llmdocs.index.manifest import (
    SymbolIndex,
    build_manifest,
    render_readme,
    render_search_guide,
    symbol_table_key,
    write_manifest,
)
from llmdocs.ingestion.api_json import ApiDocument
from llmdocs.models import ChunkCounts, ChunkRecord

from conftest import RUNTIME_API


def record(kind: str, name: str, member: str | None = None, rel_path: str | None = "p.md", stage: str = "runtime") -> ChunkRecord:
    suffix = f"#{member}" if member else ""
    return ChunkRecord(
        id=f"1.0.0/{stage}/{kind}/{name}{suffix}",
        version="1.0.0",
        stage=stage,
        kind=kind,
        name=name,
        text="t",
        member=member,
        rel_path=rel_path,
        anchor=member,
    )


class TestSymbolTableKey:
    """Test symbol_table_key function."""

    def test_class_and_method(self) -> None:
        """Should map chunk kinds onto symbol kinds."""
        assert symbol_table_key(record("class", "LuaEntity")) == "runtime:class:LuaEntity"
        assert symbol_table_key(record("class_method", "Foo", "bar")) == "runtime:method:Foo.bar"
        assert symbol_table_key(record("class_attribute", "Foo", "valid")) == "runtime:attribute:Foo.valid"

    def test_other_kinds(self) -> None:
        """Should cover event fields, define values, properties and pages."""
        assert symbol_table_key(record("event_field", "on_tick", "tick")) == "runtime:field:on_tick.tick"
        assert (
            symbol_table_key(record("define_value", "defines.direction", "north"))
            == "runtime:define_value:defines.direction.north"
        )
        assert (
            symbol_table_key(record("type_property", "Color", "r", stage="prototype")) == "prototype:property:Color.r"
        )
        assert symbol_table_key(record("auxiliary", "storage", stage="auxiliary")) == "auxiliary:page:storage"

    def test_index(self) -> None:
        """Should key overview pages by collection."""
        assert symbol_table_key(record("classes_index", "Runtime Classes")) == "runtime:index:classes"

    def test_without_page(self) -> None:
        """Should skip records without a page."""
        assert symbol_table_key(record("class", "A", rel_path=None)) is None


class TestSymbolIndex:
    """Test SymbolIndex class."""

    def test_sorted_output(self) -> None:
        """Should emit keys sorted."""
        index = SymbolIndex()
        index.add(record("class", "B"))
        index.add(record("class", "A"))

        assert list(index.to_dict()) == ["runtime:class:A", "runtime:class:B"]
        assert index.to_dict()["runtime:class:A"]["relPath"] == "p.md"

    def test_duplicate_keeps_first(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should keep the first record for a repeated key."""
        index = SymbolIndex()
        first = record("class", "A")
        second = record("class", "A", rel_path="other.md")
        with caplog.at_level(logging.WARNING):
            index.add(first)
            index.add(second)

        assert len(index) == 1
        assert index.to_dict()["runtime:class:A"]["relPath"] == "p.md"
        assert "Duplicate symbol key" in caplog.text

    def test_write(self, tmp_path: Path) -> None:
        """Should write indented JSON with a trailing newline."""
        index = SymbolIndex()
        index.add(record("class_method", "Foo", "bar"))
        path = tmp_path / "symbols.json"
        index.write(path)

        text = path.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert json.loads(text)["runtime:method:Foo.bar"]["anchor"] == "bar"


class TestManifest:
    """Test manifest building."""

    def test_build_manifest(self) -> None:
        """Should record version, UTC timestamp, outputs and counts."""
        stamp = datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=timezone.utc)
        manifest = build_manifest("2.0.9", ChunkCounts(), generated_at=stamp)

        assert manifest["version"] == "2.0.9"
        assert manifest["generated_at"] == "2024-05-01T12:30:00.123Z"
        assert manifest["outputs"] == {"markdown_root": "2.0.9", "chunks_jsonl": "2.0.9/chunks.jsonl"}
        assert manifest["counts"]["auxiliary"] == {"pages": 0}

    def test_default_timestamp_is_utc(self) -> None:
        """Should stamp the current time in UTC."""
        manifest = build_manifest("1.0.0", ChunkCounts())
        assert manifest["generated_at"].endswith("Z")

    def test_write_manifest(self, tmp_path: Path) -> None:
        """Should write manifest.json into the version directory."""
        path = write_manifest(tmp_path, {"version": "1.0.0"})

        assert path == tmp_path / "manifest.json"
        assert json.loads(path.read_text(encoding="utf-8")) == {"version": "1.0.0"}


class TestLandingPages:
    """Test README and SEARCH guide rendering."""

    @pytest.fixture
    def catalog(self):
        doc = ApiDocument(stage="runtime", source_name="runtime-api.json", data=RUNTIME_API, text="{}")
        return build_catalog(doc, None, ["storage"])

    def test_readme(self, catalog) -> None:
        """Should list the stage overviews and auxiliary pages."""
        readme = render_readme("2.0.9", catalog)

        assert readme.startswith("# API Docs (LLM Export) - 2.0.9")
        assert "`runtime/classes/index.md`" in readme
        assert "`auxiliary/storage.md`" in readme
        assert "Prototype" not in readme

    def test_search_guide(self, catalog) -> None:
        """Should link the overview pages as a jump list."""
        guide = render_search_guide("2.0.9", catalog)

        assert "[Runtime Classes](runtime/classes/index.md)" in guide
        assert "[storage](auxiliary/storage.md)" in guide
        assert "llmdocs search" in guide
