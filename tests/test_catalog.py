"""Tests for the symbol catalog."""

from __future__ import annotations

import copy
import json
import logging

import pytest

from conftest import PROTOTYPE_API, RUNTIME_API
from llmdocs.catalog.catalog import Catalog, build_catalog, symbol_key, symbol_page_path
from llmdocs.errors import ConfigurationError
from llmdocs.ingestion.api_json import ApiDocument


def make_doc(stage: str, data: dict) -> ApiDocument:
    return ApiDocument(stage=stage, source_name=f"{stage}-api.json", data=data, text=json.dumps(data))


@pytest.fixture
def catalog() -> Catalog:
    return build_catalog(make_doc("runtime", RUNTIME_API), make_doc("prototype", PROTOTYPE_API), ["storage", "libraries"])


class TestSymbolKey:
    """Test symbol_key function."""

    def test_plain_symbol(self) -> None:
        """Should prefix the stage."""
        assert symbol_key("runtime", "class", "LuaFoo") == "runtime:LuaFoo"

    def test_define_group(self) -> None:
        """Should put define groups under defines."""
        assert symbol_key("prototype", "define", "direction") == "prototype:defines.direction"


class TestSymbolPagePath:
    """Test symbol_page_path function."""

    def test_directory_per_kind(self) -> None:
        """Should place same-named symbols of different kinds on different pages."""
        assert symbol_page_path("runtime", "class", "LuaBar") == "runtime/classes/LuaBar.md"
        assert symbol_page_path("runtime", "concept", "LuaBar") == "runtime/concepts/LuaBar.md"
        assert symbol_page_path("prototype", "define", "direction") == "prototype/defines/direction.md"


class TestBuildCatalog:
    """Test build_catalog function."""

    def test_class_entry(self, catalog: Catalog) -> None:
        """Should map a class onto its page."""
        entry = catalog["runtime:LuaFoo"]

        assert entry.rel_path == "runtime/classes/LuaFoo.md"
        assert entry.stage == "runtime"
        assert entry.kind == "class"

    def test_every_collection(self, catalog: Catalog) -> None:
        """Should register every symbol family under its directory."""
        assert catalog["runtime:MapPosition"].rel_path == "runtime/concepts/MapPosition.md"
        assert catalog["runtime:on_tick"].rel_path == "runtime/events/on_tick.md"
        assert catalog["runtime:log"].rel_path == "runtime/global_functions/log.md"
        assert catalog["runtime:game"].rel_path == "runtime/global_objects/game.md"
        assert catalog["prototype:FooPrototype"].rel_path == "prototype/prototypes/FooPrototype.md"
        assert catalog["prototype:Color"].rel_path == "prototype/types/Color.md"

    def test_defines_per_stage(self, catalog: Catalog) -> None:
        """Should keep runtime and prototype define groups apart."""
        assert catalog["runtime:defines.direction"].rel_path == "runtime/defines/direction.md"
        assert catalog["prototype:defines.direction"].rel_path == "prototype/defines/direction.md"

    def test_overview_pages(self, catalog: Catalog) -> None:
        """Should register the overview index pages."""
        entry = catalog["runtime:classes"]

        assert entry.rel_path == "runtime/classes/index.md"
        assert entry.kind == "classes_index"
        assert catalog["prototype:types"].rel_path == "prototype/types/index.md"

    def test_auxiliary_aliases(self, catalog: Catalog) -> None:
        """Should expose auxiliary pages under every stage prefix."""
        for prefix in ("auxiliary", "runtime", "prototype"):
            assert catalog[f"{prefix}:storage"].rel_path == "auxiliary/storage.md"

    def test_symbols_win_over_auxiliary(self) -> None:
        """Should let a symbol replace an auxiliary page of the same name."""
        catalog = build_catalog(make_doc("runtime", RUNTIME_API), None, ["LuaFoo"])

        assert catalog["runtime:LuaFoo"].kind == "class"
        assert catalog["auxiliary:LuaFoo"].kind == "auxiliary"

    def test_duplicate_symbol_keeps_first(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should keep the first definition of a duplicated name."""
        data = copy.deepcopy(RUNTIME_API)
        data["concepts"].append({"name": "LuaFoo", "order": 1})

        with caplog.at_level(logging.WARNING):
            catalog = build_catalog(make_doc("runtime", data), None, [])

        assert catalog["runtime:LuaFoo"].kind == "class"
        assert "Duplicate catalog key runtime:LuaFoo" in caplog.text

    def test_requires_a_document(self) -> None:
        """Should refuse to build without any API document."""
        with pytest.raises(ConfigurationError):
            build_catalog(None, None, ["storage"])


class TestCatalog:
    """Test Catalog mapping."""

    def test_lookup_missing(self, catalog: Catalog) -> None:
        """Should return None from lookup for unknown keys."""
        assert catalog.lookup("runtime:Nope") is None

    def test_immutable(self, catalog: Catalog) -> None:
        """Should not support item assignment."""
        with pytest.raises(TypeError):
            catalog["runtime:Nope"] = catalog["runtime:LuaFoo"]  # type: ignore[index]

    def test_len_and_iter(self, catalog: Catalog) -> None:
        """Should behave like a read-only mapping."""
        assert len(catalog) == len(list(catalog))
        assert "runtime:LuaBar" in catalog
