"""Tests for the structural type grammar."""

from __future__ import annotations

import pytest

from llmdocs.render.types import (
    ArrayType,
    LazyValueType,
    MarkerType,
    NamedType,
    UnionType,
    parse_type,
    render_type,
    type_to_string,
)


class TestParseType:
    """Test parse_type function."""

    def test_plain_name(self) -> None:
        """Should map a string onto a named type."""
        assert parse_type("LuaEntity") == NamedType("LuaEntity")

    def test_nested_array(self) -> None:
        """Should parse nested complex types."""
        raw = {"complex_type": "array", "value": {"complex_type": "array", "value": "uint"}}
        assert parse_type(raw) == ArrayType(ArrayType(NamedType("uint")))

    def test_unknown_tag(self) -> None:
        """Should keep unknown tags as markers."""
        assert parse_type({"complex_type": "builtin"}) == MarkerType("builtin")


class TestRenderType:
    """Test render_type function."""

    def test_none(self) -> None:
        """Should render a missing type as unknown."""
        assert render_type(None) == "unknown"

    def test_union(self) -> None:
        """Should join union options with pipes."""
        raw = {"complex_type": "union", "options": ["string", "LuaEntity", {"complex_type": "literal", "value": 3}]}
        assert render_type(raw) == "string | LuaEntity | 3"

    def test_string_literal(self) -> None:
        """Should quote string literals."""
        assert render_type({"complex_type": "literal", "value": "foo"}) == '"foo"'

    def test_dictionary_and_tuple(self) -> None:
        """Should render dictionaries and tuples with their parameters."""
        assert render_type({"complex_type": "dictionary", "key": "string", "value": "uint"}) == "Dict<string, uint>"
        assert render_type({"complex_type": "tuple", "values": ["float", "float"]}) == "Tuple<float, float>"

    def test_table(self) -> None:
        """Should render inline tables with optional markers."""
        raw = {
            "complex_type": "table",
            "parameters": [
                {"name": "x", "type": "double", "optional": False},
                {"name": "y", "type": "double", "optional": True},
            ],
        }
        assert render_type(raw) == "{ x: double, y?: double }"

    def test_function(self) -> None:
        """Should render parameters and return values of function types."""
        raw = {"complex_type": "function", "parameters": ["LuaEntity"], "return_values": ["boolean"]}
        assert render_type(raw) == "function(LuaEntity) -> boolean"

    def test_wrappers(self) -> None:
        """Should render nominal wrapper types."""
        assert render_type({"complex_type": "LuaLazyLoadedValue", "value": "LuaEntity"}) == "LuaLazyLoadedValue<LuaEntity>"
        assert (
            render_type({"complex_type": "LuaCustomTable", "key": "uint", "value": "LuaPlayer"})
            == "LuaCustomTable<uint, LuaPlayer>"
        )
        assert render_type({"complex_type": "type", "value": "string", "description": "x"}) == "string"

    def test_struct(self) -> None:
        """Should render struct attributes by read type."""
        raw = {"complex_type": "LuaStruct", "attributes": [{"name": "a", "read_type": "uint", "optional": True}]}
        assert render_type(raw) == "LuaStruct{ a?: uint }"

    def test_struct_complex_attribute(self) -> None:
        """Should render complex attribute types through the grammar."""
        raw = {
            "complex_type": "LuaStruct",
            "attributes": [
                {"name": "pos", "read_type": {"complex_type": "array", "value": "double"}},
                {"name": "cb", "write_type": {"complex_type": "union", "options": ["string", "nil"]}},
            ],
        }
        assert render_type(raw) == "LuaStruct{ pos: Array<double>, cb: string | nil }"

    def test_deterministic(self) -> None:
        """Should render the same input identically every time."""
        raw = {"complex_type": "union", "options": [{"complex_type": "array", "value": "string"}, "nil"]}
        assert render_type(raw) == render_type(raw) == "Array<string> | nil"


class TestTypeToString:
    """Test type_to_string function."""

    def test_empty_union(self) -> None:
        """Should render an empty union by name."""
        assert type_to_string(UnionType(())) == "union"

    def test_lazy_value(self) -> None:
        """Should render variants built directly."""
        assert type_to_string(LazyValueType(NamedType("X"))) == "LuaLazyLoadedValue<X>"

    def test_unknown_variant(self) -> None:
        """Should raise TypeError for objects outside the grammar."""
        with pytest.raises(TypeError):
            type_to_string("not a type")  # type: ignore[arg-type]
