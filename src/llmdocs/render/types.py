"""Structural type grammar of the API documents and its text rendering.

Raw types are either plain names (``"LuaEntity"``) or objects tagged with
``complex_type``. :func:`parse_type` maps both onto the closed set of variants
below and :func:`type_to_string` renders any variant back to text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(slots=True, frozen=True)
class NamedType:
    name: str


@dataclass(slots=True, frozen=True)
class ArrayType:
    value: "TypeExpr"


@dataclass(slots=True, frozen=True)
class DictType:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(slots=True, frozen=True)
class TupleType:
    values: Tuple["TypeExpr", ...]


@dataclass(slots=True, frozen=True)
class UnionType:
    options: Tuple["TypeExpr", ...]


@dataclass(slots=True, frozen=True)
class LiteralType:
    value: Any


@dataclass(slots=True, frozen=True)
class TableField:
    name: str
    type: "TypeExpr"
    optional: bool = False


@dataclass(slots=True, frozen=True)
class TableType:
    fields: Tuple[TableField, ...]


@dataclass(slots=True, frozen=True)
class FunctionType:
    parameters: Tuple["TypeExpr", ...]
    returns: Tuple["TypeExpr", ...] = ()


@dataclass(slots=True, frozen=True)
class AliasType:
    """``complex_type: "type"`` - a described wrapper around another type."""

    value: "TypeExpr"


@dataclass(slots=True, frozen=True)
class StructField:
    name: str
    type: "TypeExpr"
    optional: bool = False


@dataclass(slots=True, frozen=True)
class StructType:
    attributes: Tuple[StructField, ...]


@dataclass(slots=True, frozen=True)
class CustomTableType:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(slots=True, frozen=True)
class LazyValueType:
    value: "TypeExpr"


@dataclass(slots=True, frozen=True)
class MarkerType:
    """Bodiless complex types such as ``builtin`` and ``struct``, or unknown tags."""

    tag: str


TypeExpr = Union[
    NamedType,
    ArrayType,
    DictType,
    TupleType,
    UnionType,
    LiteralType,
    TableType,
    FunctionType,
    AliasType,
    StructType,
    CustomTableType,
    LazyValueType,
    MarkerType,
]


def _list(raw: dict, key: str) -> list:
    value = raw.get(key)
    return value if isinstance(value, list) else []


def parse_type(raw: Any) -> TypeExpr:
    if isinstance(raw, str):
        return NamedType(raw)
    if not isinstance(raw, dict):
        return NamedType(json.dumps(raw))

    tag = raw.get("complex_type")
    if not isinstance(tag, str):
        return NamedType(json.dumps(raw, sort_keys=True))

    if tag == "array":
        return ArrayType(parse_type(raw.get("value")))
    if tag == "dictionary":
        return DictType(parse_type(raw.get("key")), parse_type(raw.get("value")))
    if tag == "tuple":
        return TupleType(tuple(parse_type(v) for v in _list(raw, "values")))
    if tag == "union":
        return UnionType(tuple(parse_type(o) for o in _list(raw, "options")))
    if tag == "literal":
        return LiteralType(raw.get("value"))
    if tag == "table":
        fields = tuple(
            TableField(
                name=str(p.get("name", "value")),
                type=parse_type(p.get("type")),
                optional=bool(p.get("optional")),
            )
            for p in _list(raw, "parameters")
            if isinstance(p, dict)
        )
        return TableType(fields)
    if tag == "function":
        return FunctionType(
            parameters=tuple(parse_type(p) for p in _list(raw, "parameters")),
            returns=tuple(parse_type(r) for r in _list(raw, "return_values")),
        )
    if tag == "type":
        return AliasType(parse_type(raw.get("value")))
    if tag == "LuaStruct":
        attributes = tuple(
            StructField(
                name=str(a.get("name")),
                type=parse_type(a.get("read_type") or a.get("write_type") or "unknown"),
                optional=bool(a.get("optional")),
            )
            for a in _list(raw, "attributes")
            if isinstance(a, dict)
        )
        return StructType(attributes)
    if tag == "LuaCustomTable":
        return CustomTableType(parse_type(raw.get("key")), parse_type(raw.get("value")))
    if tag == "LuaLazyLoadedValue":
        return LazyValueType(parse_type(raw.get("value")))
    return MarkerType(tag)


def _join(items: Tuple[TypeExpr, ...], separator: str = ", ") -> str:
    return separator.join(type_to_string(item) for item in items)


def type_to_string(expr: TypeExpr) -> str:
    if isinstance(expr, NamedType):
        return expr.name
    if isinstance(expr, ArrayType):
        return f"Array<{type_to_string(expr.value)}>"
    if isinstance(expr, DictType):
        return f"Dict<{type_to_string(expr.key)}, {type_to_string(expr.value)}>"
    if isinstance(expr, TupleType):
        return f"Tuple<{_join(expr.values)}>"
    if isinstance(expr, UnionType):
        return _join(expr.options, " | ") or "union"
    if isinstance(expr, LiteralType):
        return json.dumps(expr.value, ensure_ascii=False)
    if isinstance(expr, TableType):
        pieces = [f"{f.name}{'?' if f.optional else ''}: {type_to_string(f.type)}" for f in expr.fields]
        return f"{{ {', '.join(pieces)} }}"
    if isinstance(expr, FunctionType):
        returns = f" -> {_join(expr.returns)}" if expr.returns else ""
        return f"function({_join(expr.parameters)}){returns}"
    if isinstance(expr, AliasType):
        return type_to_string(expr.value)
    if isinstance(expr, StructType):
        pieces = [f"{a.name}{'?' if a.optional else ''}: {type_to_string(a.type)}" for a in expr.attributes]
        return f"LuaStruct{{ {', '.join(pieces)} }}"
    if isinstance(expr, CustomTableType):
        return f"LuaCustomTable<{type_to_string(expr.key)}, {type_to_string(expr.value)}>"
    if isinstance(expr, LazyValueType):
        return f"LuaLazyLoadedValue<{type_to_string(expr.value)}>"
    if isinstance(expr, MarkerType):
        return expr.tag
    raise TypeError(f"Unsupported type expression: {expr!r}")


def render_type(raw: Any) -> str:
    """Parse and render a raw type; ``None`` renders as ``unknown``."""
    if raw is None:
        return "unknown"
    return type_to_string(parse_type(raw))
