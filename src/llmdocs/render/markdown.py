"""Small Markdown building blocks used by the renderer."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from llmdocs.render.types import render_type


def by_order(items: Optional[Iterable[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Sort members by their declared ``order``; ties keep input order."""
    return sorted(items or [], key=lambda item: item.get("order", 0))


def frontmatter(data: Dict[str, Any]) -> str:
    lines = [f"{key}: {value}" for key, value in data.items()]
    return "---\n" + "\n".join(lines) + "\n---\n"


def section(title: str, level: int = 2) -> str:
    return f"\n{'#' * level} {title}\n"


def flag(value: Any) -> str:
    return "true" if value else "false"


def field_list(items: Iterable[Dict[str, Any]]) -> str:
    """Bullet list of ``name?: type - description`` entries."""
    lines = []
    for item in items:
        optional = "?" if item.get("optional") else ""
        line = f"- `{item['name']}{optional}`: `{render_type(item.get('type'))}`"
        if item.get("description"):
            line += f" - {item['description']}"
        lines.append(line)
    return "\n".join(lines)


def return_list(items: Iterable[Dict[str, Any]]) -> str:
    lines = []
    for item in items:
        optional = "?" if item.get("optional") else ""
        line = f"- `{render_type(item.get('type'))}{optional}`"
        if item.get("description"):
            line += f" - {item['description']}"
        lines.append(line)
    return "\n".join(lines)


def signature(qualified_name: str, parameters: Iterable[Dict[str, Any]], return_values: Iterable[Dict[str, Any]]) -> str:
    params = [
        f"{p['name']}{'?' if p.get('optional') else ''}: {render_type(p.get('type'))}" for p in parameters
    ]
    returns = [f"{render_type(r.get('type'))}{'?' if r.get('optional') else ''}" for r in return_values]
    tail = f" -> {', '.join(returns)}" if returns else ""
    return f"{qualified_name}({', '.join(params)}){tail}"


def call_convention(item: Dict[str, Any]) -> Tuple[bool, bool]:
    """``(takes_table, table_optional)`` from a method's ``format`` or legacy flags."""
    fmt = item.get("format")
    if isinstance(fmt, dict):
        return bool(fmt.get("takes_table")), bool(fmt.get("table_optional"))
    return bool(item.get("takes_table")), bool(item.get("table_optional"))


def call_usage(qualified_name: str, parameters: Iterable[Dict[str, Any]], takes_table: bool) -> str:
    names = [f"{p['name']}{'?' if p.get('optional') else ''}" for p in parameters]
    if takes_table:
        return f"{qualified_name}{{{', '.join(f'{name}=…' for name in names)}}}"
    return f"{qualified_name}({', '.join(names)})"


def lua_block(code: str) -> str:
    return f"```lua\n{code}\n```\n"


def examples_block(examples: Iterable[str]) -> str:
    return "\n\n".join(examples) + "\n"
