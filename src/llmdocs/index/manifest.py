"""Manifest, symbols table and version landing pages."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from llmdocs.catalog.catalog import Catalog
from llmdocs.config import CHUNKS_FILE, MANIFEST_FILE, SYMBOLS_FILE
from llmdocs.models import ChunkCounts, ChunkRecord, SymbolEntry

LOGGER = logging.getLogger(__name__)

SYMBOL_KINDS = {
    "class": "class",
    "class_attribute": "attribute",
    "class_method": "method",
    "concept": "concept",
    "event": "event",
    "event_field": "field",
    "define": "define",
    "define_value": "define_value",
    "global_function": "global_function",
    "global_object": "global_object",
    "prototype": "prototype",
    "prototype_property": "property",
    "type": "type",
    "type_property": "property",
    "auxiliary": "page",
}


def symbol_table_key(record: ChunkRecord) -> Optional[str]:
    """``stage:kind:name[.member]`` for a chunk, or ``None`` if it has no page."""
    if not record.rel_path:
        return None
    if record.kind.endswith("_index"):
        return f"{record.stage}:index:{record.kind[: -len('_index')]}"
    kind = SYMBOL_KINDS.get(record.kind, record.kind)
    name = f"{record.name}.{record.member}" if record.member else record.name
    return f"{record.stage}:{kind}:{name}"


class SymbolIndex:
    """Accumulates the symbols table from emitted chunk records."""

    def __init__(self) -> None:
        self._entries: Dict[str, SymbolEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, record: ChunkRecord) -> None:
        key = symbol_table_key(record)
        if key is None:
            return
        if key in self._entries:
            LOGGER.warning("Duplicate symbol key %s (%s); keeping %s", key, record.id, self._entries[key].id)
            return
        self._entries[key] = SymbolEntry(
            id=record.id,
            stage=record.stage,
            kind=record.kind,
            name=record.name,
            rel_path=record.rel_path,
            member=record.member,
            anchor=record.anchor,
        )

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {key: self._entries[key].to_dict() for key in sorted(self._entries)}

    def write(self, path: Path) -> None:
        path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def build_manifest(
    version: str, counts: ChunkCounts, *, generated_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """Manifest payload; output paths are relative to the docs root."""
    stamp = (generated_at or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return {
        "version": version,
        "generated_at": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "outputs": {
            "markdown_root": version,
            "chunks_jsonl": f"{version}/{CHUNKS_FILE}",
        },
        "counts": counts.to_dict(),
    }


def write_manifest(version_dir: Path, manifest: Dict[str, Any]) -> Path:
    path = version_dir / MANIFEST_FILE
    path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return path


def write_symbols(version_dir: Path, symbols: SymbolIndex) -> Path:
    path = version_dir / SYMBOLS_FILE
    symbols.write(path)
    return path


def _overview_entries(catalog: Catalog, stage: str) -> List[tuple[str, str]]:
    rows = []
    for key in sorted(catalog):
        entry = catalog[key]
        if entry.stage == stage and entry.kind.endswith("_index"):
            rows.append((entry.name, entry.rel_path))
    return rows


def _auxiliary_entries(catalog: Catalog) -> List[tuple[str, str]]:
    return sorted(
        (catalog[key].name, catalog[key].rel_path) for key in catalog if key.startswith("auxiliary:")
    )


def render_readme(version: str, catalog: Catalog) -> str:
    lines = [f"# API Docs (LLM Export) - {version}", ""]
    for stage, label in (("runtime", "Runtime"), ("prototype", "Prototype")):
        overviews = _overview_entries(catalog, stage)
        if not overviews:
            continue
        lines.append(f"- {label}: `{stage}/`")
        lines.extend(f"  - {name.replace('_', ' ').title()}: `{rel}`" for name, rel in overviews)
    auxiliary = _auxiliary_entries(catalog)
    if auxiliary:
        lines.append("- Auxiliary: `auxiliary/`")
        lines.extend(f"  - `{rel}`" for _, rel in auxiliary)
    lines.extend(
        [
            "- Start Here: `SEARCH.md`",
            "",
            "Machine-readable sources:",
            "",
            f"- `{CHUNKS_FILE}` (chunked text + metadata)",
            f"- `{SYMBOLS_FILE}` (symbol key -> page, anchor and chunk id)",
            f"- `{MANIFEST_FILE}` (counts and output paths)",
            "",
        ]
    )
    return "\n".join(lines)


def render_search_guide(version: str, catalog: Catalog) -> str:
    lines = [f"# Search Guide - {version}", "", "## Start Here", ""]
    for stage, label in (("runtime", "Runtime"), ("prototype", "Prototype")):
        overviews = _overview_entries(catalog, stage)
        if overviews:
            links = ", ".join(f"[{label} {name.replace('_', ' ').title()}]({rel})" for name, rel in overviews)
            lines.append(f"- {label} overview: {links}")
    auxiliary = _auxiliary_entries(catalog)
    if auxiliary:
        lines.extend(["", "## Auxiliary Pages", ""])
        lines.extend(f"- [{name}]({rel})" for name, rel in auxiliary)
    lines.extend(
        [
            "",
            "## Querying",
            "",
            f'- Ranked search: `llmdocs search "<term>" --version {version}`',
            f"- One chunk: `llmdocs get {version}/runtime/class/<Name>#<member>`",
            "- A page section: `llmdocs open runtime/classes/<Name>.md#<member>`",
            "",
        ]
    )
    return "\n".join(lines)
