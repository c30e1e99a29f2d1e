"""Point lookups: fetch a chunk, open a page section, show call conventions."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from llmdocs.anchors import extract_section
from llmdocs.errors import NotFoundError
from llmdocs.models import ChunkRecord
from llmdocs.retrieval.store import VersionStore

LOGGER = logging.getLogger(__name__)

CHUNK_ID_RE = re.compile(r"^\d+\.\d+\.\d+/")


def looks_like_chunk_id(target: str) -> bool:
    return bool(CHUNK_ID_RE.match(target))


def looks_like_path(target: str) -> bool:
    """Page paths contain ``/``, end in ``.md`` or carry ``#anchor``; chunk ids do not count."""
    if looks_like_chunk_id(target):
        return False
    return "/" in target or target.endswith(".md") or "#" in target


def split_anchor(target: str) -> Tuple[str, Optional[str]]:
    path, _, anchor = target.partition("#")
    return path, anchor or None


@dataclass(slots=True)
class OpenResult:
    rel_path: str
    anchor: Optional[str]
    text: str
    chunk: Optional[ChunkRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.chunk.id if self.chunk else None,
            "relPath": self.rel_path,
            "anchor": self.anchor,
            "text": self.text,
        }


@dataclass(slots=True)
class CallInfo:
    id: str
    name: str
    member: Optional[str]
    call: Optional[str]
    takes_table: bool
    table_optional: bool

    @classmethod
    def from_record(cls, record: ChunkRecord) -> "CallInfo":
        return cls(
            id=record.id,
            name=record.name,
            member=record.member,
            call=record.call,
            takes_table=bool(record.takes_table),
            table_optional=bool(record.table_optional),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "member": self.member,
            "call": self.call,
            "takes_table": self.takes_table,
            "table_optional": self.table_optional,
        }


class Reader:
    """Resolves ids, page paths and symbol keys against one generated version."""

    def __init__(self, store: VersionStore) -> None:
        self.store = store

    def get(self, chunk_id: str) -> ChunkRecord:
        return self.store.find_chunk(chunk_id.strip())

    def open(self, target: str) -> OpenResult:
        target = target.strip()
        if not target:
            raise NotFoundError("Nothing to open")

        if looks_like_path(target):
            rel_path, anchor = split_anchor(target)
            return self._open_page(rel_path, anchor)

        entry = self.store.symbols().get(target)
        if entry is not None:
            LOGGER.debug("Opening symbol %s via %s", target, entry.relPath)
            return self._open_page(entry.relPath, entry.anchor)

        record = self.get(target)
        if not record.rel_path:
            return OpenResult(rel_path="", anchor=None, text=record.text, chunk=record)
        result = self._open_page(record.rel_path, record.anchor)
        result.chunk = record
        return result

    def call(self, target: str) -> CallInfo:
        target = target.strip()
        entry = self.store.symbols().get(target)
        chunk_id = entry.id if entry is not None else target
        record = self.get(chunk_id)
        if record.call is None and record.takes_table is None:
            raise NotFoundError(f"No call convention recorded for: {record.id}")
        return CallInfo.from_record(record)

    def _open_page(self, rel_path: str, anchor: Optional[str]) -> OpenResult:
        markdown = self.store.read_page(rel_path)
        if anchor is None:
            return OpenResult(rel_path=rel_path, anchor=None, text=markdown)
        section = extract_section(markdown, anchor)
        if section is None:
            raise NotFoundError(f"Anchor not found: {rel_path}#{anchor}")
        return OpenResult(rel_path=rel_path, anchor=anchor, text=section)
