"""Core llmdocs data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(slots=True, frozen=True)
class CatalogEntry:
    """Output location of one documented symbol or page."""

    key: str
    rel_path: str
    stage: str
    kind: str
    name: str
    anchor: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ResolvedLink:
    rel_path: str
    anchor: Optional[str] = None


@dataclass(slots=True)
class ChunkRecord:
    """One retrievable unit of the corpus, serialised as a JSONL line."""

    id: str
    version: str
    stage: str
    kind: str
    name: str
    text: str
    member: Optional[str] = None
    rel_path: Optional[str] = None
    anchor: Optional[str] = None
    call: Optional[str] = None
    takes_table: Optional[bool] = None
    table_optional: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "version": self.version,
            "stage": self.stage,
            "kind": self.kind,
            "name": self.name,
        }
        optional = (
            ("member", self.member),
            ("relPath", self.rel_path),
            ("anchor", self.anchor),
            ("call", self.call),
            ("takes_table", self.takes_table),
            ("table_optional", self.table_optional),
        )
        for key, value in optional:
            if value is not None:
                payload[key] = value
        payload["text"] = self.text
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ChunkRecord":
        return cls(
            id=payload["id"],
            version=payload["version"],
            stage=payload["stage"],
            kind=payload["kind"],
            name=payload["name"],
            text=payload["text"],
            member=payload.get("member"),
            rel_path=payload.get("relPath"),
            anchor=payload.get("anchor"),
            call=payload.get("call"),
            takes_table=payload.get("takes_table"),
            table_optional=payload.get("table_optional"),
        )


@dataclass(slots=True)
class SymbolEntry:
    """Value of the symbols lookup table."""

    id: str
    stage: str
    kind: str
    name: str
    rel_path: str
    member: Optional[str] = None
    anchor: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "stage": self.stage,
            "kind": self.kind,
            "name": self.name,
        }
        if self.member is not None:
            payload["member"] = self.member
        payload["relPath"] = self.rel_path
        if self.anchor is not None:
            payload["anchor"] = self.anchor
        return payload


@dataclass(slots=True)
class SearchHit:
    score: int
    id: str
    stage: str
    kind: str
    name: str
    snippet: str
    member: Optional[str] = None
    rel_path: Optional[str] = None
    anchor: Optional[str] = None

    @property
    def location(self) -> str:
        if not self.rel_path:
            return "(no relPath)"
        return f"{self.rel_path}#{self.anchor}" if self.anchor else self.rel_path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "id": self.id,
            "stage": self.stage,
            "kind": self.kind,
            "name": self.name,
            "member": self.member,
            "relPath": self.rel_path,
            "anchor": self.anchor,
            "snippet": self.snippet,
        }


RUNTIME_COUNTERS = ("classes", "concepts", "events", "defines", "global_functions", "global_objects")
PROTOTYPE_COUNTERS = ("prototypes", "types", "defines")


@dataclass(slots=True)
class ChunkCounts:
    runtime: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(RUNTIME_COUNTERS, 0))
    prototype: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(PROTOTYPE_COUNTERS, 0))
    auxiliary_pages: int = 0
    chunks: int = 0

    def increment(self, stage: str, counter: str) -> None:
        if stage == "runtime":
            self.runtime[counter] += 1
        elif stage == "prototype":
            self.prototype[counter] += 1
        elif stage == "auxiliary":
            self.auxiliary_pages += 1
        else:
            raise ValueError(f"Unknown stage: {stage}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runtime": dict(self.runtime),
            "prototype": dict(self.prototype),
            "auxiliary": {"pages": self.auxiliary_pages},
            "chunks": self.chunks,
        }
