"""Append-only JSONL chunk writer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Optional, Set, TextIO

from llmdocs.errors import DuplicateChunkError
from llmdocs.models import ChunkCounts, ChunkRecord


def encode_chunk(record: ChunkRecord) -> str:
    return json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))


class ChunkWriter:
    """Writes one compact JSON object per line and keeps running counts."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.counts = ChunkCounts()
        self._seen_ids: Set[str] = set()
        self._handle: Optional[TextIO] = None

    def __enter__(self) -> "ChunkWriter":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("w", encoding="utf-8", newline="\n")

    def close(self) -> None:
        if self._handle is not None:
            self._handle.flush()
            self._handle.close()
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def write(self, record: ChunkRecord) -> None:
        if self._handle is None:
            raise RuntimeError("ChunkWriter is not open")
        if record.id in self._seen_ids:
            raise DuplicateChunkError(record.id)
        self._seen_ids.add(record.id)
        self._handle.write(encode_chunk(record) + "\n")
        self.counts.chunks += 1

    def write_all(self, records: Iterable[ChunkRecord]) -> None:
        for record in records:
            self.write(record)

    def count_symbol(self, stage: str, counter: str) -> None:
        self.counts.increment(stage, counter)
