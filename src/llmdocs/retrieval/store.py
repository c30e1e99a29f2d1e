"""Read-only access to a generated docs tree."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from pydantic import ValidationError

from llmdocs.config import CHUNKS_FILE, MANIFEST_FILE, SYMBOLS_FILE
from llmdocs.errors import NotFoundError
from llmdocs.models import ChunkRecord
from llmdocs.schemas import ChunkModel, Manifest, SymbolEntryModel, SymbolsTable, decode_json_or_raise
from llmdocs.utils.files import list_version_dirs

LOGGER = logging.getLogger(__name__)


class DocsStore:
    """A docs root holding one directory per generated version."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        if not self.root.is_dir():
            raise NotFoundError(f"Docs root not found: {self.root}")

    def versions(self) -> List[str]:
        return list_version_dirs(self.root)

    def latest_version(self) -> str:
        versions = self.versions()
        if not versions:
            raise NotFoundError(f"No versions found under: {self.root}")
        return versions[-1]

    def open_version(self, version: Optional[str] = None) -> "VersionStore":
        selected = version or self.latest_version()
        version_dir = self.root / selected
        if not version_dir.is_dir():
            raise NotFoundError(f"Version not found under {self.root}: {selected}")
        return VersionStore(version_dir, selected)


class VersionStore:
    """One generated version: chunk corpus, symbols table, manifest and pages."""

    def __init__(self, version_dir: Path, version: str) -> None:
        self.version_dir = Path(version_dir)
        self.version = version
        self._symbols: Optional[Dict[str, SymbolEntryModel]] = None

    @property
    def chunks_path(self) -> Path:
        return self.version_dir / CHUNKS_FILE

    def iter_chunks(self) -> Iterator[ChunkRecord]:
        """Stream chunk records line by line, skipping malformed lines."""
        if not self.chunks_path.is_file():
            raise NotFoundError(f"Missing {CHUNKS_FILE}: {self.chunks_path}")
        with self.chunks_path.open("r", encoding="utf-8", errors="replace") as handle:
            for line_number, line in enumerate(handle, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    model = ChunkModel.model_validate_json(line)
                except ValidationError:
                    LOGGER.debug("Skipping malformed chunk line %d in %s", line_number, self.chunks_path)
                    continue
                yield ChunkRecord.from_dict(model.model_dump())

    def find_chunk(self, chunk_id: str) -> ChunkRecord:
        for record in self.iter_chunks():
            if record.id == chunk_id:
                return record
        raise NotFoundError(f"Chunk not found: {chunk_id}")

    def symbols(self) -> Dict[str, SymbolEntryModel]:
        """The symbols table; empty if this version has none."""
        if self._symbols is None:
            path = self.version_dir / SYMBOLS_FILE
            if path.is_file():
                table = decode_json_or_raise(SymbolsTable, path.read_text(encoding="utf-8"), SYMBOLS_FILE)
                self._symbols = dict(table.root)
            else:
                self._symbols = {}
        return self._symbols

    def manifest(self) -> Manifest:
        path = self.version_dir / MANIFEST_FILE
        if not path.is_file():
            raise NotFoundError(f"Missing {MANIFEST_FILE}: {path}")
        return decode_json_or_raise(Manifest, path.read_text(encoding="utf-8"), MANIFEST_FILE)

    def page_path(self, rel_path: str) -> Path:
        path = (self.version_dir / rel_path).resolve()
        if not path.is_relative_to(self.version_dir.resolve()) or not path.is_file():
            raise NotFoundError(f"Markdown not found: {self.version_dir / rel_path}")
        return path

    def read_page(self, rel_path: str) -> str:
        return self.page_path(rel_path).read_text(encoding="utf-8")

    def describe(self) -> Dict[str, str]:
        return {"root": str(self.version_dir.parent), "version": self.version}


def dump_chunk(record: ChunkRecord) -> str:
    return json.dumps(record.to_dict(), indent=2, ensure_ascii=False)
