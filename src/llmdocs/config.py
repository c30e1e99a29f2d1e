"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

RUNTIME_JSON = "runtime-api.json"
PROTOTYPE_JSON = "prototype-api.json"
AUXILIARY_DIR = "auxiliary"

CHUNKS_FILE = "chunks.jsonl"
SYMBOLS_FILE = "symbols.json"
MANIFEST_FILE = "manifest.json"

STAGES = ("runtime", "prototype", "auxiliary")


@dataclass(slots=True)
class AppConfig:
    docs_root: Path = Path("llm-docs")
    input_dir: Path = Path(".")
    search_limit: int = 10
    max_search_depth: int = 5

    def resolve_docs_root(self, base_dir: Path | None = None) -> Path:
        return _resolve(self.docs_root, base_dir)

    def resolve_input_dir(self, base_dir: Path | None = None) -> Path:
        return _resolve(self.input_dir, base_dir)


def _resolve(path: Path, base_dir: Path | None) -> Path:
    if Path(path).is_absolute() or base_dir is None:
        return Path(path)
    return base_dir / path
