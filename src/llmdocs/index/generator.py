"""Documentation export pipeline."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

from llmdocs.catalog.catalog import build_catalog
from llmdocs.catalog.resolver import Resolver
from llmdocs.config import CHUNKS_FILE, PROTOTYPE_JSON, RUNTIME_JSON, STAGES
from llmdocs.errors import ConfigurationError, NotFoundError
from llmdocs.index.chunks import ChunkWriter
from llmdocs.index.manifest import (
    SymbolIndex,
    build_manifest,
    render_readme,
    render_search_guide,
    write_manifest,
    write_symbols,
)
from llmdocs.ingestion.api_json import ApiDocument, SourceBundle, load_sources
from llmdocs.ingestion.html_loader import load_auxiliary_page
from llmdocs.render.renderer import Renderer, RenderedUnit
from llmdocs.utils.files import find_docs_root, write_text_file

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerateResult:
    version: str
    version_dir: Path
    chunks_path: Path
    manifest: dict
    pages: int = 0
    written_files: list[Path] = field(default_factory=list)


class Generator:
    """Turns one API documentation drop into a Markdown tree and chunk corpus.

    The pipeline is strictly sequential: the catalog is complete before any
    page is rendered, chunks are appended in rendering order, and the
    manifest and symbols table are written only after the chunk file is closed.
    """

    def __init__(
        self,
        input_dir: Path,
        out_dir: Path,
        *,
        version: Optional[str] = None,
        only: Optional[Iterable[str]] = None,
        force: bool = False,
        max_search_depth: int = 5,
    ) -> None:
        self.input_dir = Path(input_dir)
        self.out_dir = Path(out_dir)
        self.version_override = version
        self.only = frozenset(only) if only else frozenset(STAGES)
        self.force = force
        self.max_search_depth = max_search_depth

        unknown = self.only - set(STAGES)
        if unknown:
            raise ConfigurationError(f"Unknown --only value(s): {', '.join(sorted(unknown))}")

    def run(self) -> GenerateResult:
        if not self.input_dir.is_dir():
            raise ConfigurationError(f"Input directory not found: {self.input_dir}")
        try:
            docs_dir = find_docs_root(self.input_dir, (RUNTIME_JSON, PROTOTYPE_JSON), max_depth=self.max_search_depth)
        except NotFoundError as exc:
            raise ConfigurationError(str(exc)) from exc
        sources = load_sources(docs_dir)
        version = self.version_override or sources.detect_version()
        if not version:
            raise ConfigurationError("Could not determine application_version; pass --version")

        version_dir = self._prepare_output(version)
        LOGGER.info("Generating %s from %s into %s", version, docs_dir, version_dir)
        try:
            return self._generate(sources, version, version_dir)
        except Exception:
            LOGGER.info("Removing partial output %s", version_dir)
            shutil.rmtree(version_dir, ignore_errors=True)
            raise

    def _generate(self, sources: SourceBundle, version: str, version_dir: Path) -> GenerateResult:
        catalog = build_catalog(sources.runtime, sources.prototype, sources.auxiliary_names)
        resolver = Resolver(catalog)
        renderer = Renderer(version, resolver)
        symbols = SymbolIndex()

        result = GenerateResult(version=version, version_dir=version_dir, chunks_path=version_dir / CHUNKS_FILE, manifest={})
        with ChunkWriter(result.chunks_path) as writer:
            for unit in self._iter_units(renderer, sources):
                self._emit(unit, version, version_dir, writer, symbols, result)
        counts = writer.counts

        self._copy_sources(version_dir, sources.runtime, sources.prototype)
        write_text_file(version_dir, "README.md", render_readme(version, catalog))
        write_text_file(version_dir, "SEARCH.md", render_search_guide(version, catalog))
        result.written_files.append(write_symbols(version_dir, symbols))

        result.manifest = build_manifest(version, counts)
        result.written_files.append(write_manifest(version_dir, result.manifest))
        LOGGER.info("Wrote %d pages and %d chunks", result.pages, counts.chunks)
        return result

    def _prepare_output(self, version: str) -> Path:
        version_dir = self.out_dir / version
        if version_dir.exists():
            if not self.force:
                raise ConfigurationError(f"Output already exists: {version_dir} (use --force to overwrite)")
            LOGGER.info("Removing existing output %s", version_dir)
            shutil.rmtree(version_dir)
        version_dir.mkdir(parents=True)
        return version_dir

    def _iter_units(self, renderer: Renderer, sources: SourceBundle) -> Iterable[RenderedUnit]:
        if "auxiliary" in self.only:
            for name in sources.auxiliary_names:
                title, markdown = load_auxiliary_page(sources.auxiliary_dir / f"{name}.html")
                yield renderer.render_auxiliary(name, title, markdown)
        documents: Sequence[Optional[ApiDocument]] = (sources.runtime, sources.prototype)
        for doc in documents:
            if doc is not None and doc.stage in self.only:
                yield from renderer.render_stage(doc)

    def _emit(
        self,
        unit: RenderedUnit,
        version: str,
        version_dir: Path,
        writer: ChunkWriter,
        symbols: SymbolIndex,
        result: GenerateResult,
    ) -> None:
        write_text_file(version_dir, unit.page.rel_path, unit.page.content(version))
        result.pages += 1
        if unit.counter:
            writer.count_symbol(unit.page.stage, unit.counter)
        for chunk in unit.chunks:
            writer.write(chunk)
            symbols.add(chunk)

    @staticmethod
    def _copy_sources(version_dir: Path, *documents: Optional[ApiDocument]) -> None:
        for doc in documents:
            if doc is None:
                continue
            text = doc.text if doc.text.endswith("\n") else doc.text + "\n"
            write_text_file(version_dir, doc.source_name, text)
