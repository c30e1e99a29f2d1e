"""Symbol catalog: where every documented symbol and page ends up."""

from __future__ import annotations

import logging
import posixpath
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from llmdocs.errors import ConfigurationError
from llmdocs.ingestion.api_json import ApiDocument
from llmdocs.models import CatalogEntry

LOGGER = logging.getLogger(__name__)

# (collection in the source document, output directory, symbol kind)
RUNTIME_COLLECTIONS: Tuple[Tuple[str, str, str], ...] = (
    ("classes", "classes", "class"),
    ("concepts", "concepts", "concept"),
    ("events", "events", "event"),
    ("defines", "defines", "define"),
    ("global_functions", "global_functions", "global_function"),
    ("global_objects", "global_objects", "global_object"),
)
PROTOTYPE_COLLECTIONS: Tuple[Tuple[str, str, str], ...] = (
    ("prototypes", "prototypes", "prototype"),
    ("types", "types", "type"),
    ("defines", "defines", "define"),
)
OVERVIEW_PAGES: Dict[str, Tuple[str, ...]] = {
    "runtime": ("classes", "concepts", "events", "defines"),
    "prototype": ("prototypes", "types", "defines"),
}
AUXILIARY_ALIASES = ("auxiliary", "runtime", "prototype")


def symbol_key(stage: str, kind: str, name: str) -> str:
    """Catalog key for a symbol; define groups live under ``defines.``."""
    if kind == "define":
        return f"{stage}:defines.{name}"
    return f"{stage}:{name}"


def symbol_rel_path(stage: str, directory: str, name: str) -> str:
    return posixpath.join(stage, directory, f"{name}.md")


def overview_rel_path(stage: str, kind: str) -> str:
    return posixpath.join(stage, kind, "index.md")


def auxiliary_rel_path(name: str) -> str:
    return posixpath.join("auxiliary", f"{name}.md")


def collections_for(stage: str) -> Tuple[Tuple[str, str, str], ...]:
    return RUNTIME_COLLECTIONS if stage == "runtime" else PROTOTYPE_COLLECTIONS


def symbol_page_path(stage: str, kind: str, name: str) -> str:
    """Page of a symbol of the given kind, independent of catalog key clashes."""
    directory = next(d for _, d, k in collections_for(stage) if k == kind)
    return symbol_rel_path(stage, directory, name)


class Catalog(Mapping[str, CatalogEntry]):
    """Immutable mapping from catalog key to :class:`CatalogEntry`."""

    def __init__(self, entries: Dict[str, CatalogEntry]) -> None:
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: str) -> CatalogEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, key: str) -> Optional[CatalogEntry]:
        return self._entries.get(key)


def build_catalog(
    runtime_doc: Optional[ApiDocument],
    prototype_doc: Optional[ApiDocument],
    auxiliary_names: Iterable[str],
) -> Catalog:
    """Build the version's catalog from the API documents and auxiliary page names."""
    if runtime_doc is None and prototype_doc is None:
        raise ConfigurationError("Cannot build a catalog without a runtime or prototype document")

    entries: Dict[str, CatalogEntry] = {}

    for name in auxiliary_names:
        rel_path = auxiliary_rel_path(name)
        for prefix in AUXILIARY_ALIASES:
            key = f"{prefix}:{name}"
            entries[key] = CatalogEntry(key=key, rel_path=rel_path, stage="auxiliary", kind="auxiliary", name=name)

    documents: Sequence[Tuple[str, Optional[ApiDocument]]] = (
        ("runtime", runtime_doc),
        ("prototype", prototype_doc),
    )
    for stage, doc in documents:
        if doc is None:
            continue
        for overview in OVERVIEW_PAGES[stage]:
            key = f"{stage}:{overview}"
            entries[key] = CatalogEntry(
                key=key,
                rel_path=overview_rel_path(stage, overview),
                stage=stage,
                kind=f"{overview}_index",
                name=overview,
            )
        for collection, directory, kind in collections_for(stage):
            for item in doc.collection(collection):
                name = item["name"]
                key = symbol_key(stage, kind, name)
                if key in entries and entries[key].stage != "auxiliary":
                    LOGGER.warning("Duplicate catalog key %s; keeping the first definition", key)
                    continue
                entries[key] = CatalogEntry(
                    key=key,
                    rel_path=symbol_rel_path(stage, directory, name),
                    stage=stage,
                    kind=kind,
                    name=name,
                )

    LOGGER.debug("Catalog built with %d entries", len(entries))
    return Catalog(entries)
