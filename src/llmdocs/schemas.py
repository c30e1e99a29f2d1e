"""Pydantic models for the JSON documents llmdocs reads and writes."""

from __future__ import annotations

from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, RootModel, ValidationError

from llmdocs.errors import ArtifactDecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Preserving(BaseModel):
    model_config = ConfigDict(extra="allow")


class NamedDocEntry(_Preserving):
    name: str
    description: Optional[str] = None


class RuntimeApi(_Preserving):
    application_version: str
    classes: List[NamedDocEntry] = []
    concepts: List[NamedDocEntry] = []
    events: List[NamedDocEntry] = []
    defines: List[NamedDocEntry] = []
    global_functions: List[NamedDocEntry] = []
    global_objects: List[NamedDocEntry] = []


class PrototypeApi(_Preserving):
    application_version: str
    prototypes: List[NamedDocEntry] = []
    types: List[NamedDocEntry] = []
    defines: List[NamedDocEntry] = []


class ChunkModel(_Preserving):
    id: str
    version: str
    stage: str
    kind: str
    name: str
    member: Optional[str] = None
    relPath: Optional[str] = None
    anchor: Optional[str] = None
    call: Optional[str] = None
    takes_table: Optional[bool] = None
    table_optional: Optional[bool] = None
    text: str


class SymbolEntryModel(_Preserving):
    id: str
    stage: str
    kind: str
    name: str
    member: Optional[str] = None
    relPath: str
    anchor: Optional[str] = None


class SymbolsTable(RootModel[Dict[str, SymbolEntryModel]]):
    pass


class ManifestOutputs(_Preserving):
    markdown_root: str
    chunks_jsonl: str


class RuntimeCounts(_Preserving):
    classes: int
    concepts: int
    events: int
    defines: int
    global_functions: int
    global_objects: int


class PrototypeCounts(_Preserving):
    prototypes: int
    types: int
    defines: int


class AuxiliaryCounts(_Preserving):
    pages: int


class ManifestCounts(_Preserving):
    runtime: RuntimeCounts
    prototype: PrototypeCounts
    auxiliary: AuxiliaryCounts
    chunks: int


class Manifest(_Preserving):
    version: str
    generated_at: str
    outputs: ManifestOutputs
    counts: ManifestCounts


def decode_json_or_raise(model: Type[ModelT], json_text: str, label: str) -> ModelT:
    """Validate ``json_text`` against ``model`` or raise a descriptive error naming ``label``."""
    try:
        return model.model_validate_json(json_text)
    except ValidationError as exc:
        raise ArtifactDecodeError(f"Failed to decode {label}:\n{exc}") from exc
