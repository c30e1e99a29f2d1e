"""Loading of the runtime/prototype API documents and the auxiliary page listing."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from llmdocs.config import AUXILIARY_DIR, PROTOTYPE_JSON, RUNTIME_JSON
from llmdocs.errors import ConfigurationError
from llmdocs.schemas import PrototypeApi, RuntimeApi

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiDocument:
    """A parsed API document together with its original text."""

    stage: str
    source_name: str
    data: Dict[str, Any]
    text: str

    @property
    def application_version(self) -> str:
        return str(self.data["application_version"])

    def collection(self, name: str) -> List[Dict[str, Any]]:
        return list(self.data.get(name) or [])


@dataclass(slots=True)
class SourceBundle:
    runtime: Optional[ApiDocument]
    prototype: Optional[ApiDocument]
    auxiliary_dir: Path
    auxiliary_names: List[str]

    def detect_version(self) -> Optional[str]:
        for doc in (self.runtime, self.prototype):
            if doc is not None:
                return doc.application_version
        return None


def load_api_document(path: Path, stage: str) -> Optional[ApiDocument]:
    """Read and validate one API document; ``None`` if the file is absent."""
    if not path.is_file():
        LOGGER.debug("No %s document at %s", stage, path)
        return None
    schema: Type[BaseModel] = RuntimeApi if stage == "runtime" else PrototypeApi
    try:
        text = path.read_text(encoding="utf-8")
        schema.model_validate_json(text)
        data = json.loads(text)
    except OSError as exc:
        raise ConfigurationError(f"Could not read {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {path.name}:\n{exc}") from exc
    return ApiDocument(stage=stage, source_name=path.name, data=data, text=text)


def list_auxiliary_pages(directory: Path) -> List[str]:
    """Sorted base names of the ``*.html`` pages in ``directory``."""
    if not directory.is_dir():
        return []
    return sorted(child.stem for child in directory.iterdir() if child.is_file() and child.suffix.lower() == ".html")


def load_sources(docs_dir: Path) -> SourceBundle:
    runtime = load_api_document(docs_dir / RUNTIME_JSON, "runtime")
    prototype = load_api_document(docs_dir / PROTOTYPE_JSON, "prototype")
    if runtime is None and prototype is None:
        raise ConfigurationError(f"Expected {RUNTIME_JSON} and/or {PROTOTYPE_JSON} in {docs_dir}")
    auxiliary_dir = docs_dir / AUXILIARY_DIR
    return SourceBundle(
        runtime=runtime,
        prototype=prototype,
        auxiliary_dir=auxiliary_dir,
        auxiliary_names=list_auxiliary_pages(auxiliary_dir),
    )
