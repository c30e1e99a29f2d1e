"""Exception types raised by llmdocs."""

from __future__ import annotations


class LlmDocsError(Exception):
    """Base class for errors reported to the user."""


class ConfigurationError(LlmDocsError):
    """Inputs or output location are unusable; nothing has been written."""


class NotFoundError(LlmDocsError):
    """A requested version, chunk, page, symbol or anchor does not exist."""


class ArtifactDecodeError(LlmDocsError):
    """A generated whole-file artifact failed validation."""


class DuplicateChunkError(LlmDocsError):
    """Two rendered chunks share an id."""

    def __init__(self, chunk_id: str) -> None:
        super().__init__(f"Duplicate chunk id: {chunk_id}")
        self.chunk_id = chunk_id
