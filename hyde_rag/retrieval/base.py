"""
Store interfaces shared by the in-memory and persistent backends.
"""

from typing import Protocol, runtime_checkable

from hyde_rag.models import RankedResult, SourceDocument


@runtime_checkable
class DocumentStore(Protocol):
    def all(self) -> tuple[SourceDocument, ...]: ...

    def add(self, document: SourceDocument) -> None: ...

    def add_text(self, content: str, source: str = "inline") -> SourceDocument: ...

    def count(self) -> int: ...

    def erase(self) -> None: ...


@runtime_checkable
class SimilaritySearchStore(DocumentStore, Protocol):
    """A store that ranks documents itself, given the probe text."""

    def similarity_search(self, probe_text: str, k: int) -> list[RankedResult]: ...


__all__ = ["DocumentStore", "SimilaritySearchStore"]
