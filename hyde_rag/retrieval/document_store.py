"""
In-memory document store.

Keeps documents in insertion order so that similarity ties are broken
deterministically by the ranker.
"""

from threading import Lock

from loguru import logger

from hyde_rag.exceptions import ContractViolationError
from hyde_rag.models import SourceDocument


class InMemoryDocumentStore:
    """
    Addressable, ordered collection of documents.

    Reads return an immutable snapshot; writes and snapshots share a lock so
    a concurrent reader never sees a partially erased store.
    """

    def __init__(self, documents: list[SourceDocument] | None = None) -> None:
        self._documents: dict[int | str, SourceDocument] = {}
        self._lock = Lock()

        for doc in documents or []:
            self.add(doc)

    def all(self) -> tuple[SourceDocument, ...]:
        """Return every document, in insertion order."""
        with self._lock:
            return tuple(self._documents.values())

    def add(self, document: SourceDocument) -> None:
        """
        Add a document.

        Raises:
            ContractViolationError: If a document with the same id exists.
        """
        with self._lock:
            if document.id in self._documents:
                raise ContractViolationError(
                    f"Document id {document.id!r} already exists in the store"
                )
            self._documents[document.id] = document

        logger.debug(f"Stored document {document.id!r} ({document.source})")

    def add_text(self, content: str, source: str = "inline") -> SourceDocument:
        """Add raw text under the next free integer id (1-based)."""
        with self._lock:
            int_ids = [i for i in self._documents if isinstance(i, int)]
            doc = SourceDocument(
                id=max(int_ids, default=0) + 1, content=content, source=source
            )
            self._documents[doc.id] = doc

        logger.debug(f"Stored document {doc.id!r} ({source})")
        return doc

    def count(self) -> int:
        """Return the number of stored documents."""
        with self._lock:
            return len(self._documents)

    def erase(self) -> None:
        """Remove all documents. Safe to call on an empty store."""
        with self._lock:
            removed = len(self._documents)
            self._documents = {}

        if removed:
            logger.info(f"Erased {removed} documents from the in-memory store")
