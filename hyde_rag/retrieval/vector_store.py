"""
ChromaDB document store: the persistent variant of the in-memory store.

Similarity is computed by Chroma on dense embeddings, so this store replaces
both the in-memory store and the local ranker.
"""

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from langchain_chroma import Chroma
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from loguru import logger

from hyde_rag.config import settings, timed
from hyde_rag.exceptions import (
    ContractViolationError,
    RAGException,
    SchemaMissingError,
    VectorStoreError,
)
from hyde_rag.ingestion.loader import DocumentLoader
from hyde_rag.models import RankedResult, SourceDocument

R = TypeVar("R")

_MISSING_MARKERS = ("does not exist", "not initialized", "not found")


def _chroma_id(doc_id: int | str) -> str:
    """Collection key for a document id; 1 and "1" stay distinct."""
    return f"{type(doc_id).__name__}:{doc_id}"


def _is_schema_missing(error: Exception) -> bool:
    if type(error).__name__ in {"NotFoundError", "InvalidCollectionException"}:
        return True
    message = str(error).lower()
    return any(marker in message for marker in _MISSING_MARKERS)


class ChromaDocumentStore:
    """
    Wrapper around a Chroma collection holding SourceDocuments.

    A missing collection is recovered once by creating the default schema and
    retrying the operation; any other backend error is raised as
    VectorStoreError.
    """

    def __init__(
        self,
        embedding_model: Embeddings,
        collection_name: str | None = None,
        persist_directory: Path | None = None,
        loader: DocumentLoader | None = None,
    ):
        """
        Initialize the store.

        Args:
            embedding_model: Dense embedding model used by Chroma.
            collection_name: Name of the Chroma collection. Defaults to COLLECTION_NAME.
            persist_directory: Where Chroma keeps its files. Defaults to CHROMA_PATH.
            loader: Loader used by add_file.
        """
        self.collection_name = collection_name or settings.COLLECTION_NAME
        self.embedding_model = embedding_model
        self.persist_directory = persist_directory or settings.CHROMA_PATH
        self.loader = loader or DocumentLoader()
        self._max_int_id: int | None = None

        self.db = self._connect()

    def _connect(self) -> Chroma:
        return Chroma(
            collection_name=self.collection_name,
            embedding_function=self.embedding_model,
            persist_directory=str(self.persist_directory),
            collection_metadata={"hnsw:space": "cosine"},
        )

    # ═══════════════════════════════════════════════════════
    # SCHEMA
    # ═══════════════════════════════════════════════════════

    def create_schema(self) -> None:
        """Create the default collection (no-op if it already exists)."""
        self.db = self._connect()
        self._max_int_id = None
        logger.info(f"Collection '{self.collection_name}' ready")

    def destroy_schema(self) -> None:
        """Drop the collection and everything in it."""
        self._call(self.db.delete_collection)
        logger.info(f"Collection '{self.collection_name}' dropped")

    def erase(self) -> None:
        """Remove all documents by recreating the collection."""
        try:
            self.destroy_schema()
        except SchemaMissingError:
            logger.debug(f"Collection '{self.collection_name}' already absent")
        self.create_schema()

    # ═══════════════════════════════════════════════════════
    # DOCUMENTS
    # ═══════════════════════════════════════════════════════

    def count(self) -> int:
        """Return the total number of documents in the collection."""
        return self._run(lambda: self.db._collection.count())

    def all(self) -> tuple[SourceDocument, ...]:
        """Return every document, in insertion order."""
        data = self._run(lambda: self.db.get(include=["documents", "metadatas"]))

        rows = sorted(
            zip(data["documents"], data["metadatas"], strict=True),
            key=lambda row: row[1].get("position", 0),
        )
        return tuple(
            SourceDocument(
                id=meta["doc_id"], content=content, source=meta.get("source", "")
            )
            for content, meta in rows
        )

    def add(self, document: SourceDocument) -> None:
        """
        Add a document.

        Raises:
            ContractViolationError: If a document with the same id exists.
        """
        doc_key = _chroma_id(document.id)
        existing = self._run(lambda: self.db.get(ids=[doc_key])["ids"])
        if existing:
            raise ContractViolationError(
                f"Document id {document.id!r} already exists in '{self.collection_name}'"
            )

        position = self.count()
        metadata = {
            "doc_id": document.id,
            "source": document.source,
            "position": position,
        }
        self._run(
            lambda: self.db.add_texts(
                [document.content], metadatas=[metadata], ids=[doc_key]
            )
        )
        if isinstance(document.id, int) and self._max_int_id is not None:
            self._max_int_id = max(self._max_int_id, document.id)
        logger.debug(f"Stored document {document.id!r} ({document.source})")

    def add_text(self, content: str, source: str = "inline") -> SourceDocument:
        """Add raw text under the next free integer id (1-based)."""
        if self._max_int_id is None:
            int_ids = [doc.id for doc in self.all() if isinstance(doc.id, int)]
            self._max_int_id = max(int_ids, default=0)
        document = SourceDocument(
            id=self._max_int_id + 1, content=content, source=source
        )
        self.add(document)
        return document

    def add_file(self, file_path: Path) -> list[SourceDocument]:
        """Load, chunk and store a file. Returns the stored chunks."""
        return [
            self.add_text(chunk.page_content, source=chunk.metadata["source"])
            for chunk in self.loader.load_file(file_path)
        ]

    @timed
    def similarity_search(self, probe_text: str, k: int) -> list[RankedResult]:
        """
        Rank stored documents against the probe text.

        Chroma returns cosine distances, converted here to similarities.

        Raises:
            ContractViolationError: If ``k`` is negative.
        """
        if k < 0:
            raise ContractViolationError(f"top_k must be >= 0, got {k}")

        k = min(k, self.count())
        if k == 0:
            return []

        logger.debug(f"Querying '{self.collection_name}' (k={k})")
        hits: list[tuple[Document, float]] = self._run(
            lambda: self.db.similarity_search_with_score(probe_text, k=k)
        )
        return [
            RankedResult(
                document=SourceDocument(
                    id=doc.metadata["doc_id"],
                    content=doc.page_content,
                    source=doc.metadata.get("source", ""),
                ),
                similarity=1.0 - float(distance),
            )
            for doc, distance in hits
        ]

    # ═══════════════════════════════════════════════════════
    # ERROR TRANSLATION
    # ═══════════════════════════════════════════════════════

    def _call(self, operation: Callable[[], R]) -> R:
        try:
            return operation()
        except RAGException:
            raise
        except Exception as e:
            if _is_schema_missing(e):
                raise SchemaMissingError(
                    f"Collection '{self.collection_name}' does not exist",
                    original_error=e,
                )
            logger.error(f"Chroma operation failed: {e}")
            raise VectorStoreError(
                f"Chroma operation failed on '{self.collection_name}'",
                original_error=e,
            )

    def _run(self, operation: Callable[[], R]) -> R:
        try:
            return self._call(operation)
        except SchemaMissingError as e:
            logger.warning(f"{e}. Creating default schema and retrying")
            self.create_schema()
            return self._call(operation)
