"""
Custom exceptions for the HyDE-RAG pipeline.

Provides a hierarchy of exceptions to handle errors granularly across the
components of the system (Ingestion, Retrieval, Generation, Infrastructure).

Hierarchy:
    RAGException
    ├── ConfigurationError
    ├── ContractViolationError
    ├── DocumentNotFoundError
    ├── IngestionError
    ├── EmbeddingError
    ├── SchemaMissingError
    ├── CollaboratorUnavailableError
    │   ├── LLMError
    │   └── VectorStoreError
    └── PipelineStageError
"""


class RAGException(Exception):
    """
    Base exception for all HyDE-RAG pipeline errors.

    Attributes:
        message: Explanation of the error.
        original_error: The underlying exception that caused this error (optional).
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (Caused by: {self.original_error})"
        return self.message


class ConfigurationError(RAGException):
    """Raised when there is a configuration error (eg: missing environment variables)"""

    pass


class ContractViolationError(RAGException):
    """Raised on invalid usage: duplicate document id or a negative top_k."""

    pass


class DocumentNotFoundError(RAGException):
    """Raised when a file referenced by the seed manifest cannot be found."""

    pass


class IngestionError(RAGException):
    """Raised when the document ingestion process fails (loading or chunking)."""

    pass


class EmbeddingError(RAGException):
    """Raised when embedding generation fails."""

    pass


class SchemaMissingError(RAGException):
    """Raised when the persistent collection does not exist yet."""

    pass


class CollaboratorUnavailableError(RAGException):
    """Raised when an external collaborator cannot be reached or fails in transport."""

    pass


class LLMError(CollaboratorUnavailableError):
    """Raised when communication with the LLM provider fails."""

    pass


class VectorStoreError(CollaboratorUnavailableError):
    """Raised when the persistent vector store fails."""

    pass


class PipelineStageError(RAGException):
    """
    Raised by the orchestrator when one of its stages fails.

    Attributes:
        stage: Name of the failing stage ("hypothesize", "retrieve", "synthesize").
    """

    def __init__(self, stage: str, original_error: Exception):
        super().__init__(f"Stage '{stage}' failed", original_error=original_error)
        self.stage = stage
