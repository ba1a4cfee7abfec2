"""
Data Transfer Objects (DTOs) shared across modules.

Centralizes schemas to avoid circular imports and ensure clear contracts between layers.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class PipelineStage(StrEnum):
    """Stages of one HyDE retrieval cycle, in execution order."""

    HYPOTHESIZE = "hypothesize"
    RETRIEVE = "retrieve"
    SYNTHESIZE = "synthesize"


@dataclass(frozen=True)
class SourceDocument:
    """
    A document held by a store.

    Attributes:
        id: Identifier, unique within one store.
        content: Full text of the document.
        source: Human-readable label (file name, "inline", ...).
    """

    id: int | str
    content: str
    source: str = "inline"


@dataclass(frozen=True)
class RankedResult:
    """A document paired with its similarity to the probe."""

    document: SourceDocument
    similarity: float


@dataclass(frozen=True)
class HydeQueryResult:
    """
    Externally observable output of one retrieval cycle.

    Immutable: the stage timings are copied into a read-only mapping.
    """

    hypothetical_answer: str
    retrieved_documents: tuple[SourceDocument, ...] = ()
    final_answer: str = ""
    similarities: tuple[float, ...] = ()
    elapsed_ms: Mapping[str, float] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "elapsed_ms", MappingProxyType(dict(self.elapsed_ms)))
