"""
Main Orchestrator Pipeline for the HyDE-RAG System.

Runs one retrieval cycle as three named, strictly sequential stages:
1. Hypothesize: Query -> LLM -> hypothetical answer
2. Retrieve: hypothetical answer -> probe vector -> top-k documents
3. Synthesize: Query + documents -> LLM -> grounded, cited answer
"""

import asyncio
import time
from collections.abc import Iterator
from contextlib import contextmanager

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseLanguageModel
from loguru import logger

from hyde_rag.chain.synthesizer import AnswerSynthesizer
from hyde_rag.config import settings
from hyde_rag.exceptions import ContractViolationError, PipelineStageError
from hyde_rag.ingestion.seed import seed_store
from hyde_rag.models import HydeQueryResult, PipelineStage, RankedResult, SourceDocument
from hyde_rag.providers import LLMFactory, SentenceEmbeddings
from hyde_rag.retrieval.base import DocumentStore, SimilaritySearchStore
from hyde_rag.retrieval.document_store import InMemoryDocumentStore
from hyde_rag.retrieval.hyde import HyDEGenerator
from hyde_rag.retrieval.ranker import SimilarityRanker
from hyde_rag.retrieval.vector_store import ChromaDocumentStore
from hyde_rag.retrieval.vectorizer import TermFrequencyVectorizer


class HydeRetriever:
    """
    Orchestrator for the HyDE retrieval cycle.

    Holds references to its LLM collaborator and document store and nothing
    else: no state survives between two ``answer`` calls except what the
    store persists.

    Stores implementing ``similarity_search`` rank documents themselves;
    for any other store the documents are vectorized and ranked locally.
    """

    def __init__(
        self,
        llm: BaseLanguageModel,
        store: DocumentStore,
        vectorizer: Embeddings | None = None,
        ranker: SimilarityRanker | None = None,
    ):
        """
        Initialize the retriever.

        Args:
            llm: Language model used for both LLM stages.
            store: Document store to retrieve from.
            vectorizer: Embedding used for local ranking.
                        Defaults to TermFrequencyVectorizer.
            ranker: Ranker used for local ranking.
        """
        self.llm = llm
        self.store = store
        self.vectorizer = vectorizer or TermFrequencyVectorizer()
        self.ranker = ranker or SimilarityRanker()

        self.hyde = HyDEGenerator(llm)
        self.synthesizer = AnswerSynthesizer(llm)

        logger.info(f"HyDE retriever ready ({type(store).__name__})")

    # ═══════════════════════════════════════════════════════
    # STAGES
    # ═══════════════════════════════════════════════════════

    def hypothesize(self, query: str) -> str:
        """Stage 1: draft the answer a good source document would contain."""
        logger.info("Generating hypothetical answer (HyDE)")
        hypothetical_answer = self.hyde.generate(query)
        logger.debug(f"Hypothetical answer ({len(hypothetical_answer)} chars)")
        return hypothetical_answer

    def retrieve(self, hypothetical_answer: str, top_k: int) -> list[RankedResult]:
        """Stage 2: rank stored documents against the hypothetical answer."""
        self._check_top_k(top_k)

        if isinstance(self.store, SimilaritySearchStore):
            results = self.store.similarity_search(hypothetical_answer, top_k)
        else:
            results = self._rank_locally(hypothetical_answer, top_k)

        for i, result in enumerate(results):
            preview = result.document.content[:80].replace("\n", " ")
            logger.info(
                f"  #{i + 1}: doc={result.document.id!r} "
                f"sim={result.similarity:.4f} '{preview}...'"
            )
        return results

    def synthesize(self, query: str, documents: list[SourceDocument]) -> str:
        """Stage 3: answer the query from the retrieved documents only."""
        logger.info(f"Generating final answer from {len(documents)} documents")
        final_answer = self.synthesizer.synthesize(query, documents)
        logger.debug(f"Final answer ({len(final_answer)} chars)")
        return final_answer

    def _rank_locally(self, probe_text: str, top_k: int) -> list[RankedResult]:
        probe = self.vectorizer.embed_query(probe_text)
        documents = self.store.all()
        vectors = self.vectorizer.embed_documents([doc.content for doc in documents])

        candidates = [
            (doc.id, vector, doc) for doc, vector in zip(documents, vectors, strict=True)
        ]
        return [
            RankedResult(document=doc, similarity=similarity)
            for doc, similarity in self.ranker.rank(probe, candidates, top_k)
        ]

    # ═══════════════════════════════════════════════════════
    # FULL CYCLE
    # ═══════════════════════════════════════════════════════

    def answer(self, query: str, top_k: int | None = None) -> HydeQueryResult:
        """
        Run hypothesize -> retrieve -> synthesize for one query.

        Args:
            query: The user's question.
            top_k: Number of documents to retrieve. Defaults to DEFAULT_TOP_K.

        Returns:
            The hypothetical answer, retrieved documents and final answer.

        Raises:
            ContractViolationError: If top_k is negative (before any stage runs).
            PipelineStageError: If a stage fails. No partial result is returned.
        """
        top_k = settings.DEFAULT_TOP_K if top_k is None else top_k
        self._check_top_k(top_k)

        logger.info(f"Processing query: '{query[:50]}...'")
        timings: dict[str, float] = {}

        with self._stage(PipelineStage.HYPOTHESIZE, timings):
            hypothetical_answer = self.hypothesize(query)

        with self._stage(PipelineStage.RETRIEVE, timings):
            results = self.retrieve(hypothetical_answer, top_k)

        with self._stage(PipelineStage.SYNTHESIZE, timings):
            final_answer = self.synthesize(query, [r.document for r in results])

        return self._package(hypothetical_answer, results, final_answer, timings)

    async def aanswer(self, query: str, top_k: int | None = None) -> HydeQueryResult:
        """
        Async variant of :meth:`answer`.

        Local ranking runs in a worker thread. Cancelling the task abandons
        the pending model call.
        """
        top_k = settings.DEFAULT_TOP_K if top_k is None else top_k
        self._check_top_k(top_k)

        logger.info(f"Processing query (async): '{query[:50]}...'")
        timings: dict[str, float] = {}

        with self._stage(PipelineStage.HYPOTHESIZE, timings):
            hypothetical_answer = await self.hyde.agenerate(query)

        with self._stage(PipelineStage.RETRIEVE, timings):
            results = await asyncio.to_thread(
                self.retrieve, hypothetical_answer, top_k
            )

        with self._stage(PipelineStage.SYNTHESIZE, timings):
            final_answer = await self.synthesizer.asynthesize(
                query, [r.document for r in results]
            )

        return self._package(hypothetical_answer, results, final_answer, timings)

    @contextmanager
    def _stage(
        self, stage: PipelineStage, timings: dict[str, float]
    ) -> Iterator[None]:
        """Time a stage and wrap any failure in PipelineStageError."""
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            logger.error(f"Stage '{stage}' failed: {e}")
            raise PipelineStageError(stage.value, original_error=e) from e
        timings[stage.value] = (time.perf_counter() - start) * 1000
        logger.debug(f"⏱️  [{stage}] executed in {timings[stage.value]:.2f}ms")

    @staticmethod
    def _check_top_k(top_k: int) -> None:
        if top_k < 0:
            raise ContractViolationError(f"top_k must be >= 0, got {top_k}")

    @staticmethod
    def _package(
        hypothetical_answer: str,
        results: list[RankedResult],
        final_answer: str,
        timings: dict[str, float],
    ) -> HydeQueryResult:
        return HydeQueryResult(
            hypothetical_answer=hypothetical_answer,
            retrieved_documents=tuple(r.document for r in results),
            final_answer=final_answer,
            similarities=tuple(r.similarity for r in results),
            elapsed_ms=timings,
        )


# ═══════════════════════════════════════════════════════
# FACTORY
# ═══════════════════════════════════════════════════════


def create_store(backend: str | None = None) -> DocumentStore:
    """Build the configured document store ("memory" or "chroma")."""
    backend = backend or settings.VECTOR_BACKEND
    if backend == "chroma":
        return ChromaDocumentStore(embedding_model=SentenceEmbeddings())
    return InMemoryDocumentStore()


def build_retriever(
    erase: bool = False,
    llm: BaseLanguageModel | None = None,
    store: DocumentStore | None = None,
) -> HydeRetriever:
    """
    Wire a HydeRetriever from settings.

    Args:
        erase: Remove existing documents before seeding.
        llm: LLM collaborator. Defaults to LLMFactory.completion().
        store: Document store. Defaults to the configured backend.

    Returns:
        A retriever whose store holds the seed documents if it was empty.
    """
    if llm is None:
        llm = LLMFactory.completion()
    store = store if store is not None else create_store()

    if erase:
        logger.info("Erasing existing documents")
        store.erase()

    manifest = settings.DOCUMENTS_MANIFEST
    if manifest.exists():
        seed_store(store, manifest)
    else:
        logger.warning(f"No seed manifest at {manifest}, store left as is")

    return HydeRetriever(llm, store)
