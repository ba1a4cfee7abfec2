from hyde_rag.retrieval.base import DocumentStore, SimilaritySearchStore
from hyde_rag.retrieval.document_store import InMemoryDocumentStore
from hyde_rag.retrieval.hyde import HyDEGenerator
from hyde_rag.retrieval.ranker import SimilarityRanker, cosine_similarity
from hyde_rag.retrieval.vector_store import ChromaDocumentStore
from hyde_rag.retrieval.vectorizer import TermFrequencyVectorizer, tokenize

__all__ = [
    "DocumentStore",
    "SimilaritySearchStore",
    "InMemoryDocumentStore",
    "ChromaDocumentStore",
    "HyDEGenerator",
    "SimilarityRanker",
    "cosine_similarity",
    "TermFrequencyVectorizer",
    "tokenize",
]
