"""
Term-frequency text vectorizer.

Each text is mapped to the relative frequencies of its own distinct tokens,
in first-occurrence order. The dimensionality therefore varies per text and
vectors must be zero-padded before comparison (see SimilarityRanker).
"""

import re
from collections import Counter

from langchain_core.embeddings import Embeddings

_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> list[str]:
    """Lowercase, drop everything except [a-z0-9] and whitespace, split."""
    return _NON_TOKEN_CHARS.sub("", text.lower()).split()


class TermFrequencyVectorizer(Embeddings):
    """
    Reference embedding used by the in-memory store.

    Implements the LangChain ``Embeddings`` interface so it can be swapped
    with a dense model behind the same calls.

    Example:
        >>> TermFrequencyVectorizer().embed("a b a")
        [0.6666666666666666, 0.3333333333333333]
    """

    def embed(self, text: str) -> list[float]:
        tokens = tokenize(text)
        if not tokens:
            return []

        # Counter keeps first-occurrence order
        counts = Counter(tokens)
        total = len(tokens)
        return [count / total for count in counts.values()]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts independently."""
        return [self.embed(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        """Embed a single probe text."""
        return self.embed(text)
