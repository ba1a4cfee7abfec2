"""
Model providers: the Groq chat model and local dense embeddings.

The retriever only needs "something that turns a prompt into text" and,
for the Chroma backend, "something that turns text into a fixed-width vector".
This module builds the production versions of both from settings.
"""

from threading import Lock

import torch
from langchain_core.embeddings import Embeddings
from langchain_groq import ChatGroq
from loguru import logger
from sentence_transformers import SentenceTransformer

from hyde_rag.config import settings
from hyde_rag.exceptions import EmbeddingError, LLMError

# ═══════════════════════════════════════════════════════
# LANGUAGE MODEL
# ═══════════════════════════════════════════════════════


class LLMFactory:
    """
    Builds ChatGroq clients with the request policy from settings.

    Clients carry LLM_TIMEOUT and LLM_MAX_RETRIES (0 by default), so a slow
    or failing provider surfaces as one error instead of a retry loop.

    Example:
        >>> llm = LLMFactory.completion()
        >>> llm.invoke("Please answer the question: ...")
    """

    @staticmethod
    def create(
        model_name: str | None = None,
        temperature: float | None = None,
    ) -> ChatGroq:
        """
        Build a ChatGroq client.

        Args:
            model_name: Groq model id. Defaults to LLM_MODEL.
            temperature: Sampling temperature. Defaults to LLM_TEMPERATURE.

        Raises:
            LLMError: If GROQ_API_KEY is empty or the client cannot be built.
        """
        model_name = model_name or settings.LLM_MODEL
        if temperature is None:
            temperature = settings.LLM_TEMPERATURE

        api_key = settings.GROQ_API_KEY
        if not api_key or not api_key.get_secret_value():
            logger.error("GROQ_API_KEY is empty")
            raise LLMError("GROQ_API_KEY is not configured. Set it in the .env file.")

        try:
            llm = ChatGroq(
                model=model_name,
                temperature=temperature,
                api_key=api_key,
                timeout=settings.LLM_TIMEOUT,
                max_retries=settings.LLM_MAX_RETRIES,
            )
        except Exception as e:
            logger.error(f"ChatGroq rejected model '{model_name}': {e}")
            raise LLMError(f"Could not initialize LLM {model_name}", original_error=e)

        logger.debug(
            f"LLM ready: {model_name} (temp={temperature}, "
            f"timeout={settings.LLM_TIMEOUT}s)"
        )
        return llm

    @classmethod
    def completion(cls) -> ChatGroq:
        """Client for COMPLETION_MODEL, used for both hypothesis and answer."""
        return cls.create(settings.COMPLETION_MODEL)


# ═══════════════════════════════════════════════════════
# DENSE EMBEDDINGS
# ═══════════════════════════════════════════════════════


def pick_device() -> str:
    """Best available torch device: cuda, then mps, then cpu."""
    if torch.cuda.is_available():
        return "cuda"
    if torch.backends.mps.is_available():
        return "mps"
    return "cpu"


class SentenceEmbeddings(Embeddings):
    """
    Sentence-transformer embeddings, one shared instance per model name.

    Chroma needs every vector to have the same width, which term-frequency
    vectors cannot guarantee; this class is the embedding for that backend.
    """

    _instances: dict[str, "SentenceEmbeddings"] = {}
    _lock: Lock = Lock()

    def __new__(cls, model_name: str | None = None):
        model_name = model_name or settings.EMBEDDING_MODEL
        with cls._lock:
            if model_name not in cls._instances:
                instance = super().__new__(cls)
                instance._load(model_name)
                cls._instances[model_name] = instance
            return cls._instances[model_name]

    def _load(self, model_name: str) -> None:
        device = pick_device()
        logger.info(f"Loading embedding model '{model_name}' on {device.upper()}")
        try:
            self._model = SentenceTransformer(model_name, device=device)
        except Exception as e:
            logger.error(f"Embedding model '{model_name}' failed to load: {e}")
            raise EmbeddingError(
                f"Could not initialize model {model_name}", original_error=e
            )
        self.model_name = model_name

    def _encode(self, texts: list[str]) -> list[list[float]]:
        with torch.no_grad():
            vectors = self._model.encode(
                texts, convert_to_tensor=True, show_progress_bar=False
            )
        return vectors.cpu().tolist()

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            return self._encode(texts)
        except Exception as e:
            logger.error(f"Embedding {len(texts)} documents failed: {e}")
            raise EmbeddingError("Document embedding failed", original_error=e)

    def embed_query(self, text: str) -> list[float]:
        try:
            return self._encode([text])[0]
        except Exception as e:
            logger.error(f"Embedding probe text failed: {e}")
            raise EmbeddingError("Query embedding failed", original_error=e)
