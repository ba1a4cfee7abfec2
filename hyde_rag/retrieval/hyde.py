"""
Hypothetical Document Embeddings (HyDE) Generator.

Generates a hypothetical answer given a query. The answer is then embedded
and used for retrieval instead of the raw query, bridging the gap between
question space and document space.
"""

from langchain_core.language_models import BaseLanguageModel
from langchain_core.output_parsers import StrOutputParser
from loguru import logger

from hyde_rag.chain.prompts import get_template
from hyde_rag.exceptions import LLMError


class HyDEGenerator:
    """
    Generator for hypothetical answers using an injected LLM.

    The prompt asks for the answer a high-quality source document would
    contain, which makes a better similarity probe than the question itself.
    """

    def __init__(self, llm: BaseLanguageModel) -> None:
        """Initialize the generator with an LLM and the HyDE prompt template."""
        self.llm = llm

        self.template = get_template("hyde")

        self.chain = self.template | self.llm | StrOutputParser()

    def generate(self, query: str) -> str:
        """
        Generate a hypothetical answer for the given query.

        Args:
            query: The user's question.

        Returns:
            The hypothetical answer text.

        Raises:
            LLMError: If the LLM generation fails.
        """
        try:
            return self.chain.invoke({"question": query})
        except Exception as e:
            logger.error(f"HyDE generation failed: {e}")
            raise LLMError("Could not generate hypothetical answer", original_error=e)

    async def agenerate(self, query: str) -> str:
        """Async variant of :meth:`generate`."""
        try:
            return await self.chain.ainvoke({"question": query})
        except Exception as e:
            logger.error(f"HyDE generation failed: {e}")
            raise LLMError("Could not generate hypothetical answer", original_error=e)
