from collections.abc import Sequence

from langchain_core.language_models import BaseLanguageModel
from langchain_core.output_parsers import StrOutputParser
from loguru import logger

from hyde_rag.chain.prompts import format_context, get_template
from hyde_rag.exceptions import LLMError
from hyde_rag.models import SourceDocument


class AnswerSynthesizer:
    """
    Produces the final answer grounded in the retrieved documents.

    Always calls the LLM, even with no documents: the prompt then carries an
    empty context and the model is told to acknowledge the gap.
    """

    def __init__(self, llm: BaseLanguageModel):
        """Initialize the synthesizer with an LLM and the answer prompt template."""
        self.llm = llm

        self.template = get_template("answer")

        self.chain = self.template | self.llm | StrOutputParser()

    def build_inputs(
        self, query: str, documents: Sequence[SourceDocument]
    ) -> dict[str, str]:
        """Template variables for the answer prompt."""
        return {"question": query, "context": format_context(documents)}

    def synthesize(self, query: str, documents: Sequence[SourceDocument]) -> str:
        """
        Answer the query from the given documents.

        Raises:
            LLMError: If the LLM call fails.
        """
        try:
            return self.chain.invoke(self.build_inputs(query, documents))
        except Exception as e:
            logger.error(f"Answer synthesis failed: {e}")
            raise LLMError("Could not generate final answer", original_error=e)

    async def asynthesize(
        self, query: str, documents: Sequence[SourceDocument]
    ) -> str:
        """Async variant of :meth:`synthesize`."""
        try:
            return await self.chain.ainvoke(self.build_inputs(query, documents))
        except Exception as e:
            logger.error(f"Answer synthesis failed: {e}")
            raise LLMError("Could not generate final answer", original_error=e)
