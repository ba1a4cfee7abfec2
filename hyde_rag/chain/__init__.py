from hyde_rag.chain.prompts import format_context, get_template
from hyde_rag.chain.synthesizer import AnswerSynthesizer

__all__ = ["AnswerSynthesizer", "format_context", "get_template"]
