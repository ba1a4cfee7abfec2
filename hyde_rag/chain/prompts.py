"""
Centralized Prompt Templates for the HyDE-RAG System.

This module contains the two prompts of a retrieval cycle:
- HyDE (Hypothetical answer generation)
- Grounded answer (Synthesis from retrieved sources)
"""

from collections.abc import Sequence
from typing import Literal

from langchain_core.prompts import ChatPromptTemplate

from hyde_rag.models import SourceDocument

# ═══════════════════════════════════════════════════════
# 1. HYDE PROMPT (Hypothetical Answer)
# ═══════════════════════════════════════════════════════

HYDE_TEMPLATE = """Generate a direct, factual answer to this question: "{question}"
The answer should be what you'd expect to find in a high-quality document about this topic.
Focus on specific details and facts that would help identify relevant documents.

Answer:
"""

# ═══════════════════════════════════════════════════════
# 2. GROUNDED ANSWER PROMPT
# ═══════════════════════════════════════════════════════

ANSWER_TEMPLATE = """Question: {question}

Using only the information from these sources, provide a well-supported answer:
{context}

Requirements:
1. Only use information from the provided sources
2. Cite the document id as source, when making specific claims
3. If the sources don't fully answer the question, acknowledge this

Answer:
"""

# ═══════════════════════════════════════════════════════
# FACTORY FUNCTION
# ═══════════════════════════════════════════════════════

TemplateType = Literal["hyde", "answer"]


def get_template(template_type: TemplateType) -> ChatPromptTemplate:
    """
    Factory function to retrieve the appropriate prompt template.

    Args:
        template_type: The type of template required ("hyde" or "answer").

    Returns:
        A configured ChatPromptTemplate instance.
    """
    if template_type == "hyde":
        return ChatPromptTemplate.from_template(HYDE_TEMPLATE)

    elif template_type == "answer":
        return ChatPromptTemplate.from_template(ANSWER_TEMPLATE)

    else:
        raise ValueError(f"Unknown template type: {template_type}")


def format_context(documents: Sequence[SourceDocument]) -> str:
    """Label each document with its id and source. Empty input gives ''."""
    return "\n\n".join(
        f"Source (document id {doc.id}, {doc.source}): {doc.content}"
        for doc in documents
    )
