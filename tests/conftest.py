import os
from unittest.mock import patch

import pytest
from langchain_core.runnables import RunnableLambda

# Settings are created at import time and need the key
os.environ.setdefault("GROQ_API_KEY", "dummy_key")

from hyde_rag.models import SourceDocument  # noqa: E402
from hyde_rag.retrieval.document_store import InMemoryDocumentStore  # noqa: E402


@pytest.fixture(autouse=True)
def mock_env_vars():
    """Dummy environment variables for every test."""
    with patch.dict(
        os.environ, {"GROQ_API_KEY": "dummy_key", "LANGCHAIN_TRACING_V2": "false"}
    ):
        yield


class ScriptedLLM:
    """
    Deterministic LLM stand-in.

    Returns the scripted responses in order and records every prompt it
    receives. An Exception in the script is raised instead of returned.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.runnable = RunnableLambda(self._complete)

    def _complete(self, prompt_value):
        self.prompts.append(prompt_value.to_string())
        response = self.responses[len(self.prompts) - 1]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def scripted_llm():
    """Factory building a ScriptedLLM from a list of responses."""
    return ScriptedLLM


@pytest.fixture
def hypothetical_answer():
    """Stubbed HyDE output about cortisol, sleep and immunity (20 distinct tokens)."""
    return (
        "Meditation lowers cortisol levels, improves sleep quality, strengthens "
        "immunity and reduces anxiety while calming the nervous system through "
        "regular practice."
    )


@pytest.fixture
def meditation_docs():
    """Four meditation documents and one unrelated pancake document."""
    return [
        SourceDocument(
            1,
            "Regular meditation practice lowers cortisol, the primary stress "
            "hormone, and is linked to reduced blood pressure.",
            "cortisol.txt",
        ),
        SourceDocument(
            2,
            "Mindfulness meditation studies report better sleep quality with "
            "fewer nighttime awakenings among people who have insomnia.",
            "sleep.txt",
        ),
        SourceDocument(
            3,
            "Meditation has been associated with stronger immune responses "
            "including higher antibody levels after vaccination.",
            "immunity.txt",
        ),
        SourceDocument(
            4,
            "Brain scans of experienced meditators show reduced amygdala activity "
            "and lower reported anxiety during stressful tasks.",
            "brain.txt",
        ),
        SourceDocument(5, "Pancakes date back to ancient Greece.", "pancakes.txt"),
    ]


@pytest.fixture
def meditation_store(meditation_docs):
    return InMemoryDocumentStore(meditation_docs)
