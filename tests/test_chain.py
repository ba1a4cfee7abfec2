import asyncio

import pytest

from hyde_rag.chain.prompts import format_context, get_template
from hyde_rag.chain.synthesizer import AnswerSynthesizer
from hyde_rag.exceptions import LLMError
from hyde_rag.models import SourceDocument


# ─── PROMPTS ───
def test_get_template_variables():
    assert set(get_template("hyde").input_variables) == {"question"}
    assert set(get_template("answer").input_variables) == {"question", "context"}


def test_get_template_unknown():
    with pytest.raises(ValueError):
        get_template("router")  # type: ignore[arg-type]


def test_format_context():
    docs = [
        SourceDocument(1, "First.", "a.txt"),
        SourceDocument("x", "Second.", "inline"),
    ]

    assert format_context(docs) == (
        "Source (document id 1, a.txt): First.\n\n"
        "Source (document id x, inline): Second."
    )
    assert format_context([]) == ""


def test_answer_prompt_with_empty_context():
    messages = get_template("answer").format_messages(question="Why?", context="")

    assert "Question: Why?" in messages[0].content
    assert "provide a well-supported answer:\n\n\nRequirements:" in messages[0].content


# ─── SYNTHESIZER ───
def test_synthesizer(scripted_llm):
    llm = scripted_llm(["Grounded answer [1]"])
    synthesizer = AnswerSynthesizer(llm.runnable)

    answer = synthesizer.synthesize("Why?", [SourceDocument(1, "Because.", "a.txt")])

    assert answer == "Grounded answer [1]"
    assert "Source (document id 1, a.txt): Because." in llm.prompts[0]
    assert "Only use information from the provided sources" in llm.prompts[0]


def test_synthesizer_error(scripted_llm):
    llm = scripted_llm([ConnectionError("refused")])
    synthesizer = AnswerSynthesizer(llm.runnable)

    with pytest.raises(LLMError):
        synthesizer.synthesize("Why?", [])


def test_synthesizer_async(scripted_llm):
    llm = scripted_llm(["async answer"])
    synthesizer = AnswerSynthesizer(llm.runnable)

    assert asyncio.run(synthesizer.asynthesize("Why?", [])) == "async answer"
