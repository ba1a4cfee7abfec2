"""
Console runner: answers one query and prints every stage to stdout.

Usage: python main.py --cli "your question" [erase]
"""

import sys
import traceback

from hyde_rag.models import HydeQueryResult
from hyde_rag.pipeline import build_retriever

DEFAULT_QUERY = "What effect does meditation have on the brain and stress levels?"


def print_result(result: HydeQueryResult) -> None:
    """Print the three stages of a retrieval cycle."""
    print("\n1. Generated hypothetical answer:")
    print("-" * 32)
    print(result.hypothetical_answer)

    print("\n2. Retrieved relevant documents using HyDE:")
    print("-" * 32)
    for doc, similarity in zip(
        result.retrieved_documents, result.similarities, strict=True
    ):
        print(f"\nDocument id {doc.id} ({doc.source}, sim={similarity:.3f}):")
        print(doc.content)

    print("\n3. Final answer (grounded in real documents):")
    print("-" * 32)
    print(result.final_answer)


def demonstrate_hyde_rag(argv: list[str] | None = None) -> int:
    """
    Run the demo for ``argv = [query, "erase"?]``.

    Returns:
        Process exit code (1 on any failure, with the traceback on stdout).
    """
    argv = sys.argv[1:] if argv is None else argv
    query = argv[0] if argv else DEFAULT_QUERY
    erase = len(argv) > 1 and argv[1] == "erase"

    try:
        print("Initializing HyDE-RAG system...")
        retriever = build_retriever(erase=erase)

        print("\nDemonstrating HyDE-RAG process...")
        print("=" * 50)
        print(f"\nProcessing query: {query}")
        print_result(retriever.answer(query))
        return 0

    except Exception as e:
        print(f"Error occurred: {e}")
        traceback.print_exc(file=sys.stdout)
        return 1
