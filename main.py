"""
HyDE-RAG - Entry Point

Mode CLI:     uv run main.py --cli "your question" [erase]
Mode Web:     streamlit run main.py

Imports are deferred: settings are validated when hyde_rag modules load, and
a bad configuration has to reach the console's error output.
"""

import sys
import traceback


def main_cli() -> int:
    """Answers one query in the console."""
    args = [arg for arg in sys.argv[1:] if arg != "--cli"]
    try:
        from hyde_rag.console import demonstrate_hyde_rag
    except Exception as e:
        print(f"Error occurred: {e}")
        traceback.print_exc(file=sys.stdout)
        return 1
    return demonstrate_hyde_rag(args)


def main_streamlit():
    """Executes the HyDE-RAG app in Streamlit mode."""
    from hyde_rag.cli import run

    run()


if __name__ == "__main__":
    if "--cli" in sys.argv:
        sys.exit(main_cli())
    else:
        main_streamlit()
