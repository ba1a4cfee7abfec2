"""
Streamlit interface for the HyDE-RAG system.

Features:
- Query box with an adjustable top-k.
- The three stages of each answer shown side by side with its sources.
- Erase-and-reseed of the document store.

Run with: streamlit run main.py
"""

import streamlit as st
from loguru import logger

from hyde_rag.config import settings
from hyde_rag.exceptions import RAGException
from hyde_rag.models import HydeQueryResult
from hyde_rag.pipeline import build_retriever

# ═══════════════════════════════════════════════════════
# SESSION STATE INITIALIZATION
# ═══════════════════════════════════════════════════════


def init_session_state() -> None:
    """Initialize session state variables."""
    if "history" not in st.session_state:
        st.session_state.history = []

    if "retriever" not in st.session_state:
        st.session_state.retriever = None


def initialize_retriever(erase: bool = False) -> bool:
    """
    Build the retriever (and seed its store) into the session.

    Args:
        erase: Remove existing documents before seeding.

    Returns:
        True if the retriever is ready.
    """
    try:
        st.session_state.retriever = build_retriever(erase=erase)
        return True
    except RAGException as e:
        st.error(f"❌ Could not initialize: {e}")
        logger.error(f"Retriever initialization failed: {e}")
        st.session_state.retriever = None
        return False


# ═══════════════════════════════════════════════════════
# SIDEBAR
# ═══════════════════════════════════════════════════════


def render_sidebar() -> int:
    """Render the sidebar and return the selected top-k."""
    with st.sidebar:
        st.markdown("## 🧠 HyDE-RAG")
        st.caption("Hypothetical Document Embeddings")

        st.divider()

        top_k = st.slider(
            "Documents to retrieve (top-k)",
            min_value=0,
            max_value=10,
            value=settings.DEFAULT_TOP_K,
        )

        st.divider()

        # ─── Status ───
        st.markdown("### 📊 Status")
        retriever = st.session_state.retriever
        if retriever is not None:
            st.metric("Documents", retriever.store.count())
            st.caption(f"Backend: **{settings.VECTOR_BACKEND}**")
        else:
            st.caption("Retriever not initialized.")

        st.divider()

        # ─── Actions ───
        if st.button("🗑️ Erase & Reseed", use_container_width=True):
            with st.spinner("Reloading documents..."):
                if initialize_retriever(erase=True):
                    st.session_state.history = []
                    st.rerun()

    return top_k


# ═══════════════════════════════════════════════════════
# RESULT RENDERING
# ═══════════════════════════════════════════════════════


def render_result(query: str, result: HydeQueryResult) -> None:
    """Render the three stages of one answered query."""
    st.markdown(f"#### ❓ {query}")

    with st.expander("1. Hypothetical answer", expanded=False):
        st.markdown(result.hypothetical_answer)

    with st.expander(
        f"2. Retrieved documents ({len(result.retrieved_documents)})",
        expanded=False,
    ):
        if not result.retrieved_documents:
            st.caption("No documents retrieved.")
        for doc, similarity in zip(
            result.retrieved_documents, result.similarities, strict=True
        ):
            st.markdown(
                f"**Document id {doc.id}** · {doc.source} · sim={similarity:.3f}"
                f"\n\n```\n{doc.content[:300]}\n```"
            )

    st.markdown("**3. Final answer**")
    st.markdown(result.final_answer)
    st.divider()


def process_user_query(query: str, top_k: int) -> None:
    """Run a query through the retriever and keep it in the history."""
    with st.spinner("Hypothesizing, retrieving, synthesizing..."):
        try:
            result = st.session_state.retriever.answer(query, top_k=top_k)
            st.session_state.history.append({"query": query, "result": result})

        except RAGException as e:
            st.error(f"❌ Error: {e}")
        except Exception as e:
            st.error(f"❌ Unexpected error: {e}")
            logger.error(f"Query error: {e}")


# ═══════════════════════════════════════════════════════
# MAIN APP
# ═══════════════════════════════════════════════════════


def run() -> None:
    """Main entry point for the Streamlit app."""
    st.set_page_config(page_title="HyDE-RAG", page_icon="🧠", layout="centered")
    init_session_state()

    if st.session_state.retriever is None:
        with st.spinner("Loading documents..."):
            initialize_retriever()

    top_k = render_sidebar()

    if query := st.chat_input(
        placeholder="Ask a question...",
        disabled=st.session_state.retriever is None,
    ):
        process_user_query(query, top_k)

    for entry in reversed(st.session_state.history):
        render_result(entry["query"], entry["result"])
