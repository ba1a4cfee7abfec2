"""
Seed data loading.

The manifest is a JSON list whose entries are either ``{"file": path}`` or
``{"content": text}`` (optionally with a ``"source"`` label). It is loaded
once at startup, and only into an empty store.
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from hyde_rag.exceptions import DocumentNotFoundError, IngestionError
from hyde_rag.ingestion.loader import DocumentLoader
from hyde_rag.retrieval.base import DocumentStore


def load_manifest(manifest_path: Path) -> list[dict[str, Any]]:
    """
    Parse and validate a seed manifest.

    Raises:
        DocumentNotFoundError: If the manifest does not exist.
        IngestionError: If it is not a list of file/content entries.
    """
    if not manifest_path.exists():
        raise DocumentNotFoundError(f"Seed manifest not found: {manifest_path}")

    try:
        entries = json.loads(manifest_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise IngestionError(f"Invalid seed manifest {manifest_path}", original_error=e)

    if not isinstance(entries, list):
        raise IngestionError(f"Seed manifest must be a JSON list: {manifest_path}")

    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) or not ("file" in entry or "content" in entry):
            raise IngestionError(
                f"Manifest entry #{position} needs a 'file' or 'content' key"
            )

    return entries


def seed_store(
    store: DocumentStore,
    manifest_path: Path,
    loader: DocumentLoader | None = None,
) -> int:
    """
    Load the manifest into the store if the store is empty.

    File paths are resolved relative to the manifest's directory.

    Returns:
        Number of documents added (0 when the store already had data).
    """
    if store.count() > 0:
        logger.info(f"Store already holds {store.count()} documents. Skipping seed.")
        return 0

    entries = load_manifest(manifest_path)
    loader = loader or DocumentLoader()
    added = 0

    for entry in entries:
        if "file" in entry:
            file_path = manifest_path.parent / entry["file"]
            for chunk in loader.load_file(file_path):
                store.add_text(chunk.page_content, source=chunk.metadata["source"])
                added += 1
        else:
            store.add_text(entry["content"], source=entry.get("source", "inline"))
            added += 1

    logger.success(f"Seeded {added} documents from {manifest_path.name}")
    return added
