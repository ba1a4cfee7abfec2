import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from hyde_rag.exceptions import DocumentNotFoundError, IngestionError
from hyde_rag.ingestion.loader import DocumentLoader
from hyde_rag.ingestion.seed import load_manifest, seed_store
from hyde_rag.models import SourceDocument
from hyde_rag.retrieval.document_store import InMemoryDocumentStore


@pytest.fixture
def mock_pdf_reader():
    with patch("hyde_rag.ingestion.loader.PdfReader") as mock:
        page = MagicMock()
        page.extract_text.return_value = "Meditation   lowers\nstress"
        empty = MagicMock()
        empty.extract_text.return_value = "  "
        mock.return_value.pages = [page, empty]
        yield mock


# ─── LOADER ───
def test_load_text_file(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("Meditation lowers stress.", encoding="utf-8")

    docs = DocumentLoader().load_file(path)

    assert len(docs) == 1
    assert docs[0].page_content == "Meditation lowers stress."
    assert docs[0].metadata["source"] == "notes.txt"
    assert docs[0].metadata["chunk_index"] == 0


def test_load_file_chunks_get_numbered_sources(tmp_path):
    path = tmp_path / "long.md"
    path.write_text("alpha beta gamma delta " * 20, encoding="utf-8")

    docs = DocumentLoader(chunk_size=100, chunk_overlap=0).load_file(path)

    assert len(docs) > 1
    assert [d.metadata["source"] for d in docs[:2]] == ["long.md#1", "long.md#2"]
    assert all(len(d.page_content) <= 100 for d in docs)


def test_load_csv_file(tmp_path):
    path = tmp_path / "studies.csv"
    path.write_text("study,effect\nMBSR,lower cortisol\nSleep trial,\n", encoding="utf-8")

    docs = DocumentLoader().load_file(path)

    assert docs[0].page_content == (
        "study: MBSR, effect: lower cortisol\nstudy: Sleep trial"
    )


def test_load_pdf_file(mock_pdf_reader, tmp_path):
    path = tmp_path / "paper.pdf"
    path.write_bytes(b"%PDF-")

    docs = DocumentLoader().load_file(path)

    assert docs[0].page_content == "Meditation lowers stress"


def test_load_docx_file(tmp_path):
    path = tmp_path / "manual.docx"
    path.write_bytes(b"PK")

    with patch("hyde_rag.ingestion.loader.DocxDocument") as mock_docx:
        paragraph = MagicMock()
        paragraph.text = "Breathing exercises"
        blank = MagicMock()
        blank.text = " "
        cells = [MagicMock(text="Week"), MagicMock(text="Minutes")]
        row = MagicMock(cells=cells)
        mock_docx.return_value.paragraphs = [paragraph, blank]
        mock_docx.return_value.tables = [MagicMock(rows=[row])]

        docs = DocumentLoader().load_file(path)

    assert docs[0].page_content == "Breathing exercises\n\nWeek | Minutes"


def test_load_file_not_found():
    with pytest.raises(DocumentNotFoundError):
        DocumentLoader().load_file(Path("no_such_file.txt"))


def test_load_file_unsupported(tmp_path):
    path = tmp_path / "image.png"
    path.write_bytes(b"png")

    with pytest.raises(IngestionError):
        DocumentLoader().load_file(path)


def test_load_file_read_error(mock_pdf_reader, tmp_path):
    path = tmp_path / "bad.pdf"
    path.write_bytes(b"broken")
    mock_pdf_reader.side_effect = Exception("PDF corrupto")

    with pytest.raises(IngestionError):
        DocumentLoader().load_file(path)


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("   \n", encoding="utf-8")

    assert DocumentLoader().load_file(path) == []


# ─── SEED MANIFEST ───
def write_manifest(tmp_path, entries):
    path = tmp_path / "documents.json"
    path.write_text(json.dumps(entries), encoding="utf-8")
    return path


def test_load_manifest_validates_entries(tmp_path):
    with pytest.raises(IngestionError):
        load_manifest(write_manifest(tmp_path, {"content": "not a list"}))

    with pytest.raises(IngestionError):
        load_manifest(write_manifest(tmp_path, [{"title": "no file or content"}]))


def test_load_manifest_missing(tmp_path):
    with pytest.raises(DocumentNotFoundError):
        load_manifest(tmp_path / "missing.json")


def test_load_manifest_invalid_json(tmp_path):
    path = tmp_path / "documents.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(IngestionError):
        load_manifest(path)


def test_seed_store_loads_files_and_content(tmp_path):
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "study.txt").write_text("File content.", encoding="utf-8")
    manifest = write_manifest(
        tmp_path,
        [
            {"file": "data/study.txt"},
            {"content": "Inline content."},
            {"content": "Labelled.", "source": "faq"},
        ],
    )
    store = InMemoryDocumentStore()

    added = seed_store(store, manifest)

    assert added == 3
    assert store.all() == (
        SourceDocument(1, "File content.", "study.txt"),
        SourceDocument(2, "Inline content.", "inline"),
        SourceDocument(3, "Labelled.", "faq"),
    )


def test_seed_store_skips_non_empty_store(tmp_path):
    manifest = write_manifest(tmp_path, [{"content": "ignored"}])
    store = InMemoryDocumentStore([SourceDocument(1, "existing")])

    assert seed_store(store, manifest) == 0
    assert store.count() == 1


def test_shipped_manifest_is_valid():
    root = Path(__file__).resolve().parent.parent
    entries = load_manifest(root / "documents.json")

    assert len(entries) == 5
    assert (root / entries[0]["file"]).exists()
