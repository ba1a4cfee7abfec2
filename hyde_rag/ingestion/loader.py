"""
Document loader for the seed manifest and file ingestion.

Handles plain text, CSV, PDF and DOCX sources with:
- Text extraction per format
- Whitespace cleaning
- Recursive character chunking
"""

import csv
from pathlib import Path

from docx import Document as DocxDocument
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter
from loguru import logger
from pypdf import PdfReader

from hyde_rag.config import settings
from hyde_rag.exceptions import DocumentNotFoundError, IngestionError

TEXT_SUFFIXES = {".txt", ".md", ".markdown", ".rst"}
SUPPORTED_SUFFIXES = TEXT_SUFFIXES | {".csv", ".pdf", ".docx"}


class DocumentLoader:
    """
    Load files from disk and split them into chunks.

    Attributes:
        text_splitter: Splitter applied to the extracted text.
    """

    def __init__(
        self,
        chunk_size: int | None = None,
        chunk_overlap: int | None = None,
    ):
        """
        Initialize the loader with a chunking configuration.

        Args:
            chunk_size: Maximum chunk size in characters. Defaults to CHUNK_SIZE.
            chunk_overlap: Character overlap between chunks. Defaults to CHUNK_OVERLAP.
        """
        chunk_size = chunk_size or settings.CHUNK_SIZE
        if chunk_overlap is None:
            chunk_overlap = settings.CHUNK_OVERLAP

        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
        )

        logger.debug(
            f"DocumentLoader initialized (chunk_size={chunk_size}, "
            f"overlap={chunk_overlap})"
        )

    def load_file(self, file_path: Path) -> list[Document]:
        """
        Load a file and split it into chunks.

        The ``source`` metadata of each chunk is the file name, suffixed with
        the chunk number when the file yields more than one chunk.

        Args:
            file_path: Path to the file.

        Returns:
            List of chunked documents with metadata.

        Raises:
            DocumentNotFoundError: If the file does not exist.
            IngestionError: If the format is unsupported or reading fails.
        """
        if not file_path.exists():
            logger.error(f"File not found: {file_path}")
            raise DocumentNotFoundError(f"File not found: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise IngestionError(f"Unsupported file type '{suffix}': {file_path}")

        logger.info(f"Loading file: {file_path.name}")

        try:
            text = self._extract_text(file_path, suffix)
        except Exception as e:
            logger.error(f"Error reading {file_path.name}: {e}")
            raise IngestionError(f"Failed to read {file_path}", original_error=e)

        if not text.strip():
            logger.warning(f"No content extracted from {file_path.name}")
            return []

        chunks = self.text_splitter.create_documents(
            [text], metadatas=[{"file": file_path.name}]
        )

        for idx, chunk in enumerate(chunks):
            chunk.metadata["chunk_index"] = idx
            chunk.metadata["source"] = (
                file_path.name if len(chunks) == 1 else f"{file_path.name}#{idx + 1}"
            )

        logger.success(f"Loaded {file_path.name}: {len(chunks)} chunks")
        return chunks

    def _extract_text(self, file_path: Path, suffix: str) -> str:
        if suffix in TEXT_SUFFIXES:
            return file_path.read_text(encoding="utf-8")
        if suffix == ".csv":
            return self._read_csv(file_path)
        if suffix == ".pdf":
            return self._read_pdf(file_path)
        return self._read_docx(file_path)

    def _read_csv(self, file_path: Path) -> str:
        """One line per row, as 'header: value' pairs."""
        lines = []
        with open(file_path, newline="", encoding="utf-8") as file:
            for row in csv.DictReader(file):
                pairs = [f"{key}: {value}" for key, value in row.items() if value]
                if pairs:
                    lines.append(", ".join(pairs))
        return "\n".join(lines)

    def _read_pdf(self, file_path: Path) -> str:
        pages = []
        with open(file_path, "rb") as file:
            reader = PdfReader(file)
            for page_num, page in enumerate(reader.pages):
                text = page.extract_text()
                if not text or text.strip() == "":
                    logger.warning(f"Page {page_num + 1} is empty, skipping")
                    continue
                pages.append(" ".join(text.split()))
        return "\n\n".join(pages)

    def _read_docx(self, file_path: Path) -> str:
        """Paragraph text followed by tables rendered as 'a | b | c' rows."""
        doc = DocxDocument(str(file_path))
        blocks = [p.text.strip() for p in doc.paragraphs if p.text.strip()]

        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    blocks.append(" | ".join(cells))

        return "\n\n".join(blocks)
