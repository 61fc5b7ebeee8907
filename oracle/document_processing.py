"""Document loading, cleaning and word-window chunking."""

import re
from pathlib import Path

import pypdf

from .config import config
from .models import DocumentChunk

logger = config.get_logger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".pdf", ".txt"})

_BLANK_LINE_RUN = re.compile(r"\n\s*\n")
_NON_ASCII = re.compile(r"[^\x00-\x7F]")


class DocumentLoader:
    """Handles loading of PDF and TXT documents."""

    @staticmethod
    def load_pdf(file_path: Path) -> str:
        """Load text content from a PDF file.

        Returns:
            The extracted text content from the PDF as a string.
        """
        try:
            with file_path.open("rb") as file:
                pdf_reader = pypdf.PdfReader(file)
                pages = [page.extract_text() or "" for page in pdf_reader.pages]
        except Exception:
            logger.exception("Error loading PDF %s", file_path)
            raise
        else:
            return "\n".join(pages)

    @staticmethod
    def load_txt(file_path: Path) -> str:
        """Load text content from a TXT file.

        Returns:
            The extracted text content from the TXT file as a string.
        """
        try:
            with file_path.open(encoding="utf-8", errors="replace") as file:
                text = file.read()
        except Exception:
            logger.exception("Error loading TXT %s", file_path)
            raise
        else:
            return text

    @classmethod
    def load_document(cls, file_path: Path) -> str:
        """Load document based on file extension.

        Args:
            file_path: Path to the document file.

        Returns:
            The text content of the document as a string.

        Raises:
            ValueError: If the file type is not supported.
        """
        file_ext = file_path.suffix.lower()
        if file_ext == ".pdf":
            return cls.load_pdf(file_path)
        if file_ext == ".txt":
            return cls.load_txt(file_path)
        msg = f"Unsupported file type: {file_ext}"
        raise ValueError(msg)


def clean_document_text(text: str) -> str:
    """Normalize raw document text before indexing.

    Line endings become ``\\n``, runs of blank lines collapse to one, and NUL
    bytes and non-ASCII characters are dropped.

    Returns:
        The cleaned, trimmed text.
    """
    text = text.replace("\r\n", "\n")
    text = _BLANK_LINE_RUN.sub("\n\n", text)
    text = text.replace("\0", "")
    text = _NON_ASCII.sub("", text)
    return text.strip()


class TextChunker:
    """Splits text into fixed-size, overlapping word windows."""

    def __init__(self, chunk_size: int = 150, overlap: int = 20) -> None:
        """Initialize the TextChunker with window size and overlap.

        Args:
            chunk_size: Number of words per chunk.
            overlap: Number of words shared by consecutive chunks.

        Raises:
            ValueError: If the overlap does not leave a positive step.
        """
        if chunk_size <= 0 or not 0 <= overlap < chunk_size:
            msg = (
                f"Invalid chunking parameters: chunk_size={chunk_size}, "
                f"overlap={overlap}"
            )
            raise ValueError(msg)
        self.chunk_size = chunk_size
        self.overlap = overlap

    @property
    def step(self) -> int:
        return self.chunk_size - self.overlap

    def chunk_text(self, text: str, filename: str) -> list[DocumentChunk]:
        """Split text into overlapping word windows.

        Every word lands in at least one chunk and consecutive chunks share
        ``overlap`` words. Windowing stops at the first window that reaches
        the last word, so only the final chunk may be shorter than
        ``chunk_size``.

        Returns:
            Chunks without embeddings, indexed from 0 in document order.
        """
        words = text.split()
        chunks: list[DocumentChunk] = []

        for start in range(0, len(words), self.step):
            end = start + self.chunk_size
            content = " ".join(words[start:end]).strip()
            if content:
                chunks.append(
                    DocumentChunk(
                        filename=filename,
                        content=content,
                        chunk_index=len(chunks),
                    )
                )
            if end >= len(words):
                break

        logger.info("Text from %s split into %d chunks", filename, len(chunks))
        return chunks
