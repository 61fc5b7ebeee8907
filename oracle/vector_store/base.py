"""Shared helpers for SQLite-backed vector stores."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from oracle.config import config
from oracle.models import DocumentChunk

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = config.get_logger(__name__)

CHUNK_COLUMNS = (
    "id",
    "filename",
    "content",
    "page_number",
    "chunk_index",
    "embedding",
    "created_at",
)


class BaseSQLiteStore:
    """Schema management and row helpers for the document chunk table."""

    def __init__(self, db_path: Path) -> None:
        """Initialize the metadata store and ensure the schema exists."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(exist_ok=True, parents=True)
        self._create_tables()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _create_tables(self) -> None:
        """Create the chunk table and its indexes if they don't exist."""
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS document_chunks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    filename TEXT NOT NULL,
                    content TEXT NOT NULL,
                    page_number INTEGER,
                    chunk_index INTEGER NOT NULL,
                    embedding TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL,
                    UNIQUE (filename, chunk_index)
                )
            """)

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_document_chunks_filename "
                "ON document_chunks(filename)"
            )
            conn.commit()

    @staticmethod
    def _insert_chunks(
        cursor: sqlite3.Cursor,
        filename: str,
        chunks: Sequence[DocumentChunk],
    ) -> int:
        """Insert chunk rows, skipping any that cannot be stored.

        Returns:
            Number of rows inserted.
        """
        inserted = 0
        for chunk in chunks:
            if chunk.embedding is None:
                logger.warning(
                    "Skipping chunk %d of %s without embedding",
                    chunk.chunk_index,
                    filename,
                )
                continue
            try:
                cursor.execute(
                    """
                    INSERT INTO document_chunks (
                        filename, content, page_number, chunk_index, embedding
                    )
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        filename,
                        chunk.content,
                        chunk.page_number,
                        chunk.chunk_index,
                        chunk.embedding,
                    ),
                )
            except sqlite3.Error:
                logger.exception(
                    "Error storing chunk %d for %s", chunk.chunk_index, filename
                )
                continue
            inserted += 1
        return inserted

    @staticmethod
    def _build_chunk_from_row(row: tuple) -> DocumentChunk:
        """Create a DocumentChunk from a table row.

        Returns:
            DocumentChunk with its serialized embedding left untouched.
        """
        (
            _chunk_db_id,
            filename,
            content,
            page_number,
            chunk_index,
            embedding,
            created_at,
        ) = row

        return DocumentChunk(
            filename=filename,
            content=content,
            chunk_index=chunk_index,
            page_number=page_number,
            embedding=embedding,
            created_at=created_at,
        )
