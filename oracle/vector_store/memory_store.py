"""Process-local chunk storage."""

from __future__ import annotations

import datetime
import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from oracle.config import config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from oracle.models import DocumentChunk

logger = config.get_logger(__name__)


class InMemoryVectorStore:
    """Keeps chunks in a dict keyed by filename; nothing survives a restart."""

    backend = "memory"

    def __init__(self) -> None:
        self._documents: dict[str, list[DocumentChunk]] = {}
        self._lock = threading.Lock()

    def replace_document(self, filename: str, chunks: Sequence[DocumentChunk]) -> int:
        """Swap in a new chunk set for ``filename``.

        Returns:
            Number of chunks stored.
        """
        created_at = datetime.datetime.now(tz=datetime.UTC)
        stored: list[DocumentChunk] = []
        seen_indexes: set[int] = set()
        for chunk in chunks:
            if chunk.embedding is None:
                logger.warning(
                    "Skipping chunk %d of %s without embedding",
                    chunk.chunk_index,
                    filename,
                )
                continue
            if chunk.chunk_index in seen_indexes:
                logger.warning(
                    "Skipping duplicate chunk index %d for %s",
                    chunk.chunk_index,
                    filename,
                )
                continue
            seen_indexes.add(chunk.chunk_index)
            stored.append(replace(chunk, filename=filename, created_at=created_at))

        with self._lock:
            self._documents.pop(filename, None)
            if stored:
                self._documents[filename] = stored

        logger.info("Replaced %s: stored %d chunks", filename, len(stored))
        return len(stored)

    def delete_document(self, filename: str) -> int:
        with self._lock:
            return len(self._documents.pop(filename, []))

    def all_chunks(self) -> list[DocumentChunk]:
        with self._lock:
            return [chunk for chunks in self._documents.values() for chunk in chunks]

    def count_distinct_documents(self) -> int:
        with self._lock:
            return len(self._documents)
