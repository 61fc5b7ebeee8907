"""Indexing and search pipeline: Load -> Split -> Embed -> Store -> Rank."""

from __future__ import annotations

import asyncio
import sqlite3
from collections import defaultdict
from pathlib import Path
from typing import TYPE_CHECKING, cast

from .config import config
from .context import build_document_context
from .document_processing import DocumentLoader, TextChunker, clean_document_text
from .embeddings import EmbeddingService
from .exceptions import EmbeddingUnavailable
from .models import DocumentSearchOutcome, serialize_embedding
from .ranking import SimilarityRanker
from .relevance import RelevanceClassifier
from .vector_store import VectorBackend, get_vector_store

if TYPE_CHECKING:
    from .models import SearchResult
    from .vector_store import VectorStore

logger = config.get_logger(__name__)


class RAGPipeline:
    """Indexes documents into the vector store and searches them."""

    def __init__(  # noqa: PLR0913
        self,
        embedding_service: EmbeddingService | None = None,
        vector_store: VectorStore | None = None,
        *,
        chunker: TextChunker | None = None,
        ranker: SimilarityRanker | None = None,
        classifier: RelevanceClassifier | None = None,
        vector_backend: str | None = None,
        db_path: Path | None = None,
    ) -> None:
        """Initialize the pipeline from injected collaborators or config.

        Args:
            embedding_service: Embedder. If None, an OpenAI-backed service.
            vector_store: Chunk store. If None, built from ``vector_backend``.
            chunker: Word-window chunker. If None, uses config chunk settings.
            ranker: Similarity ranker. If None, uses config limits.
            classifier: Strong-match classifier.
            vector_backend: "sqlite" | "memory". Defaults to config.VECTOR_BACKEND.
            db_path: SQLite path. Defaults to config.VECTOR_STORE_DB_PATH.
        """
        if vector_store is None:
            backend = cast(
                "VectorBackend",
                (vector_backend or config.VECTOR_BACKEND).lower(),
            )
            vector_store = get_vector_store(backend, db_path=db_path)

        self.embedding_service = embedding_service or EmbeddingService()
        self.vector_store = vector_store
        self.chunker = chunker or TextChunker(
            chunk_size=config.CHUNK_SIZE, overlap=config.CHUNK_OVERLAP
        )
        self.ranker = ranker or SimilarityRanker()
        self.classifier = classifier or RelevanceClassifier()
        self._document_locks: defaultdict[str, asyncio.Lock] = defaultdict(
            asyncio.Lock
        )
        logger.info("Using %s vector storage", self.vector_store.backend)

    async def index_document(self, filename: str, raw_text: str) -> int:
        """Chunk, embed and store one document, replacing any earlier version.

        Chunks whose embedding fails are skipped. Re-indexing the same
        filename concurrently is serialized.

        Returns:
            Number of chunks stored.
        """
        async with self._document_locks[filename]:
            chunks = self.chunker.chunk_text(raw_text, filename)

            for chunk in chunks:
                try:
                    embedding = await self.embedding_service.get_embedding(
                        chunk.content
                    )
                except EmbeddingUnavailable:
                    logger.warning(
                        "Skipping chunk %d of %s: embedding unavailable",
                        chunk.chunk_index,
                        filename,
                    )
                    continue
                chunk.embedding = serialize_embedding(embedding)

            stored = await asyncio.to_thread(
                self.vector_store.replace_document, filename, chunks
            )

        logger.info("Indexed %s: %d/%d chunks stored", filename, stored, len(chunks))
        return stored

    async def process_document(self, file_path: Path) -> int:
        """Load a file from disk, clean it and index it under its file name.

        Returns:
            Number of chunks stored.
        """
        logger.info("Processing document: %s", file_path)
        text = await asyncio.to_thread(DocumentLoader.load_document, Path(file_path))
        return await self.index_document(
            Path(file_path).name, clean_document_text(text)
        )

    async def search_documents(self, query: str, limit: int = 5) -> list[SearchResult]:
        """Return the chunks most similar to ``query``.

        Invalid queries and provider or storage failures all yield ``[]``.

        Returns:
            Ranked results, best first.
        """
        if not isinstance(query, str) or not query.strip():
            logger.info("Invalid query provided to search_documents")
            return []

        try:
            query_embedding = await self.embedding_service.get_embedding(query.strip())
        except EmbeddingUnavailable:
            logger.warning("Query embedding unavailable; returning no results")
            return []

        try:
            chunks = await asyncio.to_thread(self.vector_store.all_chunks)
        except sqlite3.Error:
            logger.exception("Vector store read failed")
            return []

        if not chunks:
            logger.info("No document chunks found in vector store")
            return []

        return self.ranker.rank(query_embedding, chunks, limit)

    async def search_with_scoring(
        self, query: str, limit: int | None = None
    ) -> DocumentSearchOutcome:
        """Search documents and classify whether the hits are a strong match.

        Returns:
            Outcome with joined, scrubbed hit text and sources.
        """
        results = await self.search_documents(query, limit or config.SEARCH_TOP_K)
        if not results:
            return DocumentSearchOutcome()

        has_strong_match = self.classifier.classify(query, results)
        sources = list(dict.fromkeys(result.filename for result in results))
        logger.info(
            "Vector: %d chunks, strong: %s, sources: %s",
            len(results),
            has_strong_match,
            ", ".join(sources),
        )
        return DocumentSearchOutcome(
            has_strong_match=has_strong_match,
            context=build_document_context(results),
            sources=sources,
        )

    async def get_indexed_document_count(self) -> int:
        return await asyncio.to_thread(self.vector_store.count_distinct_documents)
