"""Cosine-similarity ranking over stored chunks."""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING

import numpy as np

from .config import config
from .models import SearchResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .models import DocumentChunk

logger = config.get_logger(__name__)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity of two vectors, 0.0 when either has zero magnitude.

    Returns:
        Similarity in [-1, 1].
    """
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    similarity = float(np.dot(a, b)) / (norm_a * norm_b)
    # Floating-point rounding can push identical vectors just past 1.0.
    return max(-1.0, min(1.0, similarity))


def parse_embedding(raw: object) -> np.ndarray | None:
    """Decode a stored embedding, or return None if it is unusable.

    Valid embeddings are non-empty JSON arrays of finite numbers.
    """
    if not isinstance(raw, str) or not raw:
        return None
    try:
        values = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(values, list) or not values:
        return None
    if not all(
        isinstance(value, (int, float)) and not isinstance(value, bool)
        for value in values
    ):
        return None
    try:
        if not all(math.isfinite(value) for value in values):
            return None
        return np.asarray(values, dtype=np.float64)
    except (OverflowError, ValueError):
        # Integer literals beyond float range.
        return None


class SimilarityRanker:
    """Scores every stored chunk against a query vector and keeps the best."""

    def __init__(
        self,
        max_results: int | None = None,
        max_content_length: int | None = None,
    ) -> None:
        self.max_results = max_results or config.MAX_SEARCH_RESULTS
        self.max_content_length = (
            max_content_length or config.MAX_RESULT_CONTENT_LENGTH
        )

    def clamp_limit(self, limit: int) -> int:
        return max(1, min(limit, self.max_results))

    def rank(
        self,
        query_embedding: np.ndarray,
        chunks: Iterable[DocumentChunk],
        limit: int = 5,
    ) -> list[SearchResult]:
        """Rank chunks by cosine similarity to the query.

        Chunks with a missing, malformed or wrong-length embedding are left
        out rather than failing the query. Equal scores keep store order.

        Returns:
            At most ``clamp(limit, 1, max_results)`` results, best first.
        """
        query = np.asarray(query_embedding, dtype=np.float64)
        results: list[SearchResult] = []
        skipped = 0

        for chunk in chunks:
            if not chunk.content or not chunk.filename:
                skipped += 1
                continue

            embedding = parse_embedding(chunk.embedding)
            if embedding is None or embedding.shape != query.shape:
                logger.warning(
                    "Invalid embedding for chunk %s of %s",
                    chunk.chunk_index,
                    chunk.filename,
                )
                skipped += 1
                continue

            similarity = cosine_similarity(query, embedding)
            if math.isnan(similarity):
                skipped += 1
                continue

            results.append(
                SearchResult(
                    content=chunk.content[: self.max_content_length],
                    filename=chunk.filename,
                    page_number=chunk.page_number,
                    similarity=similarity,
                )
            )

        if skipped:
            logger.warning("Excluded %d malformed chunks from search", skipped)

        results.sort(key=lambda result: result.similarity, reverse=True)
        return results[: self.clamp_limit(limit)]
