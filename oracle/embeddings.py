"""OpenAI embeddings service."""

import math

import numpy as np
from openai import AsyncOpenAI

from .config import config
from .exceptions import EmbeddingUnavailable

logger = config.get_logger(__name__)


class EmbeddingService:
    """Generates pinned-model embeddings through the OpenAI API."""

    model = config.EMBEDDING_MODEL
    dimensions = config.EMBEDDING_DIMENSIONS

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the EmbeddingService.

        Args:
            api_key: OpenAI API key. If None,
                reads from OPENAI_API_KEY environment variable.
            timeout: Per-request timeout in seconds. If None, uses
                config.EMBEDDING_TIMEOUT.
            client: Pre-built async client, mainly for tests.
        """
        if client is None:
            default_headers = config.get_api_headers()
            client = AsyncOpenAI(
                api_key=api_key or config.get_openai_api_key(),
                base_url=config.OPENAI_BASE_URL,
                default_headers=default_headers or None,
                timeout=timeout if timeout is not None else config.EMBEDDING_TIMEOUT,
            )
        self.client = client

    async def get_embedding(self, text: str) -> np.ndarray:
        """Get the embedding for a single text.

        Returns:
            np.ndarray: Vector of length ``dimensions``.

        Raises:
            EmbeddingUnavailable: If the provider call fails or returns a
                vector that is not usable.
        """
        try:
            response = await self.client.embeddings.create(
                model=self.model,
                input=text,
                dimensions=self.dimensions,
            )
        except Exception as exc:
            logger.exception("Error generating embedding")
            msg = "Failed to generate embedding"
            raise EmbeddingUnavailable(msg) from exc

        return self._parse_response(response)

    def _parse_response(self, response: object) -> np.ndarray:
        data = getattr(response, "data", None)
        if not data:
            msg = "Embedding response contained no data"
            raise EmbeddingUnavailable(msg)

        values = getattr(data[0], "embedding", None)
        if not isinstance(values, list) or len(values) != self.dimensions:
            msg = (
                f"Embedding response has unexpected shape; expected "
                f"{self.dimensions} values"
            )
            raise EmbeddingUnavailable(msg)
        if not all(
            isinstance(value, (int, float)) and math.isfinite(value)
            for value in values
        ):
            msg = "Embedding response contained non-numeric values"
            raise EmbeddingUnavailable(msg)

        return np.asarray(values, dtype=np.float64)
