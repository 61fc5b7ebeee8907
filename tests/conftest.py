"""Test configuration and fixtures for the Oracle agent tests.

This module provides reusable test fixtures organized by functionality:
- Constants and test data
- Mock services and API responses
- Text processing fixtures
- Vector store fixtures
- Pipeline, web search and conversation factories
"""

import hashlib
import inspect
from unittest.mock import AsyncMock, Mock, create_autospec

import httpx
import numpy as np
import pytest
import pytest_asyncio

from oracle import (
    ConversationManager,
    DocumentChunk,
    InMemoryVectorStore,
    RAGPipeline,
    SQLiteVectorStore,
    TextChunker,
    WebSearchAdapter,
)
from oracle.exceptions import EmbeddingUnavailable
from oracle.models import WebSearchOutcome, serialize_embedding


class TestConstants:
    """Centralized test constants shared across test modules."""

    __test__ = False

    TEST_API_KEY = "test-key"
    TEST_SEARCH_KEY = "test-search-key"
    DEFAULT_EMBEDDING_DIMENSION = 64

    # Word-window chunking
    DEFAULT_CHUNK_SIZE = 150
    DEFAULT_CHUNK_OVERLAP = 20
    SMALL_CHUNK_SIZE = 10
    SMALL_CHUNK_OVERLAP = 3

    TEST_DOMAINS = ("midnight.io", "cardano.org", "docs.cardano.org")


class MockEmbeddingService:
    """Mock embedding service for testing without API calls.

    Generates deterministic embeddings from a hash of the text, so identical
    text always maps to the identical vector.
    """

    def __init__(
        self, dimension: int = TestConstants.DEFAULT_EMBEDDING_DIMENSION
    ) -> None:
        self.dimension = dimension
        self.calls = 0
        self.failing_texts: set[str] = set()
        self.fail_all = False

    def vector_for(self, text: str) -> np.ndarray:
        seed = int.from_bytes(
            hashlib.sha256(text.lower().encode("utf-8")).digest()[:8],
            byteorder="big",
            signed=False,
        )
        rng = np.random.default_rng(seed)
        embedding = rng.normal(0, 1, self.dimension)
        return embedding / np.linalg.norm(embedding)

    async def get_embedding(self, text: str) -> np.ndarray:
        """Generate a deterministic mock embedding, or fail when configured to."""
        self.calls += 1
        if self.fail_all or text in self.failing_texts:
            msg = "Mock embedding failure"
            raise EmbeddingUnavailable(msg)
        return self.vector_for(text)


def create_mock_embedding_response(embeddings: list[list[float]]) -> Mock:
    """Create a mock OpenAI embeddings API response."""
    mock_response = Mock()
    mock_response.data = [Mock(embedding=emb) for emb in embeddings]
    return mock_response


def create_mock_chat_response(content: str | None) -> Mock:
    """Create a mock OpenAI chat completion response."""
    mock_response = Mock()
    mock_response.choices = [Mock(message=Mock(content=content))]
    return mock_response


def make_words(count: int, prefix: str = "word") -> str:
    return " ".join(f"{prefix}{i}" for i in range(count))


def make_chunk(
    content: str,
    filename: str = "doc.txt",
    chunk_index: int = 0,
    embedding: str | None = None,
) -> DocumentChunk:
    return DocumentChunk(
        filename=filename,
        content=content,
        chunk_index=chunk_index,
        embedding=embedding,
    )


@pytest.fixture
def mock_embedding_service():
    """Fresh MockEmbeddingService per test so call counts start at zero."""
    return MockEmbeddingService()


@pytest.fixture
def embedded_chunk_factory(mock_embedding_service):
    """Factory for chunks carrying a serialized mock embedding."""

    def _create(
        content: str, filename: str = "doc.txt", chunk_index: int = 0
    ) -> DocumentChunk:
        return make_chunk(
            content,
            filename=filename,
            chunk_index=chunk_index,
            embedding=serialize_embedding(mock_embedding_service.vector_for(content)),
        )

    return _create


@pytest.fixture
def text_chunker_factory():
    """Factory fixture that creates ``TextChunker`` instances on demand."""
    presets: dict[str, tuple[int, int]] = {
        "small": (TestConstants.SMALL_CHUNK_SIZE, TestConstants.SMALL_CHUNK_OVERLAP),
        "default": (
            TestConstants.DEFAULT_CHUNK_SIZE,
            TestConstants.DEFAULT_CHUNK_OVERLAP,
        ),
    }

    def _create_chunker(name: str = "default") -> TextChunker:
        chunk_size, overlap = presets[name]
        return TextChunker(chunk_size=chunk_size, overlap=overlap)

    return _create_chunker


@pytest.fixture
def temp_vector_store(tmp_path) -> SQLiteVectorStore:
    """Create temporary SQLite vector store for testing."""
    return SQLiteVectorStore(tmp_path / "test_store.db")


@pytest.fixture
def memory_vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture(params=["sqlite", "memory"])
def any_vector_store(request, tmp_path):
    """Run a test against both vector store backends."""
    if request.param == "sqlite":
        return SQLiteVectorStore(tmp_path / "param_store.db")
    return InMemoryVectorStore()


@pytest.fixture
def rag_pipeline_factory(mock_embedding_service, temp_vector_store):
    """Factory for RAGPipeline instances wired to mock collaborators."""

    def _create_pipeline(
        vector_store=None,
        chunk_size: int = TestConstants.DEFAULT_CHUNK_SIZE,
        overlap: int = TestConstants.DEFAULT_CHUNK_OVERLAP,
    ) -> RAGPipeline:
        return RAGPipeline(
            embedding_service=mock_embedding_service,
            vector_store=(
                vector_store if vector_store is not None else temp_vector_store
            ),
            chunker=TextChunker(chunk_size=chunk_size, overlap=overlap),
        )

    return _create_pipeline


@pytest.fixture
def rag_pipeline(rag_pipeline_factory) -> RAGPipeline:
    return rag_pipeline_factory()


def brave_payload(*results: dict) -> dict:
    return {"web": {"results": list(results)}}


def brave_result(
    url: str, title: str = "Title", description: str = "Snippet"
) -> dict:
    return {"title": title, "url": url, "description": description}


@pytest_asyncio.fixture
async def web_search_factory():
    """Factory for WebSearchAdapter backed by an ``httpx.MockTransport``.

    The handler receives each ``httpx.Request``; requests are also recorded
    on the returned adapter's ``requests`` list. Every client opened by the
    factory is closed at teardown.
    """
    clients: list[httpx.AsyncClient] = []

    def _create(
        handler,
        domains=TestConstants.TEST_DOMAINS,
        timeout: float = 3.0,
        api_key: str = TestConstants.TEST_SEARCH_KEY,
    ) -> WebSearchAdapter:
        requests: list[httpx.Request] = []

        async def _recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            result = handler(request)
            if inspect.isawaitable(result):
                result = await result
            return result

        client = httpx.AsyncClient(transport=httpx.MockTransport(_recording_handler))
        clients.append(client)
        adapter = WebSearchAdapter(
            api_key=api_key, domains=domains, timeout=timeout, client=client
        )
        adapter.requests = requests
        return adapter

    yield _create

    for client in clients:
        await client.aclose()


@pytest.fixture
def mock_web_search():
    """Autospecced WebSearchAdapter returning no results by default."""
    adapter = create_autospec(WebSearchAdapter, instance=True)
    adapter.search.return_value = WebSearchOutcome()
    return adapter


@pytest.fixture
def mock_chat_client():
    """Stand-in AsyncOpenAI client whose completions return a fixed reply."""
    client = Mock()
    client.chat.completions.create = AsyncMock(
        return_value=create_mock_chat_response("Test response")
    )
    return client


@pytest.fixture
def conversation_manager_factory(rag_pipeline, mock_web_search, mock_chat_client):
    """Factory for ConversationManager with mock collaborators."""

    def _create(
        pipeline=None, web_search=None, client=None
    ) -> ConversationManager:
        return ConversationManager(
            rag_pipeline=pipeline or rag_pipeline,
            web_search=web_search or mock_web_search,
            client=client or mock_chat_client,
        )

    return _create
