"""Oracle agent - dual-source retrieval for persona chat."""

from .context import ContextAssembler
from .conversation import ConversationManager, TurnOutcome, TurnState
from .document_processing import DocumentLoader, TextChunker
from .embeddings import EmbeddingService
from .models import (
    ContextBundle,
    DocumentChunk,
    DocumentSearchOutcome,
    InformationQuality,
    SearchResult,
    WebSearchOutcome,
    WebSearchResult,
)
from .pipeline import RAGPipeline
from .ranking import SimilarityRanker
from .relevance import RelevanceClassifier, TopicCategory
from .vector_store import InMemoryVectorStore, SQLiteVectorStore, get_vector_store
from .web_search import WebSearchAdapter

__all__ = [
    "ContextAssembler",
    "ContextBundle",
    "ConversationManager",
    "DocumentChunk",
    "DocumentLoader",
    "DocumentSearchOutcome",
    "EmbeddingService",
    "InMemoryVectorStore",
    "InformationQuality",
    "RAGPipeline",
    "RelevanceClassifier",
    "SQLiteVectorStore",
    "SearchResult",
    "SimilarityRanker",
    "TextChunker",
    "TopicCategory",
    "TurnOutcome",
    "TurnState",
    "WebSearchAdapter",
    "WebSearchOutcome",
    "WebSearchResult",
    "get_vector_store",
]
