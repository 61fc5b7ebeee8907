"""Configuration management for the Oracle agent service."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"

if env_path.exists():
    load_dotenv(env_path)

DEFAULT_WEB_SEARCH_DOMAINS = (
    "midnight.io,cardano.org,docs.cardano.org,github.com/input-output-hk"
)


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


class Config:
    """Application configuration loaded from environment variables."""

    # OpenAI Configuration
    @classmethod
    def get_openai_api_key(cls) -> str:
        """Get OpenAI API key from environment variables.

        Returns:
            OpenAI API key from environment or empty string if not set.
        """
        return os.getenv("OPENAI_API_KEY", "")

    @classmethod
    def get_web_search_api_key(cls) -> str:
        """Get the Brave web search API key from environment variables.

        Returns:
            Web search API key or empty string if not set.
        """
        return os.getenv("BRAVE_API_KEY", "")

    OPENAI_BASE_URL: str | None = os.getenv("OPENAI_BASE_URL")

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    OPENAI_LOG_LEVEL: str = os.getenv("OPENAI_LOG_LEVEL", "WARNING").upper()
    HTTPX_LOG_LEVEL: str = os.getenv("HTTPX_LOG_LEVEL", "WARNING").upper()

    # Embeddings are pinned: vectors from different models are not comparable
    EMBEDDING_MODEL: str = "text-embedding-3-large"
    EMBEDDING_DIMENSIONS: int = 3072
    EMBEDDING_TIMEOUT: float = float(os.getenv("EMBEDDING_TIMEOUT", "30"))

    # Chunking Configuration (word windows)
    CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", "150"))
    CHUNK_OVERLAP: int = int(os.getenv("CHUNK_OVERLAP", "20"))

    # Retrieval Configuration
    SEARCH_TOP_K: int = int(os.getenv("SEARCH_TOP_K", "5"))
    MAX_SEARCH_RESULTS: int = int(os.getenv("MAX_SEARCH_RESULTS", "10"))
    MAX_RESULT_CONTENT_LENGTH: int = int(
        os.getenv("MAX_RESULT_CONTENT_LENGTH", "2000")
    )
    STRONG_MATCH_THRESHOLD: float = float(
        os.getenv("STRONG_MATCH_THRESHOLD", "0.75")
    )

    # Chat Model Configuration
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gpt-4o")
    CHAT_TIMEOUT: float = float(os.getenv("CHAT_TIMEOUT", "30"))

    # Web Search Configuration
    WEB_SEARCH_URL: str = os.getenv(
        "WEB_SEARCH_URL", "https://api.search.brave.com/res/v1/web/search"
    )
    WEB_SEARCH_TIMEOUT: float = float(os.getenv("WEB_SEARCH_TIMEOUT", "3.0"))
    WEB_SEARCH_RESULT_COUNT: int = int(os.getenv("WEB_SEARCH_RESULT_COUNT", "3"))
    WEB_SEARCH_DOMAINS: tuple[str, ...] = _split_csv(
        os.getenv("WEB_SEARCH_DOMAINS", DEFAULT_WEB_SEARCH_DOMAINS)
    )

    # Vector Store Configuration
    VECTOR_BACKEND: str = os.getenv("VECTOR_BACKEND", "sqlite").lower()
    VECTOR_STORE_DB_PATH: Path = Path(
        os.getenv("VECTOR_STORE_DB_PATH", "data/vector_store.db")
    )
    SEED_DOCUMENTS_DIR: Path = Path(os.getenv("SEED_DOCUMENTS_DIR", "attached_assets"))

    # API Header Configuration
    API_USER_AGENT: str = os.getenv("API_USER_AGENT", "OracleAgent/1.0")

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration values.

        Raises:
            ValueError: If OPENAI_API_KEY is not set or chunking is inconsistent.
        """
        if not cls.get_openai_api_key():
            msg = (
                "OPENAI_API_KEY is required. Please set it in .env file or environment."
            )
            raise ValueError(msg)
        if not 0 <= cls.CHUNK_OVERLAP < cls.CHUNK_SIZE:
            msg = (
                f"CHUNK_OVERLAP ({cls.CHUNK_OVERLAP}) must be non-negative and "
                f"smaller than CHUNK_SIZE ({cls.CHUNK_SIZE})."
            )
            raise ValueError(msg)

    @classmethod
    def setup_logging(cls) -> None:
        """Configure logging once at application startup."""
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )

        logging.getLogger("openai").setLevel(
            getattr(logging, cls.OPENAI_LOG_LEVEL, logging.WARNING)
        )
        logging.getLogger("httpx").setLevel(
            getattr(logging, cls.HTTPX_LOG_LEVEL, logging.WARNING)
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger with the specified name.

        Args:
            name: Logger name (typically __name__)

        Returns:
            Logger instance
        """
        return logging.getLogger(name)

    @classmethod
    def get_api_headers(cls) -> dict[str, str]:
        """Build default headers for outbound API calls.

        Returns:
            Mapping of header names to values used on outbound HTTP requests.
        """
        headers: dict[str, str] = {}

        if cls.API_USER_AGENT:
            headers["User-Agent"] = cls.API_USER_AGENT

        return headers


config = Config()
