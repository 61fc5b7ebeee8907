"""Error types raised at the provider boundaries."""


class OracleError(Exception):
    """Base class for all Oracle agent errors."""


class ProviderUnavailable(OracleError):
    """An external provider errored, timed out or returned an unusable payload."""


class EmbeddingUnavailable(ProviderUnavailable):
    """The embedding provider could not produce a vector."""


class WebSearchUnavailable(ProviderUnavailable):
    """The web search provider could not be queried."""


class GenerationUnavailable(ProviderUnavailable):
    """The chat completion provider failed for this turn."""
