"""API-backed embedding providers routed through LiteLLM.

OpenAI text-embedding-3-small returns 1536 dimensions natively; Gemini
text-embedding-004 returns 768 and is zero-padded to the configured
dimension by EmbeddingProvider.embed().
"""

from __future__ import annotations

import logging

from contextqa.embeddings.base import DEFAULT_DIMENSIONS, EmbeddingProvider
from contextqa.rag import llm_client

logger = logging.getLogger(__name__)


class LiteLLMEmbeddingProvider(EmbeddingProvider):
    """Embedding provider calling ``litellm.embedding()`` for one text at a time.

    Args:
        model: LiteLLM model string (provider/model format).
        dimensions: System-wide embedding length.
        timeout: Per-request timeout in seconds.
    """

    name = "litellm"
    default_model = "openai/text-embedding-3-small"

    def __init__(
        self,
        model: str | None = None,
        dimensions: int = DEFAULT_DIMENSIONS,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(dimensions)
        self.model = model or self.default_model
        self.timeout = timeout

    def _generate(self, text: str) -> list[float]:
        llm_client.validate_api_key(self.model)
        try:
            vector = llm_client.embed(self.model, text, timeout=self.timeout)
        except Exception:
            logger.error(
                "Error generating %s embedding for text: %s", self.name, text[:100]
            )
            raise
        logger.debug("Generated %s embedding with %d dimensions", self.name, len(vector))
        return vector


class OpenAIEmbeddingProvider(LiteLLMEmbeddingProvider):
    name = "openai"
    default_model = "openai/text-embedding-3-small"


class GeminiEmbeddingProvider(LiteLLMEmbeddingProvider):
    name = "gemini"
    default_model = "gemini/text-embedding-004"
