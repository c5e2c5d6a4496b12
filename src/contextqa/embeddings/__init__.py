"""Embedding providers: one interface, selected at process start from config."""

from __future__ import annotations

from contextqa.config import EmbeddingCfg
from contextqa.embeddings.base import EmbeddingProvider, pad_embedding
from contextqa.embeddings.live import (
    GeminiEmbeddingProvider,
    LiteLLMEmbeddingProvider,
    OpenAIEmbeddingProvider,
)
from contextqa.embeddings.mock import MockEmbeddingProvider

__all__ = [
    "EmbeddingProvider",
    "GeminiEmbeddingProvider",
    "LiteLLMEmbeddingProvider",
    "MockEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "build_embedding_provider",
    "pad_embedding",
]


def build_embedding_provider(cfg: EmbeddingCfg) -> EmbeddingProvider:
    """Return the provider named by ``cfg.provider`` ('mock', 'openai', 'gemini').

    Raises:
        ValueError: If the provider name is unknown.
    """
    if cfg.provider == "mock":
        return MockEmbeddingProvider(dimensions=cfg.dimensions)
    if cfg.provider == "openai":
        return OpenAIEmbeddingProvider(cfg.model, cfg.dimensions, cfg.timeout)
    if cfg.provider == "gemini":
        return GeminiEmbeddingProvider(cfg.model, cfg.dimensions, cfg.timeout)
    raise ValueError(f"Unknown embedding provider '{cfg.provider}'")
