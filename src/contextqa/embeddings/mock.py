"""Deterministic embedding provider for tests and offline use.

The same text always yields the same unit-length vector: a SHA-256 digest of
the text seeds a private random.Random, which draws values in [-1, 1).
No network calls, no cost. Vectors carry no semantic meaning.
"""

from __future__ import annotations

import hashlib
import logging
import math
import random

from contextqa.embeddings.base import DEFAULT_DIMENSIONS, EmbeddingProvider

logger = logging.getLogger(__name__)


class MockEmbeddingProvider(EmbeddingProvider):
    """Hash-seeded pseudo-random embeddings, normalised to unit length."""

    name = "mock"

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS) -> None:
        super().__init__(dimensions)
        logger.warning(
            "Using mock embeddings: vectors are synthetic and for testing only."
        )

    def _generate(self, text: str) -> list[float]:
        logger.debug("Generating mock embedding for text of length %d", len(text))
        rng = random.Random(stable_seed(text))
        vector = [rng.uniform(-1.0, 1.0) for _ in range(self.dimensions)]
        return normalize(vector)


def stable_seed(text: str) -> int:
    """Process-independent integer seed for *text* (unlike built-in hash())."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def normalize(vector: list[float]) -> list[float]:
    """Scale *vector* to unit length; a zero vector is returned unchanged."""
    magnitude = math.sqrt(sum(x * x for x in vector))
    if magnitude == 0:
        return vector
    return [x / magnitude for x in vector]
