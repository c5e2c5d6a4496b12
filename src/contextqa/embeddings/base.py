"""Embedding provider interface shared by the mock and live variants."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from contextqa.errors import ProviderUnavailable, require_text

DEFAULT_DIMENSIONS = 1536


class EmbeddingProvider(ABC):
    """Abstract base for all embedding providers.

    Subclasses implement ``_generate()``; ``embed()`` validates the input and
    zero-pads the provider's native output to ``dimensions``.

    Args:
        dimensions: System-wide embedding length every returned vector has.
    """

    name: str = "base"

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS) -> None:
        if dimensions < 1:
            raise ValueError("dimensions must be >= 1")
        self.dimensions = dimensions

    @abstractmethod
    def _generate(self, text: str) -> list[float]:
        """Return the provider's native embedding for *text* (any length)."""

    def embed(self, text: str) -> list[float]:
        """Embed *text* into a vector of exactly ``self.dimensions`` floats.

        Raises:
            InvalidInput: If *text* is empty or whitespace-only.
            ProviderUnavailable: If the upstream call fails, or returns a
                vector longer than ``self.dimensions``.
        """
        require_text(text, "Text")
        return pad_embedding(self._generate(text), self.dimensions)

    def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed each text in order, one call at a time."""
        return [self.embed(text) for text in texts]


def pad_embedding(vector: Sequence[float], dimensions: int) -> list[float]:
    """Zero-pad *vector* on the right to *dimensions*. Never truncates.

    Raises:
        ProviderUnavailable: If *vector* is longer than *dimensions*.
    """
    if len(vector) > dimensions:
        raise ProviderUnavailable(
            f"Provider returned {len(vector)} dimensions; "
            f"the configured maximum is {dimensions}."
        )
    padded = [float(x) for x in vector]
    padded.extend([0.0] * (dimensions - len(padded)))
    return padded
