"""Embedding encoding for the contexts.embedding column.

Embeddings are stored as JSON float arrays, which sqlite-vec's
vec_distance_cosine() accepts directly alongside blob vectors.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from contextqa.errors import InvalidInput


def encode_embedding(embedding: Sequence[float]) -> str:
    """Serialize *embedding* to the JSON text stored in the database."""
    return json.dumps([float(x) for x in embedding])


def decode_embedding(raw: str | bytes | None) -> list[float] | None:
    """Deserialize a stored embedding; None stays None."""
    if raw is None:
        return None
    return [float(x) for x in json.loads(raw)]


def check_dimensions(embedding: Sequence[float], dimensions: int) -> None:
    """Raise InvalidInput unless *embedding* has exactly *dimensions* entries."""
    if len(embedding) != dimensions:
        raise InvalidInput(
            f"Embedding has {len(embedding)} dimensions, expected {dimensions}."
        )
