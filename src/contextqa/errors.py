"""Error taxonomy shared by the embedding, synthesis, and storage layers.

InvalidInput         caller-supplied data violates a precondition (never retried)
ProviderUnavailable  upstream embedding / answer API unreachable or erroring
NotFound             referenced entity does not exist
StoreFailure         persistence layer error (always propagated)
"""

from __future__ import annotations


class ContextQAError(Exception):
    """Base class for all contextqa errors."""


class InvalidInput(ContextQAError, ValueError):
    """Raised when caller-supplied text or data fails validation."""


class ProviderUnavailable(ContextQAError):
    """Raised when an embedding or generation provider call fails or times out."""


class NotFound(ContextQAError, LookupError):
    """Raised when a referenced context does not exist."""


class StoreFailure(ContextQAError):
    """Raised when a database read or write fails."""


def require_text(value: str | None, field: str) -> str:
    """Return *value* unchanged, or raise InvalidInput if it is empty/whitespace."""
    if value is None or not value.strip():
        raise InvalidInput(f"{field} cannot be empty.")
    return value
