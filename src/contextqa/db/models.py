"""Domain models for the contextqa database layer."""

from __future__ import annotations

from dataclasses import dataclass

MAX_TITLE_LENGTH = 200


@dataclass
class Context:
    title: str
    content: str
    embedding: list[float] | None = None
    id: int | None = None  # assigned by the store on insert
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None


@dataclass
class ChatMessage:
    question: str
    answer: str
    context_id: int | None = None
    id: int | None = None
    created_at: str | None = None
    context: Context | None = None  # resolved on read when still present
