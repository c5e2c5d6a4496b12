"""Retrieval orchestrator: embed → nearest context → synthesize → record.

answer():
  1. reject empty questions (InvalidInput)
  2. no embedded contexts      → NO_CONTEXTS_MESSAGE (no provider call)
  3. embed the question        (ProviderUnavailable propagates)
  4. nearest neighbour is None → NO_MATCH_MESSAGE
  5. synthesize from the matched context (never raises)
  6. append to chat history, referencing the matched context
  7. return the answer

add_context() embeds before writing, so a context is never stored without
its embedding. regenerate_missing_embeddings() is best effort: a provider
failure on one context is logged and the pass moves on to the next.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field

from contextqa.config import ContextQAConfig
from contextqa.db.models import MAX_TITLE_LENGTH, ChatMessage, Context
from contextqa.db.repository import ChatHistoryRepository, ContextRepository
from contextqa.embeddings import EmbeddingProvider, build_embedding_provider
from contextqa.errors import InvalidInput, NotFound, ProviderUnavailable, require_text
from contextqa.rag.synthesizer import AnswerSynthesizer

logger = logging.getLogger(__name__)

NO_CONTEXTS_MESSAGE = "No contexts available. Please add some contexts first."
NO_MATCH_MESSAGE = (
    "I couldn't find relevant information in the available contexts. "
    "Please try rephrasing your question or add more contexts."
)


@dataclass
class BackfillReport:
    """Outcome of one regenerate_missing_embeddings() pass.

    Attributes:
        embedded: Ids of contexts that received an embedding.
        failed: Ids of contexts whose embedding could not be generated.
    """

    embedded: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.embedded) + len(self.failed)


class RetrievalOrchestrator:
    """Coordinates the embedding provider, stores, and answer synthesizer.

    Args:
        contexts: Context store.
        history: Chat history store.
        embedder: Embedding provider (mock or live).
        synthesizer: Answer synthesizer.
    """

    def __init__(
        self,
        contexts: ContextRepository,
        history: ChatHistoryRepository,
        embedder: EmbeddingProvider,
        synthesizer: AnswerSynthesizer,
    ) -> None:
        self.contexts = contexts
        self.history = history
        self.embedder = embedder
        self.synthesizer = synthesizer

    @classmethod
    def from_config(
        cls, conn: sqlite3.Connection, cfg: ContextQAConfig
    ) -> RetrievalOrchestrator:
        """Wire an orchestrator from an open connection and loaded config."""
        return cls(
            contexts=ContextRepository(conn, dimensions=cfg.embedding.dimensions),
            history=ChatHistoryRepository(conn),
            embedder=build_embedding_provider(cfg.embedding),
            synthesizer=AnswerSynthesizer(
                model=cfg.generation.model,
                max_tokens=cfg.generation.max_tokens,
                timeout=cfg.generation.timeout,
            ),
        )

    # ------------------------------------------------------------------
    # Question answering
    # ------------------------------------------------------------------

    def answer(self, question: str) -> str:
        """Answer *question* from the closest stored context.

        Raises:
            InvalidInput: If *question* is empty or whitespace-only.
            ProviderUnavailable: If the question cannot be embedded.
            StoreFailure: On any database error.
        """
        require_text(question, "Question")

        if self.contexts.count_embedded() == 0:
            return NO_CONTEXTS_MESSAGE

        query = self.embedder.embed(question)

        match = self.contexts.nearest_neighbor(query)
        if match is None:
            return NO_MATCH_MESSAGE

        logger.info("Question matched context %s (%s)", match.id, match.title)
        answer = self.synthesizer.synthesize(question, match.content)

        self.history.append(question, answer, context_id=match.id)
        return answer

    # ------------------------------------------------------------------
    # Contexts
    # ------------------------------------------------------------------

    def add_context(self, title: str, content: str) -> Context:
        """Embed *content* and store a new context.

        Raises:
            InvalidInput: Empty title/content, or title longer than 200 characters.
            ProviderUnavailable: If the embedding cannot be generated (nothing is stored).
            StoreFailure: If the write fails (nothing is stored).
        """
        require_text(title, "Title")
        require_text(content, "Content")
        if len(title) > MAX_TITLE_LENGTH:
            raise InvalidInput(
                f"Title is {len(title)} characters; the maximum is {MAX_TITLE_LENGTH}."
            )

        embedding = self.embedder.embed(content)
        context = self.contexts.create(title, content, embedding)
        logger.info("Added context %s (%s)", context.id, context.title)
        return context

    def list_contexts(self) -> list[Context]:
        return self.contexts.list_all()

    def get_context(self, context_id: int) -> Context:
        """Return a context by id.

        Raises:
            NotFound: If no context has this id.
        """
        context = self.contexts.get(context_id)
        if context is None:
            raise NotFound(f"Context {context_id} not found.")
        return context

    def delete_context(self, context_id: int) -> None:
        """Delete a context; chat messages that referenced it keep a null reference.

        Raises:
            NotFound: If no context has this id.
        """
        if not self.contexts.delete(context_id):
            raise NotFound(f"Context {context_id} not found.")
        logger.info("Deleted context %s", context_id)

    def chat_history(self, limit: int | None = None) -> list[ChatMessage]:
        return self.history.list_all(limit=limit)

    # ------------------------------------------------------------------
    # Backfill
    # ------------------------------------------------------------------

    def regenerate_missing_embeddings(self) -> BackfillReport:
        """Embed every context that lacks an embedding, one at a time.

        A ProviderUnavailable for one context is logged and recorded in the
        report; the remaining contexts are still processed. Store errors
        propagate.
        """
        report = BackfillReport()
        for context in self.contexts.find_missing_embeddings():
            try:
                embedding = self.embedder.embed(context.content)
            except ProviderUnavailable as exc:
                logger.warning(
                    "Error generating embedding for context %s: %s", context.id, exc
                )
                report.failed.append(context.id)
                continue
            self.contexts.update_embedding(context.id, embedding)
            report.embedded.append(context.id)

        logger.info(
            "Embedding backfill: %d embedded, %d failed",
            len(report.embedded),
            len(report.failed),
        )
        return report
