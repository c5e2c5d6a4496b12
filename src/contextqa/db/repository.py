"""Repositories for contexts and chat history.

ContextRepository owns context records (create, list, nearest-neighbour
search, embedding backfill). ChatHistoryRepository owns the append-only
question/answer log and only references contexts by id.

Every sqlite3.Error is rolled back and re-raised as StoreFailure.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from contextqa.db.models import ChatMessage, Context
from contextqa.db.vectors import check_dimensions, decode_embedding, encode_embedding
from contextqa.errors import NotFound, StoreFailure

_CONTEXT_COLUMNS = "id, title, content, embedding, created_at, updated_at"


@contextmanager
def _store_errors(conn: sqlite3.Connection, action: str) -> Iterator[None]:
    """Translate sqlite3 errors raised inside the block into StoreFailure."""
    try:
        yield
    except sqlite3.Error as exc:
        conn.rollback()
        raise StoreFailure(f"Failed to {action}: {exc}") from exc


class ContextRepository:
    """Data access layer for Context records.

    Wraps an open sqlite3.Connection (sqlite-vec loaded, schema initialised).
    The connection is owned by the caller and must be closed after use.

    Args:
        conn: Open database connection.
        dimensions: System-wide embedding length enforced on every write.
    """

    def __init__(self, conn: sqlite3.Connection, dimensions: int = 1536) -> None:
        self._conn = conn
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(
        self, title: str, content: str, embedding: Sequence[float] | None = None
    ) -> Context:
        """Insert a new context and return the stored record (id + timestamps set)."""
        if embedding is not None:
            check_dimensions(embedding, self._dimensions)
        encoded = encode_embedding(embedding) if embedding is not None else None
        with _store_errors(self._conn, "create context"):
            cur = self._conn.execute(
                "INSERT INTO contexts (title, content, embedding) VALUES (?, ?, ?)",
                (title, content, encoded),
            )
            self._conn.commit()
            context_id = cur.lastrowid
        created = self.get(context_id)
        if created is None:
            raise StoreFailure(f"Context {context_id} vanished after insert.")
        return created

    def update_embedding(self, context_id: int, embedding: Sequence[float]) -> None:
        """Set the embedding for *context_id* and refresh updated_at.

        Raises:
            InvalidInput: If *embedding* does not have the configured dimension.
            NotFound: If no context has this id.
        """
        check_dimensions(embedding, self._dimensions)
        with _store_errors(self._conn, f"update embedding for context {context_id}"):
            cur = self._conn.execute(
                """
                UPDATE contexts
                SET embedding = ?, updated_at = strftime('%Y-%m-%d %H:%M:%f', 'now')
                WHERE id = ?
                """,
                (encode_embedding(embedding), context_id),
            )
            self._conn.commit()
        if cur.rowcount == 0:
            raise NotFound(f"Context {context_id} not found.")

    def delete(self, context_id: int) -> bool:
        """Delete a context. Chat messages referencing it keep a NULL context_id.

        Returns:
            True if a row was deleted, False if the id did not exist.
        """
        with _store_errors(self._conn, f"delete context {context_id}"):
            cur = self._conn.execute("DELETE FROM contexts WHERE id = ?", (context_id,))
            self._conn.commit()
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, context_id: int) -> Context | None:
        """Return a context by id, or None if not found."""
        with _store_errors(self._conn, f"read context {context_id}"):
            row = self._conn.execute(
                f"SELECT {_CONTEXT_COLUMNS} FROM contexts WHERE id = ?", (context_id,)
            ).fetchone()
        return _row_to_context(row) if row else None

    def list_all(self) -> list[Context]:
        """Return all contexts, newest first."""
        with _store_errors(self._conn, "list contexts"):
            rows = self._conn.execute(
                f"SELECT {_CONTEXT_COLUMNS} FROM contexts ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [_row_to_context(r) for r in rows]

    def find_missing_embeddings(self) -> list[Context]:
        """Return contexts without an embedding, oldest first (discovery order)."""
        with _store_errors(self._conn, "list contexts without embeddings"):
            rows = self._conn.execute(
                f"""
                SELECT {_CONTEXT_COLUMNS} FROM contexts
                WHERE embedding IS NULL
                ORDER BY created_at, id
                """
            ).fetchall()
        return [_row_to_context(r) for r in rows]

    def nearest_neighbor(self, query: Sequence[float]) -> Context | None:
        """Return the embedded context closest to *query* by cosine distance.

        Ties on distance go to the earliest created_at (then lowest id).
        vec_distance_cosine() yields NULL for a zero-magnitude vector; that is
        treated as the maximum distance 1.0.

        Returns:
            The best-matching Context, or None if no context has an embedding.
        """
        check_dimensions(query, self._dimensions)
        if not any(query):
            # Zero query: every distance is 1.0, so the earliest context wins.
            sql = f"""
                SELECT {_CONTEXT_COLUMNS} FROM contexts
                WHERE embedding IS NOT NULL
                ORDER BY created_at ASC, id ASC
                LIMIT 1
            """
            params: tuple = ()
        else:
            sql = f"""
                SELECT {_CONTEXT_COLUMNS},
                       COALESCE(vec_distance_cosine(embedding, ?), 1.0) AS distance
                FROM contexts
                WHERE embedding IS NOT NULL
                ORDER BY distance ASC, created_at ASC, id ASC
                LIMIT 1
            """
            params = (encode_embedding(query),)
        with _store_errors(self._conn, "search contexts"):
            row = self._conn.execute(sql, params).fetchone()
        return _row_to_context(row) if row else None

    def count(self) -> int:
        with _store_errors(self._conn, "count contexts"):
            return self._conn.execute("SELECT COUNT(*) FROM contexts").fetchone()[0]

    def count_embedded(self) -> int:
        """Return the number of contexts that have an embedding."""
        with _store_errors(self._conn, "count embedded contexts"):
            return self._conn.execute(
                "SELECT COUNT(*) FROM contexts WHERE embedding IS NOT NULL"
            ).fetchone()[0]


class ChatHistoryRepository:
    """Append-only store for answered questions."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def append(
        self, question: str, answer: str, context_id: int | None = None
    ) -> ChatMessage:
        """Insert a chat message and return it with id and created_at set."""
        with _store_errors(self._conn, "append chat message"):
            cur = self._conn.execute(
                "INSERT INTO chat_messages (question, answer, context_id) VALUES (?, ?, ?)",
                (question, answer, context_id),
            )
            self._conn.commit()
            row = self._conn.execute(
                "SELECT id, question, answer, context_id, created_at FROM chat_messages WHERE id = ?",
                (cur.lastrowid,),
            ).fetchone()
        return ChatMessage(
            id=row["id"],
            question=row["question"],
            answer=row["answer"],
            context_id=row["context_id"],
            created_at=row["created_at"],
        )

    def list_all(self, limit: int | None = None) -> list[ChatMessage]:
        """Return chat messages newest first, each with its context resolved."""
        sql = """
            SELECT m.id, m.question, m.answer, m.context_id, m.created_at,
                   c.id AS c_id, c.title AS c_title, c.content AS c_content,
                   c.embedding AS c_embedding, c.created_at AS c_created_at,
                   c.updated_at AS c_updated_at
            FROM chat_messages m
            LEFT JOIN contexts c ON c.id = m.context_id
            ORDER BY m.created_at DESC, m.id DESC
        """
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        with _store_errors(self._conn, "list chat history"):
            rows = self._conn.execute(sql, params).fetchall()
        return [_row_to_message(r) for r in rows]

    def count(self) -> int:
        with _store_errors(self._conn, "count chat messages"):
            return self._conn.execute("SELECT COUNT(*) FROM chat_messages").fetchone()[0]


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------

def _row_to_context(row: sqlite3.Row) -> Context:
    return Context(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        embedding=decode_embedding(row["embedding"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_message(row: sqlite3.Row) -> ChatMessage:
    context = None
    if row["c_id"] is not None:
        context = Context(
            id=row["c_id"],
            title=row["c_title"],
            content=row["c_content"],
            embedding=decode_embedding(row["c_embedding"]),
            created_at=row["c_created_at"],
            updated_at=row["c_updated_at"],
        )
    return ChatMessage(
        id=row["id"],
        question=row["question"],
        answer=row["answer"],
        context_id=row["context_id"],
        created_at=row["created_at"],
        context=context,
    )
