"""contextqa database layer."""

from contextqa.db.connection import Database
from contextqa.db.migrations import MIGRATIONS, run_migrations
from contextqa.db.models import MAX_TITLE_LENGTH, ChatMessage, Context
from contextqa.db.repository import ChatHistoryRepository, ContextRepository
from contextqa.db.schema import initialize

__all__ = [
    "Database",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
    "MAX_TITLE_LENGTH",
    "Context",
    "ChatMessage",
    "ContextRepository",
    "ChatHistoryRepository",
]
