"""Tests for ContextRepository and ChatHistoryRepository."""

from __future__ import annotations

import pytest

from contextqa.db.models import ChatMessage, Context
from contextqa.db.repository import ChatHistoryRepository, ContextRepository
from contextqa.errors import InvalidInput, NotFound, StoreFailure


@pytest.fixture
def contexts(tmp_db):
    return ContextRepository(tmp_db, dimensions=4)


@pytest.fixture
def history(tmp_db):
    return ChatHistoryRepository(tmp_db)


# ------------------------------------------------------------------
# Contexts: create / get / list
# ------------------------------------------------------------------

def test_create_assigns_id_and_timestamps(contexts):
    c = contexts.create("Capital", "Paris is the capital of France.", [1, 0, 0, 0])
    assert isinstance(c, Context)
    assert c.id is not None
    assert c.created_at is not None
    assert c.updated_at is not None
    assert c.embedding == [1.0, 0.0, 0.0, 0.0]


def test_create_without_embedding(contexts):
    c = contexts.create("Draft", "No vector yet.")
    assert c.embedding is None
    assert not c.has_embedding


def test_create_rejects_wrong_dimension(contexts):
    with pytest.raises(InvalidInput):
        contexts.create("t", "c", [1.0, 0.0])
    assert contexts.count() == 0


def test_create_constraint_violation_is_store_failure(contexts):
    with pytest.raises(StoreFailure):
        contexts.create("x" * 201, "body")
    assert contexts.count() == 0


def test_get_not_found(contexts):
    assert contexts.get(9999) is None


def test_list_all_empty(contexts):
    assert contexts.list_all() == []


def test_list_all_newest_first(contexts):
    first = contexts.create("a", "first")
    second = contexts.create("b", "second")
    third = contexts.create("c", "third")
    assert [c.id for c in contexts.list_all()] == [third.id, second.id, first.id]


def test_count_embedded(contexts):
    contexts.create("a", "one", [1, 0, 0, 0])
    contexts.create("b", "two")
    assert contexts.count() == 2
    assert contexts.count_embedded() == 1


# ------------------------------------------------------------------
# Contexts: embeddings
# ------------------------------------------------------------------

def test_find_missing_embeddings_oldest_first(contexts):
    a = contexts.create("a", "one")
    contexts.create("b", "two", [1, 0, 0, 0])
    c = contexts.create("c", "three")
    assert [m.id for m in contexts.find_missing_embeddings()] == [a.id, c.id]


def test_update_embedding(contexts):
    c = contexts.create("a", "one")
    contexts.update_embedding(c.id, [0, 1, 0, 0])
    stored = contexts.get(c.id)
    assert stored.embedding == [0.0, 1.0, 0.0, 0.0]
    assert stored.updated_at >= c.updated_at
    assert contexts.find_missing_embeddings() == []


def test_update_embedding_not_found(contexts):
    with pytest.raises(NotFound):
        contexts.update_embedding(42, [0, 1, 0, 0])


def test_update_embedding_wrong_dimension(contexts):
    c = contexts.create("a", "one")
    with pytest.raises(InvalidInput):
        contexts.update_embedding(c.id, [0.0] * 5)
    assert contexts.get(c.id).embedding is None


# ------------------------------------------------------------------
# Contexts: nearest neighbour
# ------------------------------------------------------------------

def test_nearest_neighbor_empty(contexts):
    assert contexts.nearest_neighbor([1, 0, 0, 0]) is None


def test_nearest_neighbor_ignores_unembedded(contexts):
    contexts.create("a", "no vector")
    assert contexts.nearest_neighbor([1, 0, 0, 0]) is None


def test_nearest_neighbor_minimum_cosine_distance(contexts):
    contexts.create("x-axis", "x", [1, 0, 0, 0])
    y = contexts.create("y-axis", "y", [0, 1, 0, 0])
    contexts.create("z-axis", "z", [0, 0, 1, 0])
    match = contexts.nearest_neighbor([0.1, 0.9, 0.2, 0])
    assert match.id == y.id


def test_nearest_neighbor_uses_direction_not_magnitude(contexts):
    small = contexts.create("small", "s", [0.1, 0.1, 0, 0])
    contexts.create("large-off-axis", "l", [5, 0, 0, 0])
    match = contexts.nearest_neighbor([3, 3, 0, 0])
    assert match.id == small.id


def test_nearest_neighbor_tie_breaks_on_earliest(contexts):
    first = contexts.create("first", "a", [0, 0, 1, 0])
    contexts.create("second", "b", [0, 0, 1, 0])
    contexts.create("third", "c", [0, 0, 1, 0])
    assert contexts.nearest_neighbor([0, 0, 2, 0]).id == first.id


def test_nearest_neighbor_zero_query_returns_earliest(contexts):
    first = contexts.create("first", "a", [0, 1, 0, 0])
    contexts.create("second", "b", [1, 0, 0, 0])
    assert contexts.nearest_neighbor([0, 0, 0, 0]).id == first.id


def test_nearest_neighbor_zero_stored_vector_ranks_last(contexts):
    zero = contexts.create("zero", "z", [0, 0, 0, 0])
    contexts.create("orthogonal", "o", [0, 1, 0, 0])
    # Both are at distance 1.0; the older zero vector wins the tie.
    assert contexts.nearest_neighbor([1, 0, 0, 0]).id == zero.id
    aligned = contexts.create("aligned", "a", [1, 0.1, 0, 0])
    assert contexts.nearest_neighbor([1, 0, 0, 0]).id == aligned.id


def test_nearest_neighbor_wrong_dimension(contexts):
    contexts.create("a", "one", [1, 0, 0, 0])
    with pytest.raises(InvalidInput):
        contexts.nearest_neighbor([1, 0])


# ------------------------------------------------------------------
# Contexts: delete
# ------------------------------------------------------------------

def test_delete(contexts):
    c = contexts.create("a", "one")
    assert contexts.delete(c.id) is True
    assert contexts.get(c.id) is None


def test_delete_missing(contexts):
    assert contexts.delete(123) is False


# ------------------------------------------------------------------
# Chat history
# ------------------------------------------------------------------

def test_append_returns_message(contexts, history):
    c = contexts.create("Capital", "Paris.", [1, 0, 0, 0])
    m = history.append("Capital of France?", "Paris.", context_id=c.id)
    assert isinstance(m, ChatMessage)
    assert m.id is not None
    assert m.created_at is not None
    assert m.context_id == c.id


def test_append_without_context(history):
    m = history.append("q", "a")
    assert m.context_id is None


def test_list_all_resolves_context(contexts, history):
    c = contexts.create("Capital", "Paris.", [1, 0, 0, 0])
    history.append("q", "a", context_id=c.id)
    [m] = history.list_all()
    assert m.context is not None
    assert m.context.title == "Capital"


def test_list_all_history_newest_first(history):
    history.append("first?", "1")
    history.append("second?", "2")
    history.append("third?", "3")
    assert [m.question for m in history.list_all()] == ["third?", "second?", "first?"]


def test_list_all_history_limit(history):
    for i in range(5):
        history.append(f"q{i}", "a")
    assert [m.question for m in history.list_all(limit=2)] == ["q4", "q3"]


def test_deleted_context_leaves_null_reference(contexts, history):
    c = contexts.create("Capital", "Paris.", [1, 0, 0, 0])
    history.append("q", "a", context_id=c.id)
    contexts.delete(c.id)
    [m] = history.list_all()
    assert m.context_id is None
    assert m.context is None
    assert m.question == "q"


def test_history_count(history):
    assert history.count() == 0
    history.append("q", "a")
    assert history.count() == 1


def test_append_empty_answer_is_store_failure(history):
    with pytest.raises(StoreFailure):
        history.append("q", "")
