"""
Shared test fixtures for pytest.
"""

import pytest

from database.memory_store import InMemoryVectorStore
from rag.guardrail import GuardrailFilter
from rag.retriever import Retriever
from tests.fakes import FakeEmbedder, unit_vector_with_score


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def store():
    return InMemoryVectorStore(dimension=2)


@pytest.fixture
def make_retriever(fake_embedder, store):
    def _make(scores=(), threshold=0.75, top_k=3, denylist=("bmw",)):
        for i, score in enumerate(scores):
            store.insert(f"chunk {i} scored {score}", unit_vector_with_score(score))
        return Retriever(
            fake_embedder,
            store,
            GuardrailFilter(denylist),
            threshold=threshold,
            top_k=top_k,
        )

    return _make
