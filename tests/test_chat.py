"""
Unit tests for the chatbot and the request handlers.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from chatbot.chat import (
    BLOCKED_MESSAGE,
    DEFAULT_SYSTEM_MESSAGE,
    FALLBACK_ANSWER,
    NOT_FOUND_MESSAGE,
    RAGChatbot,
    build_messages,
)
from chatbot.endpoint import (
    CHAT_FAILED_MESSAGE,
    RETRIEVAL_FAILED_MESSAGE,
    handle_chat,
    handle_retrieval,
)
from database.supabase_client import SupabaseVectorStore
from rag.errors import CompletionTimeout, EmbeddingFailure
from rag.guardrail import GuardrailFilter
from rag.retriever import RetrievalStatus, Retriever

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_chatbot(retriever, content="Red and blue.", error=None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        client.chat.completions.create.return_value = completion(content)
    return RAGChatbot(retriever, client=client, model="gpt-4o-mini"), client


class TestBuildMessages:

    def test_default_system_message(self):
        messages = build_messages("What colors?", ["chunk a", "chunk b"])

        assert messages == [
            {"role": "system", "content": DEFAULT_SYSTEM_MESSAGE},
            {"role": "system", "content": "Here is the context:\nchunk a\n---\nchunk b"},
            {"role": "user", "content": "Q: What colors?"},
        ]

    def test_custom_system_message(self):
        messages = build_messages("What colors?", ["chunk a"], system_message="Be brief.")

        assert messages[0] == {"role": "system", "content": "Be brief."}


class TestRAGChatbot:

    def test_answers_from_context(self, make_retriever):
        chatbot, client = make_chatbot(make_retriever([0.9, 0.8]))

        answer = chatbot.ask("What colors are available?")

        assert answer.text == "Red and blue."
        assert answer.status is RetrievalStatus.FOUND
        assert answer.sources == ["chunk 0 scored 0.9", "chunk 1 scored 0.8"]
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert "chunk 0 scored 0.9\n---\nchunk 1 scored 0.8" in kwargs["messages"][1]["content"]

    def test_blocked_query_skips_every_remote_call(self, make_retriever, fake_embedder):
        chatbot, client = make_chatbot(make_retriever([0.9]))

        answer = chatbot.ask("What is the BMW lease rate?")

        assert answer.text == BLOCKED_MESSAGE
        assert fake_embedder.calls == []
        client.chat.completions.create.assert_not_called()

    def test_no_relevant_content_skips_completion(self, make_retriever):
        chatbot, client = make_chatbot(make_retriever([0.2]))

        answer = chatbot.ask("What colors are available?")

        assert answer.text == NOT_FOUND_MESSAGE
        assert answer.status is RetrievalStatus.NO_RELEVANT_CONTENT
        client.chat.completions.create.assert_not_called()

    def test_empty_completion_falls_back(self, make_retriever):
        chatbot, _ = make_chatbot(make_retriever([0.9]), content=None)

        assert chatbot.ask("What colors are available?").text == FALLBACK_ANSWER

    def test_completion_timeout(self, make_retriever):
        chatbot, _ = make_chatbot(
            make_retriever([0.9]), error=openai.APITimeoutError(request=REQUEST)
        )

        with pytest.raises(CompletionTimeout):
            chatbot.ask("What colors are available?")

    def test_stream_answer_short_circuits_blocked(self, make_retriever):
        chatbot, client = make_chatbot(make_retriever([0.9]))

        assert list(chatbot.stream_answer("bmw prices")) == [BLOCKED_MESSAGE]
        client.chat.completions.create.assert_not_called()

    def test_stream_answer_yields_deltas(self, make_retriever):
        chatbot, client = make_chatbot(make_retriever([0.9]))
        client.chat.completions.create.return_value = iter(
            [
                SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content="Red "))]),
                SimpleNamespace(choices=[]),
                SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=None))]),
                SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content="and blue."))]),
            ]
        )

        assert "".join(chatbot.stream_answer("What colors are available?")) == "Red and blue."


class TestHandleRetrieval:

    def test_found(self, make_retriever):
        response = handle_retrieval({"query": "What colors?"}, make_retriever([0.9, 0.8, 0.76]))

        assert response.status_code == 200
        assert response.body == {
            "chunks": ["chunk 0 scored 0.9", "chunk 1 scored 0.8", "chunk 2 scored 0.76"],
            "blocked": False,
        }

    def test_blocked(self, make_retriever, fake_embedder):
        response = handle_retrieval({"query": "What is the BMW lease rate?"}, make_retriever([0.9]))

        assert response.status_code == 200
        assert response.body == {"chunks": [], "blocked": True, "message": BLOCKED_MESSAGE}
        assert fake_embedder.calls == []

    def test_no_relevant_content(self, make_retriever):
        response = handle_retrieval({"query": "What colors?"}, make_retriever([]))

        assert response.status_code == 200
        assert response.body == {"chunks": [], "blocked": False, "message": NOT_FOUND_MESSAGE}

    @pytest.mark.parametrize("payload", [None, {}, {"query": ""}, {"query": "  "}, {"query": 5}])
    def test_missing_query(self, make_retriever, payload):
        response = handle_retrieval(payload, make_retriever([0.9]))

        assert response.status_code == 400
        assert response.body["kind"] == "validation_error"

    def test_remote_failure_is_generic(self, make_retriever, fake_embedder):
        retriever = make_retriever([0.9])
        fake_embedder.embed_text = MagicMock(side_effect=EmbeddingFailure("secret upstream detail"))

        response = handle_retrieval({"query": "What colors?"}, retriever)

        assert response.status_code == 500
        assert response.body == {"error": RETRIEVAL_FAILED_MESSAGE, "kind": "retrieval_failed"}
        assert "chunks" not in response.body

    def test_malformed_stored_row_is_generic_failure(self, fake_embedder):
        client = MagicMock()
        scan = client.table.return_value.select.return_value.order.return_value.range.return_value
        scan.execute.return_value = SimpleNamespace(
            data=[{"id": 1, "chunk": "Honda Civic 2021 available", "embedding": "[0.1,"}]
        )
        store = SupabaseVectorStore(client=client, table="vectors", dimension=2)
        retriever = Retriever(fake_embedder, store, GuardrailFilter(["bmw"]))

        response = handle_retrieval({"query": "Which sedans?"}, retriever)

        assert response.status_code == 500
        assert response.body == {"error": RETRIEVAL_FAILED_MESSAGE, "kind": "retrieval_failed"}


class TestHandleChat:

    def test_answer(self, make_retriever):
        chatbot, _ = make_chatbot(make_retriever([0.9]))

        response = handle_chat({"query": "What colors?", "systemMessage": "Be brief."}, chatbot)

        assert response.status_code == 200
        assert response.body == {"aiResponse": "Red and blue.", "blocked": False}

    def test_accepts_prompt_field(self, make_retriever):
        chatbot, _ = make_chatbot(make_retriever([0.9]))

        response = handle_chat({"prompt": "What colors?"}, chatbot)

        assert response.status_code == 200

    def test_blocked(self, make_retriever):
        chatbot, _ = make_chatbot(make_retriever([0.9]))

        response = handle_chat({"query": "who is the ceo of bmw"}, chatbot)

        assert response.body == {"aiResponse": BLOCKED_MESSAGE, "blocked": True}

    def test_invalid_system_message(self, make_retriever):
        chatbot, _ = make_chatbot(make_retriever([0.9]))

        response = handle_chat({"query": "What colors?", "systemMessage": 3}, chatbot)

        assert response.status_code == 400

    def test_completion_failure(self, make_retriever):
        chatbot, _ = make_chatbot(
            make_retriever([0.9]), error=openai.APIConnectionError(request=REQUEST)
        )

        response = handle_chat({"query": "What colors?"}, chatbot)

        assert response.status_code == 500
        assert response.body["error"] == CHAT_FAILED_MESSAGE
