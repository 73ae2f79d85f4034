"""Tests for the Ollama HTTP client and embedder, using httpx.MockTransport."""

import json

import httpx
import pytest

from docrag.clients import OllamaClient
from docrag.embedders import OllamaEmbedder
from docrag.errors import EmbeddingUnavailable, LLMUnavailable


def make_client(handler) -> OllamaClient:
    return OllamaClient("http://ollama.test", transport=httpx.MockTransport(handler))


class TestEmbeddings:
    def test_posts_model_and_prompt(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"embedding": [0.1, 0.2, 0.3]})

        vector = make_client(handler).embeddings("nomic-embed-text", "hello")

        assert vector == [0.1, 0.2, 0.3]
        assert seen["path"] == "/api/embeddings"
        assert seen["body"] == {"model": "nomic-embed-text", "prompt": "hello"}

    def test_error_status_is_unavailable(self):
        client = make_client(lambda request: httpx.Response(500, text="model not loaded"))
        with pytest.raises(EmbeddingUnavailable, match="500"):
            client.embeddings("m", "hello")

    def test_connection_error_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(EmbeddingUnavailable, match="unreachable"):
            make_client(handler).embeddings("m", "hello")

    @pytest.mark.parametrize(
        "payload",
        [{}, {"embedding": []}, {"embedding": "nope"}, {"embedding": ["a", "b"]}, ["not", "a", "dict"]],
    )
    def test_malformed_reply_is_unavailable(self, payload):
        client = make_client(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(EmbeddingUnavailable):
            client.embeddings("m", "hello")

    def test_non_json_reply_is_unavailable(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(EmbeddingUnavailable):
            client.embeddings("m", "hello")


class TestChat:
    def test_returns_message_content(self):
        def handler(request):
            body = json.loads(request.content)
            assert request.url.path == "/api/chat"
            assert body["stream"] is False
            assert body["messages"][0]["role"] == "system"
            return httpx.Response(200, json={"message": {"role": "assistant", "content": "Hi there"}, "done": True})

        reply = make_client(handler).chat("llama", [{"role": "system", "content": "s"}, {"role": "user", "content": "q"}])
        assert reply == "Hi there"

    def test_stream_yields_fragments(self):
        events = [
            {"message": {"role": "assistant", "content": "Hel"}, "done": False},
            {"message": {"role": "assistant", "content": "lo"}, "done": False},
            {"message": {"role": "assistant", "content": ""}, "done": True},
        ]
        body = "\n".join(json.dumps(e) for e in events) + "\n"
        client = make_client(lambda request: httpx.Response(200, content=body.encode()))

        assert list(client.chat_stream("llama", [{"role": "user", "content": "q"}])) == ["Hel", "lo"]

    def test_chat_error_is_llm_unavailable(self):
        client = make_client(lambda request: httpx.Response(404, json={"error": "model not found"}))
        with pytest.raises(LLMUnavailable, match="404"):
            client.chat("missing", [])

    def test_reply_without_message_is_llm_unavailable(self):
        client = make_client(lambda request: httpx.Response(200, json={"done": True}))
        with pytest.raises(LLMUnavailable):
            client.chat("llama", [])


class TestListModels:
    def test_returns_names(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"models": [{"name": "llama3.2:latest"}, {"name": "nomic-embed-text:latest"}]})
        )
        assert client.list_models() == ["llama3.2:latest", "nomic-embed-text:latest"]


class TestOllamaEmbedder:
    def test_batch_isolates_failures(self):
        def handler(request):
            prompt = json.loads(request.content)["prompt"]
            if prompt == "bad":
                return httpx.Response(500)
            return httpx.Response(200, json={"embedding": [float(len(prompt)), 1.0]})

        embedder = OllamaEmbedder(make_client(handler), "nomic-embed-text")
        results = embedder.embed_batch(["good", "bad", "fine!"])

        assert [r.ok for r in results] == [True, False, True]
        assert results[0].unwrap() == [4.0, 1.0]
        assert isinstance(results[1].error, EmbeddingUnavailable)
        with pytest.raises(EmbeddingUnavailable):
            results[1].unwrap()

    def test_default_model_name(self):
        assert OllamaEmbedder(OllamaClient()).model_name == "nomic-embed-text:latest"
