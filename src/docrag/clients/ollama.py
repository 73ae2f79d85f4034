"""HTTP client for the Ollama API (embeddings, chat, model listing)."""

import json
import logging
from typing import Iterator, Optional

import httpx

from docrag.errors import EmbeddingUnavailable, LLMUnavailable

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:11434"


class OllamaClient:
    """Thin synchronous wrapper around the Ollama REST endpoints.

    The underlying httpx.Client is created lazily so constructing the client
    never touches the network. Pass ``transport`` to route requests through a
    custom httpx transport (e.g. httpx.MockTransport in tests).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http: httpx.Client | None = None

    @property
    def http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "OllamaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def embeddings(self, model: str, prompt: str) -> list[float]:
        """Embed one text.

        Raises:
            EmbeddingUnavailable: On transport errors, non-2xx replies or a
                reply without a non-empty numeric ``embedding`` array
        """
        try:
            response = self.http.post("/api/embeddings", json={"model": model, "prompt": prompt})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise EmbeddingUnavailable(
                f"Ollama returned {e.response.status_code} for embeddings ({model})"
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingUnavailable(f"Ollama unreachable at {self.base_url}: {e}") from e
        except ValueError as e:
            raise EmbeddingUnavailable(f"Malformed embeddings reply: {e}") from e

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise EmbeddingUnavailable("Embeddings reply has no 'embedding' array")
        try:
            return [float(x) for x in embedding]
        except (TypeError, ValueError) as e:
            raise EmbeddingUnavailable(f"Embedding contains non-numeric values: {e}") from e

    def chat(self, model: str, messages: list[dict[str, str]]) -> str:
        """Send a non-streaming chat request and return the reply text.

        Raises:
            LLMUnavailable: On transport errors or malformed replies
        """
        payload = {"model": model, "messages": messages, "stream": False}
        try:
            response = self.http.post("/api/chat", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise LLMUnavailable(f"Ollama returned {e.response.status_code} for chat ({model})") from e
        except httpx.HTTPError as e:
            raise LLMUnavailable(f"Ollama unreachable at {self.base_url}: {e}") from e
        except ValueError as e:
            raise LLMUnavailable(f"Malformed chat reply: {e}") from e

        try:
            return data["message"]["content"]
        except (KeyError, TypeError) as e:
            raise LLMUnavailable("Chat reply has no message content") from e

    def chat_stream(self, model: str, messages: list[dict[str, str]]) -> Iterator[str]:
        """Stream a chat reply, yielding content fragments as they arrive.

        Ollama streams newline-delimited JSON objects; the last one has
        ``"done": true``.
        """
        payload = {"model": model, "messages": messages, "stream": True}
        try:
            with self.http.stream("POST", "/api/chat", json=payload) as response:
                response.raise_for_status()
                for line in response.iter_lines():
                    if not line.strip():
                        continue
                    try:
                        event = json.loads(line)
                    except json.JSONDecodeError as e:
                        raise LLMUnavailable(f"Malformed stream event: {line[:80]!r}") from e
                    fragment = (event.get("message") or {}).get("content", "")
                    if fragment:
                        yield fragment
                    if event.get("done"):
                        break
        except httpx.HTTPStatusError as e:
            raise LLMUnavailable(f"Ollama returned {e.response.status_code} for chat ({model})") from e
        except httpx.HTTPError as e:
            raise LLMUnavailable(f"Ollama unreachable at {self.base_url}: {e}") from e

    def list_models(self) -> list[str]:
        """Return the names of models installed on the Ollama server."""
        try:
            response = self.http.get("/api/tags")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise LLMUnavailable(f"Failed to fetch models from {self.base_url}: {e}") from e
        except ValueError as e:
            raise LLMUnavailable(f"Malformed tags reply: {e}") from e
        return [m.get("name", "") for m in data.get("models", [])]
