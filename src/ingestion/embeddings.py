"""Embedding client for an Ollama-compatible ``/api/embeddings`` endpoint."""

from __future__ import annotations

import httpx

from src.errors import ProviderError, ProviderTimeoutError


class EmbeddingClient:
    """Convert text to vectors using a remote embedding provider.

    No retries happen here; retry policy belongs to the caller.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        dimensions: int | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.dimensions = dimensions
        self._http = http_client or httpx.Client(timeout=timeout)

    def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            ProviderError: Provider unreachable, non-2xx response, undecodable
                payload, or a vector of unexpected length.
        """
        url = f"{self.base_url}/api/embeddings"
        try:
            response = self._http.post(url, json={"model": self.model, "prompt": text})
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(f"Embedding request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Embedding provider unreachable: {exc}") from exc

        if not response.is_success:
            raise ProviderError(
                "Embedding provider error", status_code=response.status_code, body=response.text
            )

        try:
            embedding = [float(x) for x in response.json()["embedding"]]
        except (ValueError, KeyError, TypeError) as exc:
            raise ProviderError(f"Failed to decode embedding response: {exc}") from exc

        if not embedding:
            raise ProviderError("Embedding provider returned an empty embedding")
        if self.dimensions is not None and len(embedding) != self.dimensions:
            msg = f"Embedding has {len(embedding)} dimensions, expected {self.dimensions}"
            raise ProviderError(msg)

        return embedding

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed texts one by one; the first failure aborts the whole batch."""
        return [self.embed(text) for text in texts]

    def close(self) -> None:
        self._http.close()
