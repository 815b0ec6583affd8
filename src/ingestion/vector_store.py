"""Client for a Chroma-compatible HTTP vector store, scoped to one collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from src.errors import ProviderError, ProviderTimeoutError, ValidationError


@dataclass
class QueryResult:
    """Similarity-search results, grouped per query vector (closest first)."""

    ids: list[list[str]] = field(default_factory=list)
    documents: list[list[str]] = field(default_factory=list)
    distances: list[list[float]] = field(default_factory=list)
    metadatas: list[list[dict[str, Any]]] = field(default_factory=list)

    def documents_for(self, index: int = 0) -> list[str]:
        """Return the non-null documents matched by query vector *index*."""
        if len(self.documents) <= index:
            return []
        return [doc for doc in self.documents[index] if doc is not None]


class VectorStoreClient:
    """Thin facade over the ``/api/v1/collections`` endpoints.

    Every operation raises :class:`ProviderError` carrying the store's status
    code and body on a non-success response. Nothing retries internally.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout)

    def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/api/v1/collections{path}"
        try:
            response = self._http.post(url, json=payload)
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(f"Vector store request to {path or '/'} timed out") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Vector store unreachable: {exc}") from exc

        if not response.is_success:
            raise ProviderError(
                f"Vector store error on {path or '/'}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(f"Failed to decode vector store response: {exc}") from exc

    def ensure_collection(self, name: str, metadata: dict[str, Any] | None = None) -> None:
        """Get or create the collection *name* (idempotent)."""
        payload: dict[str, Any] = {"name": name, "get_or_create": True}
        if metadata:
            payload["metadata"] = metadata
        self._post("", payload)

    def upsert(
        self,
        collection: str,
        ids: list[str],
        documents: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
    ) -> None:
        """Write entries keyed by id; an existing id is replaced.

        Raises:
            ValidationError: If the four sequences differ in length.
            ProviderError: If the store rejects the write.
        """
        lengths = {len(ids), len(documents), len(embeddings), len(metadatas)}
        if len(lengths) != 1:
            msg = (
                "ids, documents, embeddings and metadatas must have equal length "
                f"(got {len(ids)}, {len(documents)}, {len(embeddings)}, {len(metadatas)})"
            )
            raise ValidationError(msg)

        self._post(
            f"/{collection}/add",
            {
                "collection_name": collection,
                "ids": ids,
                "documents": documents,
                "embeddings": embeddings,
                "metadatas": metadatas,
            },
        )

    def query(
        self,
        collection: str,
        query_embeddings: list[list[float]],
        k: int,
        where: dict[str, Any] | None = None,
    ) -> QueryResult:
        """Return the *k* nearest entries for each query vector."""
        payload: dict[str, Any] = {
            "collection_name": collection,
            "query_embeddings": query_embeddings,
            "n_results": k,
        }
        if where:
            payload["where"] = where

        data = self._decode(self._post(f"/{collection}/query", payload))
        if not isinstance(data, dict):
            raise ProviderError("Unexpected vector store query response")

        return QueryResult(
            ids=data.get("ids") or [],
            documents=data.get("documents") or [],
            distances=data.get("distances") or [],
            metadatas=data.get("metadatas") or [],
        )

    def count(self, collection: str, where: dict[str, Any] | None = None) -> int:
        """Count entries in *collection*. Used for status reporting only."""
        payload: dict[str, Any] = {"collection_name": collection}
        if where:
            payload["where"] = where

        data = self._decode(self._post(f"/{collection}/count", payload))
        # Some store versions return a bare integer instead of {"count": n}.
        if isinstance(data, dict):
            data = data.get("count")
        if not isinstance(data, int):
            raise ProviderError(f"Unexpected vector store count response: {data!r}")
        return data

    def close(self) -> None:
        self._http.close()
