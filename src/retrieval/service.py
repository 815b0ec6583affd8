"""RAG service: document storage, similarity retrieval, grounded chat and stats."""

from __future__ import annotations

import logging
from typing import Any

from src.errors import ProviderError
from src.ingestion.embeddings import EmbeddingClient
from src.ingestion.models import TranscriptionDocument, build_document_content
from src.ingestion.storage import JobStore
from src.ingestion.vector_store import VectorStoreClient
from src.retrieval.generation import ChatModelClient, build_chat_prompt

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "transcriptions"
DEFAULT_TOP_K = 5
COLLECTION_METADATA = {"description": "Transcription summaries and content"}


class RAGService:
    """Orchestrates both flows over one vector-store collection.

    Args:
        embeddings: Client used for documents and queries alike.
        vector_store: Client for the similarity index.
        llm: Chat-completion client used by :meth:`chat`.
        job_store: System of record, used for :meth:`stats`.
        default_model: Model used when :meth:`chat` is called without one.
        default_temperature: Temperature used when :meth:`chat` gets none.
        collection_name: Name of the single collection this service manages.
        top_k: Number of documents retrieved for :meth:`chat`.
    """

    def __init__(
        self,
        embeddings: EmbeddingClient,
        vector_store: VectorStoreClient,
        llm: ChatModelClient,
        job_store: JobStore,
        default_model: str,
        default_temperature: float = 0.7,
        collection_name: str = DEFAULT_COLLECTION,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        self.embeddings = embeddings
        self.vector_store = vector_store
        self.llm = llm
        self.job_store = job_store
        self.default_model = default_model
        self.default_temperature = default_temperature
        self.collection_name = collection_name
        self.top_k = top_k

        # The store may come up after us; a failure here must not abort startup.
        try:
            self.vector_store.ensure_collection(self.collection_name, COLLECTION_METADATA)
        except ProviderError as exc:
            logger.warning("Could not ensure collection %r: %s", self.collection_name, exc)

    def store_document(self, job_id: str, summary: str, transcript: str) -> TranscriptionDocument:
        """Embed and upsert the document for *job_id*, replacing any previous one."""
        content = build_document_content(summary, transcript)
        document = TranscriptionDocument(
            id=job_id,
            content=content,
            embedding=self.embeddings.embed(content),
            metadata={"transcription_id": job_id, "type": "summary"},
        )
        self.vector_store.upsert(
            self.collection_name,
            ids=[document.id],
            documents=[document.content],
            embeddings=[document.embedding],
            metadatas=[document.metadata],
        )
        return document

    def query(self, text: str, k: int = DEFAULT_TOP_K) -> list[str]:
        """Return up to *k* stored document texts, closest first."""
        if k <= 0:
            k = DEFAULT_TOP_K
        query_embedding = self.embeddings.embed(text)
        result = self.vector_store.query(self.collection_name, [query_embedding], k)
        return result.documents_for(0)

    def chat(self, query: str, model: str | None = None, temperature: float | None = None) -> str:
        """Answer *query* grounded on the retrieved documents."""
        contexts = self.query(query, self.top_k)
        logger.info("Retrieved %d context documents for chat", len(contexts))

        messages = [{"role": "user", "content": build_chat_prompt(query, contexts)}]
        return self.llm.complete(
            model or self.default_model,
            messages,
            self.default_temperature if temperature is None else temperature,
        )

    def stats(self, include_stored_count: bool = True) -> dict[str, Any]:
        """Report ingestion status.

        ``transcript_count`` comes from the system of record, not the vector
        store, and can drift from what was actually stored. ``stored_count``
        is the store's own count, ``None`` when it cannot be read. Callers that
        bound the store count separately pass ``include_stored_count=False``
        and use :meth:`stored_count`.
        """
        data: dict[str, Any] = {
            "status": "active",
            "transcript_count": self.job_store.count_completed_jobs(),
            "collection_name": self.collection_name,
        }
        if include_stored_count:
            data["stored_count"] = self.stored_count()
        return data

    def stored_count(self) -> int | None:
        """Number of documents in the collection, ``None`` when unavailable."""
        try:
            return self.vector_store.count(self.collection_name)
        except ProviderError as exc:
            logger.warning("Could not count vector store documents: %s", exc)
            return None
