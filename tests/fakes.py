"""In-memory fakes for the RAG collaborators (no network access)."""

from __future__ import annotations

from typing import Any

from src.errors import ProviderError
from src.ingestion.models import JobStatus, TranscriptionJob
from src.ingestion.vector_store import QueryResult


class FakeEmbeddings:
    """Deterministic 3-dimensional embeddings derived from the text."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.fail = False

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise ProviderError("embedding provider down", status_code=503, body="unavailable")
        return [float(len(text)), float(text.count(" ")), 1.0]

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(t) for t in texts]

    def close(self) -> None:
        pass


class FakeVectorStore:
    """Dict-backed collection with upsert-by-id semantics."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.fail_upsert = False
        self.fail_count = False
        self.query_documents: list[str] | None = None
        self.last_query: dict[str, Any] = {}

    def ensure_collection(self, name: str, metadata: dict[str, Any] | None = None) -> None:
        self.collections.setdefault(name, {})

    def upsert(
        self,
        collection: str,
        ids: list[str],
        documents: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
    ) -> None:
        if self.fail_upsert:
            raise ProviderError("vector store down", status_code=500, body="boom")
        entries = self.collections.setdefault(collection, {})
        for id_, doc, emb, meta in zip(ids, documents, embeddings, metadatas, strict=True):
            entries[id_] = {"document": doc, "embedding": emb, "metadata": meta}

    def query(
        self,
        collection: str,
        query_embeddings: list[list[float]],
        k: int,
        where: dict[str, Any] | None = None,
    ) -> QueryResult:
        self.last_query = {"collection": collection, "embeddings": query_embeddings, "k": k}
        if self.query_documents is not None:
            docs = self.query_documents[:k]
        else:
            docs = [e["document"] for e in self.collections.get(collection, {}).values()][:k]
        return QueryResult(ids=[[]], documents=[docs], distances=[[]], metadatas=[[]])

    def count(self, collection: str, where: dict[str, Any] | None = None) -> int:
        if self.fail_count:
            raise ProviderError("vector store down", status_code=500)
        return len(self.collections.get(collection, {}))

    def close(self) -> None:
        pass


class FakeLLM:
    """Records calls and returns canned completions (or raises)."""

    def __init__(self, reply: str = "A short summary.") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    def complete(self, model: str, messages: list[dict[str, Any]], temperature: float) -> str:
        self.calls.append({"model": model, "messages": messages, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.reply

    def close(self) -> None:
        pass


class FakeJobStore:
    """In-memory ``transcription_jobs`` table."""

    def __init__(self, jobs: list[TranscriptionJob] | None = None) -> None:
        self.jobs = {job.id: job for job in jobs or []}
        self.saved_summaries: dict[str, str] = {}
        self.fail_list = False
        self.fail_save = False

    def get_job(self, job_id: str) -> TranscriptionJob | None:
        return self.jobs.get(job_id)

    def list_completed_jobs(self) -> list[TranscriptionJob]:
        if self.fail_list:
            raise ProviderError("Failed to fetch transcriptions")
        return [j for j in self.jobs.values() if j.is_completed and j.has_transcript]

    def count_completed_jobs(self) -> int:
        return len([j for j in self.jobs.values() if j.is_completed and j.has_transcript])

    def save_summary(self, job_id: str, summary: str) -> None:
        if self.fail_save:
            raise ProviderError("Failed to save summary")
        self.saved_summaries[job_id] = summary
        if job_id in self.jobs:
            self.jobs[job_id].summary = summary


def completed_job(job_id: str, transcript: str | None, summary: str | None = None) -> TranscriptionJob:
    return TranscriptionJob(
        id=job_id, status=JobStatus.COMPLETED, transcript=transcript, summary=summary
    )
