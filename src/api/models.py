"""Pydantic request/response schemas for the RAG API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from src.ingestion.models import IngestionStatus, SummaryStatus


class ChatRequest(BaseModel):
    """Request body for the /rag/chat endpoint."""

    query: str = Field(min_length=1)
    model: str = Field(min_length=1)
    temperature: float | None = None


class ChatResponse(BaseModel):
    """Response body for the /rag/chat endpoint."""

    response: str
    query: str


class StatsResponse(BaseModel):
    """Response body for the /rag/stats endpoint.

    ``transcript_count`` counts eligible jobs in the system of record;
    ``stored_count`` is the vector store's own count, when available. Failures
    are reported as HTTP 500, not as a status value.
    """

    status: Literal["active", "inactive"]
    transcript_count: int = 0
    collection_name: str | None = None
    stored_count: int | None = None
    message: str | None = None


class BackfillResponse(BaseModel):
    """Response body for the /rag/backfill endpoint."""

    message: str
    total: int
    processed: int
    failed: int


class IngestionResultResponse(BaseModel):
    """Response body for the /rag/jobs/{job_id}/completed endpoint."""

    job_id: str
    status: IngestionStatus
    summary_status: SummaryStatus
    error: str | None = None
