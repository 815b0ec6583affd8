"""RAG endpoints: grounded chat, status, backfill and the job-completion trigger."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.models import (
    BackfillResponse,
    ChatRequest,
    ChatResponse,
    IngestionResultResponse,
    StatsResponse,
)
from src.config import Settings, get_settings
from src.errors import RAGError
from src.services import RAGServices

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag")

NOT_INITIALIZED = "RAG service not initialized"


def get_services(request: Request) -> RAGServices | None:
    """Return the handles built at startup, or ``None`` in inactive mode."""
    return getattr(request.app.state, "services", None)


ServicesDep = Annotated[RAGServices | None, Depends(get_services)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def _require(services: RAGServices | None) -> RAGServices:
    if services is None:
        raise HTTPException(status_code=500, detail=NOT_INITIALIZED)
    return services


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, services: ServicesDep, settings: SettingsDep) -> ChatResponse:
    """Answer a question across all stored transcriptions."""
    rag = _require(services).rag

    try:
        answer = await asyncio.wait_for(
            asyncio.to_thread(rag.chat, request.query, request.model, request.temperature),
            timeout=settings.chat_timeout_seconds,
        )
    except TimeoutError as exc:
        logger.error("RAG chat timed out after %.0fs", settings.chat_timeout_seconds)
        raise HTTPException(status_code=500, detail="RAG chat timed out") from exc
    except RAGError as exc:
        logger.error("RAG chat failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ChatResponse(response=answer, query=request.query)


@router.get("/stats", response_model=StatsResponse, response_model_exclude_none=True)
async def stats(services: ServicesDep, settings: SettingsDep) -> StatsResponse:
    """Report whether RAG is active and how many transcripts are eligible."""
    if services is None:
        return StatsResponse(status="inactive", transcript_count=0, message=NOT_INITIALIZED)

    try:
        data = await asyncio.wait_for(
            asyncio.to_thread(services.rag.stats, include_stored_count=False),
            timeout=settings.stats_timeout_seconds,
        )
    except TimeoutError as exc:
        logger.error("RAG stats timed out after %.0fs", settings.stats_timeout_seconds)
        raise HTTPException(status_code=500, detail="RAG stats timed out") from exc
    except RAGError as exc:
        logger.error("RAG stats failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    # The vector store count is informational; a slow store must not fail the request.
    try:
        data["stored_count"] = await asyncio.wait_for(
            asyncio.to_thread(services.rag.stored_count),
            timeout=settings.stored_count_timeout_seconds,
        )
    except TimeoutError:
        logger.warning(
            "Vector store count timed out after %.1fs", settings.stored_count_timeout_seconds
        )
        data["stored_count"] = None

    return StatsResponse(**data)


@router.post("/backfill", response_model=BackfillResponse)
async def backfill(services: ServicesDep) -> BackfillResponse:
    """Ingest every completed transcription into the vector store.

    Safe to re-run: documents are keyed by job id, so existing entries are
    overwritten rather than duplicated.
    """
    hook = _require(services).hook

    try:
        report = await asyncio.to_thread(hook.backfill)
    except RAGError as exc:
        logger.error("Backfill failed: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch transcriptions") from exc

    return BackfillResponse(
        message="Backfill completed",
        total=report.total,
        processed=report.processed,
        failed=report.failed,
    )


@router.post("/jobs/{job_id}/completed", response_model=IngestionResultResponse)
async def job_completed(job_id: str, services: ServicesDep) -> IngestionResultResponse:
    """Post-processing trigger, called by the job scheduler when a job completes."""
    hook = _require(services).hook

    try:
        result = await asyncio.to_thread(hook.on_transcription_completed, job_id)
    except RAGError as exc:
        logger.error("Post-processing failed for job %s: %s", job_id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return IngestionResultResponse(
        job_id=result.job_id,
        status=result.status,
        summary_status=result.summary_status,
        error=result.error,
    )
