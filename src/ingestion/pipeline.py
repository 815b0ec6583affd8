"""Post-processing hook: extract -> summarize -> embed -> store, per completed job."""

from __future__ import annotations

import logging

from src.errors import ExtractionError, GenerationError, ProviderError, ValidationError
from src.ingestion.models import (
    BackfillReport,
    IngestionResult,
    IngestionStatus,
    SummaryStatus,
    TranscriptionJob,
)
from src.ingestion.parsers import extract_transcript_text
from src.ingestion.storage import JobStore
from src.ingestion.summarizer import Summarizer
from src.retrieval.service import RAGService

logger = logging.getLogger(__name__)


class PostProcessingHook:
    """Turn a completed transcription job into a stored RAG document.

    Failures are tiered: missing transcript text aborts the job, a failed
    summary only degrades it (the transcript is stored without one), and a
    failed vector-store write leaves the job without a RAG entry. Nothing is
    retried; re-running is safe because storage is keyed by job id.
    """

    def __init__(self, rag: RAGService, summarizer: Summarizer, job_store: JobStore) -> None:
        self.rag = rag
        self.summarizer = summarizer
        self.job_store = job_store

    def on_transcription_completed(self, job_id: str) -> IngestionResult:
        """Entry point for the job scheduler, called once per completion event."""
        job = self.job_store.get_job(job_id)
        if job is None:
            logger.warning("Job %s not found, skipping", job_id)
            return IngestionResult(job_id, IngestionStatus.SKIPPED, error="job not found")
        if not job.is_completed:
            logger.info("Job %s not completed (status: %s), skipping", job_id, job.status)
            return IngestionResult(job_id, IngestionStatus.SKIPPED, error=f"job status is {job.status}")
        if not job.has_transcript:
            logger.info("Job %s has no transcript, skipping", job_id)
            return IngestionResult(job_id, IngestionStatus.SKIPPED, error="job has no transcript")

        return self.ingest_job(job)

    def ingest_job(self, job: TranscriptionJob, regenerate_summary: bool = True) -> IngestionResult:
        """Run every stage for *job*.

        Args:
            job: A completed job read from the system of record.
            regenerate_summary: When False and the job already has a summary,
                reuse it instead of calling the LLM.
        """
        # 1. Extract
        try:
            text = extract_transcript_text(job.transcript or "")
        except ExtractionError as exc:
            logger.warning("Failed to extract text from transcript for job %s: %s", job.id, exc)
            return IngestionResult(job.id, IngestionStatus.ABORTED, error=str(exc))

        # 2. Validate
        if not text.strip():
            logger.warning("Job %s has empty transcript text", job.id)
            return IngestionResult(job.id, IngestionStatus.ABORTED, error="empty transcript text")

        logger.info("Processing job %s, transcript length: %d chars", job.id, len(text))

        # 3. Summarize (never blocks storage)
        summary, summary_status = self._summarize(job, text, regenerate_summary)

        # 4. Embed + store
        try:
            self.rag.store_document(job.id, summary, text)
        except (ProviderError, ValidationError) as exc:
            logger.error("Failed to store job %s in vector store: %s", job.id, exc)
            return IngestionResult(job.id, IngestionStatus.STORE_FAILED, summary_status, error=str(exc))

        logger.info("Stored job %s in RAG (summary: %s)", job.id, bool(summary))
        return IngestionResult(job.id, IngestionStatus.STORED, summary_status)

    def _summarize(
        self, job: TranscriptionJob, text: str, regenerate: bool
    ) -> tuple[str, SummaryStatus]:
        if job.summary and not regenerate:
            return job.summary, SummaryStatus.REUSED

        try:
            summary = self.summarizer.summarize(text)
        except (GenerationError, ProviderError) as exc:
            logger.warning(
                "Failed to generate summary for job %s: %s (storing transcript without summary)",
                job.id,
                exc,
            )
            return "", SummaryStatus.FAILED

        logger.info("Generated summary for job %s, length: %d", job.id, len(summary))
        try:
            self.job_store.save_summary(job.id, summary)
        except ProviderError as exc:
            logger.error("Failed to save summary for job %s: %s", job.id, exc)
        return summary, SummaryStatus.GENERATED

    def backfill(self, regenerate_summaries: bool = False) -> BackfillReport:
        """Ingest every historically completed job with a transcript.

        Stored summaries are reused unless *regenerate_summaries* is set.
        Summary failures do not count as failed items.

        Raises:
            ProviderError: If the completed jobs cannot be listed.
        """
        jobs = self.job_store.list_completed_jobs()
        report = BackfillReport(total=len(jobs))
        logger.info("Backfill started for %d completed jobs", report.total)

        for job in jobs:
            report.record(self.ingest_job(job, regenerate_summary=regenerate_summaries))

        logger.info(
            "Backfill completed: %d processed, %d failed of %d",
            report.processed,
            report.failed,
            report.total,
        )
        return report
