"""Data models for the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class JobStatus(StrEnum):
    """Lifecycle states of a transcription job in the system of record."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TranscriptionJob:
    """A row of the ``transcription_jobs`` table, as far as ingestion needs it."""

    id: str
    status: str
    transcript: str | None = None
    summary: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == JobStatus.COMPLETED

    @property
    def has_transcript(self) -> bool:
        return bool(self.transcript)


@dataclass
class TranscriptionDocument:
    """The single vector-store entry kept per completed job."""

    id: str
    content: str
    embedding: list[float]
    metadata: dict[str, str] = field(default_factory=dict)


def build_document_content(summary: str, transcript: str) -> str:
    """Render the text that is embedded and returned as retrieved context."""
    if summary:
        return f"Summary: {summary}\n\nTranscript: {transcript}"
    return f"Transcript: {transcript}"


class IngestionStatus(StrEnum):
    """Terminal outcome of one ingestion run."""

    STORED = "stored"
    SKIPPED = "skipped"  # job missing, not completed, or without transcript
    ABORTED = "aborted"  # no usable transcript text
    STORE_FAILED = "store_failed"


class SummaryStatus(StrEnum):
    """What happened at the summarization stage."""

    GENERATED = "generated"
    REUSED = "reused"
    FAILED = "failed"
    NOT_ATTEMPTED = "not_attempted"


@dataclass
class IngestionResult:
    """Outcome of the post-processing hook for a single job.

    ``status`` carries the must-abort failures; ``summary_status`` carries the
    recoverable one. A job whose summary failed but whose document was stored
    is a degraded success, not a failure.
    """

    job_id: str
    status: IngestionStatus
    summary_status: SummaryStatus = SummaryStatus.NOT_ATTEMPTED
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is IngestionStatus.STORED

    @property
    def degraded(self) -> bool:
        return self.ok and self.summary_status is SummaryStatus.FAILED


@dataclass
class BackfillReport:
    """Aggregate counts of a backfill sweep."""

    total: int = 0
    processed: int = 0
    failed: int = 0
    results: list[IngestionResult] = field(default_factory=list)

    def record(self, result: IngestionResult) -> None:
        self.results.append(result)
        if result.ok:
            self.processed += 1
        elif result.status in (IngestionStatus.ABORTED, IngestionStatus.STORE_FAILED):
            self.failed += 1
