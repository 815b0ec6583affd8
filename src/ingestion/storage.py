"""Supabase access to the ``transcription_jobs`` system of record."""

from __future__ import annotations

from typing import Any, cast

from postgrest import CountMethod
from supabase import Client, create_client

from src.errors import ProviderError
from src.ingestion.models import JobStatus, TranscriptionJob

JOBS_TABLE = "transcription_jobs"


def get_supabase_client(url: str, key: str) -> Client:
    """Create and return a Supabase client."""
    return create_client(url, key)


def _to_job(row: dict[str, Any]) -> TranscriptionJob:
    return TranscriptionJob(
        id=str(row["id"]),
        status=row.get("status") or "",
        transcript=row.get("transcript"),
        summary=row.get("summary"),
    )


class JobStore:
    """Read completed jobs and write back generated summaries.

    Supabase/PostgREST failures are re-raised as :class:`ProviderError` so the
    pipeline and the API treat the relational store like any other provider.
    """

    def __init__(self, client: Client, table: str = JOBS_TABLE) -> None:
        self._client = client
        self._table = table

    def _eligible(self, query: Any) -> Any:
        # Completed jobs with a non-empty transcript are eligible for ingestion.
        return (
            query.eq("status", JobStatus.COMPLETED.value)
            .not_.is_("transcript", "null")
            .neq("transcript", "")
        )

    def get_job(self, job_id: str) -> TranscriptionJob | None:
        """Fetch one job by id, or ``None`` if it does not exist."""
        try:
            result = (
                self._client.table(self._table)
                .select("id,status,transcript,summary")
                .eq("id", job_id)
                .execute()
            )
        except Exception as exc:
            raise ProviderError(f"Failed to fetch job {job_id}: {exc}") from exc

        rows = cast(list[dict[str, Any]], result.data)
        return _to_job(rows[0]) if rows else None

    def list_completed_jobs(self) -> list[TranscriptionJob]:
        """Return every completed job with a non-empty transcript."""
        try:
            query = self._client.table(self._table).select("id,status,transcript,summary")
            result = self._eligible(query).execute()
        except Exception as exc:
            raise ProviderError(f"Failed to fetch transcriptions: {exc}") from exc

        jobs = [_to_job(row) for row in cast(list[dict[str, Any]], result.data)]
        return [job for job in jobs if job.has_transcript]

    def count_completed_jobs(self) -> int:
        """Count jobs eligible for ingestion (authoritative for stats)."""
        try:
            query = self._client.table(self._table).select("id", count=CountMethod.exact)
            result = self._eligible(query).execute()
        except Exception as exc:
            raise ProviderError(f"Failed to count transcriptions: {exc}") from exc
        return result.count or 0

    def save_summary(self, job_id: str, summary: str) -> None:
        """Persist a generated summary on the job row."""
        try:
            self._client.table(self._table).update({"summary": summary}).eq("id", job_id).execute()
        except Exception as exc:
            raise ProviderError(f"Failed to save summary for job {job_id}: {exc}") from exc
