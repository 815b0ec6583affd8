"""Backfill the vector store with every completed transcription job."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import get_settings
from src.errors import ProviderError
from src.services import build_services


def backfill(job_id: str | None = None, regenerate_summaries: bool = False) -> int:
    """Run the backfill sweep (or a single job) and return a process exit code."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    services = build_services(settings)
    if services is None:
        print("RAG service not initialized; check the configuration.", file=sys.stderr)
        return 1

    try:
        if job_id:
            result = services.hook.on_transcription_completed(job_id)
            detail = f" -- {result.error}" if result.error else ""
            print(f"{result.job_id}: {result.status} (summary: {result.summary_status}){detail}")
            return 0 if result.ok else 1

        report = services.hook.backfill(regenerate_summaries=regenerate_summaries)
    except ProviderError as e:
        print(f"Backfill failed: {e}", file=sys.stderr)
        return 1
    finally:
        services.close()

    for result in report.results:
        if not result.ok:
            print(f"  FAILED {result.job_id}: {result.status} -- {result.error}")

    print(f"\nDone! {report.processed}/{report.total} processed, {report.failed} failed.")
    return 0 if report.failed == 0 else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--job-id", default=None, help="Ingest a single job instead of all")
    parser.add_argument(
        "--regenerate-summaries",
        action="store_true",
        help="Summarize again even when a job already has a stored summary",
    )
    args = parser.parse_args()
    sys.exit(backfill(args.job_id, args.regenerate_summaries))
