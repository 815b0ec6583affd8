"""Transcript text extraction for structured (JSON) and raw payloads.

Extraction is an ordered list of parse attempts. Each attempt either yields
text, fails outright with :class:`ExtractionError`, or declines so the next
attempt can run::

    structured  {"text": "...", "segments": [{"text": "..."}, ...]}
    minimal     {"text": "..."}
    raw         anything that does not start with "{"
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.errors import ExtractionError


@dataclass(frozen=True)
class StructuredTranscript:
    """Typed view of the structured transcript format."""

    text: str
    segments: list[str]


def _load_object(payload: str) -> dict[str, Any] | None:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError):
        return None
    return data if isinstance(data, dict) else None


def _optional_str(value: Any) -> str | None:
    """Return *value* as a string, ``""`` for null, or ``None`` on a type mismatch."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return None


def parse_structured(payload: str) -> StructuredTranscript | None:
    """Parse *payload* as a structured transcript, or return ``None``.

    Any shape other than an object with a string ``text`` and a list of
    ``segments`` objects with string ``text`` fields counts as a failed parse.
    Missing or null fields are treated as empty.
    """
    data = _load_object(payload)
    if data is None:
        return None

    text = _optional_str(data.get("text"))
    if text is None:
        return None

    raw_segments = data.get("segments")
    if raw_segments is None:
        raw_segments = []
    if not isinstance(raw_segments, list):
        return None

    segments: list[str] = []
    for seg in raw_segments:
        if not isinstance(seg, dict):
            return None
        seg_text = _optional_str(seg.get("text"))
        if seg_text is None:
            return None
        segments.append(seg_text)

    return StructuredTranscript(text=text, segments=segments)


def _from_structured(payload: str) -> str | None:
    transcript = parse_structured(payload)
    if transcript is None:
        return None
    if transcript.text:
        return transcript.text
    if transcript.segments:
        return " ".join(seg for seg in transcript.segments if seg)
    raise ExtractionError("no text found in transcript")


def _from_minimal(payload: str) -> str | None:
    data = _load_object(payload)
    if data is None:
        return None
    text = data.get("text")
    if isinstance(text, str) and text:
        return text
    return None


def _from_raw(payload: str) -> str | None:
    if payload.strip().startswith("{"):
        return None
    return payload


_ATTEMPTS: list[Callable[[str], str | None]] = [_from_structured, _from_minimal, _from_raw]


def extract_transcript_text(payload: str) -> str:
    """Return the plain text of a transcript payload.

    Args:
        payload: Transcript as stored by the transcription producer, either
            JSON or already-plain text.

    Returns:
        The extracted text. It may still be blank (e.g. every segment empty);
        callers validate emptiness themselves.

    Raises:
        ExtractionError: If no attempt could recover text.
    """
    for attempt in _ATTEMPTS:
        text = attempt(payload)
        if text is not None:
            return text
    raise ExtractionError("unable to extract text from transcript")
