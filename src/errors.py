"""Error taxonomy shared by the ingestion and retrieval flows."""

from __future__ import annotations


class RAGError(Exception):
    """Base class for every error raised by the RAG pipeline."""


class ProviderError(RAGError):
    """A remote dependency was unreachable or returned a non-success response.

    Attributes:
        status_code: HTTP status returned by the provider, or ``None`` when the
            request never produced a response (connection refused, DNS, ...).
        body: Raw response body, when one was received.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is None:
            return message
        return f"{message} (status {self.status_code}: {self.body or ''})"


class ProviderTimeoutError(ProviderError):
    """A provider call did not finish within its timeout."""


class ExtractionError(RAGError):
    """Plain text could not be recovered from a transcript payload."""


class GenerationError(RAGError):
    """The language model returned no usable completion."""


class ValidationError(RAGError):
    """Caller input was malformed."""
