"""LLM summarization of transcripts before they are indexed."""

from __future__ import annotations

from src.errors import GenerationError
from src.retrieval.generation import ChatModelClient

SUMMARY_PROMPT = "Please provide a concise summary of the following transcription:\n\n{text}"
TRUNCATION_MARKER = "... [truncated]"


class Summarizer:
    """Produce a short abstract of a transcript.

    Only the summarization input is truncated to ``max_chars``; the transcript
    that gets stored is never touched here.
    """

    def __init__(
        self,
        llm: ChatModelClient,
        model: str,
        temperature: float = 0.7,
        max_chars: int = 10_000,
    ) -> None:
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_chars = max_chars

    def build_prompt(self, text: str) -> str:
        if len(text) > self.max_chars:
            text = text[: self.max_chars] + TRUNCATION_MARKER
        return SUMMARY_PROMPT.format(text=text)

    def summarize(self, text: str) -> str:
        """Return the summary of *text*.

        Raises:
            GenerationError: The model returned no choices or an empty completion.
            ProviderError: The model endpoint failed.
        """
        messages = [{"role": "user", "content": self.build_prompt(text)}]
        summary = self.llm.complete(self.model, messages, self.temperature)
        if not summary.strip():
            raise GenerationError("LLM returned an empty summary")
        return summary
