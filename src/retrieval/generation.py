"""Chat-completion client and the grounded RAG prompt."""

from __future__ import annotations

from typing import Any

from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, OpenAI

from src.errors import GenerationError, ProviderError, ProviderTimeoutError

RAG_PREAMBLE = (
    "You are a helpful assistant that answers questions based on the following "
    "transcription summaries and transcripts."
)
RAG_INSTRUCTION = "Please provide a helpful answer based on the context above."


def build_chat_prompt(question: str, contexts: list[str]) -> str:
    """Compose the single-message prompt used by :meth:`RAGService.chat`.

    Retrieved documents are rendered as a numbered list with a blank line
    between entries. An empty context list still produces a valid prompt.
    """
    parts = [f"{RAG_PREAMBLE}\n\n", "Relevant context:\n"]
    for i, context in enumerate(contexts):
        parts.append(f"{i + 1}. {context}\n\n")
    parts.append(f"\nUser question: {question}")
    parts.append(f"\n\n{RAG_INSTRUCTION}")
    return "".join(parts)


class ChatModelClient:
    """Call an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 60.0,
        client: OpenAI | None = None,
    ) -> None:
        # Local OpenAI-compatible servers ignore the key, but the SDK requires one.
        self._client = client or OpenAI(
            base_url=base_url,
            api_key=api_key or "not-needed",
            timeout=timeout,
            max_retries=0,
        )

    def complete(self, model: str, messages: list[dict[str, Any]], temperature: float) -> str:
        """Return the content of the first choice.

        Raises:
            ProviderError: The endpoint is unreachable, returned an error, or
                answered with a body that is not a chat completion.
            GenerationError: The response carried no choices.
        """
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=messages,  # type: ignore[arg-type]
                temperature=temperature,
            )
        except APITimeoutError as exc:
            raise ProviderTimeoutError(f"LLM request timed out: {exc}") from exc
        except APIStatusError as exc:
            raise ProviderError(
                "LLM request failed", status_code=exc.status_code, body=exc.message
            ) from exc
        except APIConnectionError as exc:
            raise ProviderError(f"LLM unreachable: {exc}") from exc
        except APIError as exc:
            raise ProviderError(f"LLM request failed: {exc}") from exc

        # Non-JSON bodies (e.g. a gateway error page) come back as plain strings.
        choices = getattr(response, "choices", None)
        if not isinstance(choices, list):
            raise ProviderError("Failed to decode LLM response", body=str(response)[:500])
        if not choices:
            raise GenerationError("no response from LLM")
        return choices[0].message.content or ""

    def close(self) -> None:
        self._client.close()
