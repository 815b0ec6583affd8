from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # Embedding provider (Ollama-compatible)
    embedding_url: str = ""
    embedding_model: str = ""
    embedding_dimensions: int | None = None

    # Vector store (Chroma-compatible HTTP API)
    vector_store_url: str = ""

    # Generative model (OpenAI-compatible chat completions)
    llm_base_url: str = ""
    llm_model: str = ""
    llm_api_key: str = ""

    # Supabase (system of record for transcription jobs)
    supabase_url: str = ""
    supabase_key: str = ""

    # RAG behaviour
    rag_collection_name: str = "transcriptions"
    rag_top_k: int = 5
    summary_max_chars: int = 10_000
    summary_temperature: float = 0.7
    chat_temperature: float = 0.7

    # Timeouts (seconds)
    embedding_timeout_seconds: float = 60.0
    vector_store_timeout_seconds: float = 30.0
    llm_timeout_seconds: float = 60.0
    chat_timeout_seconds: float = 120.0
    stats_timeout_seconds: float = 10.0
    stored_count_timeout_seconds: float = 2.0

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def missing_rag_settings(self) -> list[str]:
        """Return the names of required settings that are unset.

        An empty list means the RAG pipeline can be activated.
        """
        required = {
            "EMBEDDING_URL": self.embedding_url,
            "EMBEDDING_MODEL": self.embedding_model,
            "VECTOR_STORE_URL": self.vector_store_url,
            "LLM_BASE_URL": self.llm_base_url,
            "LLM_MODEL": self.llm_model,
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_KEY": self.supabase_key,
        }
        return [name for name, value in required.items() if not value.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
