"""Tests for Settings and service wiring."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from src.config import Settings
from src.services import RAGServices, build_services

FULL_ENV = {
    "embedding_url": "http://ollama:11434",
    "embedding_model": "nomic-embed-text",
    "vector_store_url": "http://chroma:8000",
    "llm_base_url": "http://ollama:11434/v1",
    "llm_model": "llama3",
    "supabase_url": "https://example.supabase.co",
    "supabase_key": "service-role-key",
}


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **{**FULL_ENV, **overrides})  # type: ignore[arg-type]


class TestSettings:
    def test_defaults(self) -> None:
        s = _settings()
        assert s.rag_collection_name == "transcriptions"
        assert s.rag_top_k == 5
        assert s.summary_max_chars == 10_000
        assert s.chat_temperature == 0.7
        assert s.embedding_dimensions is None

    def test_nothing_missing(self) -> None:
        assert _settings().missing_rag_settings() == []

    def test_reports_missing_names(self) -> None:
        s = _settings(embedding_url="", supabase_key="  ")
        assert s.missing_rag_settings() == ["EMBEDDING_URL", "SUPABASE_KEY"]

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RAG_TOP_K", "3")
        monkeypatch.setenv("EMBEDDING_DIMENSIONS", "768")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.rag_top_k == 3
        assert s.embedding_dimensions == 768


class TestBuildServices:
    def test_missing_configuration_is_inactive(self) -> None:
        with patch("src.services.get_supabase_client") as factory:
            assert build_services(_settings(llm_model="")) is None
        factory.assert_not_called()

    def test_bad_supabase_credentials_are_inactive(self) -> None:
        with patch("src.services.get_supabase_client", side_effect=Exception("Invalid URL")):
            assert build_services(_settings()) is None

    def test_wires_shared_handles(self) -> None:
        vector_store = MagicMock()
        llm = MagicMock()
        with (
            patch("src.services.get_supabase_client", return_value=MagicMock()),
            patch("src.services.VectorStoreClient", return_value=vector_store),
            patch("src.services.ChatModelClient", return_value=llm),
        ):
            services = build_services(_settings(rag_collection_name="meetings", rag_top_k=3))

        assert isinstance(services, RAGServices)
        assert services.rag.collection_name == "meetings"
        assert services.rag.top_k == 3
        assert services.hook.rag is services.rag
        assert services.rag.job_store is services.job_store
        vector_store.ensure_collection.assert_called_once()

        services.close()
        vector_store.close.assert_called_once()
        llm.close.assert_called_once()
