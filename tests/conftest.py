"""Pytest fixtures wiring the RAG components to in-memory fakes."""

from __future__ import annotations

import pytest

from src.errors import GenerationError
from src.ingestion.pipeline import PostProcessingHook
from src.ingestion.summarizer import Summarizer
from src.retrieval.service import RAGService
from tests.fakes import FakeEmbeddings, FakeJobStore, FakeLLM, FakeVectorStore


@pytest.fixture
def embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def vector_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def job_store() -> FakeJobStore:
    return FakeJobStore()


@pytest.fixture
def rag(
    embeddings: FakeEmbeddings,
    vector_store: FakeVectorStore,
    llm: FakeLLM,
    job_store: FakeJobStore,
) -> RAGService:
    return RAGService(
        embeddings,  # type: ignore[arg-type]
        vector_store,  # type: ignore[arg-type]
        llm,  # type: ignore[arg-type]
        job_store,  # type: ignore[arg-type]
        default_model="llama3",
    )


@pytest.fixture
def hook(rag: RAGService, llm: FakeLLM, job_store: FakeJobStore) -> PostProcessingHook:
    summarizer = Summarizer(llm, model="llama3")  # type: ignore[arg-type]
    return PostProcessingHook(rag, summarizer, job_store)  # type: ignore[arg-type]


@pytest.fixture
def failing_llm(llm: FakeLLM) -> FakeLLM:
    llm.error = GenerationError("no response from LLM")
    return llm
