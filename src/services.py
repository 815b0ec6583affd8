"""Process-wide service handles, built once at startup and injected explicitly."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.config import Settings
from src.ingestion.embeddings import EmbeddingClient
from src.ingestion.pipeline import PostProcessingHook
from src.ingestion.storage import JobStore, get_supabase_client
from src.ingestion.summarizer import Summarizer
from src.ingestion.vector_store import VectorStoreClient
from src.retrieval.generation import ChatModelClient
from src.retrieval.service import RAGService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RAGServices:
    """Immutable bundle of the handles shared by ingestion and retrieval."""

    rag: RAGService
    hook: PostProcessingHook
    job_store: JobStore

    def close(self) -> None:
        self.rag.embeddings.close()
        self.rag.vector_store.close()
        self.rag.llm.close()


def build_services(settings: Settings) -> RAGServices | None:
    """Build every RAG handle from *settings*.

    Returns ``None`` (inactive mode) when required configuration is missing,
    so the host process keeps running and ``/rag/stats`` can report it.
    """
    missing = settings.missing_rag_settings()
    if missing:
        logger.warning("RAG service inactive, missing configuration: %s", ", ".join(missing))
        return None

    try:
        supabase = get_supabase_client(settings.supabase_url, settings.supabase_key)
    except Exception:
        # create_client rejects malformed URLs and keys eagerly.
        logger.exception("RAG service inactive, could not create Supabase client")
        return None
    job_store = JobStore(supabase)

    embeddings = EmbeddingClient(
        settings.embedding_url,
        settings.embedding_model,
        timeout=settings.embedding_timeout_seconds,
        dimensions=settings.embedding_dimensions,
    )
    vector_store = VectorStoreClient(
        settings.vector_store_url, timeout=settings.vector_store_timeout_seconds
    )
    llm = ChatModelClient(
        settings.llm_base_url,
        api_key=settings.llm_api_key,
        timeout=settings.llm_timeout_seconds,
    )

    rag = RAGService(
        embeddings,
        vector_store,
        llm,
        job_store,
        default_model=settings.llm_model,
        default_temperature=settings.chat_temperature,
        collection_name=settings.rag_collection_name,
        top_k=settings.rag_top_k,
    )
    summarizer = Summarizer(
        llm,
        model=settings.llm_model,
        temperature=settings.summary_temperature,
        max_chars=settings.summary_max_chars,
    )
    hook = PostProcessingHook(rag, summarizer, job_store)

    logger.info("RAG service active (collection %r)", settings.rag_collection_name)
    return RAGServices(rag=rag, hook=hook, job_store=job_store)
