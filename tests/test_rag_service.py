"""Unit tests for the RAG query pipeline (RagService)."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from server.core.RagService import RagService
from server.core.prompts import GENERAL_SYSTEM_PROMPT, RAG_SYSTEM_PROMPT
from shared.errors import EmbeddingError, LLMError, MisconfigurationError, RagQueryError
from shared.models.config import AppSettings
from shared.models.document import SearchResult
from shared.models.rag import ChatMessage, LLMProvider, RagMode


def make_hit(doc_id: str, distance: float, content: str = "content", title: str | None = "Title") -> SearchResult:
    metadata = {"title": title} if title else {}
    return SearchResult(id=doc_id, content=content, metadata=metadata, distance=distance)


@pytest.fixture
def document_service():
    mock = Mock()
    mock.search = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def rag_service(helper_config, settings, document_service, mock_llm_clients):
    return RagService(
        helper_config=helper_config,
        settings=settings,
        document_service=document_service,
        llm_clients=mock_llm_clients,
    )


class TestRelevanceFilter:
    """Test the strict distance threshold."""

    def test_threshold_boundary(self, rag_service):
        hits = [make_hit("exact", 1.2), make_hit("below", 1.1999), make_hit("far", 1.5)]
        assert [doc.id for doc in rag_service.filter_relevant(hits)] == ["below"]

    def test_threshold_is_configurable(self, helper_config, document_service, mock_llm_clients):
        service = RagService(helper_config, AppSettings(relevance_threshold=0.5), document_service, mock_llm_clients)
        assert service.filter_relevant([make_hit("a", 0.6), make_hit("b", 0.4)])[0].id == "b"


class TestModeSelection:
    """Test general vs rag mode and prompt construction."""

    def test_no_matches_uses_general_mode(self, rag_service, document_service, mock_llm_clients):
        document_service.search.return_value = [make_hit("far", 1.7)]

        result = asyncio.run(rag_service.query("What is RAG?"))

        assert result.mode == RagMode.GENERAL
        assert result.sources == []
        assert result.system_prompt == GENERAL_SYSTEM_PROMPT
        assert result.user_prompt == "What is RAG?"
        mock_llm_clients[LLMProvider.OPENAI].do_complete.assert_awaited_once_with(GENERAL_SYSTEM_PROMPT, "What is RAG?", [])

    def test_matches_use_rag_mode(self, rag_service, document_service):
        document_service.search.return_value = [
            make_hit("a", 0.3, "Chroma is a vector database.", "Chroma"),
            make_hit("b", 0.9, "Untitled text.", None),
            make_hit("c", 1.4, "Irrelevant."),
        ]

        result = asyncio.run(rag_service.query("What is Chroma?"))

        assert result.mode == RagMode.RAG
        assert len(result.sources) == 2
        assert result.system_prompt == RAG_SYSTEM_PROMPT
        assert result.user_prompt == (
            "Context from knowledge base:\n"
            "[Document 1: Chroma]\nChroma is a vector database.\n\n"
            "[Document 2]\nUntitled text.\n\n"
            "Question: What is Chroma?"
        )

    def test_sources_are_truncated(self, rag_service, document_service):
        document_service.search.return_value = [make_hit("a", 0.1, "x" * 500)]

        source = asyncio.run(rag_service.query("q")).sources[0]

        assert source.content == "x" * 200 + "..."
        assert source.title == "Title"
        assert source.distance == 0.1

    def test_context_limit_defaults_to_settings(self, rag_service, document_service):
        asyncio.run(rag_service.query("q"))
        document_service.search.assert_awaited_once_with("q", 3)

        document_service.search.reset_mock()
        asyncio.run(rag_service.query("q", context_limit=7))
        document_service.search.assert_awaited_once_with("q", 7)


class TestProviderRouting:
    """Test that exactly the selected provider is called."""

    def test_llama_routes_to_ollama_only(self, rag_service, mock_llm_clients):
        result = asyncio.run(rag_service.query("q", provider=LLMProvider.LLAMA))

        assert result.provider == LLMProvider.LLAMA
        assert result.answer == "answer from llama"
        mock_llm_clients[LLMProvider.LLAMA].do_complete.assert_awaited_once()
        mock_llm_clients[LLMProvider.OPENAI].do_complete.assert_not_called()

    def test_openai_routes_to_openai_only(self, rag_service, mock_llm_clients):
        result = asyncio.run(rag_service.query("q", provider=LLMProvider.OPENAI))

        assert result.tokens_used == 42
        mock_llm_clients[LLMProvider.OPENAI].do_complete.assert_awaited_once()
        mock_llm_clients[LLMProvider.LLAMA].do_complete.assert_not_called()

    def test_missing_provider_client_is_rejected(self, helper_config, settings, document_service, mock_llm_clients):
        del mock_llm_clients[LLMProvider.LLAMA]
        service = RagService(helper_config, settings, document_service, mock_llm_clients)
        with pytest.raises(RagQueryError, match="Unsupported LLM provider"):
            asyncio.run(service.query("q", provider=LLMProvider.LLAMA))
        document_service.search.assert_not_called()


class TestHistoryWindow:
    """Test that only the most recent turns are forwarded."""

    def test_twelve_turns_are_cut_to_ten(self, rag_service, mock_llm_clients):
        history = [ChatMessage(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}") for i in range(12)]

        asyncio.run(rag_service.query("q", conversation_history=history))

        sent_history = mock_llm_clients[LLMProvider.OPENAI].do_complete.await_args.args[2]
        assert [msg.content for msg in sent_history] == [f"turn {i}" for i in range(2, 12)]

    def test_window_is_configurable(self, helper_config, document_service, mock_llm_clients):
        service = RagService(helper_config, AppSettings(history_window=5), document_service, mock_llm_clients)
        history = [ChatMessage(role="user", content=f"turn {i}") for i in range(12)]

        asyncio.run(service.query("q", provider=LLMProvider.LLAMA, conversation_history=history))

        assert len(mock_llm_clients[LLMProvider.LLAMA].do_complete.await_args.args[2]) == 5


class TestFailures:
    """Test that every failure is wrapped into RagQueryError."""

    @pytest.mark.parametrize("error", [EmbeddingError("embedding down"), RuntimeError("unexpected")])
    def test_search_failure_is_wrapped(self, rag_service, document_service, error):
        document_service.search.side_effect = error
        with pytest.raises(RagQueryError, match="RAG query failed") as exc_info:
            asyncio.run(rag_service.query("q"))
        assert exc_info.value.__cause__ is error

    def test_llm_failure_is_wrapped_without_fallback(self, rag_service, mock_llm_clients):
        mock_llm_clients[LLMProvider.OPENAI].do_complete.side_effect = LLMError("rate limited", status_code=429)
        with pytest.raises(RagQueryError, match="rate limited"):
            asyncio.run(rag_service.query("q"))
        mock_llm_clients[LLMProvider.LLAMA].do_complete.assert_not_called()

    def test_misconfiguration_is_wrapped(self, rag_service, mock_llm_clients):
        mock_llm_clients[LLMProvider.OPENAI].do_complete.side_effect = MisconfigurationError("OPENAI_API_KEY is not set")
        with pytest.raises(RagQueryError) as exc_info:
            asyncio.run(rag_service.query("q"))
        assert isinstance(exc_info.value.__cause__, MisconfigurationError)
