"""HTTP-level tests for the FastAPI routes, with services replaced by mocks."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from server.api_server import app
from shared.errors import DocumentNotFoundError, EmbeddingError, MisconfigurationError, RagQueryError
from shared.models.document import Document, SearchResult
from shared.models.rag import LLMProvider, RagMode, RagQueryResult, RagSource


@pytest.fixture
def document_service():
    mock = Mock()
    mock.add = AsyncMock(return_value=Document(id="id-1", content="hello", metadata={"title": "Greeting", "createdAt": "2024-01-01T00:00:00.000Z"}))
    mock.list = AsyncMock(return_value=[Document(id="id-1", content="hello", metadata={"title": "Greeting"})])
    mock.count = AsyncMock(return_value=1)
    mock.search = AsyncMock(return_value=[SearchResult(id="id-1", content="hello", metadata={}, distance=0.42)])
    mock.update = AsyncMock(return_value=Document(id="id-1", content="bye", metadata={"title": "Greeting"}))
    mock.delete = AsyncMock(return_value={"success": True, "id": "id-1"})
    return mock


@pytest.fixture
def rag_service():
    mock = Mock()
    mock.query = AsyncMock(return_value=RagQueryResult(
        answer="An answer",
        question="Why?",
        provider=LLMProvider.OPENAI,
        sources=[RagSource(id="id-1", content="hello...", title="Greeting", distance=0.42)],
        tokens_used=17,
        mode=RagMode.RAG,
        system_prompt="sys",
        user_prompt="usr",
    ))
    return mock


@pytest.fixture
def client(document_service, rag_service):
    app.state.document_service = document_service
    app.state.rag_service = rag_service
    return TestClient(app)


class TestDocumentRoutes:
    def test_add_document(self, client, document_service):
        response = client.post("/documents", json={"content": "hello", "title": "Greeting"})

        assert response.status_code == 201
        assert response.json()["metadata"]["title"] == "Greeting"
        document_service.add.assert_awaited_once_with("hello", "Greeting")

    def test_add_document_requires_content(self, client):
        assert client.post("/documents", json={"title": "No content"}).status_code == 422

    def test_list_documents(self, client):
        response = client.get("/documents")
        assert response.status_code == 200
        assert response.json() == [{"id": "id-1", "content": "hello", "metadata": {"title": "Greeting"}}]

    def test_count_documents(self, client):
        assert client.get("/documents/count").json() == {"count": 1}

    def test_search_defaults_limit_to_five(self, client, document_service):
        response = client.post("/documents/search", json={"query": "hi"})

        assert response.status_code == 200
        assert response.json()[0]["distance"] == 0.42
        document_service.search.assert_awaited_once_with("hi", 5)

    def test_update_document(self, client, document_service):
        response = client.put("/documents/id-1", json={"content": "bye"})

        assert response.status_code == 200
        document_service.update.assert_awaited_once_with("id-1", "bye", None)

    def test_update_missing_document_returns_404(self, client, document_service):
        document_service.update.side_effect = DocumentNotFoundError("nope")

        response = client.put("/documents/nope", json={"title": "x"})

        assert response.status_code == 404
        assert "nope" in response.json()["detail"]

    def test_delete_document(self, client):
        assert client.delete("/documents/id-1").json() == {"success": True, "id": "id-1"}

    def test_upstream_failure_returns_502(self, client, document_service):
        document_service.add.side_effect = EmbeddingError("Failed to generate embedding: down")

        response = client.post("/documents", json={"content": "hello"})

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to generate embedding: down"


class TestRagRoute:
    def test_query_uses_camel_case(self, client, rag_service):
        response = client.post("/rag/query", json={
            "question": "Why?",
            "contextLimit": 2,
            "provider": "llama",
            "conversationHistory": [{"role": "user", "content": "Hi"}],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["tokensUsed"] == 17
        assert body["mode"] == "rag"
        assert body["systemPrompt"] == "sys"
        assert body["sources"][0]["title"] == "Greeting"
        kwargs = rag_service.query.await_args.kwargs
        assert kwargs["context_limit"] == 2
        assert kwargs["provider"] == LLMProvider.LLAMA
        assert kwargs["conversation_history"][0].content == "Hi"

    def test_query_defaults(self, client, rag_service):
        client.post("/rag/query", json={"question": "Why?"})

        kwargs = rag_service.query.await_args.kwargs
        assert kwargs["provider"] == LLMProvider.OPENAI
        assert kwargs["context_limit"] is None
        assert kwargs["conversation_history"] == []

    def test_null_values_fall_back_to_defaults(self, client, rag_service):
        response = client.post("/rag/query", json={
            "question": "Why?",
            "contextLimit": 0,
            "provider": None,
            "conversationHistory": None,
        })

        assert response.status_code == 200
        kwargs = rag_service.query.await_args.kwargs
        assert kwargs["provider"] == LLMProvider.OPENAI
        assert kwargs["context_limit"] is None
        assert kwargs["conversation_history"] == []

    def test_negative_context_limit_is_rejected(self, client):
        response = client.post("/rag/query", json={"question": "Why?", "contextLimit": -1})
        assert response.status_code == 422

    def test_unknown_provider_is_rejected(self, client, rag_service):
        response = client.post("/rag/query", json={"question": "Why?", "provider": "gemini"})

        assert response.status_code == 422
        rag_service.query.assert_not_called()

    def test_invalid_history_role_is_rejected(self, client):
        response = client.post("/rag/query", json={"question": "Why?", "conversationHistory": [{"role": "system", "content": "x"}]})
        assert response.status_code == 422

    def test_failed_query_returns_502(self, client, rag_service):
        rag_service.query.side_effect = RagQueryError("RAG query failed: boom")

        response = client.post("/rag/query", json={"question": "Why?"})

        assert response.status_code == 502
        assert response.json() == {"detail": "RAG query failed: boom"}

    def test_misconfigured_provider_returns_503(self, client, rag_service):
        error = RagQueryError("RAG query failed: OPENAI_API_KEY is not set")
        error.__cause__ = MisconfigurationError("OPENAI_API_KEY is not set")
        rag_service.query.side_effect = error

        assert client.post("/rag/query", json={"question": "Why?"}).status_code == 503


class TestAppRoutes:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"

    def test_swagger_is_mounted_at_api(self, client):
        assert client.get("/api").status_code == 200
        assert "/rag/query" in client.get("/api-json").json()["paths"]

    def test_index_serves_single_page_client(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "RAG Vector DB" in response.text

    def test_cors_allows_configured_origin_only(self, client):
        allowed = client.options("/documents", headers={"Origin": "http://localhost:4200", "Access-Control-Request-Method": "GET"})
        denied = client.options("/documents", headers={"Origin": "http://evil.example", "Access-Control-Request-Method": "GET"})

        assert allowed.headers.get("access-control-allow-origin") == "http://localhost:4200"
        assert "access-control-allow-origin" not in denied.headers
