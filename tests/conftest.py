"""
Pytest configuration and fixtures for the RAG vector bridge tests.

Provides a quiet logger, a HelperConfig with a clean environment, mocked
embed / vector store / LLM clients and a helper to route client requests
through httpx.MockTransport.
"""

import logging
import os
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

# keep test runs from writing logs/app.log before any app module is imported
os.environ.setdefault("LOG_TO_FILE", "false")

from shared.clients.vector.models.VectorResult import VectorGetResult, VectorQueryResult
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import AppSettings
from shared.models.rag import LLMProvider
from shared.clients.llm.models.LLMCompletion import LLMCompletion

ENV_VARS_TO_CLEAN = [
    "CHROMA_URL",
    "CHROMA_API_KEY",
    "CHROMA_TENANT",
    "CHROMA_DATABASE",
    "CHROMA_COLLECTION",
    "EMBED_ENGINE",
    "EMBEDDING_SERVICE_URL",
    "EMBEDDING_SERVICE_API_KEY",
    "OLLAMA_URL",
    "OLLAMA_API_KEY",
    "OLLAMA_MODEL",
    "OLLAMA_EMBED_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "VECTOR_ENGINE",
    "RAG_RELEVANCE_THRESHOLD",
    "RAG_HISTORY_WINDOW",
    "RAG_DEFAULT_CONTEXT_LIMIT",
]


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove every setting the application reads from the environment."""
    for var in ENV_VARS_TO_CLEAN:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def logger():
    return logging.getLogger("rag_vector_bridge.tests")


@pytest.fixture
def helper_config(clean_environment, logger):
    return HelperConfig(logger=logger)


@pytest.fixture
def settings():
    return AppSettings()


@pytest.fixture
def mock_transport():
    """Return a function that routes a booted client's requests to a handler.

    Usage::

        requests = mock_transport(client, handler)
    """

    def install(client, handler):
        seen: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client._client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        return seen

    return install


@pytest.fixture
def mock_embed_client():
    """Embed client whose vectors encode the text length, so calls are distinguishable."""
    mock = Mock()
    mock.embed = AsyncMock(side_effect=lambda text: [float(len(text)), 0.5, 0.25])
    mock.embed_batch = AsyncMock(side_effect=lambda texts: [[float(len(t)), 0.5, 0.25] for t in texts])
    return mock


@pytest.fixture
def mock_vector_client():
    mock = Mock()
    mock.do_add = AsyncMock(return_value=None)
    mock.do_upsert = AsyncMock(return_value=None)
    mock.do_delete = AsyncMock(return_value=None)
    mock.do_query = AsyncMock(return_value=VectorQueryResult())
    mock.do_get = AsyncMock(return_value=VectorGetResult())
    mock.do_get_all = AsyncMock(return_value=VectorGetResult())
    mock.do_count = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def mock_llm_clients():
    clients = {}
    for provider in LLMProvider:
        client = Mock()
        client.do_complete = AsyncMock(return_value=LLMCompletion(answer=f"answer from {provider.value}", tokens_used=42))
        clients[provider] = client
    return clients
