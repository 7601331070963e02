"""RAG query service that embeds, searches, filters, prompts and completes.

If no stored document is close enough to the question, the query falls back
to general-knowledge mode and the LLM answers without context.
"""

from server.core.DocumentService import DocumentService
from server.core.prompts import (
    DOCUMENT_TAG,
    DOCUMENT_TAG_WITH_TITLE,
    GENERAL_SYSTEM_PROMPT,
    RAG_SYSTEM_PROMPT,
    RAG_USER_PROMPT,
)
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.errors import RagQueryError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import AppSettings
from shared.models.document import SearchResult
from shared.models.rag import ChatMessage, LLMProvider, RagMode, RagQueryResult, RagSource

SOURCE_PREVIEW_CHARS = 200


class RagService:
    """Answers questions with an LLM, augmented by documents from the vector collection."""

    def __init__(
        self,
        helper_config: HelperConfig,
        settings: AppSettings,
        document_service: DocumentService,
        llm_clients: dict[LLMProvider, LLMClientInterface],
    ) -> None:
        self.logging = helper_config.get_logger()
        self._settings = settings
        self._documents = document_service
        self._llm_clients = llm_clients

    ##########################################
    ################ CORE ####################
    ##########################################

    async def query(
        self,
        question: str,
        context_limit: int | None = None,
        provider: LLMProvider = LLMProvider.OPENAI,
        conversation_history: list[ChatMessage] | None = None,
    ) -> RagQueryResult:
        """Answer a question, using stored documents as context when any are relevant.

        Args:
            question (str): The user question.
            context_limit (int | None): Number of candidates fetched from the vector store.
            provider (LLMProvider): The LLM backend to use.
            conversation_history (list[ChatMessage] | None): Previous turns, oldest first.

        Returns:
            RagQueryResult: The answer with sources, mode, token usage and the prompts sent.

        Raises:
            RagQueryError: If any step fails. No partial result is returned.
        """
        limit = context_limit or self._settings.default_context_limit
        history = self.window_history(conversation_history or [])
        self.logging.info(
            "RAG query: provider=%s limit=%d history=%d question=%r",
            provider.value, limit, len(history), question[:80],
        )

        try:
            llm_client = self.get_llm_client(provider)
            candidates = await self._documents.search(question, limit)
            relevant_docs = self.filter_relevant(candidates)
            mode, system_prompt, user_prompt = self.build_prompts(question, relevant_docs)
            completion = await llm_client.do_complete(system_prompt, user_prompt, history)
        except Exception as e:
            self.logging.error("RAG query failed: %s", e)
            raise RagQueryError(f"RAG query failed: {e}") from e

        self.logging.info(
            "RAG query complete: mode=%s sources=%d tokens=%d",
            mode.value, len(relevant_docs), completion.tokens_used,
        )
        return RagQueryResult(
            answer=completion.answer,
            question=question,
            provider=provider,
            sources=self.build_sources(relevant_docs),
            tokens_used=completion.tokens_used,
            mode=mode,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
        )

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def get_llm_client(self, provider: LLMProvider) -> LLMClientInterface:
        """Return the client serving a provider.

        Raises:
            ValueError: If no client is registered for the provider.
        """
        client = self._llm_clients.get(provider)
        if client is None:
            raise ValueError(f"Unsupported LLM provider '{provider}'.")
        return client

    def window_history(self, history: list[ChatMessage]) -> list[ChatMessage]:
        """Keep only the most recent history messages, as configured by history_window."""
        window = self._settings.history_window
        return list(history[-window:]) if window > 0 else []

    def filter_relevant(self, candidates: list[SearchResult]) -> list[SearchResult]:
        """Keep candidates whose distance is strictly below the relevance threshold."""
        threshold = self._settings.relevance_threshold
        relevant = [doc for doc in candidates if doc.distance < threshold]
        self.logging.debug("%d of %d candidate(s) below distance %.3f.", len(relevant), len(candidates), threshold)
        return relevant

    def build_prompts(self, question: str, relevant_docs: list[SearchResult]) -> tuple[RagMode, str, str]:
        """Build system and user prompt for the given retrieval outcome.

        Returns:
            tuple[RagMode, str, str]: (mode, system_prompt, user_prompt)
        """
        if not relevant_docs:
            return RagMode.GENERAL, GENERAL_SYSTEM_PROMPT, question

        blocks = []
        for index, doc in enumerate(relevant_docs, start=1):
            title = doc.metadata.get("title")
            tag = DOCUMENT_TAG_WITH_TITLE.format(index=index, title=title) if title else DOCUMENT_TAG.format(index=index)
            blocks.append(f"{tag}\n{doc.content}")
        context = "\n\n".join(blocks)
        return RagMode.RAG, RAG_SYSTEM_PROMPT, RAG_USER_PROMPT.format(context=context, question=question)

    @staticmethod
    def build_sources(relevant_docs: list[SearchResult]) -> list[RagSource]:
        return [
            RagSource(
                id=doc.id,
                content=doc.content[:SOURCE_PREVIEW_CHARS] + "...",
                title=doc.metadata.get("title"),
                distance=doc.distance,
            )
            for doc in relevant_docs
        ]
