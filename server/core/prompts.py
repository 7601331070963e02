"""Prompt templates for the RAG query pipeline."""

GENERAL_SYSTEM_PROMPT = """You are a helpful assistant. Answer questions using your knowledge.
If you're not certain about something, acknowledge it."""

RAG_SYSTEM_PROMPT = """You are a helpful assistant that answers questions using both your general knowledge and the provided context from a knowledge base.

When answering:
1. Prioritize information from the provided documents when relevant
2. You can also use your general knowledge to provide comprehensive answers
3. If you use information from the documents, cite them (e.g., "According to Document 1...")
4. If the documents don't fully answer the question, supplement with your knowledge
5. Be clear about what comes from the documents vs. your general knowledge"""

RAG_USER_PROMPT = """Context from knowledge base:
{context}

Question: {question}"""

DOCUMENT_TAG = "[Document {index}]"
DOCUMENT_TAG_WITH_TITLE = "[Document {index}: {title}]"
