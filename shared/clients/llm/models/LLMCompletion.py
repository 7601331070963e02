from pydantic import BaseModel


class LLMCompletion(BaseModel):
    """Normalised reply of an LLM backend.

    Attributes:
        answer:      The generated text, or the fallback literal if the backend returned none.
        tokens_used: Total tokens reported by the backend, 0 if it reports none.
    """

    answer: str
    tokens_used: int = 0
