"""Answer synthesis: one LiteLLM completion grounded in a single context.

Synthesis never raises for upstream failures: the error is logged and a
human-readable fallback string is returned as the answer, so the
question/answer cycle always completes with something to show.
"""

from __future__ import annotations

import logging

from contextqa.errors import ProviderUnavailable, require_text
from contextqa.rag import llm_client

logger = logging.getLogger(__name__)

_ANSWER_PROMPT = """\
Based on the following context, answer the question concisely and accurately.
If the answer is not in the context, say so.

Context:
{context}

Question: {question}

Answer:"""

EMPTY_ANSWER_MESSAGE = "I couldn't generate an answer based on the context."

_DEFAULT_MODEL = "gemini/gemini-2.5-flash"


class AnswerSynthesizer:
    """Generate an answer to a question from one supporting passage.

    Args:
        model:      LiteLLM model string for answer generation.
        max_tokens: Maximum tokens in the generated answer.
        timeout:    Request timeout in seconds (single attempt, no retries).
    """

    def __init__(
        self,
        model: str = _DEFAULT_MODEL,
        max_tokens: int = 1024,
        timeout: float = 60.0,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def synthesize(self, question: str, supporting_text: str) -> str:
        """Return the model's answer, or a fallback string describing the failure.

        Raises:
            InvalidInput: If *question* is empty or whitespace-only.
        """
        require_text(question, "Question")
        try:
            answer = self._generate(question, supporting_text)
        except ProviderUnavailable as exc:
            logger.error("Error generating answer for question %r: %s", question, exc)
            return f"Error generating answer: {exc}"
        return answer.strip() or EMPTY_ANSWER_MESSAGE

    def build_prompt(self, question: str, supporting_text: str) -> str:
        return _ANSWER_PROMPT.format(context=supporting_text, question=question)

    def _generate(self, question: str, supporting_text: str) -> str:
        llm_client.validate_api_key(self._model)
        return llm_client.complete(
            self._model,
            [{"role": "user", "content": self.build_prompt(question, supporting_text)}],
            max_tokens=self._max_tokens,
            temperature=0.0,
            timeout=self._timeout,
            num_retries=0,
        )
