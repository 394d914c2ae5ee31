"""OpenAI-compatible chat completion client.

Talks to Groq by default. The rest of the pipeline only sees
`complete(messages) -> str` or a CompletionError.
"""

from typing import Dict, List, Optional

import openai
from openai import AsyncOpenAI
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from ..config import get_settings
from ..errors import CompletionError, ConfigurationError
from ..log import get_logger

settings = get_settings()
logger = get_logger("llm")

TRANSIENT_ERRORS = (openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError)


class LLMClient:
    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.GROQ_API_KEY:
                raise ConfigurationError("API key not configured (set GROQ_API_KEY)")
            # _create owns retries
            self._client = AsyncOpenAI(
                api_key=settings.GROQ_API_KEY,
                base_url=settings.LLM_BASE_URL,
                max_retries=0,
                timeout=settings.LLM_TIMEOUT_SECONDS,
            )
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(2),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _create(self, messages: List[Dict[str, str]], model: str):
        return await self.client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
            top_p=settings.LLM_TOP_P,
        )

    async def complete(self, messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
        """Returns the answer text. Raises CompletionError for anything unusable."""
        model = model or settings.LLM_MODEL
        try:
            response = await self._create(messages, model)
        except openai.OpenAIError as e:
            logger.error(f"Completion API error: {e}")
            raise CompletionError(f"AI processing failed: {e}") from e

        if not response.choices:
            raise CompletionError("Completion returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise CompletionError("Completion returned empty content")
        return content

llm_client = LLMClient()
