from typing import Optional

import structlog
from openai import AsyncOpenAI, OpenAIError

from ..core.config import Settings, get_settings
from ..core.exceptions import LanguageModelError
from ..core.interfaces import Completion, LanguageModel

logger = structlog.get_logger(__name__)

class OpenAIChatModel(LanguageModel):
    """Chat-completions backed ``LanguageModel``.

    Each prompt is sent as a single user message. The client is built on
    first use and never retries; the caller decides what a failure means.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self.model_name = self.settings.AI_MODEL
        self.temperature = self.settings.AI_TEMPERATURE
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                timeout=self.settings.AI_REQUEST_TIMEOUT,
                max_retries=0,
            )
        return self._client

    async def invoke(self, prompt: str) -> Completion:
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error("llm_request_failed", model=self.model_name, error=str(e))
            raise LanguageModelError("Language model request failed") from e

        if not response.choices or response.choices[0].message.content is None:
            raise LanguageModelError("Language model returned no content")

        tokens = response.usage.total_tokens if response.usage else 0
        logger.debug("llm_request_completed", model=self.model_name, tokens=tokens)
        return Completion(content=response.choices[0].message.content, token_usage=tokens)
