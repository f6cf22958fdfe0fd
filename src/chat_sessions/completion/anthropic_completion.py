import anthropic
from loguru import logger
from tenacity import retry

from chat_sessions.completion.common import default_retry_kwargs
from chat_sessions.completion.prompts import SUMMARIZE_PROMPT, SYSTEM_PROMPT

_RETRYABLE = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.APITimeoutError,
)


def _response_text(response) -> str:
    return "".join(block.text for block in response.content if block.type == "text")


class AnthropicCompletionService:
    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        max_tokens: int,
        temperature: float = 0.3,
        summary_max_tokens: int = 100,
    ):
        self._client = anthropic.AsyncAnthropic(api_key=api_key)
        self._model = model
        self.max_tokens = max_tokens
        self._temperature = temperature
        self._summary_max_tokens = summary_max_tokens

    @retry(**default_retry_kwargs(_RETRYABLE))
    async def ask(self, session_id: str, conversation: str) -> tuple[str, int, int]:
        logger.debug(
            f"API request: model={self._model}, max_tokens={self.max_tokens}, "
            f"session={session_id}, chars={len(conversation)}"
        )
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self.max_tokens,
            temperature=self._temperature,
            system=SYSTEM_PROMPT,
            metadata={"user_id": session_id},
            messages=[{"role": "user", "content": conversation}],
        )
        usage = response.usage
        logger.debug(
            f"API response: stop_reason={response.stop_reason}, "
            f"input_tokens={usage.input_tokens}, output_tokens={usage.output_tokens}"
        )
        return _response_text(response), usage.input_tokens, usage.output_tokens

    @retry(**default_retry_kwargs(_RETRYABLE))
    async def summarize(self, session_id: str, prompt: str) -> str:
        logger.debug(f"Summary API request: model={self._model}, session={session_id}")
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._summary_max_tokens,
            temperature=0.0,
            system=SUMMARIZE_PROMPT,
            metadata={"user_id": session_id},
            messages=[{"role": "user", "content": prompt}],
        )
        summary = _response_text(response).strip()
        logger.debug(f"Summary API response: {summary!r}")
        return summary
