import openai
from loguru import logger
from tenacity import retry

from chat_sessions.completion.common import default_retry_kwargs
from chat_sessions.completion.prompts import SUMMARIZE_PROMPT, SYSTEM_PROMPT

_RETRYABLE = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.APITimeoutError,
)


class OpenAICompletionService:
    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        max_tokens: int,
        temperature: float = 0.3,
        summary_max_tokens: int = 100,
    ):
        self._client = openai.AsyncOpenAI(api_key=api_key)
        self._model = model
        self.max_tokens = max_tokens
        self._temperature = temperature
        self._summary_max_tokens = summary_max_tokens

    @retry(**default_retry_kwargs(_RETRYABLE))
    async def ask(self, session_id: str, conversation: str) -> tuple[str, int, int]:
        """Send the conversation as a single user turn.

        Returns (response_text, prompt_tokens, completion_tokens).
        """
        logger.debug(
            f"API request: model={self._model}, max_tokens={self.max_tokens}, "
            f"session={session_id}, chars={len(conversation)}"
        )
        response = await self._client.chat.completions.create(
            model=self._model,
            max_tokens=self.max_tokens,
            temperature=self._temperature,
            user=session_id,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": conversation},
            ],
        )
        text = response.choices[0].message.content or ""
        usage = response.usage
        prompt_tokens = usage.prompt_tokens if usage else 0
        completion_tokens = usage.completion_tokens if usage else 0
        logger.debug(
            f"API response: finish_reason={response.choices[0].finish_reason}, "
            f"prompt_tokens={prompt_tokens}, completion_tokens={completion_tokens}"
        )
        return text, prompt_tokens, completion_tokens

    @retry(**default_retry_kwargs(_RETRYABLE))
    async def summarize(self, session_id: str, prompt: str) -> str:
        logger.debug(f"Summary API request: model={self._model}, session={session_id}")
        response = await self._client.chat.completions.create(
            model=self._model,
            max_tokens=self._summary_max_tokens,
            temperature=0.0,
            user=session_id,
            messages=[
                {"role": "system", "content": SUMMARIZE_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        summary = (response.choices[0].message.content or "").strip()
        logger.debug(f"Summary API response: {summary!r}")
        return summary
