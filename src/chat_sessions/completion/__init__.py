from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionService(Protocol):
    max_tokens: int

    async def ask(self, session_id: str, conversation: str) -> tuple[str, int, int]:
        """Complete a conversation.

        Returns (response_text, prompt_tokens, response_tokens).
        """
        ...

    async def summarize(self, session_id: str, prompt: str) -> str:
        """Return a short label for the prompt."""
        ...


def create_completion_service(
    provider_name: str,
    api_key: str,
    *,
    model: str,
    max_tokens: int,
    temperature: float = 0.3,
    summary_max_tokens: int = 100,
) -> CompletionService:
    """Factory: create a CompletionService by provider name."""
    name = provider_name.strip().lower()
    kwargs = dict(
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        summary_max_tokens=summary_max_tokens,
    )
    if name == "openai":
        from chat_sessions.completion.openai_completion import OpenAICompletionService
        return OpenAICompletionService(api_key, **kwargs)
    if name == "anthropic":
        from chat_sessions.completion.anthropic_completion import AnthropicCompletionService
        return AnthropicCompletionService(api_key, **kwargs)
    raise ValueError(f"Unknown provider: {provider_name!r}. Supported: 'openai', 'anthropic'")


__all__ = [
    "CompletionService",
    "create_completion_service",
]
