"""Gateway: OpenAI-compatible LLM client — implements LLMClient port.

Works with any OpenAI-compatible API: OpenAI, Gemini, Groq, Together, vLLM, etc.
"""

from __future__ import annotations

import openai

from prompt_splicer.l1_entities.chat_message import ChatMessage
from prompt_splicer.l1_entities.errors import ProviderError
from prompt_splicer.l2_use_cases.ports.llm_client import ChatResponse


class OpenAICompatLLMClient:
    """Wraps openai.AsyncOpenAI to implement the LLMClient protocol."""

    def __init__(self, api_key: str | None = None, base_url: str = 'https://api.openai.com/v1') -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._client: openai.AsyncOpenAI | None = None

    def _async_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self._api_key, base_url=self._base_url, max_retries=0)
        return self._client

    async def chat(self, model: str, messages: list[ChatMessage], **params: object) -> ChatResponse:
        try:
            resp = await self._async_client().chat.completions.create(
                model=model,
                messages=[m.to_payload() for m in messages],  # ty: ignore[invalid-argument-type] -- dict satisfies ChatCompletionMessageParam at runtime
                **params,
            )
        except openai.AuthenticationError as e:
            raise ProviderError(f'Authentication failed: {e}') from e
        except openai.RateLimitError as e:
            raise ProviderError(f'Rate limited: {e}') from e
        except openai.APIError as e:
            raise ProviderError(f'OpenAI API error: {e}') from e

        if not resp.choices:
            return ChatResponse(content=None)
        choice = resp.choices[0]
        prompt_tokens = resp.usage.prompt_tokens if resp.usage else 0
        return ChatResponse(
            content=choice.message.content if choice.message else None,
            finish_reason=choice.finish_reason,
            prompt_tokens=prompt_tokens,
        )

    def check_connectivity(self) -> tuple[bool, str]:
        try:
            client = openai.OpenAI(api_key=self._api_key, base_url=self._base_url)
            client.models.list()
            return True, ''
        except openai.AuthenticationError as e:
            return False, f'Authentication failed: {e}'
        except Exception as e:
            return False, f'Cannot connect to OpenAI-compatible API: {e}'
