"""Port: LLM chat client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from prompt_splicer.l1_entities.chat_message import ChatMessage


@dataclass(frozen=True)
class ChatResponse:
    """Response from an LLM chat call.

    ``content`` is None when the provider produced no text; ``finish_reason``
    carries the provider's stop reason (``'length'`` means truncated).
    """

    content: str | None
    finish_reason: str | None = None
    prompt_tokens: int = 0


class LLMClient(Protocol):
    """Abstract LLM client. Zero framework types leak through."""

    async def chat(self, model: str, messages: list[ChatMessage], **params: object) -> ChatResponse:
        """Single completion over a message list. Raises ProviderError on transport failure."""
        ...

    def check_connectivity(self) -> tuple[bool, str]:
        """Pre-flight connectivity check. Returns (ok, error_message)."""
        ...
