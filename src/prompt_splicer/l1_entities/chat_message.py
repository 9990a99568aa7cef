"""Chat message entity — one turn of a segmentize or condense request."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal['system', 'user', 'assistant']


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_payload(self) -> dict[str, str]:
        """Wire form expected by chat-completions endpoints."""
        return {'role': self.role, 'content': self.content}
