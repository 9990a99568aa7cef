"""Durable subset of AppState written to storage."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from prompt_splicer.l1_entities.app_state import AppState
from prompt_splicer.l1_entities.segment import Segment

# Transient UI flags are dropped on save.
_SEGMENT_EXCLUDE = {'is_editing', 'is_expanded'}


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_prompt: str = Field(default='', alias='originalPrompt')
    segments: list[Segment] = Field(default_factory=list)
    saved_at: float = Field(default_factory=time.time, alias='savedAt')

    @classmethod
    def from_state(cls, state: AppState) -> SessionSnapshot:
        return cls(
            original_prompt=state.original_prompt,
            segments=[s.model_copy() for s in state.segments],
        )

    def to_json(self) -> str:
        return self.model_dump_json(
            by_alias=True,
            exclude={'segments': {'__all__': _SEGMENT_EXCLUDE}},
        )
