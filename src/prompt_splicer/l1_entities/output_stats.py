"""Summary counts for the derived output."""

from __future__ import annotations

from dataclasses import dataclass

from prompt_splicer.l1_entities.app_state import AppState


@dataclass(frozen=True)
class OutputStats:
    characters: int
    words: int
    lines: int
    segment_count: int
    included_count: int

    @classmethod
    def from_state(cls, state: AppState) -> OutputStats:
        text = state.derived_output
        return cls(
            characters=len(text),
            words=len(text.split()),
            lines=len(text.split('\n')),
            segment_count=len(state.segments),
            included_count=sum(1 for s in state.segments if s.is_included),
        )
