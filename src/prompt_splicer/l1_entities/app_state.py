"""Application state entity."""

from __future__ import annotations

from pydantic import BaseModel, Field

from prompt_splicer.l1_entities.segment import Segment

SEGMENT_SEPARATOR = '\n\n'


class AppState(BaseModel):
    """Mutable state for one editing session. Owned by SegmentStore."""

    original_prompt: str = ''
    segments: list[Segment] = Field(default_factory=list)
    derived_output: str = ''
    is_loading: bool = False
    error: str | None = None


def compute_derived_output(segments: list[Segment]) -> str:
    """Join the content of included segments in ascending order with a blank line."""
    included = sorted((s for s in segments if s.is_included), key=lambda s: s.order)
    return SEGMENT_SEPARATOR.join(s.content for s in included)
