"""Segment entities — one titled, independently editable block of the prompt."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


def new_segment_id() -> str:
    return f'segment-{uuid.uuid4().hex[:12]}'


class SegmentDraft(BaseModel):
    """Title/content pair proposed by the segmentize operation, before ids and order exist."""

    title: str
    content: str


class Segment(BaseModel):
    """A block of the prompt with inclusion and order metadata.

    ``is_editing`` and ``is_expanded`` are UI-only flags and are not persisted.
    Field aliases follow the camelCase names used in stored sessions.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_segment_id)
    title: str = ''
    content: str = ''
    order: int = Field(default=0, ge=0)
    is_included: bool = Field(default=True, alias='isIncluded')
    is_editing: bool = Field(default=False, alias='isEditing')
    is_expanded: bool = Field(default=False, alias='isExpanded')


# Fields that can be merged by SegmentStore.update_segment.
EDITABLE_FIELDS = frozenset({'title', 'content', 'is_included', 'is_editing', 'is_expanded'})

# camelCase alias -> field name, so stored-session spellings are accepted on edit.
FIELD_ALIASES = {info.alias: name for name, info in Segment.model_fields.items() if info.alias}
