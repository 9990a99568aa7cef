"""SegmentStore — single source of truth for the prompt, its segments and the derived output."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping

from prompt_splicer.l1_entities.app_state import AppState, compute_derived_output
from prompt_splicer.l1_entities.errors import InvalidReorderError, SegmentNotFoundError
from prompt_splicer.l1_entities.segment import EDITABLE_FIELDS, FIELD_ALIASES, Segment, SegmentDraft, new_segment_id
from prompt_splicer.l1_entities.session_snapshot import SessionSnapshot

log = logging.getLogger('psp.store')

ChangeListener = Callable[[], None]


class SegmentStore:
    """Owns AppState. Every mutation recomputes ``derived_output`` before returning.

    ``generation`` increases whenever the prompt or the segment set is replaced
    or reordered; asynchronous callers capture it at dispatch and compare on
    completion to detect superseded results.
    """

    def __init__(self, state: AppState | None = None) -> None:
        self._state = state or AppState()
        self._generation = 0
        self._listeners: list[ChangeListener] = []
        self._recompute()

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback fired after every change to the prompt or segments."""
        self._listeners.append(listener)

    # --- queries ---

    def get_segment(self, segment_id: str) -> Segment | None:
        for seg in self._state.segments:
            if seg.id == segment_id:
                return seg
        return None

    def ordered_segments(self) -> list[Segment]:
        return sorted(self._state.segments, key=lambda s: s.order)

    # --- mutations ---

    def set_original_prompt(self, text: str) -> None:
        """Replace the prompt and drop all segments and any current error."""
        self._state.original_prompt = text
        self._state.segments = []
        self._state.error = None
        self._bump_generation()
        self._recompute()
        self._notify()

    def replace_segments(self, items: Iterable[SegmentDraft | Segment | Mapping]) -> list[Segment]:
        """Install a fresh segment list. Order follows list position."""
        segments: list[Segment] = []
        for index, item in enumerate(items):
            segments.append(self._coerce(item, index))
        self._state.segments = segments
        self._bump_generation()
        self._recompute()
        log.info('Installed %d segments (generation=%d)', len(segments), self._generation)
        self._notify()
        return segments

    def update_segment(self, segment_id: str, fields: Mapping[str, object], *, strict: bool = False) -> bool:
        """Merge *fields* into the matching segment.

        Field names or their camelCase aliases are accepted. Values are validated
        before anything is stored; a bad value raises ValidationError and leaves
        the segment unchanged. An unknown id is a no-op returning False, or raises
        SegmentNotFoundError when *strict* is set.
        """
        changes = {FIELD_ALIASES.get(name, name): value for name, value in fields.items()}
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f'Fields not editable: {", ".join(sorted(unknown))}')

        for index, seg in enumerate(self._state.segments):
            if seg.id == segment_id:
                updated = Segment.model_validate({**seg.model_dump(), **changes})
                self._state.segments[index] = updated
                self._recompute()
                self._notify()
                return True

        if strict:
            raise SegmentNotFoundError(f'No segment with id {segment_id!r}')
        log.debug('update_segment: no segment %s, ignored', segment_id)
        return False

    def reorder(self, new_order: Iterable[str | Segment]) -> None:
        """Reassign ``order`` by position in *new_order* (ids or segments).

        *new_order* must name every current segment exactly once.
        """
        ids = [item.id if isinstance(item, Segment) else item for item in new_order]
        current = {seg.id: seg for seg in self._state.segments}
        if len(ids) != len(set(ids)) or set(ids) != set(current):
            raise InvalidReorderError(
                f'Reorder must be a permutation of the {len(current)} current segment ids',
            )

        self._state.segments = [current[seg_id].model_copy(update={'order': pos}) for pos, seg_id in enumerate(ids)]
        self._bump_generation()
        self._recompute()
        self._notify()

    def move_segment(self, segment_id: str, position: int) -> None:
        """Move one segment to *position* in the canonical order (clamped)."""
        ids = [seg.id for seg in self.ordered_segments()]
        if segment_id not in ids:
            raise SegmentNotFoundError(f'No segment with id {segment_id!r}')
        ids.remove(segment_id)
        position = max(0, min(position, len(ids)))
        ids.insert(position, segment_id)
        self.reorder(ids)

    def restore(self, snapshot: SessionSnapshot) -> None:
        """Load a saved session, clearing any current error."""
        self._state.original_prompt = snapshot.original_prompt
        ordered = sorted(snapshot.segments, key=lambda s: s.order)
        self._state.segments = [seg.model_copy(update={'order': pos}) for pos, seg in enumerate(ordered)]
        self._state.error = None
        self._bump_generation()
        self._recompute()

    def set_loading(self, loading: bool) -> None:
        self._state.is_loading = loading

    def set_error(self, message: str) -> None:
        """Replace the current error; errors do not accumulate."""
        self._state.error = message

    def clear_error(self) -> None:
        self._state.error = None

    # --- internals ---

    @staticmethod
    def _coerce(item: SegmentDraft | Segment | Mapping, index: int) -> Segment:
        if isinstance(item, Segment):
            return item.model_copy(update={'order': index})
        if isinstance(item, SegmentDraft):
            data: dict = item.model_dump()
        else:
            data = dict(item)
        data.setdefault('id', new_segment_id())
        data.setdefault('title', f'Segment {index + 1}')
        data['order'] = index
        return Segment.model_validate(data)

    def _bump_generation(self) -> None:
        self._generation += 1

    def _recompute(self) -> None:
        self._state.derived_output = compute_derived_output(self._state.segments)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()
