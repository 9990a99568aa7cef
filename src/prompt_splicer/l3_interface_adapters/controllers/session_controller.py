"""SessionController — orchestrates use cases and owns the editing session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from prompt_splicer.l1_entities.app_state import AppState
from prompt_splicer.l1_entities.config import AppConfig
from prompt_splicer.l1_entities.credentials import ProviderCredentials
from prompt_splicer.l1_entities.errors import SURFACED_ERRORS, SegmentNotFoundError
from prompt_splicer.l1_entities.model_profile import resolve_profile
from prompt_splicer.l1_entities.output_stats import OutputStats
from prompt_splicer.l1_entities.segment import Segment
from prompt_splicer.l1_entities.session_snapshot import SessionSnapshot
from prompt_splicer.l2_use_cases.ai_gateway import AIGateway, ProviderContext
from prompt_splicer.l2_use_cases.export_use_case import build_export, write_export
from prompt_splicer.l2_use_cases.operation_gate import OperationGate
from prompt_splicer.l2_use_cases.ports.clipboard import Clipboard
from prompt_splicer.l2_use_cases.ports.llm_client import LLMClient
from prompt_splicer.l2_use_cases.segment_store import SegmentStore
from prompt_splicer.l2_use_cases.session_persistence import SessionPersistence

log = logging.getLogger('psp.controller')

ClientFactory = Callable[[ProviderCredentials], LLMClient]


class SessionController:
    """Central orchestrator between the boundary layer and the core.

    Holds the provider handle, the single-slot operation gate and the
    SegmentStore. AI results are applied only if the store's generation is
    unchanged since dispatch; otherwise they are discarded.
    """

    def __init__(
        self,
        config: AppConfig,
        store: SegmentStore,
        gateway: AIGateway,
        persistence: SessionPersistence,
        clipboard: Clipboard,
        client_factory: ClientFactory,
    ) -> None:
        self._config = config
        self._store = store
        self._gateway = gateway
        self._persistence = persistence
        self._clipboard = clipboard
        self._client_factory = client_factory
        self._gate = OperationGate()
        self._provider: ProviderContext | None = None

    @property
    def state(self) -> AppState:
        return self._store.state

    @property
    def store(self) -> SegmentStore:
        return self._store

    @property
    def provider(self) -> ProviderContext | None:
        return self._provider

    # --- provider ---

    def configure_provider(self, credentials: ProviderCredentials) -> None:
        profile = resolve_profile(credentials.model)
        self._provider = ProviderContext(client=self._client_factory(credentials), profile=profile)
        log.info('Provider configured: model=%s key=%s', profile.name, credentials.masked_key())

    def clear_provider(self) -> None:
        self._provider = None

    # --- session ---

    def restore_session(self) -> bool:
        """Load the previous session if one was saved. Returns True if restored."""
        snapshot = self._persistence.load()
        if snapshot is None:
            return False
        self._store.restore(snapshot)
        log.info('Previous session loaded (%d segments)', len(snapshot.segments))
        return True

    def save_session(self) -> bool:
        return self._persistence.save(SessionSnapshot.from_state(self.state))

    # --- edits ---

    def set_original_prompt(self, text: str) -> None:
        self._store.set_original_prompt(text)

    def update_segment(self, segment_id: str, fields: Mapping[str, object], *, strict: bool = False) -> bool:
        return self._store.update_segment(segment_id, fields, strict=strict)

    def toggle_included(self, segment_id: str) -> bool:
        seg = self._require_segment(segment_id)
        self._store.update_segment(segment_id, {'is_included': not seg.is_included})
        return not seg.is_included

    def reorder(self, new_order: Iterable[str | Segment]) -> None:
        self._store.reorder(new_order)

    def move_segment(self, segment_id: str, position: int) -> None:
        self._store.move_segment(segment_id, position)

    def clear_error(self) -> None:
        self._store.clear_error()

    # --- AI operations ---

    async def break_into_segments(self) -> list[Segment] | None:
        """Segmentize the current prompt. Returns the installed segments, or None if
        the prompt is blank or the result was superseded.
        """
        prompt = self.state.original_prompt
        if not prompt.strip():
            return None

        with self._gate.hold('segmentize'):
            generation = self._begin()
            try:
                drafts = await self._gateway.segmentize(self._provider, prompt)
            except SURFACED_ERRORS as e:
                self._store.set_error(f'Failed to break prompt into segments: {e}')
                raise
            finally:
                self._store.set_loading(False)

        if self._store.generation != generation:
            log.info('Discarding segmentize result: generation %d superseded by %d', generation, self._store.generation)
            return None
        return self._store.replace_segments(drafts)

    async def make_concise(self, segment_id: str) -> str | None:
        """Condense one segment's content in place. Returns the new content, or None
        if the result was superseded by a newer edit.
        """
        seg = self._require_segment(segment_id)
        original = seg.content

        with self._gate.hold('condense'):
            generation = self._begin()
            try:
                condensed = await self._gateway.condense(self._provider, original)
            except SURFACED_ERRORS as e:
                self._store.set_error(f'Failed to make content concise: {e}')
                raise
            finally:
                self._store.set_loading(False)

        current = self._store.get_segment(segment_id)
        if self._store.generation != generation or current is None or current.content != original:
            log.info('Discarding condense result for %s: segment changed while in flight', segment_id)
            return None
        self._store.update_segment(segment_id, {'content': condensed})
        return condensed

    # --- output ---

    def stats(self) -> OutputStats:
        return OutputStats.from_state(self.state)

    def export_output(self, directory: Path | None = None) -> Path:
        artifact = build_export(self.state.derived_output, self._config.output.export_filename)
        return write_export(artifact, directory or Path(self._config.output.directory))

    def copy_output(self) -> str | None:
        """Copy the derived output. Returns a fallback file path when the clipboard is unavailable."""
        return self._clipboard.copy(self.state.derived_output)

    # --- internals ---

    def _begin(self) -> int:
        self._store.clear_error()
        self._store.set_loading(True)
        return self._store.generation

    def _require_segment(self, segment_id: str) -> Segment:
        seg = self._store.get_segment(segment_id)
        if seg is None:
            raise SegmentNotFoundError(f'No segment with id {segment_id!r}')
        return seg
