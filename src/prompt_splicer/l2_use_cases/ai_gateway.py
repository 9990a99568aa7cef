"""Use case: the two AI operations (segmentize, condense), fronted by ResultCache."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass

from prompt_splicer.l1_entities.chat_message import ChatMessage
from prompt_splicer.l1_entities.errors import (
    MalformedResponseError,
    NotInitializedError,
    ProviderError,
    ProviderTimeoutError,
    TruncatedError,
)
from prompt_splicer.l1_entities.model_profile import ModelProfile, Operation
from prompt_splicer.l1_entities.segment import SegmentDraft
from prompt_splicer.l2_use_cases.ports.llm_client import ChatResponse, LLMClient
from prompt_splicer.l2_use_cases.result_cache import ResultCache, make_cache_key
from prompt_splicer.l2_use_cases.utils.prompt_builder import build_condense_messages, build_segmentize_messages

log = logging.getLogger('psp.ai')

_FENCE_RE = re.compile(r'^```(?:json)?\s*\n(.*?)\n?```\s*$', re.DOTALL)


@dataclass(frozen=True)
class ProviderContext:
    """Configured provider handle: the client plus the model profile it is used with."""

    client: LLMClient
    profile: ModelProfile


class AIGateway:
    """Runs segmentize/condense against the provider, consulting the cache first.

    Failures surface as NotInitializedError, ProviderError (ProviderTimeoutError
    on deadline), MalformedResponseError or TruncatedError. Nothing is retried.
    """

    def __init__(self, cache: ResultCache, *, timeout_seconds: float | None = None) -> None:
        self._cache = cache
        self._timeout = timeout_seconds

    async def segmentize(self, provider: ProviderContext | None, prompt: str) -> list[SegmentDraft]:
        ctx = _require(provider)
        key = make_cache_key(Operation.SEGMENTIZE.value, prompt)
        cached = self._cache.get(key)
        if isinstance(cached, list):
            try:
                drafts = [SegmentDraft.model_validate(item) for item in cached]
            except ValueError:
                log.warning('Ignoring malformed cached segments for %s', key)
            else:
                log.info('Using cached segments (%d)', len(drafts))
                return drafts

        resp = await self._call(ctx, Operation.SEGMENTIZE, build_segmentize_messages(prompt))
        try:
            drafts = parse_segments(_usable_content(resp))
        except MalformedResponseError:
            if resp.finish_reason == 'length':
                raise TruncatedError(
                    'Response was truncated due to token limit. The prompt may be too large to process in one request.',
                ) from None
            raise

        self._cache.set(key, [d.model_dump() for d in drafts])
        log.info('Segmentize produced %d segments', len(drafts))
        return drafts

    async def condense(self, provider: ProviderContext | None, content: str) -> str:
        ctx = _require(provider)
        key = make_cache_key(Operation.CONDENSE.value, content)
        cached = self._cache.get(key)
        if isinstance(cached, str):
            log.info('Using cached condensed text')
            return cached

        resp = await self._call(ctx, Operation.CONDENSE, build_condense_messages(content))
        text = _usable_content(resp)
        if resp.finish_reason == 'length':
            raise TruncatedError('Condensed text was cut off by the output limit.')

        result = text.strip()
        self._cache.set(key, result)
        log.info('Condense: %d -> %d chars', len(content), len(result))
        return result

    async def _call(self, ctx: ProviderContext, operation: Operation, messages: list[ChatMessage]) -> ChatResponse:
        params = ctx.profile.request_kwargs(operation)
        log.info('Provider request: op=%s model=%s params=%s', operation.value, ctx.profile.name, params)
        try:
            resp = await asyncio.wait_for(
                ctx.client.chat(ctx.profile.name, messages, **params),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            err = f'{operation.value}: no response within {self._timeout}s'
            log.error(err)
            raise ProviderTimeoutError(err) from None
        except ProviderError as e:
            log.error('%s failed: %s', operation.value, e, exc_info=True)
            raise
        except Exception as e:
            err = f'{operation.value} failed: {type(e).__name__}: {e}'
            log.error(err, exc_info=True)
            raise ProviderError(err) from e
        log.debug('%s finished: reason=%s prompt_tokens=%d', operation.value, resp.finish_reason, resp.prompt_tokens)
        return resp


def _require(provider: ProviderContext | None) -> ProviderContext:
    if provider is None:
        raise NotInitializedError('AI provider not configured. Save an API key first.')
    return provider


def _usable_content(resp: ChatResponse) -> str:
    """Return the response text, or raise the failure that explains its absence."""
    if resp.content and resp.content.strip():
        return resp.content
    if resp.finish_reason == 'length':
        raise TruncatedError(
            'Response was truncated due to token limit. The prompt may be too large to process in one request.',
        )
    raise MalformedResponseError('No response content from provider')


def parse_segments(raw: str) -> list[SegmentDraft]:
    """Parse a JSON array of {title, content} records, applying defaults.

    Accepts a bare array, one fenced in a ```json block, or an object with a
    ``segments`` array.
    """
    text = raw.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f'Segments response is not valid JSON: {e}') from e

    if isinstance(data, dict) and isinstance(data.get('segments'), list):
        data = data['segments']
    if not isinstance(data, list):
        raise MalformedResponseError(f'Expected a JSON array of segments, got {type(data).__name__}')

    drafts: list[SegmentDraft] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedResponseError(f'Segment {index + 1} is not an object')
        title = item.get('title') or f'Segment {index + 1}'
        content = item.get('content') or ''
        if not isinstance(title, str) or not isinstance(content, str):
            raise MalformedResponseError(f'Segment {index + 1} has non-text fields')
        drafts.append(SegmentDraft(title=title, content=content))
    return drafts
