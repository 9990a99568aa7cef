"""Tests for AIGateway — uses FakeLLMClient, NOT @patch("openai...")."""

from __future__ import annotations

import pytest

from prompt_splicer.l1_entities.errors import (
    MalformedResponseError,
    NotInitializedError,
    ProviderError,
    ProviderTimeoutError,
    TruncatedError,
)
from prompt_splicer.l1_entities.model_profile import MODEL_PROFILES
from prompt_splicer.l2_use_cases.ai_gateway import AIGateway, ProviderContext, parse_segments
from prompt_splicer.l2_use_cases.result_cache import make_cache_key


@pytest.fixture
def gateway(cache) -> AIGateway:
    return AIGateway(cache, timeout_seconds=1)


class TestSegmentize:
    @pytest.mark.asyncio
    async def test_success(self, gateway, provider):
        drafts = await gateway.segmentize(provider, 'A\n\nB')
        assert [(d.title, d.content) for d in drafts] == [('Intro', 'A'), ('Body', 'B')]

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, gateway, provider, fake_llm):
        await gateway.segmentize(provider, 'same prompt')
        again = await gateway.segmentize(provider, 'same prompt')

        assert len(fake_llm.chat_calls) == 1
        assert again[0].content == 'A'

    @pytest.mark.asyncio
    async def test_different_prompt_calls_provider(self, gateway, provider, fake_llm):
        await gateway.segmentize(provider, 'one')
        await gateway.segmentize(provider, 'two')
        assert len(fake_llm.chat_calls) == 2

    @pytest.mark.asyncio
    async def test_sends_profile_params(self, gateway, provider, fake_llm):
        await gateway.segmentize(provider, 'p')
        model, messages, params = fake_llm.chat_calls[0]
        assert model == 'gpt-4o-mini'
        assert params == {'temperature': 0.3, 'max_tokens': 16000}
        assert messages[0].role == 'system'
        assert messages[1].content.endswith('p')

    @pytest.mark.asyncio
    async def test_long_context_profile_sends_no_limit(self, gateway, fake_llm):
        ctx = ProviderContext(client=fake_llm, profile=MODEL_PROFILES['gpt-5-mini'])
        await gateway.segmentize(ctx, 'p')
        assert fake_llm.chat_calls[0][2] == {'temperature': 1.0}

    @pytest.mark.asyncio
    async def test_defaults_for_missing_fields(self, gateway, provider, fake_llm):
        fake_llm.set_response('[{"content": "x"}, {"title": "T"}]')
        drafts = await gateway.segmentize(provider, 'p')
        assert drafts[0].title == 'Segment 1'
        assert drafts[1].content == ''

    @pytest.mark.asyncio
    async def test_not_initialized(self, gateway):
        with pytest.raises(NotInitializedError):
            await gateway.segmentize(None, 'p')

    @pytest.mark.asyncio
    async def test_truncated_empty(self, gateway, provider, fake_llm):
        fake_llm.set_response(None, finish_reason='length')
        with pytest.raises(TruncatedError):
            await gateway.segmentize(provider, 'p')

    @pytest.mark.asyncio
    async def test_truncated_partial_json(self, gateway, provider, fake_llm):
        fake_llm.set_response('[{"title": "A", "content": "cut', finish_reason='length')
        with pytest.raises(TruncatedError):
            await gateway.segmentize(provider, 'p')

    @pytest.mark.asyncio
    async def test_empty_without_length_is_malformed(self, gateway, provider, fake_llm):
        fake_llm.set_response('', finish_reason='stop')
        with pytest.raises(MalformedResponseError):
            await gateway.segmentize(provider, 'p')

    @pytest.mark.asyncio
    async def test_invalid_json_is_malformed(self, gateway, provider, fake_llm, cache):
        fake_llm.set_response('Sure! Here are your sections.')
        with pytest.raises(MalformedResponseError):
            await gateway.segmentize(provider, 'p')
        assert cache.get(make_cache_key('segmentize', 'p')) is None

    @pytest.mark.asyncio
    async def test_provider_exception_wrapped(self, gateway, provider, fake_llm):
        fake_llm.set_error(ConnectionError('network down'))
        with pytest.raises(ProviderError, match='network down'):
            await gateway.segmentize(provider, 'p')

    @pytest.mark.asyncio
    async def test_provider_error_passes_through(self, gateway, provider, fake_llm):
        fake_llm.set_error(ProviderError('Rate limited'))
        with pytest.raises(ProviderError, match='Rate limited'):
            await gateway.segmentize(provider, 'p')

    @pytest.mark.asyncio
    async def test_timeout(self, cache, provider, fake_llm):
        gateway = AIGateway(cache, timeout_seconds=0.01)
        fake_llm.hold()
        with pytest.raises(ProviderTimeoutError):
            await gateway.segmentize(provider, 'p')

    @pytest.mark.asyncio
    async def test_no_retry_after_failure(self, gateway, provider, fake_llm):
        fake_llm.set_error(ConnectionError('down'))
        with pytest.raises(ProviderError):
            await gateway.segmentize(provider, 'p')
        assert len(fake_llm.chat_calls) == 1

    @pytest.mark.asyncio
    async def test_malformed_cache_entry_ignored(self, gateway, provider, fake_llm, cache):
        cache.set(make_cache_key('segmentize', 'p'), [{'bogus': True}])
        drafts = await gateway.segmentize(provider, 'p')
        assert len(fake_llm.chat_calls) == 1
        assert drafts[0].title == 'Intro'


class TestCondense:
    @pytest.mark.asyncio
    async def test_success_strips(self, gateway, provider, fake_llm):
        fake_llm.set_response('  shorter text \n')
        assert await gateway.condense(provider, 'a much longer text') == 'shorter text'

    @pytest.mark.asyncio
    async def test_cached(self, gateway, provider, fake_llm):
        fake_llm.set_response('short')
        await gateway.condense(provider, 'long')
        fake_llm.set_response('different')
        assert await gateway.condense(provider, 'long') == 'short'
        assert len(fake_llm.chat_calls) == 1

    @pytest.mark.asyncio
    async def test_condense_and_segmentize_keys_distinct(self, gateway, provider, fake_llm):
        fake_llm.queue_responses('short', '[{"title": "T", "content": "c"}]')
        await gateway.condense(provider, 'same')
        drafts = await gateway.segmentize(provider, 'same')
        assert drafts[0].title == 'T'

    @pytest.mark.asyncio
    async def test_params(self, gateway, provider, fake_llm):
        fake_llm.set_response('x')
        await gateway.condense(provider, 'y')
        assert fake_llm.chat_calls[0][2] == {'temperature': 0.2, 'max_tokens': 2000}

    @pytest.mark.asyncio
    async def test_truncated_text(self, gateway, provider, fake_llm, cache):
        fake_llm.set_response('partial cond', finish_reason='length')
        with pytest.raises(TruncatedError):
            await gateway.condense(provider, 'y')
        assert cache.get(make_cache_key('condense', 'y')) is None

    @pytest.mark.asyncio
    async def test_none_content_malformed(self, gateway, provider, fake_llm):
        fake_llm.set_response(None)
        with pytest.raises(MalformedResponseError):
            await gateway.condense(provider, 'y')

    @pytest.mark.asyncio
    async def test_not_initialized(self, gateway):
        with pytest.raises(NotInitializedError):
            await gateway.condense(None, 'y')


class TestParseSegments:
    def test_fenced_json(self):
        raw = '```json\n[{"title": "A", "content": "a"}]\n```'
        assert parse_segments(raw)[0].title == 'A'

    def test_wrapped_object(self):
        assert parse_segments('{"segments": [{"title": "A", "content": "a"}]}')[0].content == 'a'

    def test_object_without_segments(self):
        with pytest.raises(MalformedResponseError):
            parse_segments('{"title": "A"}')

    def test_non_object_item(self):
        with pytest.raises(MalformedResponseError):
            parse_segments('["just text"]')

    def test_non_text_field(self):
        with pytest.raises(MalformedResponseError):
            parse_segments('[{"title": 5, "content": "a"}]')

    def test_empty_array(self):
        assert parse_segments('[]') == []
