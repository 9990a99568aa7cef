"""Per-model request parameter presets."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Operation(str, Enum):
    SEGMENTIZE = 'segmentize'
    CONDENSE = 'condense'


class OperationParams(BaseModel):
    temperature: float
    max_output_tokens: int | None = None  # None = no limit sent


class ModelProfile(BaseModel):
    """Fixes temperature and output-length policy for each operation of one model.

    ``token_param`` is the request field name the provider expects for the
    output limit on this model family.
    """

    name: str
    token_param: str = 'max_tokens'
    segmentize: OperationParams
    condense: OperationParams

    def params_for(self, operation: Operation) -> OperationParams:
        return self.segmentize if operation is Operation.SEGMENTIZE else self.condense

    def request_kwargs(self, operation: Operation) -> dict:
        params = self.params_for(operation)
        kwargs: dict = {'temperature': params.temperature}
        if params.max_output_tokens is not None:
            kwargs[self.token_param] = params.max_output_tokens
        return kwargs


MODEL_PROFILES: dict[str, ModelProfile] = {
    # long-context: provider only accepts temperature=1
    'gpt-5-mini': ModelProfile(
        name='gpt-5-mini',
        token_param='max_completion_tokens',
        segmentize=OperationParams(temperature=1.0),
        condense=OperationParams(temperature=1.0, max_output_tokens=2000),
    ),
    'gpt-4o-mini': ModelProfile(
        name='gpt-4o-mini',
        segmentize=OperationParams(temperature=0.3, max_output_tokens=16000),
        condense=OperationParams(temperature=0.2, max_output_tokens=2000),
    ),
    'gpt-3.5-turbo': ModelProfile(
        name='gpt-3.5-turbo',
        segmentize=OperationParams(temperature=0.3, max_output_tokens=16000),
        condense=OperationParams(temperature=0.2, max_output_tokens=2000),
    ),
}

DEFAULT_MODEL = 'gpt-5-mini'


def resolve_profile(model: str) -> ModelProfile:
    """Return the preset for *model*; raises KeyError for unknown models."""
    try:
        return MODEL_PROFILES[model]
    except KeyError:
        known = ', '.join(sorted(MODEL_PROFILES))
        raise KeyError(f'Unknown model {model!r} (known: {known})') from None
