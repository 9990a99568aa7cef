"""Provider credential record."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from prompt_splicer.l1_entities.model_profile import DEFAULT_MODEL, MODEL_PROFILES


class ProviderCredentials(BaseModel):
    api_key: str
    model: str = DEFAULT_MODEL

    @field_validator('api_key')
    @classmethod
    def _non_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('API key must not be empty')
        return value

    @field_validator('model')
    @classmethod
    def _known_model(cls, value: str) -> str:
        if value not in MODEL_PROFILES:
            raise ValueError(f'Unknown model: {value}')
        return value

    def masked_key(self) -> str:
        key = self.api_key
        if len(key) <= 8:
            return key
        return f'{key[:4]}...{key[-4:]}'
