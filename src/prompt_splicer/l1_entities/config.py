"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from prompt_splicer.l1_entities.model_profile import MODEL_PROFILES


class CacheConfig(BaseModel):
    ttl_seconds: float = Field(gt=0)
    max_entries: int = Field(gt=0)


class AutosaveConfig(BaseModel):
    interval_seconds: float = Field(gt=0)
    debounce_seconds: float = Field(gt=0)


class ProviderConfig(BaseModel):
    model: str
    timeout_seconds: float | None = None  # None = wait indefinitely

    @field_validator('model')
    @classmethod
    def _known_model(cls, value: str) -> str:
        if value not in MODEL_PROFILES:
            raise ValueError(f'Unknown model: {value} (choose from {", ".join(MODEL_PROFILES)})')
        return value


class OutputConfig(BaseModel):
    directory: str
    export_filename: str


class AppConfig(BaseModel):
    cache: CacheConfig
    autosave: AutosaveConfig
    provider: ProviderConfig
    output: OutputConfig
