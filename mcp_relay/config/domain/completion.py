"""Completion service configuration model."""

from pydantic import BaseModel, Field


class CompletionConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    max_tokens: int = Field(default=4096, ge=1)
    temperature: float | None = Field(default=None, ge=0.0)
    api_base: str | None = None
    api_key: str | None = None
