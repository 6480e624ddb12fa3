from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Capability(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


class TextGenerationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_tokens: int | None = Field(default=None, alias="maxTokens")
    temperature: float | None = None
    top_p: float | None = Field(default=None, alias="topP")
    frequency_penalty: float | None = Field(default=None, alias="frequencyPenalty")
    presence_penalty: float | None = Field(default=None, alias="presencePenalty")
    system_prompt: str | None = Field(default=None, alias="systemPrompt")
    # Reserved; tokens are never streamed back.
    stream: bool = False


class ImageGenerationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: str | None = None
    aspect_ratio: str | None = Field(default=None, alias="aspectRatio")
    quality: str | None = None
    style: str | None = None
    model: str | None = None
    n: int | None = None


class VideoGenerationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    duration: float | None = None
    aspect_ratio: str | None = Field(default=None, alias="aspectRatio")
    fps: int | None = None
    model: str | None = None


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tokens_used: int | None = Field(default=None, alias="tokensUsed")
    model: str | None = None
    duration: int | None = Field(default=None, description="Milliseconds")


class AIResponse(BaseModel, Generic[T]):
    """Uniform envelope: `data` is set iff `success`, `error` iff not."""

    success: bool
    data: T | None = None
    error: str | None = None
    metadata: ResponseMetadata | None = None

    @classmethod
    def ok(cls, data: T, metadata: ResponseMetadata | None = None) -> "AIResponse[T]":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str) -> "AIResponse[T]":
        return cls(success=False, error=error)


class EnhancementConfig(BaseModel):
    """Stylistic options folded into a prompt-enhancement request."""

    model_config = ConfigDict(populate_by_name=True)

    use_case: str | None = Field(default=None, alias="useCase")
    tone: str | None = None
    lighting: str | None = None
    composition: str | None = None
    color_theme: str | None = Field(default=None, alias="colorTheme")
    image_style: str | None = Field(default=None, alias="imageStyle")
    aspect_ratio: str | None = Field(default=None, alias="aspectRatio")
