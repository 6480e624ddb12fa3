from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from promptsmith.domain.models import PublicModel


class PromptParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    use_case: str = Field(default="", alias="useCase")
    tone: str = ""
    lighting: str = ""
    composition: str = ""
    color_theme: str = Field(default="", alias="colorTheme")
    color_grade: str = Field(default="", alias="colorGrade")
    image_style: str = Field(default="", alias="imageStyle")
    effects: str = ""
    aspect_ratio: str = Field(default="", alias="aspectRatio")


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = ""
    system_instructions: str = Field(default="", alias="systemInstructions")
    model: str = ""
    parameters: PromptParameters = Field(default_factory=PromptParameters)


class JsonPromptMetadata(BaseModel):
    created_at: str = Field(default_factory=lambda: datetime.now(tz=timezone.utc).isoformat())
    version: str = "1.0"


class JsonPrompt(BaseModel):
    """Structured prompt returned to the UI; keys are snake_case on the wire."""

    prompt: str
    system_instructions: str
    model: str
    parameters: dict[str, str]
    metadata: JsonPromptMetadata = Field(default_factory=JsonPromptMetadata)


class ChatResponse(BaseModel):
    success: bool
    data: JsonPrompt | None = None
    error: str | None = None


class ImageParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    aspect_ratio: str | None = Field(default=None, alias="aspectRatio")
    image_style: str | None = Field(default=None, alias="imageStyle")
    quality: str | None = None
    size: str | None = None
    n: int | None = None


class ImageGenerationRequest(BaseModel):
    prompt: str = ""
    model: str = ""
    parameters: ImageParameters = Field(default_factory=ImageParameters)


class ImageResultMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    model: str
    prompt: str
    duration: int | None = None
    tokens_used: int | None = Field(default=None, alias="tokensUsed")


class ImageResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")
    metadata: ImageResultMetadata | None = None


class ImageGenerationResponse(BaseModel):
    success: bool
    data: ImageResult | None = None
    error: str | None = None


class ModelsResponse(BaseModel):
    models: list[PublicModel]
    groups: list[str]
    status: str
