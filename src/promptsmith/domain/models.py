from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientType(str, Enum):
    OPENAI = "openai"
    AZURE_OPENAI = "azure-openai"
    ANTHROPIC = "anthropic"
    STABILITY = "stability"
    MIDJOURNEY = "midjourney"
    ADOBE = "adobe"
    UNKNOWN = "unknown"


class Endpoints(BaseModel):
    """Per-capability URL overrides (absolute URL or path relative to apiUrl)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    chat: str | None = None
    image: str | None = None
    video: str | None = None


class PublicModel(BaseModel):
    """Model descriptor as it may be shown to UI-facing callers."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    groups: list[str]
    description: str | None = None
    capabilities: list[str] | None = None


PRIVATE_FIELDS = frozenset(
    {"client_type", "api_url", "api_token", "headers", "api_version", "deployment", "endpoints"}
)


class ModelDescriptor(BaseModel):
    """Full model descriptor, including connection details. Server-side only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    groups: list[str] = Field(..., min_length=1)
    description: str | None = None
    capabilities: list[str] | None = None

    client_type: ClientType | None = Field(default=None, alias="clientType")
    api_url: str | None = Field(default=None, alias="apiUrl")
    api_token: str | None = Field(default=None, alias="apiToken", repr=False)
    headers: dict[str, str] | None = None
    api_version: str | None = Field(default=None, alias="apiVersion")
    deployment: str | None = None
    endpoints: Endpoints | None = None

    def in_groups(self, groups: set[str]) -> bool:
        return any(g in groups for g in self.groups)

    def to_public(self) -> PublicModel:
        return PublicModel.model_validate(self.model_dump(exclude=set(PRIVATE_FIELDS)))


class ModelsConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    models: list[ModelDescriptor]

    @field_validator("models")
    @classmethod
    def _unique_ids(cls, value: list[ModelDescriptor]) -> list[ModelDescriptor]:
        seen: set[str] = set()
        for model in value:
            if model.id in seen:
                raise ValueError(f"duplicate model id: {model.id}")
            seen.add(model.id)
        return value
