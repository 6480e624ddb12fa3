from __future__ import annotations

import json
from typing import Any

import pytest

from promptsmith.domain.generation import (
    AIResponse,
    Capability,
    ImageGenerationOptions,
    ResponseMetadata,
    TextGenerationOptions,
)
from promptsmith.domain.models import ClientType, ModelDescriptor
from promptsmith.providers.base import ProviderClient
from promptsmith.providers.manager import ClientManager
from promptsmith.registry.models import ModelRegistry

MODELS_CONFIG: dict[str, Any] = {
    "models": [
        {
            "id": "gpt-4o",
            "name": "GPT-4o",
            "groups": ["chat", "text"],
            "description": "General chat model",
            "capabilities": ["reasoning"],
            "apiUrl": "https://api.openai.com/v1",
            "apiToken": "sk-test",
            "headers": {"OpenAI-Organization": "org-1"},
        },
        {
            "id": "dall-e-3",
            "name": "DALL-E 3",
            "groups": ["image"],
            "apiUrl": "https://api.openai.com/v1",
            "apiToken": "sk-test",
        },
        {
            "id": "claude-sonnet",
            "name": "Claude Sonnet",
            "groups": ["chat"],
            "apiUrl": "https://api.anthropic.com/v1",
            "apiToken": "ak-test",
            "headers": {"anthropic-version": "2023-06-01"},
        },
        {
            "id": "azure-dalle",
            "name": "Azure DALL-E",
            "groups": ["image"],
            "clientType": "azure-openai",
            "apiUrl": "https://contoso.openai.azure.com",
            "apiToken": "az-test",
            "apiVersion": "2024-02-01",
            "deployment": "dalle3",
            "endpoints": {"image": "/custom/images"},
        },
        {
            "id": "stable-diffusion-xl",
            "name": "SDXL",
            "groups": ["image"],
            "apiUrl": "https://api.stability.ai/v1",
            "apiToken": "st-test",
        },
        {
            "id": "gpt-video",
            "name": "Video preview",
            "groups": ["video"],
            "apiUrl": "https://api.openai.com/v1",
            "apiToken": "sk-test",
        },
    ]
}


class RecordingClient(ProviderClient):
    """Provider client that records calls instead of talking to a network."""

    client_type = ClientType.OPENAI
    capabilities = frozenset({Capability.TEXT, Capability.IMAGE})

    def __init__(self, model: ModelDescriptor, *, http) -> None:
        super().__init__(model, http=http)
        self.text_calls: list[tuple[str, TextGenerationOptions | None]] = []
        self.image_calls: list[tuple[str, ImageGenerationOptions | None]] = []

    async def generate_text(self, prompt, options=None):
        self.text_calls.append((prompt, options))
        return AIResponse[str].ok("an enhanced prompt", ResponseMetadata(model=self.model.id, tokens_used=12))

    async def generate_image(self, prompt, options=None):
        self.image_calls.append((prompt, options))
        return AIResponse[str].ok("https://img.example/1.png", ResponseMetadata(model=self.model.id, duration=5))


@pytest.fixture
def models_config() -> dict[str, Any]:
    return json.loads(json.dumps(MODELS_CONFIG))


@pytest.fixture
def registry(models_config: dict[str, Any]) -> ModelRegistry:
    return ModelRegistry.from_raw(json.dumps(models_config))


@pytest.fixture
def created() -> list[RecordingClient]:
    return []


@pytest.fixture
def manager(registry: ModelRegistry, created: list[RecordingClient]) -> ClientManager:
    def factory(model: ModelDescriptor, http) -> RecordingClient:
        client = RecordingClient(model, http=http)
        created.append(client)
        return client

    return ClientManager(
        registry,
        factories={t: factory for t in (ClientType.OPENAI, ClientType.AZURE_OPENAI, ClientType.ANTHROPIC)},
    )
