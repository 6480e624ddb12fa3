from __future__ import annotations

import pytest

from promptsmith.domain.generation import (
    AIResponse,
    Capability,
    EnhancementConfig,
    ImageGenerationOptions,
    VideoGenerationOptions,
)
from promptsmith.domain.models import ClientType
from promptsmith.providers.base import ProviderClient
from promptsmith.providers.errors import ClientError
from promptsmith.providers.manager import ClientManager
from promptsmith.services.ai_service import (
    ENHANCEMENT_SYSTEM_PROMPT,
    AIService,
    build_enhancement_prompt,
)


@pytest.fixture
def service(registry, manager) -> AIService:
    return AIService(registry, manager)


def test_enhancement_prompt_includes_only_present_fields() -> None:
    text = build_enhancement_prompt("a cat", EnhancementConfig(tone="bold", aspect_ratio="16:9"))

    assert '"a cat"' in text
    lines = text.splitlines()
    assert "- Tone: bold" in lines
    assert "- Aspect ratio: 16:9" in lines
    for label in ("Use case", "Lighting", "Composition", "Color theme", "Image style"):
        assert not any(line.startswith(f"- {label}:") for line in lines)
    assert lines[-1] == "Return only the enhanced prompt, no explanations."


def test_enhancement_prompt_field_order_is_fixed() -> None:
    config = EnhancementConfig(
        aspectRatio="1:1",
        imageStyle="watercolor",
        colorTheme="pastel",
        composition="rule of thirds",
        lighting="golden hour",
        tone="calm",
        useCase="poster",
    )
    text = build_enhancement_prompt("a boat", config)

    requirement_lines = [line for line in text.splitlines() if line.startswith("- ")]
    assert requirement_lines == [
        "- Use case: poster",
        "- Tone: calm",
        "- Lighting: golden hour",
        "- Composition: rule of thirds",
        "- Color theme: pastel",
        "- Image style: watercolor",
        "- Aspect ratio: 1:1",
    ]
    assert text == build_enhancement_prompt("a boat", config)


@pytest.mark.asyncio
async def test_generate_enhanced_prompt_calls_text_with_fixed_options(service: AIService, created) -> None:
    resp = await service.generate_enhanced_prompt("gpt-4o", "a cat", EnhancementConfig(tone="bold"))

    assert resp.success
    assert resp.data == "an enhanced prompt"
    [(prompt, options)] = created[0].text_calls
    assert "- Tone: bold" in prompt
    assert options.system_prompt == ENHANCEMENT_SYSTEM_PROMPT
    assert options.max_tokens == 500
    assert options.temperature == 0.7


@pytest.mark.asyncio
async def test_generate_text_unknown_model(service: AIService, manager: ClientManager) -> None:
    resp = await service.generate_text("nope", "hi")

    assert resp == AIResponse[str](success=False, error="Model nope not found")
    assert manager.get_active_clients() == []


@pytest.mark.asyncio
async def test_generate_text_rejects_non_text_model(service: AIService, manager: ClientManager) -> None:
    resp = await service.generate_text("dall-e-3", "hi")

    assert not resp.success
    assert resp.error == "Model dall-e-3 does not support text generation"
    assert resp.data is None
    assert manager.get_active_clients() == []


@pytest.mark.asyncio
async def test_generate_image_on_text_model_never_reaches_client(service: AIService, manager, created) -> None:
    # Warm the client so a stray call would be recorded.
    await service.generate_text("gpt-4o", "warm up")

    resp = await service.generate_image("gpt-4o", "a cat", ImageGenerationOptions(aspect_ratio="16:9"))

    assert resp.success is False
    assert resp.error == "Model gpt-4o does not support image generation"
    assert len(created) == 1
    assert created[0].image_calls == []


@pytest.mark.asyncio
async def test_generate_image_delegates_to_client(service: AIService, created) -> None:
    opts = ImageGenerationOptions(size="1024x1792", quality="hd")
    resp = await service.generate_image("dall-e-3", "a lighthouse", opts)

    assert resp.success
    assert resp.data == "https://img.example/1.png"
    assert created[0].image_calls == [("a lighthouse", opts)]


@pytest.mark.asyncio
async def test_generate_video_when_client_lacks_capability(service: AIService) -> None:
    resp = await service.generate_video("gpt-video", "a timelapse")

    assert not resp.success
    assert resp.error == "Video generation not implemented for model gpt-video"


@pytest.mark.asyncio
async def test_generate_video_gated_on_group(service: AIService) -> None:
    resp = await service.generate_video("gpt-4o", "a timelapse")
    assert resp.error == "Model gpt-4o does not support video generation"


@pytest.mark.asyncio
async def test_generate_video_with_capable_client(registry) -> None:
    class VideoClient(ProviderClient):
        client_type = ClientType.OPENAI
        capabilities = frozenset({Capability.VIDEO})

        async def generate_video(self, prompt, options=None):
            return AIResponse[str].ok(f"https://video.example/{options.fps}.mp4")

    manager = ClientManager(registry, factories={ClientType.OPENAI: lambda m, http: VideoClient(m, http=http)})
    resp = await AIService(registry, manager).generate_video("gpt-video", "waves", VideoGenerationOptions(fps=24))

    assert resp.success
    assert resp.data == "https://video.example/24.mp4"


@pytest.mark.asyncio
async def test_provider_errors_become_failure_envelopes(registry) -> None:
    class FailingClient(ProviderClient):
        client_type = ClientType.OPENAI
        capabilities = frozenset({Capability.TEXT})

        async def generate_text(self, prompt, options=None):
            raise ClientError("openai text generation failed: provider returned 500", ClientType.OPENAI)

    manager = ClientManager(registry, factories={ClientType.OPENAI: lambda m, http: FailingClient(m, http=http)})
    resp = await AIService(registry, manager).generate_text("gpt-4o", "hi")

    assert resp.success is False
    assert resp.error == "openai text generation failed: provider returned 500"


@pytest.mark.asyncio
async def test_resolution_errors_become_failure_envelopes(service: AIService) -> None:
    resp = await service.generate_image("stable-diffusion-xl", "a cat")

    assert resp.success is False
    assert resp.error == "AI client not found for type: stability"


@pytest.mark.asyncio
async def test_unexpected_exceptions_are_captured(registry) -> None:
    class BrokenClient(ProviderClient):
        client_type = ClientType.OPENAI
        capabilities = frozenset({Capability.TEXT})

        async def generate_text(self, prompt, options=None):
            raise RuntimeError("boom")

    manager = ClientManager(registry, factories={ClientType.OPENAI: lambda m, http: BrokenClient(m, http=http)})
    resp = await AIService(registry, manager).generate_enhanced_prompt("gpt-4o", "a cat")

    assert resp == AIResponse[str](success=False, error="boom")


@pytest.mark.asyncio
async def test_clear_pass_through(service: AIService, manager: ClientManager) -> None:
    service.clear_model_client("never-created")
    service.clear_all_clients()

    await service.generate_text("gpt-4o", "hi")
    await service.generate_text("claude-sonnet", "hi")
    service.clear_model_client("gpt-4o")
    assert manager.get_active_clients() == ["claude-sonnet"]
    service.clear_all_clients()
    assert manager.get_active_clients() == []
