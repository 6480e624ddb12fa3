from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

from promptsmith.core.metrics import (
    promptsmith_errors_total,
    promptsmith_request_duration_seconds,
    promptsmith_requests_total,
)
from promptsmith.domain.generation import (
    AIResponse,
    Capability,
    EnhancementConfig,
    ImageGenerationOptions,
    TextGenerationOptions,
    VideoGenerationOptions,
)
from promptsmith.providers.base import ProviderClient
from promptsmith.providers.manager import ClientManager
from promptsmith.registry.models import ModelRegistry

log = logging.getLogger(__name__)

ENHANCEMENT_SYSTEM_PROMPT = (
    "You are an expert AI prompt engineer. Your task is to enhance user prompts for image "
    "generation by incorporating technical details, artistic elements, and professional "
    "terminology while maintaining the user's original intent."
)
ENHANCEMENT_MAX_TOKENS = 500
ENHANCEMENT_TEMPERATURE = 0.7

# (field, label) in output order.
ENHANCEMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("use_case", "Use case"),
    ("tone", "Tone"),
    ("lighting", "Lighting"),
    ("composition", "Composition"),
    ("color_theme", "Color theme"),
    ("image_style", "Image style"),
    ("aspect_ratio", "Aspect ratio"),
)

# Groups that allow each capability.
CAPABILITY_GROUPS: dict[Capability, frozenset[str]] = {
    Capability.TEXT: frozenset({"chat", "text"}),
    Capability.IMAGE: frozenset({"image"}),
    Capability.VIDEO: frozenset({"video"}),
}

_NOUNS = {Capability.TEXT: "Text", Capability.IMAGE: "Image", Capability.VIDEO: "Video"}


def build_enhancement_prompt(user_prompt: str, config: EnhancementConfig) -> str:
    lines = [f'Please enhance this image generation prompt: "{user_prompt}"', "", "Requirements:"]
    for field, label in ENHANCEMENT_FIELDS:
        value = getattr(config, field)
        if value:
            lines.append(f"- {label}: {value}")
    lines.append("")
    lines.append("Return only the enhanced prompt, no explanations.")
    return "\n".join(lines)


class AIService:
    """Entry point for request handlers. Never raises; failures come back as envelopes."""

    def __init__(self, registry: ModelRegistry, manager: ClientManager):
        self._registry = registry
        self._manager = manager

    async def _run(
        self,
        capability: Capability,
        model_id: str,
        call: Callable[[ProviderClient], Awaitable[AIResponse[str]]],
    ) -> AIResponse[str]:
        noun = _NOUNS[capability]
        started = time.perf_counter()
        status = "error"
        try:
            model = self._registry.get_model_by_id(model_id)
            if model is None:
                return AIResponse[str].fail(f"Model {model_id} not found")

            if not CAPABILITY_GROUPS[capability].intersection(model.groups):
                return AIResponse[str].fail(f"Model {model_id} does not support {noun.lower()} generation")

            client = await self._manager.get_client(model_id)
            if not client.supports(capability):
                return AIResponse[str].fail(f"{noun} generation not implemented for model {model_id}")

            resp = await call(client)
            status = "ok" if resp.success else "error"
            return resp
        except Exception as e:
            log.exception(
                "ai.generate.failed",
                extra={"capability": capability.value, "model_id": model_id},
            )
            return AIResponse[str].fail(str(e) or "Unknown error occurred")
        finally:
            # Unknown ids would otherwise create unbounded label sets.
            label = model_id if self._registry.is_valid_model_id(model_id) else "unknown"
            promptsmith_requests_total.labels(capability.value, label, status).inc()
            promptsmith_request_duration_seconds.labels(capability.value, label).observe(
                time.perf_counter() - started
            )
            if status != "ok":
                promptsmith_errors_total.labels(capability.value, label).inc()

    async def generate_text(
        self, model_id: str, prompt: str, options: TextGenerationOptions | None = None
    ) -> AIResponse[str]:
        opts = options or TextGenerationOptions()
        return await self._run(Capability.TEXT, model_id, lambda c: c.generate_text(prompt, opts))

    async def generate_image(
        self, model_id: str, prompt: str, options: ImageGenerationOptions | None = None
    ) -> AIResponse[str]:
        opts = options or ImageGenerationOptions()
        return await self._run(Capability.IMAGE, model_id, lambda c: c.generate_image(prompt, opts))

    async def generate_video(
        self, model_id: str, prompt: str, options: VideoGenerationOptions | None = None
    ) -> AIResponse[str]:
        opts = options or VideoGenerationOptions()
        return await self._run(Capability.VIDEO, model_id, lambda c: c.generate_video(prompt, opts))

    async def generate_enhanced_prompt(
        self, model_id: str, user_prompt: str, config: EnhancementConfig | None = None
    ) -> AIResponse[str]:
        enhancement_prompt = build_enhancement_prompt(user_prompt, config or EnhancementConfig())
        return await self.generate_text(
            model_id,
            enhancement_prompt,
            TextGenerationOptions(
                system_prompt=ENHANCEMENT_SYSTEM_PROMPT,
                max_tokens=ENHANCEMENT_MAX_TOKENS,
                temperature=ENHANCEMENT_TEMPERATURE,
            ),
        )

    def clear_model_client(self, model_id: str) -> None:
        self._manager.clear_client(model_id)

    def clear_all_clients(self) -> None:
        self._manager.clear_all_clients()
