from __future__ import annotations

import json
import logging
import time
from typing import Any

from promptsmith.domain.generation import (
    AIResponse,
    Capability,
    ImageGenerationOptions,
    ResponseMetadata,
    TextGenerationOptions,
)
from promptsmith.domain.models import ClientType
from promptsmith.providers.base import ProviderClient, elapsed_ms, optional_int, safe_text
from promptsmith.providers.errors import ClientError
from promptsmith.providers.sizes import resolve_image_size

log = logging.getLogger(__name__)

DEFAULT_IMAGE_QUALITY = "standard"
DEFAULT_IMAGE_STYLE = "natural"


def build_chat_payload(model: str, prompt: str, options: TextGenerationOptions) -> dict[str, Any]:
    messages: list[dict[str, str]] = []
    if options.system_prompt:
        messages.append({"role": "system", "content": options.system_prompt})
    messages.append({"role": "user", "content": prompt})

    payload: dict[str, Any] = {"model": model, "messages": messages}
    optional = {
        "max_tokens": options.max_tokens,
        "temperature": options.temperature,
        "top_p": options.top_p,
        "frequency_penalty": options.frequency_penalty,
        "presence_penalty": options.presence_penalty,
    }
    payload.update({k: v for k, v in optional.items() if v is not None})
    return payload


class OpenAIClient(ProviderClient):
    """OpenAI-compatible chat completions + image generations over HTTP."""

    client_type = ClientType.OPENAI
    capabilities = frozenset({Capability.TEXT, Capability.IMAGE})

    chat_path = "/chat/completions"
    image_path = "/images/generations"

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.model.api_token}"}
        headers.update(self.model.headers or {})
        return headers

    def _query_params(self) -> dict[str, str] | None:
        return None

    async def generate_text(
        self, prompt: str, options: TextGenerationOptions | None = None
    ) -> AIResponse[str]:
        options = options or TextGenerationOptions()
        payload = build_chat_payload(self.request_model, prompt, options)

        started = time.perf_counter()
        data = await self._post_json(
            self._endpoint("chat", self.chat_path),
            payload,
            what="text generation",
            params=self._query_params(),
        )
        duration = elapsed_ms(started)

        choices = data.get("choices") or []
        if not choices:
            raise ClientError(
                f"{self.client_type.value} text generation failed: no choices returned: {json.dumps(data)[:500]}",
                self.client_type,
            )
        try:
            message = choices[0].get("message") or {}
            content = message.get("content") or ""
            if not isinstance(content, str):
                raise TypeError(f"message content is {type(content).__name__}, not str")
            usage = data.get("usage") or {}
            metadata = ResponseMetadata(
                tokens_used=optional_int(usage.get("total_tokens")),
                model=safe_text(data.get("model")) or self.request_model,
                duration=duration,
            )
        except (AttributeError, LookupError, TypeError, ValueError) as e:
            raise self._malformed("text generation", e) from e

        return AIResponse[str].ok(content, metadata)

    async def generate_image(
        self, prompt: str, options: ImageGenerationOptions | None = None
    ) -> AIResponse[str]:
        options = options or ImageGenerationOptions()
        model_name = options.model or self.request_model
        payload: dict[str, Any] = {
            "model": model_name,
            "prompt": prompt,
            "size": resolve_image_size(options),
            "quality": options.quality or DEFAULT_IMAGE_QUALITY,
            "style": options.style or DEFAULT_IMAGE_STYLE,
            "n": options.n or 1,
        }

        started = time.perf_counter()
        data = await self._post_json(
            self._endpoint("image", self.image_path),
            payload,
            what="image generation",
            params=self._query_params(),
        )
        duration = elapsed_ms(started)

        items = data.get("data") or []
        first = items[0] if isinstance(items, list) and items else None
        image_url = first.get("url") if isinstance(first, dict) else None
        if not image_url or not isinstance(image_url, str):
            raise ClientError(f"No image URL returned from {self.client_type.value}", self.client_type)

        log.debug("openai.image.generated", extra={"model": model_name, "duration_ms": duration})
        return AIResponse[str].ok(image_url, ResponseMetadata(model=model_name, duration=duration))
