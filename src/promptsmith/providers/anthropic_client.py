from __future__ import annotations

import time
from typing import Any

from promptsmith.domain.generation import AIResponse, Capability, ResponseMetadata, TextGenerationOptions
from promptsmith.domain.models import ClientType
from promptsmith.providers.base import ProviderClient, elapsed_ms, optional_int, safe_text
from promptsmith.providers.errors import ClientError

DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 1000


class AnthropicClient(ProviderClient):
    """Anthropic Messages API. Text only."""

    client_type = ClientType.ANTHROPIC
    capabilities = frozenset({Capability.TEXT})

    messages_path = "/messages"

    def _headers(self) -> dict[str, str]:
        headers = {
            "x-api-key": self.model.api_token or "",
            "anthropic-version": DEFAULT_ANTHROPIC_VERSION,
        }
        headers.update(self.model.headers or {})
        return headers

    async def generate_text(
        self, prompt: str, options: TextGenerationOptions | None = None
    ) -> AIResponse[str]:
        options = options or TextGenerationOptions()
        payload: dict[str, Any] = {
            "model": self.request_model,
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }
        if options.system_prompt:
            payload["system"] = options.system_prompt
        if options.temperature is not None:
            payload["temperature"] = options.temperature
        if options.top_p is not None:
            payload["top_p"] = options.top_p

        started = time.perf_counter()
        data = await self._post_json(self._endpoint("chat", self.messages_path), payload, what="text generation")
        duration = elapsed_ms(started)

        blocks = data.get("content") or []
        if not isinstance(blocks, list):
            raise self._malformed("text generation", TypeError("content is not a list"))
        texts = [b.get("text") for b in blocks if isinstance(b, dict) and b.get("type") == "text"]
        texts = [t for t in texts if isinstance(t, str)]
        if not texts:
            raise ClientError("anthropic text generation failed: no text content returned", self.client_type)

        usage = data.get("usage")
        tokens: int | None = None
        if isinstance(usage, dict) and usage:
            counts = [optional_int(usage.get("input_tokens")), optional_int(usage.get("output_tokens"))]
            if any(c is not None for c in counts):
                tokens = sum(c or 0 for c in counts)

        return AIResponse[str].ok(
            "".join(texts),
            ResponseMetadata(
                tokens_used=tokens,
                model=safe_text(data.get("model")) or self.request_model,
                duration=duration,
            ),
        )
