from __future__ import annotations

import logging
import time
from abc import ABC
from typing import Any, ClassVar, Protocol, runtime_checkable

import httpx

from promptsmith.domain.generation import (
    AIResponse,
    Capability,
    ImageGenerationOptions,
    TextGenerationOptions,
    VideoGenerationOptions,
)
from promptsmith.domain.models import ClientType, ModelDescriptor
from promptsmith.providers.errors import ClientError

log = logging.getLogger(__name__)


@runtime_checkable
class TextGenerator(Protocol):
    async def generate_text(
        self, prompt: str, options: TextGenerationOptions | None = None
    ) -> AIResponse[str]: ...


@runtime_checkable
class ImageGenerator(Protocol):
    async def generate_image(
        self, prompt: str, options: ImageGenerationOptions | None = None
    ) -> AIResponse[str]: ...


@runtime_checkable
class VideoGenerator(Protocol):
    async def generate_video(
        self, prompt: str, options: VideoGenerationOptions | None = None
    ) -> AIResponse[str]: ...


def safe_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def optional_int(value: Any) -> int | None:
    """Usage counters are informational; anything non-numeric is dropped."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


class ProviderClient(ABC):
    """Handle for one model descriptor on one provider.

    Subclasses declare what they can do in `capabilities` and implement the
    matching `generate_*` coroutines. The HTTP connection is shared between
    clients that point at the same apiUrl + apiToken.
    """

    client_type: ClassVar[ClientType] = ClientType.UNKNOWN
    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    def __init__(self, model: ModelDescriptor, *, http: httpx.AsyncClient):
        self.model = model
        self._http = http

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def request_model(self) -> str:
        """Model name sent to the provider."""
        return self.model.deployment or self.model.id

    def _headers(self) -> dict[str, str]:
        return dict(self.model.headers or {})

    def _endpoint(self, capability: str, default: str) -> str:
        endpoints = self.model.endpoints
        override = getattr(endpoints, capability, None) if endpoints is not None else None
        return override or default

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        what: str,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        label = f"{self.client_type.value} {what}"
        try:
            resp = await self._http.post(url, json=payload, headers=self._headers(), params=params)
        except httpx.TimeoutException as e:
            log.warning("%s timed out: %s", label, e)
            raise ClientError(f"{label} timed out", self.client_type, e) from e
        except httpx.HTTPError as e:
            log.warning("%s failed: %s", label, e)
            raise ClientError(f"{label} request failed: {e}", self.client_type, e) from e

        if resp.status_code >= 400:
            detail = safe_text(resp.text)
            if len(detail) > 500:
                detail = detail[:500] + "..."
            raise ClientError(f"{label} failed: provider returned {resp.status_code}: {detail}", self.client_type)

        try:
            data = resp.json()
        except ValueError as e:
            raise ClientError(f"{label} failed: invalid JSON from provider", self.client_type, e) from e
        if not isinstance(data, dict):
            raise ClientError(f"{label} failed: unexpected response shape", self.client_type)
        return data

    def _malformed(self, what: str, e: Exception) -> ClientError:
        log.warning("%s %s returned a malformed response: %s", self.client_type.value, what, e)
        return ClientError(
            f"{self.client_type.value} {what} failed: malformed response: {e}", self.client_type, e
        )


def connection_key(model: ModelDescriptor) -> tuple[str, str]:
    return (model.api_url or "", model.api_token or "")


class ConnectionPool:
    """One `httpx.AsyncClient` per (apiUrl, apiToken); owned by the client manager."""

    def __init__(
        self,
        *,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._timeout = timeout or httpx.Timeout(60.0, connect=10.0)
        self._transport = transport
        self._clients: dict[tuple[str, str], httpx.AsyncClient] = {}

    def get(self, model: ModelDescriptor) -> httpx.AsyncClient:
        key = connection_key(model)
        client = self._clients.get(key)
        if client is None:
            client = httpx.AsyncClient(
                base_url=key[0].rstrip("/"),
                timeout=self._timeout,
                transport=self._transport,
            )
            self._clients[key] = client
        return client

    def __len__(self) -> int:
        return len(self._clients)

    async def aclose(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()
