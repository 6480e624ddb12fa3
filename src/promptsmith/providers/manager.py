"""Resolves model ids to provider clients and owns the client cache.

One `ClientManager` is created per process (in the app lifespan) and closed on
shutdown. Client handles are cached per model id; HTTP connections are shared
per apiUrl + apiToken through the manager's `ConnectionPool`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from promptsmith.domain.models import ClientType, ModelDescriptor
from promptsmith.providers.anthropic_client import AnthropicClient
from promptsmith.providers.azure_client import AzureOpenAIClient
from promptsmith.providers.base import ConnectionPool, ProviderClient
from promptsmith.providers.errors import ClientConfigError, ClientNotFoundError
from promptsmith.providers.openai_client import OpenAIClient
from promptsmith.registry.models import ModelRegistry

log = logging.getLogger(__name__)

ClientFactory = Callable[[ModelDescriptor, httpx.AsyncClient], ProviderClient]


@dataclass(frozen=True)
class DetectionRule:
    client_type: ClientType
    url_markers: tuple[str, ...] = ()
    id_markers: tuple[str, ...] = ()

    def matches(self, api_url: str, model_id: str) -> bool:
        return any(m in api_url for m in self.url_markers) or any(m in model_id for m in self.id_markers)


# First match wins.
DETECTION_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(ClientType.OPENAI, ("api.openai.com",), ("gpt", "dall-e")),
    DetectionRule(ClientType.AZURE_OPENAI, ("openai.azure.com", ".azure.")),
    DetectionRule(ClientType.ANTHROPIC, ("api.anthropic.com",), ("claude",)),
    DetectionRule(ClientType.STABILITY, ("api.stability.ai",), ("stable-diffusion",)),
    DetectionRule(ClientType.MIDJOURNEY, ("midjourney",), ("midjourney",)),
    DetectionRule(ClientType.ADOBE, ("adobe",), ("firefly",)),
)

DEFAULT_FACTORIES: dict[ClientType, ClientFactory] = {
    ClientType.OPENAI: lambda model, http: OpenAIClient(model, http=http),
    ClientType.AZURE_OPENAI: lambda model, http: AzureOpenAIClient(model, http=http),
    ClientType.ANTHROPIC: lambda model, http: AnthropicClient(model, http=http),
}


def determine_client_type(model: ModelDescriptor) -> ClientType:
    if model.client_type is not None:
        return model.client_type

    api_url = (model.api_url or "").lower()
    model_id = model.id.lower()
    for rule in DETECTION_RULES:
        if rule.matches(api_url, model_id):
            return rule.client_type

    log.warning("client_type.defaulted", extra={"model_id": model.id, "client_type": ClientType.OPENAI.value})
    return ClientType.OPENAI


def validate_model_config(model: ModelDescriptor, client_type: ClientType) -> None:
    if not model.api_url:
        raise ClientConfigError(client_type, "Missing apiUrl")
    if not model.api_token:
        raise ClientConfigError(client_type, "Missing apiToken")

    headers = model.headers or {}
    if client_type is ClientType.ANTHROPIC and "anthropic-version" not in headers:
        log.warning("client_config.missing_header", extra={"model_id": model.id, "header": "anthropic-version"})
    elif client_type is ClientType.AZURE_OPENAI and not (model.api_version or headers.get("api-version")):
        log.warning("client_config.missing_header", extra={"model_id": model.id, "header": "api-version"})


class ClientManager:
    def __init__(
        self,
        registry: ModelRegistry,
        *,
        pool: ConnectionPool | None = None,
        factories: dict[ClientType, ClientFactory] | None = None,
    ):
        self._registry = registry
        self._pool = pool or ConnectionPool()
        self._factories = dict(DEFAULT_FACTORIES if factories is None else factories)
        self._clients: dict[str, ProviderClient] = {}
        # Locks are kept per id for the process lifetime; ids are bounded by the registry.
        self._locks: dict[str, asyncio.Lock] = {}

    async def get_client(self, model_id: str) -> ProviderClient:
        client = self._clients.get(model_id)
        if client is not None:
            return client

        model = self._registry.get_private_model_config(model_id)
        if model is None:
            raise ClientNotFoundError(ClientType.UNKNOWN, model_id=model_id)

        lock = self._locks.setdefault(model_id, asyncio.Lock())
        async with lock:
            # Another task may have finished construction while we waited.
            client = self._clients.get(model_id)
            if client is not None:
                return client

            client_type = determine_client_type(model)
            validate_model_config(model, client_type)
            client = self._create_client(model, client_type)
            self._clients[model_id] = client
            log.info("client.created", extra={"model_id": model_id, "client_type": client_type.value})
            return client

    def _create_client(self, model: ModelDescriptor, client_type: ClientType) -> ProviderClient:
        factory = self._factories.get(client_type)
        if factory is None:
            raise ClientNotFoundError(client_type, model_id=model.id)
        return factory(model, self._pool.get(model))

    def clear_client(self, model_id: str) -> None:
        self._clients.pop(model_id, None)

    def clear_all_clients(self) -> None:
        self._clients.clear()

    def get_active_clients(self) -> list[str]:
        return list(self._clients.keys())

    async def aclose(self) -> None:
        self.clear_all_clients()
        await self._pool.aclose()
