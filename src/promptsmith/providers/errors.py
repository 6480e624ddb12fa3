from __future__ import annotations

from promptsmith.domain.models import ClientType


class ProviderClientError(Exception):
    """Base class for everything the provider layer raises."""

    def __init__(self, message: str, provider_type: ClientType | str = ClientType.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.provider_type = ClientType(provider_type)


class ClientError(ProviderClientError):
    """A provider call was made and failed."""

    def __init__(self, message: str, provider_type: ClientType | str, cause: BaseException | None = None):
        super().__init__(message, provider_type)
        self.cause = cause


class ClientNotFoundError(ProviderClientError):
    """No implementation (or no descriptor) for the resolved provider type."""

    def __init__(self, provider_type: ClientType | str = ClientType.UNKNOWN, *, model_id: str | None = None):
        super().__init__(f"AI client not found for type: {ClientType(provider_type).value}", provider_type)
        self.model_id = model_id


class ClientConfigError(ProviderClientError):
    """A required descriptor field is missing or invalid."""

    def __init__(self, provider_type: ClientType | str, issue: str):
        super().__init__(f"Configuration error for {ClientType(provider_type).value}: {issue}", provider_type)
        self.issue = issue
