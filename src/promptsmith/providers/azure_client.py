from __future__ import annotations

from promptsmith.domain.models import ClientType
from promptsmith.providers.openai_client import OpenAIClient

DEFAULT_API_VERSION = "2024-02-01"


class AzureOpenAIClient(OpenAIClient):
    """Azure OpenAI: deployment-scoped paths, `api-key` auth, `api-version` query param."""

    client_type = ClientType.AZURE_OPENAI

    @property
    def api_version(self) -> str:
        headers = self.model.headers or {}
        return self.model.api_version or headers.get("api-version") or DEFAULT_API_VERSION

    @property
    def _deployment_path(self) -> str:
        return f"/openai/deployments/{self.request_model}"

    @property
    def chat_path(self) -> str:  # type: ignore[override]
        return f"{self._deployment_path}/chat/completions"

    @property
    def image_path(self) -> str:  # type: ignore[override]
        return f"{self._deployment_path}/images/generations"

    def _headers(self) -> dict[str, str]:
        headers = {"api-key": self.model.api_token or ""}
        # api-version travels as a query parameter, not a header.
        headers.update({k: v for k, v in (self.model.headers or {}).items() if k != "api-version"})
        return headers

    def _query_params(self) -> dict[str, str] | None:
        return {"api-version": self.api_version}
