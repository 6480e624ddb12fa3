"""Process-wide registry of model descriptors.

The registry is built once (normally from `Settings` during app startup) and is
read-only afterwards. Public accessors always strip connection details; the
`*_with_private_data` / `get_private_model_config` accessors are for the
provider layer only.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from promptsmith.core.config import Settings
from promptsmith.domain.models import ModelDescriptor, ModelsConfig, PublicModel

log = logging.getLogger(__name__)


class RegistryStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class LoadResult:
    config: ModelsConfig
    status: RegistryStatus
    error: str | None = None


def parse_config(raw: str | None) -> LoadResult:
    """Parse a `{"models": [...]}` document.

    Never raises: a missing document yields an empty registry, an invalid one
    yields an empty registry in the degraded state. Validation is all-or-nothing.
    """
    if not raw or not raw.strip():
        return LoadResult(config=ModelsConfig(models=[]), status=RegistryStatus.EMPTY)

    try:
        data = json.loads(raw)
        if not isinstance(data, dict) or not isinstance(data.get("models"), list):
            raise ValueError("Invalid models configuration: models array is required")
        config = ModelsConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        # ValidationError and JSONDecodeError are both ValueError subclasses.
        log.error("registry.parse_failed", extra={"error": str(e)})
        log.warning("registry.fallback_empty")
        return LoadResult(config=ModelsConfig(models=[]), status=RegistryStatus.DEGRADED, error=str(e))

    return LoadResult(config=config, status=RegistryStatus.OK)


def _read_raw_config(settings: Settings) -> str | None:
    if settings.models_config:
        return settings.models_config
    if settings.models_config_path:
        return Path(settings.models_config_path).read_text(encoding="utf-8")
    return None


def _as_group_set(groups: str | Iterable[str]) -> set[str]:
    if isinstance(groups, str):
        return {groups}
    return set(groups)


class ModelRegistry:
    def __init__(self, result: LoadResult):
        self._config = result.config
        self._by_id: dict[str, ModelDescriptor] = {m.id: m for m in result.config.models}
        self.status = result.status
        self.load_error = result.error

    @classmethod
    def from_raw(cls, raw: str | None) -> ModelRegistry:
        return cls(parse_config(raw))

    @classmethod
    def from_settings(cls, settings: Settings) -> ModelRegistry:
        try:
            result = parse_config(_read_raw_config(settings))
        except (OSError, UnicodeDecodeError) as e:
            # Unreadable or not UTF-8.
            log.error("registry.read_failed", extra={"path": settings.models_config_path, "error": str(e)})
            result = LoadResult(config=ModelsConfig(models=[]), status=RegistryStatus.DEGRADED, error=str(e))
        registry = cls(result)
        log.info(
            "registry.loaded",
            extra={"status": registry.status.value, "models": [m.id for m in registry._config.models]},
        )
        return registry

    @property
    def degraded(self) -> bool:
        return self.status is RegistryStatus.DEGRADED

    def get_all_models(self) -> list[PublicModel]:
        return [m.to_public() for m in self._config.models]

    def get_all_models_with_private_data(self) -> list[ModelDescriptor]:
        return list(self._config.models)

    def get_models_by_group(self, groups: str | Iterable[str]) -> list[PublicModel]:
        return [m.to_public() for m in self.get_models_by_group_with_private_data(groups)]

    def get_models_by_group_with_private_data(self, groups: str | Iterable[str]) -> list[ModelDescriptor]:
        wanted = _as_group_set(groups)
        return [m for m in self._config.models if m.in_groups(wanted)]

    def get_model_by_id(self, model_id: str) -> PublicModel | None:
        model = self._by_id.get(model_id)
        return model.to_public() if model is not None else None

    def get_private_model_config(self, model_id: str) -> ModelDescriptor | None:
        return self._by_id.get(model_id)

    def is_valid_model_id(self, model_id: str) -> bool:
        return model_id in self._by_id

    def get_available_groups(self) -> list[str]:
        return sorted({g for m in self._config.models for g in m.groups})

    def get_default_model_for_group(self, group: str) -> PublicModel | None:
        # Load order decides.
        models = self.get_models_by_group(group)
        return models[0] if models else None
