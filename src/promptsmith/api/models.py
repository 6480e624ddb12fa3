from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from promptsmith.core.deps import get_model_registry
from promptsmith.domain.api import ModelsResponse
from promptsmith.registry.models import ModelRegistry

router = APIRouter()


@router.get("/models", response_model=ModelsResponse, response_model_exclude_none=True)
def list_models(
    group: list[str] | None = Query(default=None),
    registry: ModelRegistry = Depends(get_model_registry),
) -> ModelsResponse:
    models = registry.get_models_by_group(group) if group else registry.get_all_models()
    return ModelsResponse(
        models=models,
        groups=registry.get_available_groups(),
        status=registry.status.value,
    )
