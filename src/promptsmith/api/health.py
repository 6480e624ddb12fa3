from __future__ import annotations

from fastapi import APIRouter, Depends

from promptsmith.core.deps import get_model_registry
from promptsmith.registry.models import ModelRegistry

router = APIRouter()


@router.get("/health")
def health(registry: ModelRegistry = Depends(get_model_registry)) -> dict[str, str]:
    return {"status": "ok", "models": registry.status.value}
