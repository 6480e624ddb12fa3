"""Prometheus metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from promptsmith.core.deps import get_model_registry
from promptsmith.core.metrics import observe_registry
from promptsmith.registry.models import ModelRegistry

router = APIRouter()


@router.get("/metrics")
def metrics(registry: ModelRegistry = Depends(get_model_registry)) -> Response:
    """Generation counters plus registry gauges taken at scrape time."""
    observe_registry(registry)
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
