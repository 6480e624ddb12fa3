from __future__ import annotations

from fastapi import Request

from promptsmith.registry.models import ModelRegistry
from promptsmith.services.ai_service import AIService


def get_model_registry(request: Request) -> ModelRegistry:
    return request.app.state.model_registry


def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai_service
