from fastapi import APIRouter

from promptsmith.api.chat import router as chat_router
from promptsmith.api.health import router as health_router
from promptsmith.api.images import router as images_router
from promptsmith.api.metrics import router as metrics_router
from promptsmith.api.models import router as models_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(metrics_router)
api_router.include_router(models_router, prefix="/api")
api_router.include_router(chat_router, prefix="/api")
api_router.include_router(images_router, prefix="/api")

__all__ = ["api_router"]
