from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from promptsmith.core.deps import get_ai_service
from promptsmith.core.errors import bad_request, internal_error
from promptsmith.core.logging import LogContext, with_context
from promptsmith.domain.api import (
    ImageGenerationRequest,
    ImageGenerationResponse,
    ImageResult,
    ImageResultMetadata,
)
from promptsmith.domain.generation import ImageGenerationOptions
from promptsmith.services.ai_service import AIService

router = APIRouter()
log = logging.getLogger(__name__)


@router.post(
    "/generate-image",
    response_model=ImageGenerationResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
async def generate_image(
    request: Request,
    body: ImageGenerationRequest,
    service: AIService = Depends(get_ai_service),
) -> ImageGenerationResponse:
    if not body.prompt.strip():
        raise bad_request("Prompt is required")
    if not body.model:
        raise bad_request("Model is required")

    logger = with_context(
        log,
        LogContext(request_id=getattr(request.state, "request_id", None), model=body.model, capability="image"),
    )
    params = body.parameters
    result = await service.generate_image(
        body.model,
        body.prompt,
        ImageGenerationOptions(
            size=params.size,
            aspect_ratio=params.aspect_ratio,
            quality=params.quality,
            style=params.image_style,
            n=params.n,
        ),
    )
    if not result.success:
        logger.warning("image.generate.failed")
        raise internal_error(result.error or "Failed to generate image")

    meta = result.metadata
    logger.info("image.generate.done")
    return ImageGenerationResponse(
        success=True,
        data=ImageResult(
            image_url=result.data or "",
            metadata=ImageResultMetadata(
                model=body.model,
                prompt=body.prompt,
                duration=meta.duration if meta else None,
                tokens_used=meta.tokens_used if meta else None,
            ),
        ),
    )
