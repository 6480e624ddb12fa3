from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from promptsmith.core.deps import get_ai_service
from promptsmith.core.errors import bad_request, internal_error
from promptsmith.core.logging import LogContext, with_context
from promptsmith.domain.api import ChatRequest, ChatResponse, JsonPrompt
from promptsmith.domain.generation import EnhancementConfig
from promptsmith.services.ai_service import AIService

router = APIRouter()
log = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(
    request: Request,
    body: ChatRequest,
    service: AIService = Depends(get_ai_service),
) -> ChatResponse:
    if not body.prompt.strip():
        raise bad_request("Prompt is required")
    if not body.model:
        raise bad_request("Model is required")

    logger = with_context(
        log,
        LogContext(request_id=getattr(request.state, "request_id", None), model=body.model, capability="text"),
    )
    params = body.parameters
    result = await service.generate_enhanced_prompt(
        body.model,
        body.prompt,
        EnhancementConfig(
            use_case=params.use_case,
            tone=params.tone,
            lighting=params.lighting,
            composition=params.composition,
            color_theme=params.color_theme,
            image_style=params.image_style,
            aspect_ratio=params.aspect_ratio,
        ),
    )
    if not result.success:
        logger.warning("chat.enhance.failed")
        raise internal_error(result.error or "Failed to generate enhanced prompt")

    logger.info("chat.enhance.done")
    return ChatResponse(
        success=True,
        data=JsonPrompt(
            # Fall back to what the user typed when the model returns nothing.
            prompt=result.data or body.prompt,
            system_instructions=body.system_instructions,
            model=body.model,
            parameters=params.model_dump(by_alias=False),
        ),
    )
