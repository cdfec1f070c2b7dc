import logging
from typing import Any

from fastapi import APIRouter, Depends

from liirat_api.core.exceptions import ConfigurationError, UpstreamError
from liirat_api.core.responses import legacy_error
from liirat_api.deps import get_chat_service
from liirat_api.schemas.chat import AIChatRequest, ChatRequest, TranslateRequest
from liirat_api.services.chat_service import ChatService, error_message_for, localized
from liirat_api.services.translate_service import translate
from liirat_api.utils.date_utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assistant"])


@router.post("/ai-chat")
async def ai_chat(
    request: AIChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> Any:
    """단일 프롬프트 AI 응답"""
    try:
        response = await service.quick_reply(request.prompt)
    except ConfigurationError as e:
        return legacy_error(500, e.message)
    except UpstreamError as e:
        return legacy_error(500, "Internal server error", message=e.message)
    return {"response": response}


@router.post("/chat")
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> Any:
    """시장 데이터 기반 AI 어시스턴트 (아랍어/영어)"""
    language = request.language or "ar"
    if not request.message:
        return legacy_error(400, localized("message_required", language))

    if not service.configured:
        logger.error("OpenAI API key not found")
        return legacy_error(
            500, "OpenAI API key not configured", response=localized("unavailable", language)
        )

    try:
        response = await service.reply(request.message, language)
    except ConfigurationError:
        return legacy_error(
            500, "OpenAI API key not configured", response=localized("unavailable", language)
        )
    except UpstreamError as e:
        logger.error(f"Chat failed: {e}")
        return legacy_error(
            500,
            "Failed to process chat request",
            response=error_message_for(e.upstream_status, language),
        )

    return {"response": response, "timestamp": utc_now_iso()}


@router.post("/translate")
async def translate_text(request: TranslateRequest) -> Any:
    """경제 용어 사전 기반 번역"""
    if not request.text or not request.targetLanguage:
        return legacy_error(400, "Missing required fields: text and targetLanguage")

    return {
        "translatedText": translate(request.text, request.targetLanguage),
        "originalText": request.text,
        "targetLanguage": request.targetLanguage,
        "success": True,
    }
