from fastapi import APIRouter, Body, Depends
import base64
import time
from typing import Any, Dict, Optional

from ..config import Settings
from ..dependencies import (
    get_credits_ledger,
    get_image_generator,
    get_settings,
)
from ..models.schemas import ErrorResponse, RemodelResponse, parse_remodel_request
from ..services.composer import compose, extract_image
from ..services.credits_service import SupabaseCreditsLedger
from ..services.gemini_service import GeminiImageGenerator
from ..utils.errors import GenerationFailed, MalformedRequest
from ..utils.images import verify_image_parts
from ..utils.logger import logger

router = APIRouter(prefix="/api", tags=["remodel"])


async def charge_credits(
    ledger: Optional[SupabaseCreditsLedger],
    user_id: Optional[str],
    config: Settings,
) -> Optional[int]:
    """크레딧 차감 (Supabase 미설정 시 건너뜀). 차감 후 잔액 반환"""
    if ledger is None:
        return None

    user = user_id or config.credits_default_user_id
    if not user:
        raise MalformedRequest("userId is required when credits are enabled.")

    return await ledger.debit(user, config.credit_cost_per_remodel)


@router.post(
    "/remodel",
    response_model=RemodelResponse,
    responses={
        400: {"model": ErrorResponse},
        402: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def remodel(
    payload: Dict[str, Any] = Body(...),
    generator: Optional[GeminiImageGenerator] = Depends(get_image_generator),
    ledger: Optional[SupabaseCreditsLedger] = Depends(get_credits_ledger),
    config: Settings = Depends(get_settings),
):
    """인테리어 리모델 이미지 생성 (style / inpainting / custom)"""
    start_time = time.time()
    logger.info(f"Remodel requested (mode={payload.get('remodelMode')})")

    # 1. 요청 검증 및 part 조립 (외부 호출 전에 400 으로 거절)
    remodel_request = parse_remodel_request(payload)
    composed = compose(remodel_request)
    verify_image_parts(composed.parts)

    if generator is None:
        logger.error("Image generator requested but not configured")
        raise GenerationFailed("Failed to generate image on the server.")

    # 2. 크레딧 차감
    balance = await charge_credits(ledger, remodel_request.user_id, config)
    if balance is not None:
        logger.info(f"Remaining credits: {balance}")

    # 3. 이미지 생성 및 추출
    result = await generator.generate(composed)
    image_bytes = extract_image(result)

    logger.info(
        f"Remodel ({remodel_request.remodel_mode}) completed in {time.time() - start_time:.2f}s "
        f"({len(image_bytes)} bytes)"
    )
    return RemodelResponse(image_data=base64.b64encode(image_bytes).decode("ascii"))
