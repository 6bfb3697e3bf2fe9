"""외부 서비스 클라이언트 생성 및 라우트 주입

클라이언트는 startup 시 한 번 만들어 app.state 에 보관하고,
라우트는 Depends 로 받는다 (테스트에서는 dependency_overrides 로 교체).
"""
from typing import Optional

from fastapi import Request

from .config import Settings, settings
from .services.credits_service import SupabaseCreditsLedger
from .services.gemini_service import GeminiImageGenerator
from .utils.logger import logger


def build_image_generator(config: Settings) -> Optional[GeminiImageGenerator]:
    if not config.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set, /api/remodel will fail until it is configured")
        return None
    return GeminiImageGenerator(
        api_key=config.gemini_api_key,
        model=config.gemini_image_model,
        timeout_seconds=config.gemini_timeout_seconds,
    )


def build_credits_ledger(config: Settings) -> Optional[SupabaseCreditsLedger]:
    if not config.credits_enabled:
        logger.info("Supabase is not configured, credits will not be deducted")
        return None
    return SupabaseCreditsLedger(
        url=config.supabase_url,
        key=config.supabase_key,
        table=config.credits_table,
    )


def get_settings() -> Settings:
    return settings


def get_image_generator(request: Request) -> Optional[GeminiImageGenerator]:
    """미설정(GEMINI_API_KEY 없음)이면 None, 라우트가 요청 검증 후 500 으로 처리"""
    return getattr(request.app.state, "image_generator", None)


def get_credits_ledger(request: Request) -> Optional[SupabaseCreditsLedger]:
    return getattr(request.app.state, "credits_ledger", None)

