from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import remodel
from .config import settings
from .dependencies import build_credits_ledger, build_image_generator, get_settings
from .middleware import BodySizeLimitMiddleware
from .utils.errors import register_exception_handlers
from .utils.logger import logger

logger.info(f"Starting {settings.app_name} v{settings.app_version}")

# FastAPI 앱 생성
app = FastAPI(
    title=settings.app_name,
    description="인테리어 리모델 이미지 생성 프록시 API",
    version=settings.app_version,
    debug=settings.debug
)

# body 크기 제한 (JSON 파싱 전). dependency_overrides 로 바꾼 설정도 반영
app.add_middleware(
    BodySizeLimitMiddleware,
    settings_provider=lambda: app.dependency_overrides.get(get_settings, get_settings)(),
)

# CORS 설정 (환경변수 기반, 마지막에 등록해 가장 바깥에서 동작)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info(f"CORS enabled for origins: {settings.cors_origins}")

# 에러 응답 통일 ({"error": ..., "code": ...})
register_exception_handlers(app)

# 라우터 등록
app.include_router(remodel.router)


@app.get("/health")
async def health_check():
    """헬스 체크 및 시스템 상태"""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "gemini_api_key_configured": bool(settings.gemini_api_key),
        "credits_enabled": settings.credits_enabled,
        "config": {
            "image_model": settings.gemini_image_model,
            "max_request_size_mb": settings.max_request_size_mb,
            "timeout_seconds": settings.gemini_timeout_seconds
        }
    }


@app.on_event("startup")
async def startup_event():
    """애플리케이션 시작 시 외부 서비스 클라이언트 생성"""
    logger.info("="*50)
    logger.info("Application startup")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Gemini API configured: {bool(settings.gemini_api_key)}")
    logger.info(f"Credits enabled: {settings.credits_enabled}")
    logger.info(f"Max request size: {settings.max_request_size_mb}MB")
    logger.info("="*50)

    app.state.image_generator = build_image_generator(settings)
    app.state.credits_ledger = build_credits_ledger(settings)


@app.on_event("shutdown")
async def shutdown_event():
    """애플리케이션 종료 시 클라이언트 해제"""
    app.state.image_generator = None
    app.state.credits_ledger = None
    logger.info("Application shutdown")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
