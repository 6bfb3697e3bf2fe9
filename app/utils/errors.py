"""리모델 파이프라인 에러 정의 및 FastAPI 핸들러 등록"""
from typing import Any, Dict, Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logger import logger


class RemodelError(Exception):
    """모든 리모델 요청 실패의 기본 클래스 (JSON 에러 응답으로 변환됨)"""

    status_code: int = 500
    error_code: str = "remodel_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class MalformedRequest(RemodelError):
    """모드에 필요한 필드가 없거나 payload 를 해석할 수 없음"""

    status_code = 400
    error_code = "malformed_request"


class PayloadTooLarge(RemodelError):
    status_code = 413
    error_code = "payload_too_large"


class InsufficientCredits(RemodelError):
    status_code = 402
    error_code = "insufficient_credits"


class CreditsUnavailable(RemodelError):
    """크레딧 저장소(Supabase) 호출 실패"""

    status_code = 503
    error_code = "credits_unavailable"


class GenerationFailed(RemodelError):
    """이미지 생성 API 호출 자체가 실패 (네트워크, quota, 인증, 타임아웃)"""

    status_code = 500
    error_code = "generation_failed"


class NoImageReturned(RemodelError):
    """API 는 응답했지만 이미지 part 가 없음"""

    status_code = 500
    error_code = "no_image_returned"


def error_payload(message: str, error_code: str) -> Dict[str, str]:
    return {"error": message, "code": error_code}


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """pydantic 에러 목록 → 한 줄 메시지"""
    problems = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid remodel request. " + "; ".join(problems)


def register_exception_handlers(app: FastAPI) -> None:
    """모든 실패를 {"error": ..., "code": ...} 형태로 응답"""

    @app.exception_handler(RemodelError)
    async def remodel_error_handler(request: Request, exc: RemodelError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc}")
        if exc.details:
            # 모델 거절 사유 등 응답에 싣지 않는 내용은 로그로만 남김
            logger.warning(f"{exc.error_code} details: {exc.details}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(exc.message, exc.error_code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = format_validation_errors(exc.errors())
        logger.warning(f"{request.method} {request.url.path} -> 400 {message}")
        return JSONResponse(
            status_code=MalformedRequest.status_code,
            content=error_payload(message, MalformedRequest.error_code),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.url.path}: {type(exc).__name__}: {str(exc)}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=error_payload("Failed to generate image on the server.", "internal_error"),
        )
