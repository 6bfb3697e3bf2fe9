"""요청 body 크기 제한 ASGI 미들웨어

라우트가 body 를 JSON 으로 파싱하기 전에 Content-Length 및 실제 수신 바이트로
제한을 확인한다. 제한 이내면 읽어 둔 body 를 그대로 앱에 다시 흘려준다.
"""
from typing import Callable

from fastapi.responses import JSONResponse

from .config import Settings
from .utils.errors import PayloadTooLarge, error_payload
from .utils.logger import logger

BODY_METHODS = {"POST", "PUT", "PATCH"}


class BodySizeLimitMiddleware:
    def __init__(self, app, settings_provider: Callable[[], Settings]):
        self.app = app
        self.settings_provider = settings_provider

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or scope["method"] not in BODY_METHODS:
            await self.app(scope, receive, send)
            return

        limit = self.settings_provider().max_request_size_bytes

        headers = dict(scope.get("headers") or [])
        content_length = headers.get(b"content-length", b"")
        if content_length.isdigit() and int(content_length) > limit:
            await self.reject(scope, receive, send, limit)
            return

        # chunked 전송 등 Content-Length 가 없거나 틀린 경우
        chunks = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > limit:
                await self.reject(scope, receive, send, limit)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        replayed = False

        async def replay():
            nonlocal replayed
            if replayed:
                return await receive()
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}

        await self.app(scope, replay, send)

    @staticmethod
    async def reject(scope, receive, send, limit: int):
        exc = PayloadTooLarge(f"Request body exceeds {limit // (1024 * 1024)}MB.")
        logger.warning(f"{scope['method']} {scope['path']} -> {exc.status_code} {exc}")
        response = JSONResponse(
            status_code=exc.status_code,
            content=error_payload(exc.message, exc.error_code),
        )
        await response(scope, receive, send)
