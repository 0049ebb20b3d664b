import logging
import uuid
import re
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from app.core.context import reset_trace_id, set_trace_id

logger = logging.getLogger(__name__)

# UUID 형식 검증 정규식 (8-4-4-4-12)
UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE
)


class TraceIDMiddleware(BaseHTTPMiddleware):
    """
    HTTP 요청 추적을 위한 Trace ID 관리 미들웨어

    - 요청 헤더(X-Trace-ID)가 UUID 형식이면 해당 값을 사용
    - 없거나 형식이 잘못되었으면 새로운 UUIDv4를 발급
    - 응답 헤더(X-Trace-ID)에 포함하여 클라이언트에 반환
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = request.headers.get("X-Trace-ID")

        if trace_id and not UUID_PATTERN.match(trace_id):
            logger.warning(f"Invalid Trace ID received: {trace_id}")
            trace_id = None

        if not trace_id:
            trace_id = str(uuid.uuid4())

        token = set_trace_id(trace_id)
        request.state.trace_id = trace_id

        try:
            response = await call_next(request)
        finally:
            reset_trace_id(token)

        response.headers["X-Trace-ID"] = trace_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """요청 메서드/경로와 응답 상태 코드를 INFO로 기록합니다. (헬스체크 제외)"""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if request.url.path != "/ping":
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                },
            )
        return response
