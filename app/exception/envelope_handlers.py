from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException
import logging
from app.core.response import error_response, ValidationErrorDetail
from app.core.error_codes import ErrorCode
from app.exception.base_exception import BaseCustomException
from app.core import config
import traceback

logger = logging.getLogger("app")


async def custom_exception_handler(request: Request, exc: BaseCustomException):
    """
    도메인 예외(BaseCustomException)를 ApiResponse 포맷으로 변환

    Rationale:
        NotFound/InvalidArgument/IntegrityConflict는 호출자 책임의 종료형 실패이므로
        스택 트레이스 없이 경고 수준으로 로깅합니다.
    """
    # error_code가 Enum이면 .value, 아니면 그대로 사용
    error_code_value = exc.error_code.value if hasattr(exc.error_code, 'value') else exc.error_code

    logger.warning({
        "status": exc.status_code,
        "errorCode": error_code_value,
        "message": exc.message,
        "path": request.url.path
    })
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=exc.message,
            code=error_code_value
        ).model_dump()
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """HTTPException(라우팅 404, 405 등)도 표준 Envelope 포맷으로 변환"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=str(exc.detail),
            code=ErrorCode.http_error(exc.status_code)
        ).model_dump()
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    요청 본문/경로 파라미터의 타입 오류(422)를 필드별 상세 정보와 함께 반환
    """
    error_details = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        error_details[field] = ValidationErrorDetail(
            message=error["msg"],
            type=error["type"],
            input=error.get("input")
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder(error_response(
            message="Request body or parameters are malformed.",
            code=ErrorCode.VALIDATION_ERROR,
            result=error_details
        ))
    )


async def global_exception_handler_envelope(request: Request, exc: Exception):
    """
    미처리 예외(500)를 ApiResponse 포맷으로 변환

    Rationale:
        상세 스택 트레이스는 로그에만 기록하고, 개발 환경(APP_ENV=development)에서만
        응답 본문에 포함합니다.
    """
    logger.exception(
        f"Unhandled Exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )

    if config.IS_DEBUG:
        error_result = {
            "error_detail": str(exc),
            "stack_trace": traceback.format_exc()
        }
    else:
        error_result = None

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            message="Internal server error.",
            code=ErrorCode.INTERNAL_ERROR,
            result=error_result
        ).model_dump()
    )
