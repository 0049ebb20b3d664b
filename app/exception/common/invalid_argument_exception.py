from app.exception.base_exception import BaseCustomException, ErrorCode


class InvalidArgumentError(BaseCustomException):
    """호출자가 넘긴 값이 도메인 규칙을 위반함 (저장소 변경 전에 검사)"""
    error_code = ErrorCode.INVALID_ARGUMENT
    message = "Invalid argument."
    status_code = 400
