from app.exception.base_exception import BaseCustomException, ErrorCode


class IntegrityConflictError(BaseCustomException):
    """
    저장소 쓰기 시점에 드러난 무결성 위반.

    Rationale:
        백엔드별 예외(sqlalchemy IntegrityError 등)를 호출자에게 그대로
        노출하지 않고 하나의 종료형 오류로 변환합니다.
    """
    error_code = ErrorCode.INTEGRITY_CONFLICT
    message = "Storage integrity violation."
    status_code = 409
