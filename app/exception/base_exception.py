from enum import Enum

class ErrorCode(str, Enum):
    """
    애플리케이션 전반에서 사용하는 에러 코드 정의.
    형식: 카테고리(영문)-번호(3자리)
    """
    # 1. COMMON: 공통/일반 에러
    GENERIC_UNKNOWN = "GENERIC-000"
    COMMON_INTERNAL_ERROR = "COMMON-001"
    COMMON_BAD_REQUEST = "COMMON-002"

    # 2. ENTITY: 참조 대상 미존재
    ENTITY_NOT_FOUND = "ENTITY-001"
    FILM_NOT_FOUND = "FILM-001"
    USER_NOT_FOUND = "USER-001"
    MPA_NOT_FOUND = "MPA-001"
    GENRE_NOT_FOUND = "GENRE-001"

    # 3. ARGUMENT: 도메인 규칙 위반
    INVALID_ARGUMENT = "ARGUMENT-001"

    # 4. STORAGE: 저장소 수준 무결성 위반
    INTEGRITY_CONFLICT = "STORAGE-001"


class BaseCustomException(Exception):
    """
    모든 커스텀 예외의 최상위 클래스.
    이 클래스를 상속받아 구체적인 예외를 정의해야 함.
    """
    error_code: ErrorCode = ErrorCode.GENERIC_UNKNOWN
    message: str = "An unknown error occurred."
    status_code: int = 500

    def __init__(self, message: str = None, error_code: ErrorCode = None, status_code: int = None):
        if message:
            self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)
