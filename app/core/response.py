from typing import TypeVar, Generic, Optional, Any
from pydantic import BaseModel, ConfigDict
from app.core.error_codes import ErrorCode

T = TypeVar('T')

class ApiResponse(BaseModel, Generic[T]):
    """
    API 공통 응답 모델 (Envelope Pattern)

    Attributes:
        isSuccess (bool): 성공 여부
        code (str): 응답 코드 (성공: "COMMON200", 실패: 에러코드)
        message (str): 메시지
        result (T | None): 실제 데이터 (영화, 사용자, 목록 등). 실패 시 상세 정보 또는 null
    """
    isSuccess: bool
    code: str
    message: str
    result: Optional[T] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "isSuccess": True,
                    "code": "COMMON200",
                    "message": "OK",
                    "result": {"id": 1, "name": "Nosferatu", "likes": [2, 5]}
                },
                {
                    "isSuccess": False,
                    "code": "FILM-001",
                    "message": "Film with id 42 not found",
                    "result": None
                }
            ]
        }
    )


class ValidationErrorDetail(BaseModel):
    """
    Validation 에러의 상세 정보를 담는 모델
    """
    message: str
    type: str
    input: Any | None = None


def success_response(result: Any = None, code: str = ErrorCode.COMMON_SUCCESS, message: str = "OK") -> ApiResponse[Any]:
    """성공 응답 생성 팩토리 함수"""
    return ApiResponse(isSuccess=True, code=code, message=message, result=result)


def error_response(message: str, code: str = "ERROR", result: Optional[Any] = None) -> ApiResponse[Any]:
    """실패 응답 생성 팩토리 함수"""
    return ApiResponse(isSuccess=False, code=code, message=message, result=result)
