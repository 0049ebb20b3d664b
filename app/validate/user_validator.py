import re
from datetime import date
from typing import Optional

from pydantic.networks import validate_email as parse_email_address
from pydantic_core import PydanticCustomError

from app.models.dto import User
from app.exception.common.invalid_argument_exception import InvalidArgumentError

WHITESPACE_PATTERN = re.compile(r"\s")

# --- 단위 검증 함수들 ---

def validate_email(user: User):
    if user.email is None or not user.email.strip():
        raise InvalidArgumentError("User email must not be blank")
    # 주소 형식 검사는 email-validator에 위임 (DNS 조회 없음)
    try:
        parse_email_address(user.email)
    except (PydanticCustomError, ValueError) as e:
        raise InvalidArgumentError(f"User email '{user.email}' is not a valid address") from e

def validate_login(user: User):
    if user.login is None or not user.login.strip():
        raise InvalidArgumentError("User login must not be blank")
    if WHITESPACE_PATTERN.search(user.login):
        raise InvalidArgumentError("User login must not contain whitespace")

def validate_birthday(user: User, today: Optional[date] = None):
    today = today or date.today()
    if user.birthday is not None and user.birthday > today:
        raise InvalidArgumentError("User birthday must not be in the future")

# --- 조합 검증 함수 ---

def validate_user(user: User, today: Optional[date] = None):
    """사용자 한 건에 대한 이메일/로그인/생일 규칙을 검증합니다."""
    validate_email(user)
    validate_login(user)
    validate_birthday(user, today)
