import logging
from typing import List

from app.exception.common.invalid_argument_exception import InvalidArgumentError
from app.exception.common.not_found_exception import UserNotFoundError
from app.models.dto import User
from app.repositories.base import IUserRepository
from app.validate.user_validator import validate_user

logger = logging.getLogger(__name__)


class UserService:
    """사용자 CRUD, 친구 관계 관리, 공통 친구 조회 서비스"""

    def __init__(self, user_repository: IUserRepository):
        self.user_repository = user_repository

    def get_all_users(self) -> List[User]:
        return self.user_repository.get_all()

    def get_user_by_id(self, user_id: int) -> User:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def create_user(self, user: User) -> User:
        validate_user(user)
        return self.user_repository.create(self._with_display_name(user))

    def update_user(self, user: User) -> User:
        validate_user(user)
        if user.id is None:
            raise UserNotFoundError(user.id)
        self.get_user_by_id(user.id)
        return self.user_repository.update(self._with_display_name(user))

    def delete_user(self, user_id: int) -> None:
        self.user_repository.delete(user_id)

    def add_friend(self, user_id: int, friend_id: int) -> None:
        """
        두 사용자를 서로의 친구로 등록합니다. (양방향 동시 기록)

        Raises:
            UserNotFoundError: 둘 중 하나라도 존재하지 않을 때
            InvalidArgumentError: 자기 자신을 친구로 추가하려 할 때
        """
        self._ensure_users_exist(user_id, friend_id)
        if user_id == friend_id:
            raise InvalidArgumentError(f"User {user_id} cannot add themselves as a friend")
        self.user_repository.add_friend(user_id, friend_id)

    def remove_friend(self, user_id: int, friend_id: int) -> None:
        self._ensure_users_exist(user_id, friend_id)
        self.user_repository.remove_friend(user_id, friend_id)

    def get_friends(self, user_id: int) -> List[User]:
        self.get_user_by_id(user_id)
        return self.user_repository.get_friends(user_id)

    def get_common_friends(self, user_id: int, other_id: int) -> List[User]:
        self._ensure_users_exist(user_id, other_id)
        return self.user_repository.get_common_friends(user_id, other_id)

    # ==================== Private Methods ====================

    @staticmethod
    def _with_display_name(user: User) -> User:
        # 이름이 비어 있으면 로그인을 표시 이름으로 사용
        if user.name is None or not user.name.strip():
            logger.info(f"Display name for login '{user.login}' defaults to the login")
            return user.model_copy(update={"name": user.login})
        return user

    def _ensure_users_exist(self, *user_ids: int) -> None:
        for user_id in user_ids:
            if not self.user_repository.exists_by_id(user_id):
                raise UserNotFoundError(user_id)
