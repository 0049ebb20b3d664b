from typing import Protocol, List, Optional
from app.models.dto import Film, User, MpaRating, Genre


class IFilmRepository(Protocol):
    """영화 저장소 인터페이스 (Repository Pattern Protocol)

    Note:
        구현체는 likes 관계 상태까지 함께 소유합니다.
        서비스 계층은 이 인터페이스에만 의존하므로 백엔드를 바꿔도 로직이 그대로입니다.
    """

    def get_all(self) -> List[Film]:
        """
        전체 영화 목록 조회

        Returns:
            List[Film]: id 오름차순, genres/likes가 채워진 영화 목록
        """
        ...

    def get_by_id(self, film_id: int) -> Optional[Film]:
        """
        단건 조회. 존재하지 않으면 예외 대신 None을 반환합니다.
        """
        ...

    def create(self, film: Film) -> Film:
        """
        영화 생성

        Args:
            film (Film): 저장할 영화. 호출자가 넣은 id는 무시됩니다.

        Returns:
            Film: 새 id가 부여된 저장 형태 (likes는 빈 목록)

        Raises:
            IntegrityConflictError: 존재하지 않는 MPA/장르 참조 등 쓰기 시점 무결성 위반
        """
        ...

    def update(self, film: Film) -> Film:
        """
        가변 필드 전체 교체 (부분 수정 아님). 장르 연결도 통째로 교체합니다.

        Raises:
            FilmNotFoundError: film.id에 해당하는 행이 없을 때
        """
        ...

    def delete(self, film_id: int) -> None:
        """
        영화 삭제. 해당 영화의 장르 연결과 좋아요도 함께 제거합니다.

        Raises:
            FilmNotFoundError: 존재하지 않는 id
        """
        ...

    def exists_by_id(self, film_id: int) -> bool:
        ...

    def add_like(self, film_id: int, user_id: int) -> None:
        """좋아요 추가 (집합 의미론: 중복 추가는 효과 없음)"""
        ...

    def remove_like(self, film_id: int, user_id: int) -> None:
        """좋아요 삭제 (멱등: 없는 좋아요 삭제는 no-op)"""
        ...

    def get_popular(self, count: int) -> List[Film]:
        """
        좋아요 수 내림차순 인기 영화 목록

        Args:
            count (int): 최대 반환 개수

        Returns:
            List[Film]: 좋아요 0개인 영화도 포함. 동점이면 id 오름차순
        """
        ...


class IUserRepository(Protocol):
    """사용자 저장소 인터페이스. 친구 관계 상태도 함께 소유합니다."""

    def get_all(self) -> List[User]:
        ...

    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def create(self, user: User) -> User:
        ...

    def update(self, user: User) -> User:
        """
        Raises:
            UserNotFoundError: user.id에 해당하는 행이 없을 때
        """
        ...

    def delete(self, user_id: int) -> None:
        """
        사용자 삭제. 친구 관계(양방향)와 그 사용자의 좋아요도 함께 제거합니다.

        Raises:
            UserNotFoundError: 존재하지 않는 id
        """
        ...

    def exists_by_id(self, user_id: int) -> bool:
        ...

    def add_friend(self, user_id: int, friend_id: int) -> None:
        """양방향(A→B, B→A)을 한 번에 기록합니다. 이미 친구면 no-op."""
        ...

    def remove_friend(self, user_id: int, friend_id: int) -> None:
        """양방향을 한 번에 제거합니다. 관계가 없으면 no-op."""
        ...

    def get_friends(self, user_id: int) -> List[User]:
        """친구 목록 (id 오름차순)"""
        ...

    def get_common_friends(self, user_id: int, other_id: int) -> List[User]:
        """두 사용자의 친구 집합 교집합 (id 오름차순)"""
        ...


class IMpaRepository(Protocol):
    """MPA 등급 조회 전용 저장소"""

    def get_all(self) -> List[MpaRating]:
        ...

    def get_by_id(self, mpa_id: int) -> Optional[MpaRating]:
        ...


class IGenreRepository(Protocol):
    """장르 조회 전용 저장소"""

    def get_all(self) -> List[Genre]:
        ...

    def get_by_id(self, genre_id: int) -> Optional[Genre]:
        ...
