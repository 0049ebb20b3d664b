"""
영화 도메인 서비스 (FilmService)

역할:
    - 영화 CRUD 전 도메인 규칙 검증 (app.validate.film_validator)
    - MPA/장르 참조 존재 여부 확인
    - 좋아요 추가/삭제, 인기 영화 조회

Rationale:
    모든 검증은 저장소 변경 전에 끝냅니다. 검증이 실패하면 어떤 행도 쓰이지 않습니다.
    인기 순위는 저장소의 집계 쿼리 하나에 위임하여 좋아요 수 계산의 출처를 하나로 유지합니다.
"""

import logging
from typing import List, Optional

from app.core.config import POPULAR_FILMS_DEFAULT_COUNT
from app.exception.common.not_found_exception import (
    FilmNotFoundError,
    GenreNotFoundError,
    MpaNotFoundError,
    UserNotFoundError,
)
from app.models.dto import Film
from app.repositories.base import IFilmRepository, IGenreRepository, IMpaRepository, IUserRepository
from app.validate.film_validator import validate_film

logger = logging.getLogger(__name__)


class FilmService:
    def __init__(
        self,
        film_repository: IFilmRepository,
        user_repository: IUserRepository,
        mpa_repository: IMpaRepository,
        genre_repository: IGenreRepository,
        default_popular_count: int = POPULAR_FILMS_DEFAULT_COUNT,
    ):
        self.film_repository = film_repository
        self.user_repository = user_repository
        self.mpa_repository = mpa_repository
        self.genre_repository = genre_repository
        self.default_popular_count = default_popular_count

    def get_all_films(self) -> List[Film]:
        return self.film_repository.get_all()

    def get_film_by_id(self, film_id: int) -> Film:
        film = self.film_repository.get_by_id(film_id)
        if film is None:
            raise FilmNotFoundError(film_id)
        return film

    def create_film(self, film: Film) -> Film:
        self._validate(film)
        return self.film_repository.create(film)

    def update_film(self, film: Film) -> Film:
        """
        영화 전체 교체

        Raises:
            InvalidArgumentError: 도메인 규칙 위반
            MpaNotFoundError / GenreNotFoundError: 참조 데이터 미존재
            FilmNotFoundError: film.id가 없거나 존재하지 않음
        """
        self._validate(film)
        if film.id is None:
            raise FilmNotFoundError(film.id)
        self.get_film_by_id(film.id)
        return self.film_repository.update(film)

    def delete_film(self, film_id: int) -> None:
        self.film_repository.delete(film_id)

    def add_like(self, film_id: int, user_id: int) -> None:
        self._ensure_film_and_user(film_id, user_id)
        self.film_repository.add_like(film_id, user_id)

    def remove_like(self, film_id: int, user_id: int) -> None:
        """좋아요 삭제. 영화/사용자는 존재해야 하지만, 좋아요 자체가 없으면 no-op입니다."""
        self._ensure_film_and_user(film_id, user_id)
        self.film_repository.remove_like(film_id, user_id)

    def get_popular_films(self, count: Optional[int] = None) -> List[Film]:
        """
        Args:
            count (Optional[int]): 반환 개수. None 또는 0 이하이면 기본값(10)을 사용

        Returns:
            List[Film]: 좋아요 수 내림차순, 동점이면 id 오름차순
        """
        if count is None or count <= 0:
            count = self.default_popular_count
        return self.film_repository.get_popular(count)

    # ==================== Private Methods ====================

    def _validate(self, film: Film) -> None:
        validate_film(film)
        self._validate_mpa_exists(film)
        self._validate_genres_exist(film)

    def _validate_mpa_exists(self, film: Film) -> None:
        if self.mpa_repository.get_by_id(film.mpa.id) is None:
            logger.warning(f"Film references unknown MPA rating id={film.mpa.id}")
            raise MpaNotFoundError(film.mpa.id)

    def _validate_genres_exist(self, film: Film) -> None:
        if not film.genres:
            return

        existing_ids = {genre.id for genre in self.genre_repository.get_all()}
        for genre_id in film.genre_ids():
            if genre_id not in existing_ids:
                logger.warning(f"Film references unknown genre id={genre_id}")
                raise GenreNotFoundError(genre_id, available_ids=existing_ids)

    def _ensure_film_and_user(self, film_id: int, user_id: int) -> None:
        if not self.film_repository.exists_by_id(film_id):
            raise FilmNotFoundError(film_id)
        if not self.user_repository.exists_by_id(user_id):
            raise UserNotFoundError(user_id)
