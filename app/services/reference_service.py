from typing import List
from app.exception.common.not_found_exception import GenreNotFoundError, MpaNotFoundError
from app.models.dto import Genre, MpaRating
from app.repositories.base import IGenreRepository, IMpaRepository


class ReferenceService:
    """MPA 등급/장르 참조 데이터 조회 서비스 (읽기 전용)"""

    def __init__(self, mpa_repository: IMpaRepository, genre_repository: IGenreRepository):
        self.mpa_repository = mpa_repository
        self.genre_repository = genre_repository

    def get_all_mpa(self) -> List[MpaRating]:
        return self.mpa_repository.get_all()

    def get_mpa_by_id(self, mpa_id: int) -> MpaRating:
        mpa = self.mpa_repository.get_by_id(mpa_id)
        if mpa is None:
            raise MpaNotFoundError(mpa_id)
        return mpa

    def get_all_genres(self) -> List[Genre]:
        return self.genre_repository.get_all()

    def get_genre_by_id(self, genre_id: int) -> Genre:
        genre = self.genre_repository.get_by_id(genre_id)
        if genre is None:
            raise GenreNotFoundError(genre_id)
        return genre
