from __future__ import annotations
from functools import lru_cache
from fastapi import Depends

from app.core import config
from app.repositories.base import IFilmRepository, IGenreRepository, IMpaRepository, IUserRepository
from app.repositories.memory import (
    InMemoryFilmRepository,
    InMemoryGenreRepository,
    InMemoryMpaRepository,
    InMemoryStore,
    InMemoryUserRepository,
)
from app.repositories.sql import SqlFilmRepository, SqlGenreRepository, SqlMpaRepository, SqlUserRepository
from app.services.film_service import FilmService
from app.services.reference_service import ReferenceService
from app.services.user_service import UserService


def _use_memory() -> bool:
    return config.STORAGE_BACKEND == "memory"


@lru_cache(maxsize=1)
def get_memory_store() -> InMemoryStore:
    """
    In-Memory 저장소 공유 상태 (Singleton via lru_cache)

    Rationale:
        네 저장소가 같은 store를 공유해야 사용자 삭제 시 좋아요가 정리되는 등
        관계형 백엔드와 동일한 연쇄 동작을 보장합니다.
    """
    return InMemoryStore()


@lru_cache(maxsize=1)
def get_film_repository() -> IFilmRepository:
    """
    Film Repository 의존성 주입 (Singleton via lru_cache)

    Returns:
        IFilmRepository: STORAGE_BACKEND 설정에 따라 SQL 또는 In-Memory 구현체
    """
    if _use_memory():
        return InMemoryFilmRepository(get_memory_store())
    return SqlFilmRepository()


@lru_cache(maxsize=1)
def get_user_repository() -> IUserRepository:
    if _use_memory():
        return InMemoryUserRepository(get_memory_store())
    return SqlUserRepository()


@lru_cache(maxsize=1)
def get_mpa_repository() -> IMpaRepository:
    if _use_memory():
        return InMemoryMpaRepository(get_memory_store())
    return SqlMpaRepository()


@lru_cache(maxsize=1)
def get_genre_repository() -> IGenreRepository:
    if _use_memory():
        return InMemoryGenreRepository(get_memory_store())
    return SqlGenreRepository()


def get_film_service(
    film_repository: IFilmRepository = Depends(get_film_repository),
    user_repository: IUserRepository = Depends(get_user_repository),
    mpa_repository: IMpaRepository = Depends(get_mpa_repository),
    genre_repository: IGenreRepository = Depends(get_genre_repository),
) -> FilmService:
    """FilmService 인스턴스 반환 (DI용)."""
    return FilmService(film_repository, user_repository, mpa_repository, genre_repository)


def get_user_service(
    user_repository: IUserRepository = Depends(get_user_repository),
) -> UserService:
    """UserService 인스턴스 반환 (DI용)."""
    return UserService(user_repository)


def get_reference_service(
    mpa_repository: IMpaRepository = Depends(get_mpa_repository),
    genre_repository: IGenreRepository = Depends(get_genre_repository),
) -> ReferenceService:
    return ReferenceService(mpa_repository, genre_repository)
