import os
import tempfile

# NOTE: app.core.config는 임포트 시점에 환경변수를 읽으므로 앱 임포트 전에 설정해야 함
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_DIR"] = os.path.join(tempfile.gettempdir(), "filmorate-test-logs")

from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy.pool import StaticPool

from app.core.database import build_engine, build_session_factory, init_db
from app.models.dto import Film, Genre, MpaRating, User
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


@pytest.fixture
def sql_engine():
    """테스트마다 독립적인 in-memory SQLite 엔진 (StaticPool로 단일 연결 공유)"""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_session_factory(sql_engine):
    return build_session_factory(sql_engine)


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture(params=["memory", "sql"])
def repositories(request):
    """두 백엔드 모두에 대해 같은 테스트를 실행하기 위한 저장소 묶음"""
    if request.param == "memory":
        store = request.getfixturevalue("memory_store")
        return SimpleNamespace(
            backend="memory",
            films=InMemoryFilmRepository(store),
            users=InMemoryUserRepository(store),
            mpa=InMemoryMpaRepository(store),
            genres=InMemoryGenreRepository(store),
        )

    factory = request.getfixturevalue("sql_session_factory")
    return SimpleNamespace(
        backend="sql",
        films=SqlFilmRepository(factory),
        users=SqlUserRepository(factory),
        mpa=SqlMpaRepository(factory),
        genres=SqlGenreRepository(factory),
    )


@pytest.fixture
def film_service(repositories):
    return FilmService(repositories.films, repositories.users, repositories.mpa, repositories.genres)


@pytest.fixture
def user_service(repositories):
    return UserService(repositories.users)


@pytest.fixture
def reference_service(repositories):
    return ReferenceService(repositories.mpa, repositories.genres)


@pytest.fixture
def make_film():
    """유효한 기본값을 가진 Film 생성 헬퍼. 키워드로 필드를 덮어쓸 수 있다."""
    def _make(**overrides):
        fields = {
            "name": "Nosferatu",
            "description": "A vampire arrives in Wisborg.",
            "release_date": date(1922, 3, 4),
            "duration": 94,
            "mpa": MpaRating(id=1),
            "genres": [],
        }
        genre_ids = overrides.pop("genre_ids", None)
        if genre_ids is not None:
            fields["genres"] = [Genre(id=genre_id) for genre_id in genre_ids]
        fields.update(overrides)
        return Film(**fields)
    return _make


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "email": f"user{n}@example.com",
            "login": f"user{n}",
            "name": f"User {n}",
            "birthday": date(1990, 1, 1),
        }
        fields.update(overrides)
        return User(**fields)
    return _make
