import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import (
    get_film_repository,
    get_genre_repository,
    get_mpa_repository,
    get_user_repository,
)
from app.main import app
from app.repositories.memory import (
    InMemoryFilmRepository,
    InMemoryGenreRepository,
    InMemoryMpaRepository,
    InMemoryStore,
    InMemoryUserRepository,
)


@pytest.fixture
def client():
    """각 테스트마다 독립적인 In-Memory 저장소로 Dependency override가 적용된 TestClient"""
    store = InMemoryStore()
    app.dependency_overrides[get_film_repository] = lambda: InMemoryFilmRepository(store)
    app.dependency_overrides[get_user_repository] = lambda: InMemoryUserRepository(store)
    app.dependency_overrides[get_mpa_repository] = lambda: InMemoryMpaRepository(store)
    app.dependency_overrides[get_genre_repository] = lambda: InMemoryGenreRepository(store)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def film_payload():
    return {
        "name": "Sherlock Jr.",
        "description": "A projectionist dreams himself into a detective film.",
        "releaseDate": "1924-04-21",
        "duration": 45,
        "mpa": {"id": 1},
        "genres": [{"id": 1}],
    }


@pytest.fixture
def create_user(client):
    def _create(login: str, **extra):
        payload = {"email": f"{login}@example.com", "login": login, **extra}
        response = client.post("/users", json=payload)
        assert response.status_code == 201
        return response.json()["result"]
    return _create
