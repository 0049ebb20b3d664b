from app.repositories.base import IFilmRepository, IUserRepository, IMpaRepository, IGenreRepository
from app.repositories.memory import (
    InMemoryStore,
    InMemoryFilmRepository,
    InMemoryUserRepository,
    InMemoryMpaRepository,
    InMemoryGenreRepository,
)

__all__ = [
    "IFilmRepository",
    "IUserRepository",
    "IMpaRepository",
    "IGenreRepository",
    "InMemoryStore",
    "InMemoryFilmRepository",
    "InMemoryUserRepository",
    "InMemoryMpaRepository",
    "InMemoryGenreRepository",
]
