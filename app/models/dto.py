from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MpaRating(BaseModel):
    """MPA content rating (reference data, read-only)"""
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None


class Genre(BaseModel):
    """Genre tag (reference data, read-only)"""
    id: Optional[int] = None
    name: Optional[str] = None


class Film(BaseModel):
    """Film entity.

    Fields are optional in shape so that a request with a blank name or a
    missing release date reaches the film validator and fails there with an
    InvalidArgumentError instead of a schema-level 422.

    Rationale:
        `genres` is a set keyed by genre id: duplicates sent by the client
        collapse to one entry, first occurrence wins.
        `likes` is derived from the like relation and ignored on writes.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[date] = Field(None, alias="releaseDate")
    duration: Optional[int] = None
    mpa: Optional[MpaRating] = None
    genres: List[Genre] = Field(default_factory=list)
    likes: List[int] = Field(default_factory=list)

    @field_validator("genres", mode="before")
    @classmethod
    def none_genres_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("genres")
    @classmethod
    def unique_genres(cls, v: List[Genre]) -> List[Genre]:
        seen = set()
        unique = []
        for genre in v:
            if genre.id in seen:
                continue
            seen.add(genre.id)
            unique.append(genre)
        return unique

    @field_validator("likes", mode="before")
    @classmethod
    def none_likes_as_empty(cls, v):
        return [] if v is None else v

    def genre_ids(self) -> List[int]:
        return [genre.id for genre in self.genres]


class User(BaseModel):
    """User entity. `name` falls back to `login` when blank (applied by UserService)."""
    id: Optional[int] = None
    email: Optional[str] = None
    login: Optional[str] = None
    name: Optional[str] = None
    birthday: Optional[date] = None
