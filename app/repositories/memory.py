import itertools
import logging
import threading
from typing import Dict, Iterable, List, Optional, Set, Tuple

from app.exception.common.conflict_exception import IntegrityConflictError
from app.exception.common.not_found_exception import FilmNotFoundError, UserNotFoundError
from app.models.dto import Film, Genre, MpaRating, User
from app.repositories.base import IFilmRepository, IGenreRepository, IMpaRepository, IUserRepository
from app.repositories.seed import DEFAULT_GENRES, DEFAULT_MPA_RATINGS

logger = logging.getLogger(__name__)


class InMemoryStore:
    """
    프로세스 로컬 저장소의 공유 상태

    Note:
        서버 재시작 시 데이터가 초기화됩니다.
        영화/사용자 맵, 좋아요/친구 인접 맵(id -> id 집합), id 카운터(1부터 시작)를
        하나의 RLock으로 보호합니다. 네 저장소가 같은 store를 공유해야
        사용자 삭제 시 좋아요까지 정리되는 등 관계형 백엔드와 같은 동작을 합니다.
    """

    def __init__(
        self,
        mpa_ratings: Iterable[Tuple[int, str, str]] = DEFAULT_MPA_RATINGS,
        genres: Iterable[Tuple[int, str]] = DEFAULT_GENRES,
    ):
        self.lock = threading.RLock()
        self.films: Dict[int, Film] = {}
        self.users: Dict[int, User] = {}
        # film_id -> 좋아요를 누른 user_id 집합
        self.likes: Dict[int, Set[int]] = {}
        # user_id -> friend_id 집합 (항상 대칭)
        self.friends: Dict[int, Set[int]] = {}
        self.mpa_ratings: Dict[int, MpaRating] = {
            mpa_id: MpaRating(id=mpa_id, name=name, description=description)
            for mpa_id, name, description in mpa_ratings
        }
        self.genres: Dict[int, Genre] = {
            genre_id: Genre(id=genre_id, name=name) for genre_id, name in genres
        }
        self._film_ids = itertools.count(1)
        self._user_ids = itertools.count(1)

    def next_film_id(self) -> int:
        return next(self._film_ids)

    def next_user_id(self) -> int:
        return next(self._user_ids)


class InMemoryFilmRepository(IFilmRepository):
    """In-Memory 영화 저장소 구현체"""

    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    def get_all(self) -> List[Film]:
        with self.store.lock:
            return [self._materialize(film_id) for film_id in sorted(self.store.films)]

    def get_by_id(self, film_id: int) -> Optional[Film]:
        with self.store.lock:
            if film_id not in self.store.films:
                return None
            return self._materialize(film_id)

    def create(self, film: Film) -> Film:
        with self.store.lock:
            # 참조 검사를 먼저 끝내야 실패 시 id가 소모되거나 행이 남지 않는다
            stored = self._resolve(film)
            film_id = self.store.next_film_id()
            stored.id = film_id
            self.store.films[film_id] = stored
            logger.info(f"Film created: id={film_id}, name='{stored.name}'")
            return self._materialize(film_id)

    def update(self, film: Film) -> Film:
        with self.store.lock:
            if film.id not in self.store.films:
                logger.warning(f"Attempt to update missing film id={film.id}")
                raise FilmNotFoundError(film.id)
            stored = self._resolve(film)
            stored.id = film.id
            self.store.films[film.id] = stored
            logger.info(f"Film updated: id={film.id}")
            return self._materialize(film.id)

    def delete(self, film_id: int) -> None:
        with self.store.lock:
            if film_id not in self.store.films:
                raise FilmNotFoundError(film_id)
            del self.store.films[film_id]
            self.store.likes.pop(film_id, None)
            logger.info(f"Film deleted: id={film_id}")

    def exists_by_id(self, film_id: int) -> bool:
        with self.store.lock:
            return film_id in self.store.films

    def add_like(self, film_id: int, user_id: int) -> None:
        with self.store.lock:
            if film_id not in self.store.films or user_id not in self.store.users:
                raise IntegrityConflictError(
                    f"Cannot record like: film {film_id} or user {user_id} does not exist"
                )
            self.store.likes.setdefault(film_id, set()).add(user_id)
            logger.info(f"User {user_id} liked film {film_id}")

    def remove_like(self, film_id: int, user_id: int) -> None:
        with self.store.lock:
            self.store.likes.get(film_id, set()).discard(user_id)
            logger.info(f"User {user_id} removed like from film {film_id}")

    def get_popular(self, count: int) -> List[Film]:
        with self.store.lock:
            likes = self.store.likes
            ranked = sorted(
                self.store.films,
                key=lambda film_id: (-len(likes.get(film_id, ())), film_id),
            )
            return [self._materialize(film_id) for film_id in ranked[:max(count, 0)]]

    # ==================== Private Methods ====================

    def _resolve(self, film: Film) -> Film:
        """
        저장 형태로 변환합니다. MPA/장르를 참조 데이터로 치환하고 likes는 비웁니다.

        Raises:
            IntegrityConflictError: 존재하지 않는 MPA/장르 id (관계형 백엔드의 FK 위반에 대응)
        """
        mpa_id = film.mpa.id if film.mpa else None
        mpa = self.store.mpa_ratings.get(mpa_id)
        if mpa is None:
            raise IntegrityConflictError(f"MPA rating {mpa_id} does not exist")

        genres = []
        for genre_id in film.genre_ids():
            genre = self.store.genres.get(genre_id)
            if genre is None:
                raise IntegrityConflictError(f"Genre {genre_id} does not exist")
            genres.append(genre.model_copy())

        return Film(
            name=film.name,
            description=film.description,
            release_date=film.release_date,
            duration=film.duration,
            mpa=mpa.model_copy(),
            genres=sorted(genres, key=lambda g: g.id),
        )

    def _materialize(self, film_id: int) -> Film:
        # 호출자가 반환값을 수정해도 저장 상태에 영향이 없도록 깊은 복사
        film = self.store.films[film_id].model_copy(deep=True)
        film.likes = sorted(self.store.likes.get(film_id, ()))
        return film


class InMemoryUserRepository(IUserRepository):
    """In-Memory 사용자 저장소 구현체"""

    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    def get_all(self) -> List[User]:
        with self.store.lock:
            return [self.store.users[user_id].model_copy() for user_id in sorted(self.store.users)]

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.store.lock:
            user = self.store.users.get(user_id)
            return user.model_copy() if user else None

    def create(self, user: User) -> User:
        with self.store.lock:
            user_id = self.store.next_user_id()
            stored = user.model_copy(update={"id": user_id})
            self.store.users[user_id] = stored
            logger.info(f"User created: id={user_id}, login='{stored.login}'")
            return stored.model_copy()

    def update(self, user: User) -> User:
        with self.store.lock:
            if user.id not in self.store.users:
                logger.warning(f"Attempt to update missing user id={user.id}")
                raise UserNotFoundError(user.id)
            stored = user.model_copy()
            self.store.users[user.id] = stored
            logger.info(f"User updated: id={user.id}")
            return stored.model_copy()

    def delete(self, user_id: int) -> None:
        with self.store.lock:
            if user_id not in self.store.users:
                raise UserNotFoundError(user_id)
            for friend_id in self.store.friends.pop(user_id, set()):
                self.store.friends.get(friend_id, set()).discard(user_id)
            for likers in self.store.likes.values():
                likers.discard(user_id)
            del self.store.users[user_id]
            logger.info(f"User deleted: id={user_id}")

    def exists_by_id(self, user_id: int) -> bool:
        with self.store.lock:
            return user_id in self.store.users

    def add_friend(self, user_id: int, friend_id: int) -> None:
        with self.store.lock:
            if user_id == friend_id:
                raise IntegrityConflictError(f"User {user_id} cannot befriend themselves")
            if user_id not in self.store.users or friend_id not in self.store.users:
                raise IntegrityConflictError(
                    f"Cannot record friendship: user {user_id} or {friend_id} does not exist"
                )
            self.store.friends.setdefault(user_id, set()).add(friend_id)
            self.store.friends.setdefault(friend_id, set()).add(user_id)
            logger.info(f"Users {user_id} and {friend_id} are now friends")

    def remove_friend(self, user_id: int, friend_id: int) -> None:
        with self.store.lock:
            self.store.friends.get(user_id, set()).discard(friend_id)
            self.store.friends.get(friend_id, set()).discard(user_id)
            logger.info(f"Users {user_id} and {friend_id} are no longer friends")

    def get_friends(self, user_id: int) -> List[User]:
        with self.store.lock:
            return self._users_by_ids(self.store.friends.get(user_id, set()))

    def get_common_friends(self, user_id: int, other_id: int) -> List[User]:
        with self.store.lock:
            common = self.store.friends.get(user_id, set()) & self.store.friends.get(other_id, set())
            return self._users_by_ids(common)

    def _users_by_ids(self, user_ids: Iterable[int]) -> List[User]:
        return [
            self.store.users[user_id].model_copy()
            for user_id in sorted(user_ids)
            if user_id in self.store.users
        ]


class InMemoryMpaRepository(IMpaRepository):
    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    def get_all(self) -> List[MpaRating]:
        return [self.store.mpa_ratings[mpa_id].model_copy() for mpa_id in sorted(self.store.mpa_ratings)]

    def get_by_id(self, mpa_id: int) -> Optional[MpaRating]:
        mpa = self.store.mpa_ratings.get(mpa_id)
        return mpa.model_copy() if mpa else None


class InMemoryGenreRepository(IGenreRepository):
    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    def get_all(self) -> List[Genre]:
        return [self.store.genres[genre_id].model_copy() for genre_id in sorted(self.store.genres)]

    def get_by_id(self, genre_id: int) -> Optional[Genre]:
        genre = self.store.genres.get(genre_id)
        return genre.model_copy() if genre else None
