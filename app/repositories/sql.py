import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import and_, delete, exists, func, insert, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.core.database import SessionLocal
from app.exception.common.conflict_exception import IntegrityConflictError
from app.exception.common.not_found_exception import FilmNotFoundError, UserNotFoundError
from app.models.dto import Film, Genre, MpaRating, User
from app.models.film import FilmRecord, film_genre, film_likes
from app.models.reference import GenreRecord, MpaRatingRecord
from app.models.user import UserRecord, friendship
from app.repositories.base import IFilmRepository, IGenreRepository, IMpaRepository, IUserRepository

logger = logging.getLogger(__name__)


def _to_mpa(record: Optional[MpaRatingRecord]) -> Optional[MpaRating]:
    if record is None:
        return None
    return MpaRating(id=record.id, name=record.name, description=record.description)


def _to_user(record: UserRecord) -> User:
    return User(
        id=record.id,
        email=record.email,
        login=record.login,
        name=record.name,
        birthday=record.birthday,
    )


class SqlFilmRepository(IFilmRepository):
    """
    SQLAlchemy 기반 영화 저장소 구현체
    테이블: films, film_genre(film_id, genre_id), film_likes(film_id, user_id)

    Rationale:
        - 목록 조회 시 genres/likes는 결과 id 전체에 대해 각각 한 번의 쿼리로 읽고
          film_id 기준으로 묶어 붙입니다. (영화마다 쿼리하는 N+1 패턴 방지)
        - 쓰기 작업은 sessionmaker.begin() 하나의 트랜잭션 안에서 수행하여,
          장르 삽입이 실패하면 영화 행도 함께 롤백됩니다.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        """
        Args:
            session_factory (Optional[sessionmaker]): 테스트 용이성을 위한 의존성 주입 지원
        """
        self.session_factory = session_factory or SessionLocal

    def get_all(self) -> List[Film]:
        with self.session_factory() as session:
            rows = session.execute(self._film_query().order_by(FilmRecord.id)).all()
            return self._to_films(session, rows)

    def get_by_id(self, film_id: int) -> Optional[Film]:
        with self.session_factory() as session:
            rows = session.execute(self._film_query().where(FilmRecord.id == film_id)).all()
            films = self._to_films(session, rows)
            return films[0] if films else None

    def create(self, film: Film) -> Film:
        try:
            with self.session_factory.begin() as session:
                record = FilmRecord(
                    name=film.name,
                    description=film.description,
                    release_date=film.release_date,
                    duration=film.duration,
                    mpa_rating_id=film.mpa.id if film.mpa else None,
                )
                session.add(record)
                # flush로 생성된 id를 먼저 확보한 뒤 장르 연결을 일괄 삽입
                session.flush()
                film_id = record.id
                self._save_genres(session, film_id, film.genre_ids())
        except IntegrityError as e:
            logger.error(f"Failed to create film '{film.name}': {e.orig}", exc_info=True)
            raise IntegrityConflictError(f"Film could not be stored: {e.orig}") from e

        logger.info(f"Film created: id={film_id}, name='{film.name}'")
        return self.get_by_id(film_id)

    def update(self, film: Film) -> Film:
        try:
            with self.session_factory.begin() as session:
                record = session.get(FilmRecord, film.id)
                if record is None:
                    logger.warning(f"Attempt to update missing film id={film.id}")
                    raise FilmNotFoundError(film.id)

                record.name = film.name
                record.description = film.description
                record.release_date = film.release_date
                record.duration = film.duration
                record.mpa_rating_id = film.mpa.id if film.mpa else None

                # 장르는 diff 없이 전부 지우고 현재 집합으로 다시 넣는다
                session.execute(delete(film_genre).where(film_genre.c.film_id == film.id))
                self._save_genres(session, film.id, film.genre_ids())
        except IntegrityError as e:
            logger.error(f"Failed to update film id={film.id}: {e.orig}", exc_info=True)
            raise IntegrityConflictError(f"Film {film.id} could not be stored: {e.orig}") from e

        logger.info(f"Film updated: id={film.id}")
        return self.get_by_id(film.id)

    def delete(self, film_id: int) -> None:
        with self.session_factory.begin() as session:
            record = session.get(FilmRecord, film_id)
            if record is None:
                raise FilmNotFoundError(film_id)
            session.execute(delete(film_likes).where(film_likes.c.film_id == film_id))
            session.execute(delete(film_genre).where(film_genre.c.film_id == film_id))
            session.delete(record)
        logger.info(f"Film deleted: id={film_id}")

    def exists_by_id(self, film_id: int) -> bool:
        with self.session_factory() as session:
            return session.scalar(select(exists().where(FilmRecord.id == film_id)))

    def add_like(self, film_id: int, user_id: int) -> None:
        """
        좋아요 추가 (멱등)

        Note:
            동일한 (film_id, user_id) 요청이 동시에 들어오면 늦은 쪽이 복합키 UNIQUE 위반을 받습니다.
            이 경우 행이 이미 존재하면 no-op으로 처리하고, 없을 때만 무결성 오류로 변환합니다.
        """
        try:
            with self.session_factory.begin() as session:
                if not self._like_exists(session, film_id, user_id):
                    session.execute(insert(film_likes).values(film_id=film_id, user_id=user_id))
        except IntegrityError as e:
            with self.session_factory() as session:
                if self._like_exists(session, film_id, user_id):
                    logger.info(f"Like film={film_id} user={user_id} was recorded concurrently")
                    return
            logger.error(f"Failed to add like film={film_id} user={user_id}: {e.orig}", exc_info=True)
            raise IntegrityConflictError(
                f"Cannot record like: film {film_id} or user {user_id} does not exist"
            ) from e
        logger.info(f"User {user_id} liked film {film_id}")

    def remove_like(self, film_id: int, user_id: int) -> None:
        with self.session_factory.begin() as session:
            session.execute(
                delete(film_likes).where(
                    film_likes.c.film_id == film_id,
                    film_likes.c.user_id == user_id,
                )
            )
        logger.info(f"User {user_id} removed like from film {film_id}")

    def get_popular(self, count: int) -> List[Film]:
        """
        좋아요 수 기준 인기 영화 조회 (단일 집계 쿼리)

        Rationale:
            - LEFT JOIN이므로 좋아요가 없는 영화도 0으로 집계되어 포함됩니다.
            - 동점일 때 순서를 고정하기 위해 films.id 오름차순을 2차 정렬 키로 둡니다.
        """
        likes_count = func.count(film_likes.c.user_id).label("likes_count")
        stmt = (
            self._film_query()
            .add_columns(likes_count)
            .outerjoin(film_likes, film_likes.c.film_id == FilmRecord.id)
            .group_by(FilmRecord.id, MpaRatingRecord.id)
            .order_by(likes_count.desc(), FilmRecord.id)
            .limit(max(count, 0))
        )
        with self.session_factory() as session:
            rows = session.execute(stmt).all()
            return self._to_films(session, rows)

    # ==================== Private Methods ====================

    @staticmethod
    def _like_exists(session: Session, film_id: int, user_id: int) -> bool:
        return session.scalar(
            select(exists().where(and_(
                film_likes.c.film_id == film_id,
                film_likes.c.user_id == user_id,
            )))
        )

    @staticmethod
    def _film_query():
        return select(FilmRecord, MpaRatingRecord).outerjoin(
            MpaRatingRecord, FilmRecord.mpa_rating_id == MpaRatingRecord.id
        )

    def _to_films(self, session: Session, rows: Sequence) -> List[Film]:
        film_ids = [row[0].id for row in rows]
        genres_by_film = self._load_genres(session, film_ids)
        likes_by_film = self._load_likes(session, film_ids)

        films = []
        for row in rows:
            record, mpa_record = row[0], row[1]
            films.append(Film(
                id=record.id,
                name=record.name,
                description=record.description,
                release_date=record.release_date,
                duration=record.duration,
                mpa=_to_mpa(mpa_record),
                genres=genres_by_film.get(record.id, []),
                likes=sorted(likes_by_film.get(record.id, [])),
            ))
        return films

    @staticmethod
    def _load_genres(session: Session, film_ids: List[int]) -> Dict[int, List[Genre]]:
        if not film_ids:
            return {}
        stmt = (
            select(film_genre.c.film_id, GenreRecord.id, GenreRecord.name)
            .join(GenreRecord, film_genre.c.genre_id == GenreRecord.id)
            .where(film_genre.c.film_id.in_(film_ids))
            .order_by(film_genre.c.film_id, GenreRecord.id)
        )
        genres_by_film: Dict[int, List[Genre]] = defaultdict(list)
        for film_id, genre_id, genre_name in session.execute(stmt):
            genres_by_film[film_id].append(Genre(id=genre_id, name=genre_name))
        return genres_by_film

    @staticmethod
    def _load_likes(session: Session, film_ids: List[int]) -> Dict[int, List[int]]:
        if not film_ids:
            return {}
        stmt = select(film_likes.c.film_id, film_likes.c.user_id).where(film_likes.c.film_id.in_(film_ids))
        likes_by_film: Dict[int, List[int]] = defaultdict(list)
        for film_id, user_id in session.execute(stmt):
            likes_by_film[film_id].append(user_id)
        return likes_by_film

    @staticmethod
    def _save_genres(session: Session, film_id: int, genre_ids: List[int]) -> None:
        unique_ids = list(dict.fromkeys(genre_ids))
        if not unique_ids:
            return
        session.execute(
            insert(film_genre),
            [{"film_id": film_id, "genre_id": genre_id} for genre_id in unique_ids],
        )


class SqlUserRepository(IUserRepository):
    """
    SQLAlchemy 기반 사용자 저장소 구현체
    테이블: users, friendship(user_id, friend_id)

    Note:
        친구 관계는 방향 행 두 개로 저장하며, 추가/삭제는 항상 한 트랜잭션에서 두 행을 함께 다룹니다.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get_all(self) -> List[User]:
        with self.session_factory() as session:
            records = session.scalars(select(UserRecord).order_by(UserRecord.id)).all()
            return [_to_user(record) for record in records]

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            record = session.get(UserRecord, user_id)
            return _to_user(record) if record else None

    def create(self, user: User) -> User:
        try:
            with self.session_factory.begin() as session:
                record = UserRecord(
                    email=user.email,
                    login=user.login,
                    name=user.name,
                    birthday=user.birthday,
                )
                session.add(record)
                session.flush()
                created = _to_user(record)
        except IntegrityError as e:
            logger.error(f"Failed to create user '{user.login}': {e.orig}", exc_info=True)
            raise IntegrityConflictError(f"User could not be stored: {e.orig}") from e

        logger.info(f"User created: id={created.id}, login='{created.login}'")
        return created

    def update(self, user: User) -> User:
        try:
            with self.session_factory.begin() as session:
                record = session.get(UserRecord, user.id)
                if record is None:
                    logger.warning(f"Attempt to update missing user id={user.id}")
                    raise UserNotFoundError(user.id)
                record.email = user.email
                record.login = user.login
                record.name = user.name
                record.birthday = user.birthday
                updated = _to_user(record)
        except IntegrityError as e:
            logger.error(f"Failed to update user id={user.id}: {e.orig}", exc_info=True)
            raise IntegrityConflictError(f"User {user.id} could not be stored: {e.orig}") from e

        logger.info(f"User updated: id={user.id}")
        return updated

    def delete(self, user_id: int) -> None:
        with self.session_factory.begin() as session:
            record = session.get(UserRecord, user_id)
            if record is None:
                raise UserNotFoundError(user_id)
            session.execute(
                delete(friendship).where(
                    or_(friendship.c.user_id == user_id, friendship.c.friend_id == user_id)
                )
            )
            session.execute(delete(film_likes).where(film_likes.c.user_id == user_id))
            session.delete(record)
        logger.info(f"User deleted: id={user_id}")

    def exists_by_id(self, user_id: int) -> bool:
        with self.session_factory() as session:
            return session.scalar(select(exists().where(UserRecord.id == user_id)))

    def add_friend(self, user_id: int, friend_id: int) -> None:
        try:
            with self.session_factory.begin() as session:
                existing = self._friendship_rows(session, user_id, friend_id)
                rows = [
                    {"user_id": a, "friend_id": b}
                    for a, b in ((user_id, friend_id), (friend_id, user_id))
                    if (a, b) not in existing
                ]
                if rows:
                    session.execute(insert(friendship), rows)
        except IntegrityError as e:
            with self.session_factory() as session:
                if len(self._friendship_rows(session, user_id, friend_id)) == 2:
                    logger.info(f"Friendship {user_id}<->{friend_id} was recorded concurrently")
                    return
            logger.error(f"Failed to add friendship {user_id}<->{friend_id}: {e.orig}", exc_info=True)
            raise IntegrityConflictError(
                f"Cannot record friendship between users {user_id} and {friend_id}"
            ) from e
        logger.info(f"Users {user_id} and {friend_id} are now friends")

    def remove_friend(self, user_id: int, friend_id: int) -> None:
        with self.session_factory.begin() as session:
            session.execute(
                delete(friendship).where(or_(
                    and_(friendship.c.user_id == user_id, friendship.c.friend_id == friend_id),
                    and_(friendship.c.user_id == friend_id, friendship.c.friend_id == user_id),
                ))
            )
        logger.info(f"Users {user_id} and {friend_id} are no longer friends")

    def get_friends(self, user_id: int) -> List[User]:
        stmt = (
            select(UserRecord)
            .join(friendship, UserRecord.id == friendship.c.friend_id)
            .where(friendship.c.user_id == user_id)
            .order_by(UserRecord.id)
        )
        with self.session_factory() as session:
            return [_to_user(record) for record in session.scalars(stmt)]

    def get_common_friends(self, user_id: int, other_id: int) -> List[User]:
        mine = friendship.alias("mine")
        theirs = friendship.alias("theirs")
        stmt = (
            select(UserRecord)
            .join(mine, UserRecord.id == mine.c.friend_id)
            .join(theirs, UserRecord.id == theirs.c.friend_id)
            .where(mine.c.user_id == user_id, theirs.c.user_id == other_id)
            .order_by(UserRecord.id)
        )
        with self.session_factory() as session:
            return [_to_user(record) for record in session.scalars(stmt)]

    @staticmethod
    def _friendship_rows(session: Session, user_id: int, friend_id: int) -> Set[Tuple[int, int]]:
        """두 사용자 사이에 이미 저장된 방향 행 (최대 2개)"""
        return {
            (row.user_id, row.friend_id)
            for row in session.execute(
                select(friendship.c.user_id, friendship.c.friend_id).where(or_(
                    and_(friendship.c.user_id == user_id, friendship.c.friend_id == friend_id),
                    and_(friendship.c.user_id == friend_id, friendship.c.friend_id == user_id),
                ))
            )
        }


class SqlMpaRepository(IMpaRepository):
    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get_all(self) -> List[MpaRating]:
        with self.session_factory() as session:
            records = session.scalars(select(MpaRatingRecord).order_by(MpaRatingRecord.id))
            return [_to_mpa(record) for record in records]

    def get_by_id(self, mpa_id: int) -> Optional[MpaRating]:
        with self.session_factory() as session:
            return _to_mpa(session.get(MpaRatingRecord, mpa_id))


class SqlGenreRepository(IGenreRepository):
    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get_all(self) -> List[Genre]:
        with self.session_factory() as session:
            records = session.scalars(select(GenreRecord).order_by(GenreRecord.id))
            return [Genre(id=record.id, name=record.name) for record in records]

    def get_by_id(self, genre_id: int) -> Optional[Genre]:
        with self.session_factory() as session:
            record = session.get(GenreRecord, genre_id)
            return Genre(id=record.id, name=record.name) if record else None
