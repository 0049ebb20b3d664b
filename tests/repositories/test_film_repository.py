"""
영화 저장소 계약 테스트 (In-Memory / SQL 두 백엔드 공통)

실행: pytest tests/repositories/test_film_repository.py -v
"""
from datetime import date

import pytest
from sqlalchemy import event

from app.exception.common.conflict_exception import IntegrityConflictError
from app.exception.common.not_found_exception import FilmNotFoundError
from app.models.dto import MpaRating
from app.repositories.sql import SqlFilmRepository


class TestCrud:

    def test_create_assigns_sequential_ids_from_one(self, repositories, make_film):
        first = repositories.films.create(make_film(id=99))
        second = repositories.films.create(make_film(name="Metropolis"))

        assert first.id == 1
        assert second.id == 2

    def test_create_returns_stored_form(self, repositories, make_film):
        created = repositories.films.create(make_film(genre_ids=[2, 1]))

        assert created.name == "Nosferatu"
        assert created.release_date == date(1922, 3, 4)
        assert created.mpa.id == 1
        assert created.mpa.name == "G"
        assert [genre.id for genre in created.genres] == [1, 2]
        assert created.genres[0].name == "Comedy"
        assert created.likes == []

    def test_duplicate_genres_collapse(self, repositories, make_film):
        created = repositories.films.create(make_film(genre_ids=[3, 3, 1, 3]))

        assert [genre.id for genre in created.genres] == [1, 3]

    def test_long_name_is_stored_unchanged(self, repositories, make_film):
        name = "N" * 300

        created = repositories.films.create(make_film(name=name))

        assert repositories.films.get_by_id(created.id).name == name

    def test_get_by_id_missing_returns_none(self, repositories):
        assert repositories.films.get_by_id(404) is None

    def test_get_all_ordered_by_id(self, repositories, make_film):
        for name in ["A", "B", "C"]:
            repositories.films.create(make_film(name=name))

        films = repositories.films.get_all()

        assert [film.id for film in films] == [1, 2, 3]
        assert [film.name for film in films] == ["A", "B", "C"]

    def test_update_replaces_all_fields_and_genres(self, repositories, make_film):
        created = repositories.films.create(make_film(genre_ids=[1, 2]))

        updated = repositories.films.update(make_film(
            id=created.id,
            name="Nosferatu (restored)",
            description=None,
            duration=81,
            mpa=MpaRating(id=3),
            genre_ids=[4],
        ))

        assert updated.id == created.id
        assert updated.name == "Nosferatu (restored)"
        assert updated.description is None
        assert updated.duration == 81
        assert updated.mpa.name == "PG-13"
        assert [genre.id for genre in updated.genres] == [4]
        assert repositories.films.get_by_id(created.id) == updated

    def test_update_missing_raises_not_found(self, repositories, make_film):
        with pytest.raises(FilmNotFoundError):
            repositories.films.update(make_film(id=77))

    def test_update_keeps_likes(self, repositories, make_film, make_user):
        film = repositories.films.create(make_film())
        user = repositories.users.create(make_user())
        repositories.films.add_like(film.id, user.id)

        updated = repositories.films.update(make_film(id=film.id, name="Renamed"))

        assert updated.likes == [user.id]

    def test_delete_removes_film_and_likes(self, repositories, make_film, make_user):
        film = repositories.films.create(make_film(genre_ids=[1]))
        user = repositories.users.create(make_user())
        repositories.films.add_like(film.id, user.id)

        repositories.films.delete(film.id)

        assert repositories.films.get_by_id(film.id) is None
        assert repositories.films.exists_by_id(film.id) is False
        assert repositories.films.get_popular(10) == []

    def test_delete_missing_raises_not_found(self, repositories):
        with pytest.raises(FilmNotFoundError):
            repositories.films.delete(5)

    def test_unknown_genre_is_integrity_conflict_and_nothing_persisted(self, repositories, make_film):
        with pytest.raises(IntegrityConflictError):
            repositories.films.create(make_film(genre_ids=[1, 999]))

        assert repositories.films.get_all() == []

    def test_unknown_mpa_is_integrity_conflict(self, repositories, make_film):
        with pytest.raises(IntegrityConflictError):
            repositories.films.create(make_film(mpa=MpaRating(id=42)))

        assert repositories.films.get_all() == []


class TestLikes:

    def test_add_like_is_set_semantics(self, repositories, make_film, make_user):
        film = repositories.films.create(make_film())
        user = repositories.users.create(make_user())

        repositories.films.add_like(film.id, user.id)
        repositories.films.add_like(film.id, user.id)

        assert repositories.films.get_by_id(film.id).likes == [user.id]

    def test_remove_like_never_added_is_noop(self, repositories, make_film, make_user):
        film = repositories.films.create(make_film())
        liker = repositories.users.create(make_user())
        stranger = repositories.users.create(make_user())
        repositories.films.add_like(film.id, liker.id)

        repositories.films.remove_like(film.id, stranger.id)
        repositories.films.remove_like(film.id, stranger.id)

        assert repositories.films.get_by_id(film.id).likes == [liker.id]

    def test_remove_like(self, repositories, make_film, make_user):
        film = repositories.films.create(make_film())
        user = repositories.users.create(make_user())
        repositories.films.add_like(film.id, user.id)

        repositories.films.remove_like(film.id, user.id)

        assert repositories.films.get_by_id(film.id).likes == []

    def test_like_for_missing_film_is_integrity_conflict(self, repositories, make_user):
        user = repositories.users.create(make_user())

        with pytest.raises(IntegrityConflictError):
            repositories.films.add_like(123, user.id)


class TestPopular:

    @pytest.fixture
    def ranked(self, repositories, make_film, make_user):
        """F1: 좋아요 2개, F2: 0개, F3: 5개"""
        f1 = repositories.films.create(make_film(name="F1"))
        f2 = repositories.films.create(make_film(name="F2"))
        f3 = repositories.films.create(make_film(name="F3"))
        users = [repositories.users.create(make_user()) for _ in range(5)]
        for user in users[:2]:
            repositories.films.add_like(f1.id, user.id)
        for user in users:
            repositories.films.add_like(f3.id, user.id)
        return f1, f2, f3

    def test_orders_by_like_count_desc_including_zero(self, repositories, ranked):
        f1, f2, f3 = ranked

        popular = repositories.films.get_popular(10)

        assert [film.id for film in popular] == [f3.id, f1.id, f2.id]
        assert len(popular[0].likes) == 5
        assert popular[2].likes == []

    def test_count_limits_result(self, repositories, ranked):
        f1, f2, f3 = ranked

        assert [film.id for film in repositories.films.get_popular(2)] == [f3.id, f1.id]

    def test_ties_break_by_ascending_id(self, repositories, make_film):
        ids = [repositories.films.create(make_film(name=f"T{i}")).id for i in range(4)]

        assert [film.id for film in repositories.films.get_popular(10)] == ids

    def test_popular_films_carry_genres_and_mpa(self, repositories, ranked, make_film):
        film = repositories.films.create(make_film(genre_ids=[5], mpa=MpaRating(id=4)))

        popular = {f.id: f for f in repositories.films.get_popular(10)}

        assert popular[film.id].mpa.name == "R"
        assert [genre.name for genre in popular[film.id].genres] == ["Documentary"]


class TestSqlBatchLoading:
    """목록 조회가 영화 수와 무관하게 고정된 쿼리 수로 끝나는지 (N+1 방지)"""

    def _count_selects(self, engine, action):
        statements = []

        def _record(conn, cursor, statement, parameters, context, executemany):
            if statement.lstrip().upper().startswith("SELECT"):
                statements.append(statement)

        event.listen(engine, "before_cursor_execute", _record)
        try:
            action()
        finally:
            event.remove(engine, "before_cursor_execute", _record)
        return statements

    def test_get_all_uses_three_queries(self, sql_engine, sql_session_factory, make_film):
        repo = SqlFilmRepository(sql_session_factory)
        for i in range(6):
            repo.create(make_film(name=f"Film {i}", genre_ids=[1, 2]))

        statements = self._count_selects(sql_engine, repo.get_all)

        # films+mpa 1회, genres 1회, likes 1회
        assert len(statements) == 3

    def test_get_popular_uses_three_queries(self, sql_engine, sql_session_factory, make_film):
        repo = SqlFilmRepository(sql_session_factory)
        for i in range(6):
            repo.create(make_film(name=f"Film {i}", genre_ids=[3]))

        statements = self._count_selects(sql_engine, lambda: repo.get_popular(10))

        assert len(statements) == 3


def test_free_text_columns_have_no_length_cap():
    from app.models.film import FilmRecord
    from app.models.user import UserRecord

    assert FilmRecord.__table__.c.name.type.length is None
    for column in ("email", "login", "name"):
        assert UserRecord.__table__.c[column].type.length is None
    # 설명은 도메인 규칙(최대 200자)과 같은 길이로 제한
    assert FilmRecord.__table__.c.description.type.length == 200
