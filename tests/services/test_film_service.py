"""
FilmService 단위 테스트 (두 저장소 백엔드 공통)

테스트 대상:
- 저장 전 도메인 검증 (InvalidArgumentError, 부분 저장 없음)
- MPA/장르 참조 검증 (MpaNotFoundError, GenreNotFoundError)
- 좋아요 추가/삭제의 영화/사용자 존재 검증
- 인기 영화 count 기본값

실행: pytest tests/services/test_film_service.py -v
"""
from datetime import date

import pytest

from app.exception.common.invalid_argument_exception import InvalidArgumentError
from app.exception.common.not_found_exception import (
    FilmNotFoundError,
    GenreNotFoundError,
    MpaNotFoundError,
    UserNotFoundError,
)
from app.models.dto import MpaRating


class TestCreateValidation:

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"name": "   "},
        {"name": None},
        {"description": "x" * 201},
        {"release_date": None},
        {"release_date": date(1895, 12, 27)},
        {"release_date": date(1800, 1, 1)},
        {"duration": 0},
        {"duration": -5},
        {"duration": None},
        {"mpa": None},
        {"mpa": MpaRating(id=None, name="G")},
    ])
    def test_invalid_film_rejected_without_write(self, film_service, make_film, overrides):
        with pytest.raises(InvalidArgumentError):
            film_service.create_film(make_film(**overrides))

        assert film_service.get_all_films() == []

    def test_boundary_values_accepted(self, film_service, make_film):
        created = film_service.create_film(make_film(
            release_date=date(1895, 12, 28),
            description="x" * 200,
            duration=1,
        ))

        assert created.id is not None
        assert created.release_date == date(1895, 12, 28)

    def test_unknown_mpa_is_not_found(self, film_service, make_film):
        with pytest.raises(MpaNotFoundError):
            film_service.create_film(make_film(mpa=MpaRating(id=99)))

    def test_unknown_genre_is_not_found_and_names_valid_ids(self, film_service, make_film):
        with pytest.raises(GenreNotFoundError) as excinfo:
            film_service.create_film(make_film(genre_ids=[1, 77]))

        assert excinfo.value.genre_id == 77
        assert "77" in excinfo.value.message
        assert "[1, 2, 3, 4, 5, 6]" in excinfo.value.message
        assert film_service.get_all_films() == []


class TestReadUpdateDelete:

    def test_get_missing_film_raises(self, film_service):
        with pytest.raises(FilmNotFoundError):
            film_service.get_film_by_id(1)

    def test_create_then_get(self, film_service, make_film):
        created = film_service.create_film(make_film(genre_ids=[2]))

        assert film_service.get_film_by_id(created.id) == created

    def test_update(self, film_service, make_film):
        created = film_service.create_film(make_film())

        updated = film_service.update_film(make_film(id=created.id, name="Faust", genre_ids=[2, 2]))

        assert updated.name == "Faust"
        assert [genre.id for genre in updated.genres] == [2]

    def test_update_missing_film_raises(self, film_service, make_film):
        with pytest.raises(FilmNotFoundError):
            film_service.update_film(make_film(id=31))

    def test_update_without_id_raises(self, film_service, make_film):
        with pytest.raises(FilmNotFoundError):
            film_service.update_film(make_film())

    def test_update_validates_before_lookup(self, film_service, make_film):
        created = film_service.create_film(make_film())

        with pytest.raises(InvalidArgumentError):
            film_service.update_film(make_film(id=created.id, duration=0))

        assert film_service.get_film_by_id(created.id).duration == 94

    def test_delete(self, film_service, make_film):
        created = film_service.create_film(make_film())

        film_service.delete_film(created.id)

        with pytest.raises(FilmNotFoundError):
            film_service.get_film_by_id(created.id)

    def test_delete_missing_raises(self, film_service):
        with pytest.raises(FilmNotFoundError):
            film_service.delete_film(3)


class TestLikes:

    @pytest.fixture
    def film_and_user(self, film_service, user_service, make_film, make_user):
        return film_service.create_film(make_film()), user_service.create_user(make_user())

    def test_add_like(self, film_service, film_and_user):
        film, user = film_and_user

        film_service.add_like(film.id, user.id)

        assert film_service.get_film_by_id(film.id).likes == [user.id]

    def test_add_like_missing_film(self, film_service, film_and_user):
        _, user = film_and_user
        with pytest.raises(FilmNotFoundError):
            film_service.add_like(999, user.id)

    def test_add_like_missing_user(self, film_service, film_and_user):
        film, _ = film_and_user
        with pytest.raises(UserNotFoundError):
            film_service.add_like(film.id, 999)

        assert film_service.get_film_by_id(film.id).likes == []

    def test_remove_like_idempotent(self, film_service, film_and_user):
        film, user = film_and_user

        film_service.remove_like(film.id, user.id)
        film_service.remove_like(film.id, user.id)

        assert film_service.get_film_by_id(film.id).likes == []

    def test_remove_like_missing_user(self, film_service, film_and_user):
        film, _ = film_and_user
        with pytest.raises(UserNotFoundError):
            film_service.remove_like(film.id, 999)


class TestPopular:

    @pytest.fixture
    def twelve_films(self, film_service, make_film):
        return [film_service.create_film(make_film(name=f"Film {i}")) for i in range(12)]

    @pytest.mark.parametrize("count", [None, 0, -3])
    def test_non_positive_or_missing_count_defaults_to_ten(self, film_service, twelve_films, count):
        assert len(film_service.get_popular_films(count)) == 10

    def test_explicit_count(self, film_service, twelve_films):
        assert len(film_service.get_popular_films(3)) == 3

    def test_ranking(self, film_service, user_service, make_film, make_user):
        f1 = film_service.create_film(make_film(name="F1"))
        f2 = film_service.create_film(make_film(name="F2"))
        f3 = film_service.create_film(make_film(name="F3"))
        users = [user_service.create_user(make_user()) for _ in range(5)]
        for user in users[:2]:
            film_service.add_like(f1.id, user.id)
        for user in users:
            film_service.add_like(f3.id, user.id)

        popular = film_service.get_popular_films(10)

        assert [film.id for film in popular] == [f3.id, f1.id, f2.id]
