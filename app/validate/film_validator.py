from datetime import date
from app.models.dto import Film
from app.exception.common.invalid_argument_exception import InvalidArgumentError

# 최초의 공개 영화 상영일 (Lumière, 1895-12-28)
MIN_RELEASE_DATE = date(1895, 12, 28)
MAX_DESCRIPTION_LENGTH = 200

# --- 단위 검증 함수들 (가장 작은 단위) ---

def validate_film_name(film: Film):
    if film.name is None or not film.name.strip():
        raise InvalidArgumentError("Film name must not be blank")

def validate_film_description(film: Film):
    if film.description is not None and len(film.description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidArgumentError(
            f"Film description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )

def validate_release_date(film: Film):
    if film.release_date is None:
        raise InvalidArgumentError("Film release date is required")
    if film.release_date < MIN_RELEASE_DATE:
        raise InvalidArgumentError(
            f"Film release date must not be earlier than {MIN_RELEASE_DATE.isoformat()}"
        )

def validate_duration(film: Film):
    if film.duration is None or film.duration <= 0:
        raise InvalidArgumentError("Film duration must be a positive number of minutes")

def validate_mpa_present(film: Film):
    if film.mpa is None:
        raise InvalidArgumentError("Film MPA rating is required")
    if film.mpa.id is None:
        raise InvalidArgumentError("Film MPA rating id is required")

def validate_genre_ids_present(film: Film):
    if any(genre.id is None for genre in film.genres):
        raise InvalidArgumentError("Every film genre must carry an id")

# --- 조합 검증 함수 ---

def validate_film(film: Film):
    """
    영화 한 건에 대한 도메인 규칙을 모두 검증합니다.
    (이름, 설명 길이, 개봉일 하한, 상영 시간, MPA 필수 여부, 장르 id)

    참조 데이터(MPA/장르)의 실제 존재 여부는 FilmService가 저장소로 확인합니다.
    """
    validate_film_name(film)
    validate_film_description(film)
    validate_release_date(film)
    validate_duration(film)
    validate_mpa_present(film)
    validate_genre_ids_present(film)
