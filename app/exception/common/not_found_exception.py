from app.exception.base_exception import BaseCustomException, ErrorCode


class NotFoundError(BaseCustomException):
    """참조한 엔티티(영화, 사용자, MPA 등급, 장르)가 존재하지 않음"""
    error_code = ErrorCode.ENTITY_NOT_FOUND
    message = "Requested entity does not exist."
    status_code = 404


class FilmNotFoundError(NotFoundError):
    def __init__(self, film_id):
        self.film_id = film_id
        super().__init__(message=f"Film with id {film_id} not found", error_code=ErrorCode.FILM_NOT_FOUND)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(message=f"User with id {user_id} not found", error_code=ErrorCode.USER_NOT_FOUND)


class MpaNotFoundError(NotFoundError):
    def __init__(self, mpa_id):
        self.mpa_id = mpa_id
        super().__init__(message=f"MPA rating with id {mpa_id} not found", error_code=ErrorCode.MPA_NOT_FOUND)


class GenreNotFoundError(NotFoundError):
    """Unknown genre id. When the set of valid ids is known it is part of the message."""

    def __init__(self, genre_id, available_ids=None):
        self.genre_id = genre_id
        self.available_ids = sorted(available_ids) if available_ids is not None else None
        message = f"Genre with id {genre_id} not found"
        if self.available_ids is not None:
            message += f". Available ids: {self.available_ids}"
        super().__init__(message=message, error_code=ErrorCode.GENRE_NOT_FOUND)
