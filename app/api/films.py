from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
import logging

from app.api.dependencies import get_film_service
from app.core.response import ApiResponse, success_response
from app.models.dto import Film
from app.services.film_service import FilmService

router = APIRouter(
    prefix="/films",
    tags=["Films"],
    responses={404: {"description": "Not found"}},
)
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[List[Film]])
def get_all_films(service: FilmService = Depends(get_film_service)):
    return success_response(service.get_all_films())


# NOTE: "/{film_id}"보다 먼저 등록해야 "popular"가 id로 해석되지 않는다
@router.get("/popular", response_model=ApiResponse[List[Film]])
def get_popular_films(
    count: Optional[int] = Query(None, description="반환할 영화 수 (기본 10)"),
    service: FilmService = Depends(get_film_service),
):
    """
    인기 영화 목록

    - **count**: 최대 반환 개수. 생략하거나 0 이하이면 10
    """
    logger.info(f"Popular films requested: count={count}")
    return success_response(service.get_popular_films(count))


@router.get("/{film_id}", response_model=ApiResponse[Film])
def get_film(film_id: int, service: FilmService = Depends(get_film_service)):
    return success_response(service.get_film_by_id(film_id))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[Film])
def create_film(film: Film, service: FilmService = Depends(get_film_service)):
    logger.info(f"Film create requested: name='{film.name}'")
    return success_response(service.create_film(film))


@router.put("", response_model=ApiResponse[Film])
def update_film(film: Film, service: FilmService = Depends(get_film_service)):
    logger.info(f"Film update requested: id={film.id}")
    return success_response(service.update_film(film))


@router.delete("/{film_id}", response_model=ApiResponse[dict])
def delete_film(film_id: int, service: FilmService = Depends(get_film_service)):
    service.delete_film(film_id)
    return success_response({"deleted": True})


@router.put("/{film_id}/like/{user_id}", response_model=ApiResponse[dict])
def add_like(film_id: int, user_id: int, service: FilmService = Depends(get_film_service)):
    """
    좋아요 추가

    - **film_id**: 영화 ID
    - **user_id**: 좋아요를 누르는 사용자 ID

    Returns:
        200 OK: 신규 추가 또는 이미 존재 (멱등성 보장)
    """
    service.add_like(film_id, user_id)
    return success_response({"liked": True})


@router.delete("/{film_id}/like/{user_id}", response_model=ApiResponse[dict])
def remove_like(film_id: int, user_id: int, service: FilmService = Depends(get_film_service)):
    """
    좋아요 삭제

    Returns:
        200 OK: 삭제 성공 또는 이미 없음 (멱등성 보장)
    """
    service.remove_like(film_id, user_id)
    return success_response({"liked": False})
