from fastapi import APIRouter, Depends
from typing import List

from app.api.dependencies import get_reference_service
from app.core.response import ApiResponse, success_response
from app.models.dto import Genre, MpaRating
from app.services.reference_service import ReferenceService

mpa_router = APIRouter(prefix="/mpa", tags=["MPA"])
genre_router = APIRouter(prefix="/genres", tags=["Genres"])


@mpa_router.get("", response_model=ApiResponse[List[MpaRating]])
def get_all_mpa(service: ReferenceService = Depends(get_reference_service)):
    return success_response(service.get_all_mpa())


@mpa_router.get("/{mpa_id}", response_model=ApiResponse[MpaRating])
def get_mpa(mpa_id: int, service: ReferenceService = Depends(get_reference_service)):
    return success_response(service.get_mpa_by_id(mpa_id))


@genre_router.get("", response_model=ApiResponse[List[Genre]])
def get_all_genres(service: ReferenceService = Depends(get_reference_service)):
    return success_response(service.get_all_genres())


@genre_router.get("/{genre_id}", response_model=ApiResponse[Genre])
def get_genre(genre_id: int, service: ReferenceService = Depends(get_reference_service)):
    return success_response(service.get_genre_by_id(genre_id))
