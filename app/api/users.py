from fastapi import APIRouter, Depends, status
from typing import List
import logging

from app.api.dependencies import get_user_service
from app.core.response import ApiResponse, success_response
from app.models.dto import User
from app.services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={404: {"description": "Not found"}},
)
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[List[User]])
def get_all_users(service: UserService = Depends(get_user_service)):
    return success_response(service.get_all_users())


@router.get("/{user_id}", response_model=ApiResponse[User])
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return success_response(service.get_user_by_id(user_id))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[User])
def create_user(user: User, service: UserService = Depends(get_user_service)):
    logger.info(f"User create requested: login='{user.login}'")
    return success_response(service.create_user(user))


@router.put("", response_model=ApiResponse[User])
def update_user(user: User, service: UserService = Depends(get_user_service)):
    logger.info(f"User update requested: id={user.id}")
    return success_response(service.update_user(user))


@router.delete("/{user_id}", response_model=ApiResponse[dict])
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    service.delete_user(user_id)
    return success_response({"deleted": True})


@router.put("/{user_id}/friends/{friend_id}", response_model=ApiResponse[dict])
def add_friend(user_id: int, friend_id: int, service: UserService = Depends(get_user_service)):
    service.add_friend(user_id, friend_id)
    return success_response({"friends": True})


@router.delete("/{user_id}/friends/{friend_id}", response_model=ApiResponse[dict])
def remove_friend(user_id: int, friend_id: int, service: UserService = Depends(get_user_service)):
    """친구 삭제. 관계가 없어도 200 OK (멱등성 보장)"""
    service.remove_friend(user_id, friend_id)
    return success_response({"friends": False})


@router.get("/{user_id}/friends", response_model=ApiResponse[List[User]])
def get_friends(user_id: int, service: UserService = Depends(get_user_service)):
    return success_response(service.get_friends(user_id))


@router.get("/{user_id}/friends/common/{other_id}", response_model=ApiResponse[List[User]])
def get_common_friends(user_id: int, other_id: int, service: UserService = Depends(get_user_service)):
    return success_response(service.get_common_friends(user_id, other_id))
