# ============================================================================
# FILE: vibeshare/api/v1/endpoints/users.py
# ============================================================================
from fastapi import APIRouter, Depends, File, UploadFile, Query
from sqlalchemy.orm import Session
from typing import Optional
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import require_current_user, get_current_user, viewer_id
from vibeshare.core.exceptions import NotFoundError
from vibeshare.core.storage import ImageStorage, get_image_storage
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.playlist import PlaylistListData
from vibeshare.schemas.user import (
    UserUpdate,
    PublicUser,
    UserResponse,
    UserData,
    MeData,
    UserListData,
    AvatarUploadData,
)
from vibeshare.services.user_service import user_service
from vibeshare.services.playlist_service import playlist_service
from vibeshare.db.models.user import User
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=ApiResponse[UserListData])
async def list_users(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db)
):
    """List users, optionally filtered by username or bio"""
    return ApiResponse(data=user_service.list_users(db, search=search, page=page, limit=limit))

@router.post("/upload-profile-picture", response_model=ApiResponse[AvatarUploadData])
async def upload_profile_picture(
    profile_picture: UploadFile = File(..., alias="profilePicture"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
    storage: ImageStorage = Depends(get_image_storage)
):
    """
    Upload a new profile picture
    The previous uploaded picture is removed from storage
    """
    data = await profile_picture.read()
    image_url = storage.save("avatars", profile_picture.content_type, data)
    previous = user_service.set_avatar(db, current_user, image_url)
    if previous and previous != image_url:
        storage.delete(previous)

    return ApiResponse(
        data=AvatarUploadData(user=UserResponse.model_validate(current_user), image_url=image_url),
        message="Profile picture updated",
    )

@router.get("/id/{user_id}", response_model=ApiResponse[UserData])
async def get_user_by_id(
    user_id: int,
    db: Session = Depends(get_db)
):
    user = user_service.require_user(db, user_id)
    return ApiResponse(data=UserData(user=PublicUser.model_validate(user)))

@router.get("/{username}", response_model=ApiResponse[UserData])
async def get_user_by_username(
    username: str,
    db: Session = Depends(get_db)
):
    user = user_service.get_user_by_username(db, username)
    if user is None:
        raise NotFoundError("User not found")
    return ApiResponse(data=UserData(user=PublicUser.model_validate(user)))

@router.put("/{user_id}", response_model=ApiResponse[MeData])
async def update_user(
    user_id: int,
    update_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Update your own profile
    Only the fields present in the body change
    """
    user = user_service.update_profile(db, user_id, current_user.id, update_data)
    return ApiResponse(data=MeData(user=UserResponse.model_validate(user)), message="Profile updated")

@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """Delete your own account and everything it owns"""
    user_service.delete_user(db, user_id, current_user.id)
    return ApiResponse(message="Account deleted successfully")

@router.get("/{user_id}/playlists", response_model=ApiResponse[PlaylistListData])
async def get_user_playlists(
    user_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user)
):
    """A user's playlists; private ones only when the viewer is that user"""
    data = playlist_service.list_user_playlists(db, user_id, viewer_id(current_user), page=page, limit=limit)
    return ApiResponse(data=data)
