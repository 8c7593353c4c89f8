# ============================================================================
# FILE: vibeshare/api/v1/endpoints/playlists.py
# ============================================================================
from fastapi import APIRouter, Depends, File, UploadFile, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import require_current_user, get_current_user, viewer_id
from vibeshare.core.storage import ImageStorage, get_image_storage
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.playlist import (
    PlaylistCreate,
    PlaylistUpdate,
    PlaylistData,
    PlaylistDetailData,
    PlaylistListData,
    LikeData,
    ThumbnailUploadData,
)
from vibeshare.services.playlist_service import playlist_service
from vibeshare.db.models.user import User
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=ApiResponse[PlaylistListData])
async def list_playlists(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    user: Optional[int] = None,
    tag: Optional[str] = None,
    sort: str = Query("recent", pattern="^(recent|popular)$"),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user)
):
    """
    List public playlists
    Filter by owner (user) or exact tag; sort by recent or popular
    """
    data = playlist_service.list_playlists(
        db, viewer_id(current_user), page=page, limit=limit, user_id=user, tag=tag, sort=sort
    )
    return ApiResponse(data=data)

@router.post("", response_model=ApiResponse[PlaylistData], status_code=status.HTTP_201_CREATED)
async def create_playlist(
    playlist_data: PlaylistCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Create a new playlist
    Requires authentication
    """
    playlist = playlist_service.create_playlist(db, current_user.id, playlist_data)
    summary = playlist_service.summarize(db, [playlist], current_user.id)[0]
    return ApiResponse(data=PlaylistData(playlist=summary), message="Playlist created successfully")

@router.get("/saved", response_model=ApiResponse[PlaylistListData])
async def get_saved_playlists(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """Playlists the current user saved, newest first"""
    return ApiResponse(data=playlist_service.list_saved_playlists(db, current_user.id, page=page, limit=limit))

@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistDetailData])
async def get_playlist(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user)
):
    """
    Get a playlist with its songs
    Private playlists are only visible to their owner
    """
    detail = playlist_service.get_playlist_detail(db, playlist_id, viewer_id(current_user))
    return ApiResponse(data=PlaylistDetailData(playlist=detail))

@router.put("/{playlist_id}", response_model=ApiResponse[PlaylistData])
async def update_playlist(
    playlist_id: int,
    update_data: PlaylistUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Update a playlist
    Requires ownership
    """
    playlist = playlist_service.update_playlist(db, playlist_id, current_user.id, update_data)
    summary = playlist_service.summarize(db, [playlist], current_user.id)[0]
    return ApiResponse(data=PlaylistData(playlist=summary), message="Playlist updated successfully")

@router.delete("/{playlist_id}", response_model=ApiResponse[None])
async def delete_playlist(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
    storage: ImageStorage = Depends(get_image_storage)
):
    """
    Delete a playlist with its songs, likes and saves
    Requires ownership
    """
    thumbnail_url = playlist_service.delete_playlist(db, playlist_id, current_user.id)
    storage.delete(thumbnail_url)
    return ApiResponse(message="Playlist deleted successfully")

@router.post("/{playlist_id}/thumbnail", response_model=ApiResponse[ThumbnailUploadData])
async def upload_thumbnail(
    playlist_id: int,
    thumbnail: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
    storage: ImageStorage = Depends(get_image_storage)
):
    """Upload a cover image, replacing any previous one"""
    playlist = playlist_service.get_owned_playlist(db, playlist_id, current_user.id)
    data = await thumbnail.read()
    image_url = storage.save("thumbnails", thumbnail.content_type, data)
    previous = playlist_service.set_thumbnail(db, playlist, image_url)
    storage.delete(previous)

    summary = playlist_service.summarize(db, [playlist], current_user.id)[0]
    return ApiResponse(
        data=ThumbnailUploadData(playlist=summary, image_url=image_url),
        message="Thumbnail uploaded successfully",
    )

@router.delete("/{playlist_id}/thumbnail", response_model=ApiResponse[PlaylistData])
async def remove_thumbnail(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
    storage: ImageStorage = Depends(get_image_storage)
):
    """Remove the cover image; the gradient is shown again"""
    playlist = playlist_service.get_owned_playlist(db, playlist_id, current_user.id)
    previous = playlist_service.set_thumbnail(db, playlist, None)
    storage.delete(previous)

    summary = playlist_service.summarize(db, [playlist], current_user.id)[0]
    return ApiResponse(data=PlaylistData(playlist=summary), message="Thumbnail removed successfully")

@router.post("/{playlist_id}/like", response_model=ApiResponse[LikeData])
async def like_playlist(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    likes_count = playlist_service.like_playlist(db, playlist_id, current_user.id)
    return ApiResponse(data=LikeData(likes_count=likes_count), message="Playlist liked")

@router.delete("/{playlist_id}/like", response_model=ApiResponse[LikeData])
async def unlike_playlist(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    likes_count = playlist_service.unlike_playlist(db, playlist_id, current_user.id)
    return ApiResponse(data=LikeData(likes_count=likes_count), message="Playlist unliked")

@router.post("/{playlist_id}/save", response_model=ApiResponse[None])
async def save_playlist(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    playlist_service.save_playlist(db, playlist_id, current_user.id)
    return ApiResponse(message="Playlist saved")

@router.delete("/{playlist_id}/save", response_model=ApiResponse[None])
async def unsave_playlist(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    playlist_service.unsave_playlist(db, playlist_id, current_user.id)
    return ApiResponse(message="Playlist unsaved")
