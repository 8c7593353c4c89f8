# ============================================================================
# FILE: vibeshare/api/v1/endpoints/discover.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import require_current_user, get_current_user, viewer_id
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.playlist import PlaylistListData, TagPlaylistsData
from vibeshare.schemas.user import PublicUser, SuggestedUsersData
from vibeshare.services.feed_service import feed_service
from vibeshare.services.user_service import user_service
from vibeshare.db.models.user import User

router = APIRouter()

@router.get("/users", response_model=ApiResponse[SuggestedUsersData])
async def get_suggested_users(
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """Users to follow: not yourself, not already followed, most followed first"""
    users = user_service.suggested_users(db, current_user.id, limit=limit)
    return ApiResponse(data=SuggestedUsersData(users=[PublicUser.model_validate(u) for u in users]))

@router.get("/playlists", response_model=ApiResponse[PlaylistListData])
async def get_trending_playlists(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user)
):
    """Most liked public playlists"""
    return ApiResponse(data=feed_service.trending(db, viewer_id(current_user), page=page, limit=limit))

@router.get("/tags/{tag}", response_model=ApiResponse[TagPlaylistsData])
async def get_playlists_by_tag(
    tag: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user)
):
    """Public playlists tagged exactly with tag, most liked first"""
    return ApiResponse(data=feed_service.by_tag(db, tag, viewer_id(current_user), page=page, limit=limit))
