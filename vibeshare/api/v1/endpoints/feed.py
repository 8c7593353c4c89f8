# ============================================================================
# FILE: vibeshare/api/v1/endpoints/feed.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import get_current_user, viewer_id
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.playlist import PlaylistListData
from vibeshare.services.feed_service import feed_service
from vibeshare.db.models.user import User

router = APIRouter()

@router.get("", response_model=ApiResponse[PlaylistListData])
async def get_feed(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user)
):
    """
    Home feed: newest public playlists
    Login only adds the isLiked/isSaved flags
    """
    return ApiResponse(data=feed_service.feed(db, viewer_id(current_user), page=page, limit=limit))
