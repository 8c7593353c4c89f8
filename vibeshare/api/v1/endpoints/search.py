# ============================================================================
# FILE: vibeshare/api/v1/endpoints/search.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import require_current_user, get_current_user, get_search_service, viewer_id
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.search import (
    UniversalSearchData,
    UserSearchData,
    PlaylistSearchData,
    TagSearchData,
    SuggestionData,
    TrendingData,
    RecentSearchData,
)
from vibeshare.services.search_service import SearchService
from vibeshare.db.models.user import User
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=ApiResponse[UniversalSearchData])
async def universal_search(
    q: Optional[str] = None,
    type: str = "all",
    limit: int = Query(10, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user),
    search: SearchService = Depends(get_search_service)
):
    """
    Search users, playlists and tags at once
    type: all | users | playlists | tags; results are cached briefly
    """
    data = search.universal(db, q, type_=type, limit=limit, offset=offset, viewer_id=viewer_id(current_user))
    return ApiResponse(data=data)

@router.get("/users", response_model=ApiResponse[UserSearchData])
async def search_users(
    q: Optional[str] = None,
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    search: SearchService = Depends(get_search_service)
):
    return ApiResponse(data=search.search_users(db, q, limit=limit, offset=offset))

@router.get("/playlists", response_model=ApiResponse[PlaylistSearchData])
async def search_playlists(
    q: Optional[str] = None,
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    sort: str = "relevant",
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user),
    search: SearchService = Depends(get_search_service)
):
    """sort: recent | popular (anything else is newest first)"""
    data = search.search_playlists(
        db, q, limit=limit, offset=offset, sort=sort, viewer_id=viewer_id(current_user)
    )
    return ApiResponse(data=data)

@router.get("/tags", response_model=ApiResponse[TagSearchData])
async def search_tags(
    q: Optional[str] = None,
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    search: SearchService = Depends(get_search_service)
):
    return ApiResponse(data=search.search_tags(db, q, limit=limit))

@router.get("/suggestions", response_model=ApiResponse[SuggestionData])
async def get_suggestions(
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    search: SearchService = Depends(get_search_service)
):
    """Autocomplete: usernames, playlist titles and tags starting with q"""
    return ApiResponse(data=search.suggestions(db, q))

@router.get("/trending", response_model=ApiResponse[TrendingData])
async def get_trending(
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
    search: SearchService = Depends(get_search_service)
):
    return ApiResponse(data=search.trending(db, limit=limit))

@router.get("/recent", response_model=ApiResponse[RecentSearchData])
async def get_recent_searches(
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
    search: SearchService = Depends(get_search_service)
):
    return ApiResponse(data=search.list_recent(db, current_user.id, limit=limit))

@router.delete("/recent", response_model=ApiResponse[None])
async def clear_recent_searches(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
    search: SearchService = Depends(get_search_service)
):
    search.clear_recent(db, current_user.id)
    return ApiResponse(message="Recent searches cleared")

@router.delete("/recent/{search_id}", response_model=ApiResponse[None])
async def remove_recent_search(
    search_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user),
    search: SearchService = Depends(get_search_service)
):
    search.remove_recent(db, current_user.id, search_id)
    return ApiResponse(message="Recent search removed")
