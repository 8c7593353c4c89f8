# ============================================================================
# FILE: vibeshare/api/v1/router.py
# ============================================================================
from fastapi import APIRouter
from vibeshare.api.v1.endpoints import auth, users, playlists, songs, feed, discover, search, notifications

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(playlists.router, prefix="/playlists", tags=["playlists"])
api_router.include_router(songs.playlist_router, prefix="/playlists", tags=["songs"])
api_router.include_router(songs.router, prefix="/songs", tags=["songs"])
api_router.include_router(feed.router, prefix="/feed", tags=["feed"])
api_router.include_router(discover.router, prefix="/discover", tags=["discover"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
