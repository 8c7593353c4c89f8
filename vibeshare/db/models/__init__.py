# ============================================================================
# FILE: vibeshare/db/models/__init__.py
# Import every model so Base.metadata knows all tables
# ============================================================================
from vibeshare.db.models.user import User, UserFollow
from vibeshare.db.models.playlist import Playlist, PlaylistTag, Song
from vibeshare.db.models.interaction import PlaylistLike, SavedPlaylist, SavedSong
from vibeshare.db.models.notification import Notification
from vibeshare.db.models.search_history import SearchHistory

__all__ = [
    "User",
    "UserFollow",
    "Playlist",
    "PlaylistTag",
    "Song",
    "PlaylistLike",
    "SavedPlaylist",
    "SavedSong",
    "Notification",
    "SearchHistory",
]
