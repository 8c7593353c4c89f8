# ============================================================================
# FILE: vibeshare/services/feed_service.py
# ============================================================================
from typing import Optional
from sqlalchemy.orm import Session
from vibeshare.db.models import Playlist, PlaylistTag
from vibeshare.schemas.playlist import PlaylistListData, TagPlaylistsData
from vibeshare.services.playlist_service import playlist_service, RECENT_ORDER, POPULAR_ORDER

class FeedService:
    """Home feed and discovery listings over public playlists"""

    def _public(self, db: Session):
        return playlist_service.base_query(db).filter(Playlist.is_public.is_(True))

    def feed(self, db: Session, viewer_id: Optional[int], page: int = 1, limit: int = 20) -> PlaylistListData:
        """Newest public playlists, the same for every viewer"""
        query = self._public(db).order_by(*RECENT_ORDER)
        return playlist_service.page(db, query, page, limit, viewer_id)

    def trending(self, db: Session, viewer_id: Optional[int], page: int = 1, limit: int = 20) -> PlaylistListData:
        query = self._public(db).order_by(*POPULAR_ORDER)
        return playlist_service.page(db, query, page, limit, viewer_id)

    def by_tag(self, db: Session, tag: str, viewer_id: Optional[int], page: int = 1, limit: int = 20) -> TagPlaylistsData:
        """Public playlists carrying exactly this tag, most liked first"""
        query = (
            self._public(db)
            .filter(Playlist.tag_rows.any(PlaylistTag.name == tag))
            .order_by(*POPULAR_ORDER)
        )
        data = playlist_service.page(db, query, page, limit, viewer_id)
        return TagPlaylistsData(tag=tag, playlists=data.playlists, pagination=data.pagination)

# Create singleton instance
feed_service = FeedService()
