# ============================================================================
# FILE: vibeshare/services/playlist_service.py
# ============================================================================
from typing import List, Optional, Tuple, Iterable
from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from vibeshare.core.exceptions import NotFoundError, ForbiddenError, ConflictError
from vibeshare.db.models import (
    Playlist, PlaylistTag, Song, User, PlaylistLike, SavedPlaylist, SavedSong, Notification,
)
from vibeshare.db.models.playlist import DEFAULT_COVER_GRADIENT
from vibeshare.db.queries import fetch_page
from vibeshare.schemas.common import Pagination
from vibeshare.schemas.playlist import (
    PlaylistCreate, PlaylistUpdate, PlaylistSummary, PlaylistDetail, PlaylistListData,
)
from vibeshare.schemas.song import SongResponse
from vibeshare.schemas.user import UserSummary
from vibeshare.services.notification_service import notification_service
import logging

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50

RECENT_ORDER = (Playlist.created_at.desc(), Playlist.id.desc())
POPULAR_ORDER = (Playlist.likes_count.desc(), Playlist.created_at.desc(), Playlist.id.desc())

def clamp_limit(limit: int, cap: int = MAX_PAGE_SIZE) -> int:
    return max(1, min(limit, cap))

def is_visible(playlist: Playlist, viewer_id: Optional[int]) -> bool:
    return playlist.is_public or (viewer_id is not None and playlist.user_id == viewer_id)

class PlaylistService:
    """Service layer for playlist operations"""

    # ------------------------------------------------------------------
    # Lookup and access checks
    # ------------------------------------------------------------------

    def get_visible_playlist(self, db: Session, playlist_id: int, viewer_id: Optional[int]) -> Playlist:
        """Private playlists behave as missing for everyone but their owner"""
        playlist = db.get(Playlist, playlist_id)
        if playlist is None or not is_visible(playlist, viewer_id):
            raise NotFoundError("Playlist not found")
        return playlist

    def get_owned_playlist(self, db: Session, playlist_id: int, user_id: int) -> Playlist:
        """Get a playlist the user may modify (404 if invisible, 403 if not the owner)"""
        playlist = self.get_visible_playlist(db, playlist_id, user_id)
        if playlist.user_id != user_id:
            raise ForbiddenError("Can only modify your own playlists")
        return playlist

    # ------------------------------------------------------------------
    # Response shaping
    # ------------------------------------------------------------------

    def song_counts(self, db: Session, playlist_ids: List[int]) -> dict:
        if not playlist_ids:
            return {}
        rows = db.execute(
            select(Song.playlist_id, func.count(Song.id))
            .where(Song.playlist_id.in_(playlist_ids))
            .group_by(Song.playlist_id)
        ).all()
        return dict(rows)

    def viewer_flags(self, db: Session, playlist_ids: List[int], viewer_id: Optional[int]) -> Tuple[set, set]:
        """Liked and saved playlist ids for the viewer, one query each"""
        if viewer_id is None or not playlist_ids:
            return set(), set()
        liked = db.scalars(
            select(PlaylistLike.playlist_id).where(
                PlaylistLike.user_id == viewer_id,
                PlaylistLike.playlist_id.in_(playlist_ids),
            )
        ).all()
        saved = db.scalars(
            select(SavedPlaylist.playlist_id).where(
                SavedPlaylist.user_id == viewer_id,
                SavedPlaylist.playlist_id.in_(playlist_ids),
            )
        ).all()
        return set(liked), set(saved)

    def summarize(self, db: Session, playlists: Iterable[Playlist], viewer_id: Optional[int]) -> List[PlaylistSummary]:
        """Attach songCount, isLiked and isSaved to a page of playlists"""
        playlists = list(playlists)
        ids = [p.id for p in playlists]
        counts = self.song_counts(db, ids)
        liked, saved = self.viewer_flags(db, ids, viewer_id)

        return [
            PlaylistSummary(
                id=p.id,
                user_id=p.user_id,
                username=p.user.username if p.user else None,
                user_avatar=p.user.avatar_url if p.user else None,
                title=p.title,
                description=p.description,
                cover_gradient=p.cover_gradient,
                thumbnail_url=p.thumbnail_url,
                tags=p.tags,
                likes_count=p.likes_count,
                is_public=p.is_public,
                song_count=counts.get(p.id, 0),
                is_liked=p.id in liked,
                is_saved=p.id in saved,
                created_at=p.created_at,
                updated_at=p.updated_at,
            )
            for p in playlists
        ]

    def page(self, db: Session, query, page: int, limit: int, viewer_id: Optional[int]) -> PlaylistListData:
        limit = clamp_limit(limit)
        page = max(page, 1)
        playlists, total = fetch_page(query, (page - 1) * limit, limit)
        return PlaylistListData(
            playlists=self.summarize(db, playlists, viewer_id),
            pagination=Pagination.build(page, limit, total),
        )

    def base_query(self, db: Session):
        return db.query(Playlist).options(selectinload(Playlist.user))

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_playlists(
        self,
        db: Session,
        viewer_id: Optional[int],
        page: int = 1,
        limit: int = 20,
        user_id: Optional[int] = None,
        tag: Optional[str] = None,
        sort: str = "recent",
    ) -> PlaylistListData:
        """Public playlists, optionally one user's (all of them when the viewer is that user)"""
        query = self.base_query(db)
        if user_id is not None:
            query = query.filter(Playlist.user_id == user_id)
            if viewer_id != user_id:
                query = query.filter(Playlist.is_public.is_(True))
        else:
            query = query.filter(Playlist.is_public.is_(True))

        if tag:
            query = query.filter(Playlist.tag_rows.any(PlaylistTag.name == tag))

        query = query.order_by(*(POPULAR_ORDER if sort == "popular" else RECENT_ORDER))
        return self.page(db, query, page, limit, viewer_id)

    def list_user_playlists(self, db: Session, user_id: int, viewer_id: Optional[int], page: int = 1, limit: int = 20) -> PlaylistListData:
        if db.get(User, user_id) is None:
            raise NotFoundError("User not found")
        return self.list_playlists(db, viewer_id, page=page, limit=limit, user_id=user_id)

    def list_saved_playlists(self, db: Session, user_id: int, page: int = 1, limit: int = 20) -> PlaylistListData:
        """Playlists the user saved, newest save first"""
        query = (
            self.base_query(db)
            .join(SavedPlaylist, SavedPlaylist.playlist_id == Playlist.id)
            .filter(SavedPlaylist.user_id == user_id)
            .filter((Playlist.is_public.is_(True)) | (Playlist.user_id == user_id))
            .order_by(SavedPlaylist.created_at.desc(), SavedPlaylist.id.desc())
        )
        return self.page(db, query, page, limit, user_id)

    def get_playlist_detail(self, db: Session, playlist_id: int, viewer_id: Optional[int]) -> PlaylistDetail:
        """Playlist with owner info and its songs in position order"""
        playlist = self.get_visible_playlist(db, playlist_id, viewer_id)
        songs = (
            db.query(Song)
            .filter(Song.playlist_id == playlist.id)
            .order_by(Song.position, Song.id)
            .all()
        )
        liked, saved = self.viewer_flags(db, [playlist.id], viewer_id)
        owner = playlist.user

        return PlaylistDetail(
            id=playlist.id,
            title=playlist.title,
            description=playlist.description,
            cover_gradient=playlist.cover_gradient,
            thumbnail_url=playlist.thumbnail_url,
            tags=playlist.tags,
            likes_count=playlist.likes_count,
            is_public=playlist.is_public,
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
            user=UserSummary(id=owner.id, username=owner.username, avatar_url=owner.avatar_url),
            songs=[SongResponse.model_validate(song) for song in songs],
            song_count=len(songs),
            is_liked=playlist.id in liked,
            is_saved=playlist.id in saved,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_playlist(self, db: Session, user_id: int, playlist_data: PlaylistCreate) -> Playlist:
        """Create a new playlist for a user and bump their playlist count"""
        try:
            playlist = Playlist(
                user_id=user_id,
                title=playlist_data.title,
                description=playlist_data.description,
                cover_gradient=playlist_data.cover_gradient or DEFAULT_COVER_GRADIENT,
                is_public=playlist_data.is_public,
            )
            playlist.set_tags(playlist_data.tags)
            db.add(playlist)
            db.execute(
                update(User)
                .where(User.id == user_id)
                .values(playlist_count=User.playlist_count + 1)
            )
            db.commit()
            db.refresh(playlist)
            logger.info(f"Playlist created: {playlist.id} for user {user_id}")
            return playlist
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating playlist: {e}")
            raise

    def update_playlist(self, db: Session, playlist_id: int, user_id: int, update_data: PlaylistUpdate) -> Playlist:
        """Update playlist details (owner only)"""
        playlist = self.get_owned_playlist(db, playlist_id, user_id)
        changes = update_data.model_dump(exclude_unset=True)

        try:
            for field in ("title", "description", "cover_gradient", "is_public"):
                if field in changes and (changes[field] is not None or field == "description"):
                    setattr(playlist, field, changes[field])
            if changes.get("tags") is not None:
                playlist.set_tags(changes["tags"])

            db.commit()
            db.refresh(playlist)
            logger.info(f"Playlist updated: {playlist_id}")
            return playlist
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating playlist: {e}")
            raise

    def set_thumbnail(self, db: Session, playlist: Playlist, thumbnail_url: Optional[str]) -> Optional[str]:
        """Replace the thumbnail URL and return the previous one"""
        previous = playlist.thumbnail_url
        try:
            playlist.thumbnail_url = thumbnail_url
            db.commit()
            db.refresh(playlist)
            return previous
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating playlist thumbnail: {e}")
            raise

    def delete_playlist(self, db: Session, playlist_id: int, user_id: int) -> Optional[str]:
        """
        Delete a playlist together with its songs, likes, saves and
        notifications, and decrement the owner's playlist count.
        Runs as one transaction, children first. Returns the thumbnail URL
        the playlist had so the caller can clean up storage.
        """
        playlist = self.get_owned_playlist(db, playlist_id, user_id)
        owner_id = playlist.user_id
        thumbnail_url = playlist.thumbnail_url

        try:
            self.purge_playlists(db, [playlist_id])
            db.execute(
                update(User)
                .where(User.id == owner_id)
                .values(playlist_count=User.playlist_count - 1)
            )
            db.commit()
            logger.info(f"Playlist deleted: {playlist_id}")
            return thumbnail_url
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting playlist: {e}")
            raise

    def purge_playlists(self, db: Session, playlist_ids: List[int]) -> None:
        """Delete playlists and every row hanging off them (caller commits)"""
        if not playlist_ids:
            return
        song_ids = select(Song.id).where(Song.playlist_id.in_(playlist_ids))
        db.execute(delete(SavedSong).where(SavedSong.song_id.in_(song_ids)).execution_options(synchronize_session=False))
        db.execute(delete(Song).where(Song.playlist_id.in_(playlist_ids)).execution_options(synchronize_session=False))
        db.execute(delete(PlaylistLike).where(PlaylistLike.playlist_id.in_(playlist_ids)).execution_options(synchronize_session=False))
        db.execute(delete(SavedPlaylist).where(SavedPlaylist.playlist_id.in_(playlist_ids)).execution_options(synchronize_session=False))
        db.execute(delete(Notification).where(Notification.playlist_id.in_(playlist_ids)).execution_options(synchronize_session=False))
        db.execute(delete(PlaylistTag).where(PlaylistTag.playlist_id.in_(playlist_ids)).execution_options(synchronize_session=False))
        db.execute(delete(Playlist).where(Playlist.id.in_(playlist_ids)).execution_options(synchronize_session=False))
        db.expire_all()

    # ------------------------------------------------------------------
    # Likes and saves
    # ------------------------------------------------------------------

    def like_playlist(self, db: Session, playlist_id: int, user_id: int) -> int:
        """Like a playlist; a second like is a conflict. Returns the new likes count."""
        playlist = self.get_visible_playlist(db, playlist_id, user_id)
        owner_id = playlist.user_id

        existing = db.query(PlaylistLike).filter_by(user_id=user_id, playlist_id=playlist_id).first()
        if existing:
            raise ConflictError("Already liked this playlist")

        try:
            db.add(PlaylistLike(user_id=user_id, playlist_id=playlist_id))
            db.flush()
            db.execute(
                update(Playlist)
                .where(Playlist.id == playlist_id)
                .values(likes_count=Playlist.likes_count + 1)
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Already liked this playlist")
        except Exception as e:
            db.rollback()
            logger.error(f"Error liking playlist: {e}")
            raise

        logger.info(f"Playlist liked: {playlist_id} by user {user_id}")
        self._notify(db, owner_id, "playlist_like", user_id, playlist_id)
        return self._likes_count(db, playlist_id)

    def unlike_playlist(self, db: Session, playlist_id: int, user_id: int) -> int:
        """Remove a like (404 if there is none) and retract its notification"""
        try:
            result = db.execute(
                delete(PlaylistLike).where(
                    PlaylistLike.user_id == user_id,
                    PlaylistLike.playlist_id == playlist_id,
                )
            )
            if result.rowcount == 0:
                db.rollback()
                raise NotFoundError("Like not found")
            db.execute(
                update(Playlist)
                .where(Playlist.id == playlist_id)
                .values(likes_count=Playlist.likes_count - 1)
            )
            db.commit()
        except NotFoundError:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error unliking playlist: {e}")
            raise

        logger.info(f"Playlist unliked: {playlist_id} by user {user_id}")
        notification_service.retract_notification(db, "playlist_like", user_id, playlist_id)
        return self._likes_count(db, playlist_id)

    def save_playlist(self, db: Session, playlist_id: int, user_id: int) -> None:
        playlist = self.get_visible_playlist(db, playlist_id, user_id)
        owner_id = playlist.user_id

        existing = db.query(SavedPlaylist).filter_by(user_id=user_id, playlist_id=playlist_id).first()
        if existing:
            raise ConflictError("Already saved this playlist")

        try:
            db.add(SavedPlaylist(user_id=user_id, playlist_id=playlist_id))
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Already saved this playlist")
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving playlist: {e}")
            raise

        logger.info(f"Playlist saved: {playlist_id} by user {user_id}")
        self._notify(db, owner_id, "playlist_save", user_id, playlist_id)

    def unsave_playlist(self, db: Session, playlist_id: int, user_id: int) -> None:
        try:
            result = db.execute(
                delete(SavedPlaylist).where(
                    SavedPlaylist.user_id == user_id,
                    SavedPlaylist.playlist_id == playlist_id,
                )
            )
            if result.rowcount == 0:
                db.rollback()
                raise NotFoundError("Save not found")
            db.commit()
        except NotFoundError:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error unsaving playlist: {e}")
            raise

        notification_service.retract_notification(db, "playlist_save", user_id, playlist_id)

    def _likes_count(self, db: Session, playlist_id: int) -> int:
        count = db.scalar(select(Playlist.likes_count).where(Playlist.id == playlist_id))
        return count or 0

    def _notify(self, db: Session, recipient_id: int, type_: str, actor_id: int, playlist_id: int) -> None:
        # Side effect only: the like/save itself already succeeded
        try:
            notification_service.create_notification(db, recipient_id, type_, actor_id, playlist_id)
        except Exception as e:
            logger.error(f"Create notification error: {e}")

# Create singleton instance
playlist_service = PlaylistService()
