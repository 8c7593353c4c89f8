# ============================================================================
# FILE: vibeshare/services/song_service.py
# ============================================================================
from typing import List, Optional, Dict, Any
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from vibeshare.core.exceptions import NotFoundError, ForbiddenError, ConflictError, ValidationError
from vibeshare.db.models import Playlist, Song, SavedSong
from vibeshare.db.queries import fetch_page
from vibeshare.schemas.common import Pagination
from vibeshare.schemas.song import SongPosition, SongResponse, SavedSongResponse, SavedSongListData, SavedSongPlaylistInfo
from vibeshare.services.playlist_service import playlist_service, is_visible, clamp_limit
import logging

logger = logging.getLogger(__name__)

def playlist_lock_query(playlist_id: int):
    # SQLite compiles this without the FOR UPDATE clause
    return select(Playlist.id).where(Playlist.id == playlist_id).with_for_update()

class SongService:
    """Service layer for songs inside playlists"""

    def list_songs(self, db: Session, playlist_id: int, viewer_id: Optional[int]) -> List[Song]:
        playlist = playlist_service.get_visible_playlist(db, playlist_id, viewer_id)
        return self._ordered(db, playlist.id)

    def get_owned_song(self, db: Session, song_id: int, user_id: int) -> Song:
        """Song whose parent playlist belongs to the user"""
        song = db.get(Song, song_id)
        if song is None or not is_visible(song.playlist, user_id):
            raise NotFoundError("Song not found")
        if song.playlist.user_id != user_id:
            raise ForbiddenError("Can only modify songs in your own playlists")
        return song

    def _ordered(self, db: Session, playlist_id: int) -> List[Song]:
        return (
            db.query(Song)
            .filter(Song.playlist_id == playlist_id)
            .order_by(Song.position, Song.id)
            .all()
        )

    def _lock_playlist(self, db: Session, playlist_id: int) -> None:
        """Hold the parent row until commit so position writes are serialized"""
        db.execute(playlist_lock_query(playlist_id))

    def _next_position(self, db: Session, playlist_id: int) -> int:
        last = db.scalar(select(func.max(Song.position)).where(Song.playlist_id == playlist_id))
        return (last or 0) + 1

    def add_songs(self, db: Session, playlist: Playlist, drafts: List[Dict[str, Any]]) -> List[Song]:
        """
        Append songs in the given order. Drafts carry title, artist, url,
        platform and thumbnail already resolved. All rows are written in one
        transaction: either every song is added or none is.
        """
        try:
            self._lock_playlist(db, playlist.id)
            position = self._next_position(db, playlist.id)
            songs = []
            for draft in drafts:
                song = Song(playlist_id=playlist.id, position=position, **draft)
                db.add(song)
                songs.append(song)
                position += 1
            db.commit()
            for song in songs:
                db.refresh(song)
            logger.info(f"Songs added to playlist {playlist.id}: {len(songs)}")
            return songs
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding songs to playlist {playlist.id}: {e}")
            raise

    def add_song(self, db: Session, playlist: Playlist, draft: Dict[str, Any]) -> Song:
        return self.add_songs(db, playlist, [draft])[0]

    def update_song(self, db: Session, song: Song, changes: Dict[str, Any]) -> Song:
        try:
            for field, value in changes.items():
                # Only the thumbnail may be cleared
                if value is not None or field == "thumbnail":
                    setattr(song, field, value)
            db.commit()
            db.refresh(song)
            logger.info(f"Song updated: {song.id}")
            return song
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating song: {e}")
            raise

    def delete_song(self, db: Session, song_id: int, user_id: int) -> None:
        """Delete a song and renumber the rest of the playlist to 1..N-1"""
        song = self.get_owned_song(db, song_id, user_id)
        playlist_id = song.playlist_id

        try:
            self._lock_playlist(db, playlist_id)
            db.execute(delete(SavedSong).where(SavedSong.song_id == song_id))
            db.delete(song)
            db.flush()
            self._renumber(self._ordered(db, playlist_id))
            db.commit()
            logger.info(f"Song deleted: {song_id} from playlist {playlist_id}")
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting song: {e}")
            raise

    def reorder_songs(self, db: Session, playlist_id: int, user_id: int, positions: List[SongPosition]) -> List[Song]:
        """
        Apply requested positions, then renumber the whole playlist densely.
        Songs that were moved win ties against songs that were not.
        """
        playlist = playlist_service.get_owned_playlist(db, playlist_id, user_id)
        requested = {item.id: item.position for item in positions}
        if len(requested) != len(positions):
            raise ValidationError("Duplicate song ids in reorder request")

        self._lock_playlist(db, playlist.id)
        songs = self._ordered(db, playlist.id)
        known = {song.id for song in songs}
        if not set(requested) <= known:
            raise ValidationError("Some songs not found in this playlist")

        try:
            previous = {song.id: song.position for song in songs}
            songs.sort(key=lambda s: (
                requested.get(s.id, s.position),
                0 if s.id in requested else 1,
                previous[s.id],
            ))
            self._renumber(songs)
            db.commit()
            logger.info(f"Songs reordered in playlist {playlist_id}")
            return self._ordered(db, playlist.id)
        except Exception as e:
            db.rollback()
            logger.error(f"Error reordering songs: {e}")
            raise

    def _renumber(self, songs: List[Song]) -> None:
        for index, song in enumerate(songs, start=1):
            if song.position != index:
                song.position = index

    # ------------------------------------------------------------------
    # Saved songs
    # ------------------------------------------------------------------

    def _get_visible_song(self, db: Session, song_id: int, viewer_id: int) -> Song:
        song = db.get(Song, song_id)
        if song is None or not is_visible(song.playlist, viewer_id):
            raise NotFoundError("Song not found")
        return song

    def save_song(self, db: Session, song_id: int, user_id: int) -> None:
        self._get_visible_song(db, song_id, user_id)
        if db.query(SavedSong).filter_by(user_id=user_id, song_id=song_id).first():
            raise ConflictError("Already saved this song")
        try:
            db.add(SavedSong(user_id=user_id, song_id=song_id))
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Already saved this song")
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving song: {e}")
            raise

    def unsave_song(self, db: Session, song_id: int, user_id: int) -> None:
        try:
            result = db.execute(
                delete(SavedSong).where(SavedSong.user_id == user_id, SavedSong.song_id == song_id)
            )
            if result.rowcount == 0:
                db.rollback()
                raise NotFoundError("Save not found")
            db.commit()
        except NotFoundError:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error unsaving song: {e}")
            raise

    def list_saved_songs(self, db: Session, user_id: int, page: int = 1, limit: int = 50) -> SavedSongListData:
        limit = clamp_limit(limit)
        page = max(page, 1)
        query = (
            db.query(SavedSong, Song)
            .join(Song, Song.id == SavedSong.song_id)
            .join(Playlist, Playlist.id == Song.playlist_id)
            .options(joinedload(Song.playlist).joinedload(Playlist.user))
            .filter(SavedSong.user_id == user_id)
            .filter((Playlist.is_public.is_(True)) | (Playlist.user_id == user_id))
            .order_by(SavedSong.created_at.desc(), SavedSong.id.desc())
        )
        rows, total = fetch_page(query, (page - 1) * limit, limit)

        songs = []
        for saved, song in rows:
            playlist = song.playlist
            songs.append(SavedSongResponse(
                **SongResponse.model_validate(song).model_dump(),
                saved_at=saved.created_at,
                playlist_info=SavedSongPlaylistInfo(
                    id=playlist.id,
                    title=playlist.title,
                    owner=playlist.user.username if playlist.user else None,
                ),
            ))
        return SavedSongListData(songs=songs, pagination=Pagination.build(page, limit, total))

# Create singleton instance
song_service = SongService()
