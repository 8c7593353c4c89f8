# ============================================================================
# FILE: vibeshare/api/v1/endpoints/songs.py
# ============================================================================
import asyncio
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional, Union
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import require_current_user, get_current_user, viewer_id
from vibeshare.core.exceptions import ValidationError
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.song import (
    SongCreate,
    SongBatchCreate,
    SongUpdate,
    SongPosition,
    SongReorder,
    SongResponse,
    SongData,
    SongListData,
    SavedSongListData,
)
from vibeshare.services.playlist_service import playlist_service
from vibeshare.services.song_service import song_service
from vibeshare.services.thumbnail_fetcher import resolve_song_source
from vibeshare.db.models.user import User
import logging

logger = logging.getLogger(__name__)

# Mounted under /playlists
playlist_router = APIRouter()
# Mounted under /songs
router = APIRouter()

async def _draft(song: SongCreate) -> dict:
    platform, thumbnail = await resolve_song_source(song.url, song.platform)
    return {
        "title": song.title,
        "artist": song.artist,
        "url": song.url,
        "platform": platform,
        "thumbnail": thumbnail,
    }

def _song_list(songs) -> SongListData:
    return SongListData(songs=[SongResponse.model_validate(s) for s in songs])

@playlist_router.get("/{playlist_id}/songs", response_model=ApiResponse[SongListData])
async def get_playlist_songs(
    playlist_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user)
):
    """Songs of a visible playlist in position order"""
    songs = song_service.list_songs(db, playlist_id, viewer_id(current_user))
    return ApiResponse(data=_song_list(songs))

@playlist_router.post(
    "/{playlist_id}/songs",
    response_model=ApiResponse[SongData],
    status_code=status.HTTP_201_CREATED,
)
async def add_song(
    playlist_id: int,
    song_data: SongCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Append a song to the end of a playlist
    Platform and thumbnail are detected from the URL when missing
    """
    playlist = playlist_service.get_owned_playlist(db, playlist_id, current_user.id)
    song = song_service.add_song(db, playlist, await _draft(song_data))
    return ApiResponse(data=SongData(song=SongResponse.model_validate(song)), message="Song added successfully")

@playlist_router.post(
    "/{playlist_id}/songs/batch",
    response_model=ApiResponse[SongListData],
    status_code=status.HTTP_201_CREATED,
)
async def add_songs(
    playlist_id: int,
    body: Union[SongBatchCreate, List[SongCreate]],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Append several songs at once
    Accepts {"songs": [...]} or a bare array; all are added or none
    """
    songs = body.songs if isinstance(body, SongBatchCreate) else body
    if not songs:
        raise ValidationError("songs: at least one song is required")

    playlist = playlist_service.get_owned_playlist(db, playlist_id, current_user.id)
    drafts = await asyncio.gather(*(_draft(song) for song in songs))
    added = song_service.add_songs(db, playlist, list(drafts))
    return ApiResponse(data=_song_list(added), message=f"{len(added)} songs added successfully")

@playlist_router.put("/{playlist_id}/songs/reorder", response_model=ApiResponse[SongListData])
async def reorder_songs(
    playlist_id: int,
    body: Union[SongReorder, List[SongPosition]],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Move songs to new positions
    Positions are renumbered 1..N afterwards
    """
    positions = body.songs if isinstance(body, SongReorder) else body
    if not positions:
        raise ValidationError("songs: at least one position is required")

    songs = song_service.reorder_songs(db, playlist_id, current_user.id, positions)
    return ApiResponse(data=_song_list(songs), message="Songs reordered successfully")

@router.get("/saved", response_model=ApiResponse[SavedSongListData])
async def get_saved_songs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return ApiResponse(data=song_service.list_saved_songs(db, current_user.id, page=page, limit=limit))

@router.put("/{song_id}", response_model=ApiResponse[SongData])
async def update_song(
    song_id: int,
    update_data: SongUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """
    Update a song
    A new URL re-detects platform and thumbnail unless a platform is given
    """
    song = song_service.get_owned_song(db, song_id, current_user.id)
    changes = update_data.model_dump(exclude_unset=True)

    if changes.get("url") and changes["url"] != song.url:
        platform, thumbnail = await resolve_song_source(changes["url"], changes.get("platform"))
        changes["platform"] = platform
        changes["thumbnail"] = thumbnail

    song = song_service.update_song(db, song, changes)
    return ApiResponse(data=SongData(song=SongResponse.model_validate(song)), message="Song updated successfully")

@router.delete("/{song_id}", response_model=ApiResponse[None])
async def delete_song(
    song_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    song_service.delete_song(db, song_id, current_user.id)
    return ApiResponse(message="Song deleted successfully")

@router.post("/{song_id}/save", response_model=ApiResponse[None])
async def save_song(
    song_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    song_service.save_song(db, song_id, current_user.id)
    return ApiResponse(message="Song saved")

@router.delete("/{song_id}/save", response_model=ApiResponse[None])
async def unsave_song(
    song_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    song_service.unsave_song(db, song_id, current_user.id)
    return ApiResponse(message="Song unsaved")
