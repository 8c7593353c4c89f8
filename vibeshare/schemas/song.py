# ============================================================================
# FILE: vibeshare/schemas/song.py
# ============================================================================
from urllib.parse import urlparse
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from vibeshare.schemas.common import CamelModel, Pagination

def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be a valid http(s) URL")
    return value

class SongCreate(CamelModel):
    """Schema for adding a song; platform is detected when omitted"""
    title: str = Field(min_length=1, max_length=255)
    artist: str = Field(min_length=1, max_length=255)
    url: str
    platform: Optional[str] = Field(default=None, min_length=1, max_length=50)
    
    @field_validator("url")
    @classmethod
    def check_url(cls, value):
        return _check_url(value)

class SongBatchCreate(CamelModel):
    songs: List[SongCreate] = Field(min_length=1)

class SongUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    artist: Optional[str] = Field(default=None, min_length=1, max_length=255)
    url: Optional[str] = None
    platform: Optional[str] = Field(default=None, min_length=1, max_length=50)
    
    @field_validator("url")
    @classmethod
    def check_url(cls, value):
        return _check_url(value)

class SongPosition(CamelModel):
    id: int
    position: int = Field(ge=1)

class SongReorder(CamelModel):
    songs: List[SongPosition] = Field(min_length=1)

class SongResponse(CamelModel):
    id: int
    playlist_id: int
    title: str
    artist: str
    url: str
    platform: str
    thumbnail: Optional[str] = None
    position: int
    created_at: datetime
    updated_at: Optional[datetime] = None

class SongData(CamelModel):
    song: SongResponse

class SongListData(CamelModel):
    songs: List[SongResponse]

class SavedSongPlaylistInfo(CamelModel):
    id: int
    title: str
    owner: Optional[str] = None

class SavedSongResponse(SongResponse):
    saved_at: datetime
    playlist_info: SavedSongPlaylistInfo

class SavedSongListData(CamelModel):
    songs: List[SavedSongResponse]
    pagination: Pagination
