# ============================================================================
# FILE: vibeshare/schemas/playlist.py
# ============================================================================
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from vibeshare.schemas.common import CamelModel, Pagination
from vibeshare.schemas.song import SongResponse
from vibeshare.schemas.user import UserSummary

MAX_TAGS = 5

def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Strip, drop blanks and duplicates, keep order"""
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned

class PlaylistCreate(CamelModel):
    """Schema for creating a playlist"""
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS)
    cover_gradient: Optional[str] = Field(default=None, max_length=100)
    is_public: bool = True
    
    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value):
        return _clean_tags(value)

class PlaylistUpdate(CamelModel):
    """Schema for updating a playlist"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    tags: Optional[List[str]] = Field(default=None, max_length=MAX_TAGS)
    cover_gradient: Optional[str] = Field(default=None, max_length=100)
    is_public: Optional[bool] = None
    
    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value):
        return _clean_tags(value)

class PlaylistSummary(CamelModel):
    """Playlist list item with per-viewer flags"""
    id: int
    user_id: int
    username: Optional[str] = None
    user_avatar: Optional[str] = None
    title: str
    description: Optional[str] = None
    cover_gradient: Optional[str] = None
    thumbnail_url: Optional[str] = None
    tags: List[str] = []
    likes_count: int = 0
    is_public: bool = True
    song_count: int = 0
    is_liked: bool = False
    is_saved: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

class PlaylistDetail(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    cover_gradient: Optional[str] = None
    thumbnail_url: Optional[str] = None
    tags: List[str] = []
    likes_count: int = 0
    is_public: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None
    user: UserSummary
    songs: List[SongResponse] = []
    song_count: int = 0
    is_liked: bool = False
    is_saved: bool = False

class PlaylistData(CamelModel):
    playlist: PlaylistSummary

class PlaylistDetailData(CamelModel):
    playlist: PlaylistDetail

class PlaylistListData(CamelModel):
    playlists: List[PlaylistSummary]
    pagination: Pagination

class TagPlaylistsData(PlaylistListData):
    tag: str

class LikeData(CamelModel):
    likes_count: int

class ThumbnailUploadData(CamelModel):
    playlist: PlaylistSummary
    image_url: str
