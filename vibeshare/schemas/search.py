# ============================================================================
# FILE: vibeshare/schemas/search.py
# ============================================================================
from typing import Optional, List
from datetime import datetime
from vibeshare.schemas.common import CamelModel
from vibeshare.schemas.playlist import PlaylistSummary
from vibeshare.schemas.user import PublicUser

class TagCount(CamelModel):
    name: str
    playlist_count: int

class UniversalSearchMeta(CamelModel):
    query: str
    total_users: int = 0
    total_playlists: int = 0
    total_tags: int = 0

class UniversalSearchData(CamelModel):
    users: List[PublicUser] = []
    playlists: List[PlaylistSummary] = []
    tags: List[TagCount] = []
    meta: UniversalSearchMeta

class SearchMeta(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool
    sort: Optional[str] = None

class UserSearchData(CamelModel):
    users: List[PublicUser]
    meta: SearchMeta

class PlaylistSearchData(CamelModel):
    playlists: List[PlaylistSummary]
    meta: SearchMeta

class TagSearchData(CamelModel):
    tags: List[TagCount]

class Suggestion(CamelModel):
    type: str
    text: str
    id: Optional[int] = None
    count: Optional[int] = None

class SuggestionData(CamelModel):
    suggestions: List[Suggestion]

class TrendingSearch(CamelModel):
    query: str
    search_count: int

class TrendingData(CamelModel):
    trending: List[TrendingSearch]

class RecentSearch(CamelModel):
    id: int
    query: str
    searched_at: datetime

class RecentSearchData(CamelModel):
    recent_searches: List[RecentSearch]
