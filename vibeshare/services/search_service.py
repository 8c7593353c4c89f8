# ============================================================================
# FILE: vibeshare/services/search_service.py
# ============================================================================
from datetime import datetime, timedelta
from typing import Optional, List, Tuple
from sqlalchemy import select, delete, func, or_
from sqlalchemy.orm import Session
from vibeshare.config import settings
from vibeshare.core.exceptions import ValidationError, NotFoundError
from vibeshare.db.models import User, Playlist, PlaylistTag, SearchHistory
from vibeshare.db.queries import contains, starts_with
from vibeshare.schemas.search import (
    TagCount, UniversalSearchMeta, UniversalSearchData, SearchMeta, UserSearchData,
    PlaylistSearchData, TagSearchData, Suggestion, SuggestionData, TrendingSearch,
    TrendingData, RecentSearch, RecentSearchData,
)
from vibeshare.schemas.user import PublicUser
from vibeshare.services.playlist_service import playlist_service, clamp_limit, RECENT_ORDER, POPULAR_ORDER
import logging

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
UNIVERSAL_MAX_LIMIT = 20
SEARCH_TYPES = ("all", "users", "playlists", "tags")
SUGGESTIONS_PER_KIND = 3
TRENDING_WINDOW = timedelta(days=7)

# Served while no search history exists yet
SEED_TRENDING = [
    ("lofi", 12453),
    ("workout", 9876),
    ("chill", 8543),
    ("indie", 7234),
    ("roadtrip", 6123),
    ("study", 5432),
    ("party", 4987),
    ("focus", 4321),
    ("sleep", 3876),
    ("motivation", 3456),
]

def check_query(q: Optional[str]) -> str:
    q = (q or "").strip()
    if len(q) < MIN_QUERY_LENGTH:
        raise ValidationError(f"Query must be at least {MIN_QUERY_LENGTH} characters")
    return q

class SearchService:
    """Search over users, playlists and tags, with a pluggable result cache"""

    def __init__(self, cache, ttl: int = None):
        self.cache = cache
        self.ttl = ttl or settings.SEARCH_CACHE_TTL_SECONDS

    # ------------------------------------------------------------------
    # Query building blocks
    # ------------------------------------------------------------------

    def _user_query(self, db: Session, q: str):
        return db.query(User).filter(or_(contains(User.username, q), contains(User.bio, q)))

    def _playlist_query(self, db: Session, q: str):
        return playlist_service.base_query(db).filter(
            Playlist.is_public.is_(True),
            or_(
                contains(Playlist.title, q),
                contains(Playlist.description, q),
                Playlist.tag_rows.any(contains(PlaylistTag.name, q)),
            ),
        )

    def _matching_users(self, db: Session, q: str, limit: int, offset: int) -> Tuple[List[PublicUser], int]:
        query = self._user_query(db, q)
        total = query.count()
        users = (
            query.order_by(User.followers_count.desc(), User.created_at.desc(), User.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [PublicUser.model_validate(u) for u in users], total

    def _matching_playlists(self, db: Session, q: str, limit: int, offset: int, order, viewer_id: Optional[int]):
        query = self._playlist_query(db, q)
        total = query.count()
        playlists = query.order_by(*order).offset(offset).limit(limit).all()
        return playlist_service.summarize(db, playlists, viewer_id), total

    def _matching_tags(self, db: Session, q: str, limit: int) -> List[TagCount]:
        """Tag prefix matches with the number of public playlists using each tag"""
        playlist_count = func.count(func.distinct(PlaylistTag.playlist_id))
        rows = db.execute(
            select(PlaylistTag.name, playlist_count)
            .join(Playlist, Playlist.id == PlaylistTag.playlist_id)
            .where(Playlist.is_public.is_(True), starts_with(PlaylistTag.name, q))
            .group_by(PlaylistTag.name)
            .order_by(playlist_count.desc(), PlaylistTag.name)
            .limit(limit)
        ).all()
        return [TagCount(name=name, playlist_count=count) for name, count in rows]

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def universal(
        self,
        db: Session,
        q: Optional[str],
        type_: str = "all",
        limit: int = 10,
        offset: int = 0,
        viewer_id: Optional[int] = None,
    ) -> UniversalSearchData:
        """
        Fan out one query to users, playlists and tags. Results are cached per
        (type, q, limit, offset); a hit skips every database query, so the
        per-viewer isLiked/isSaved flags may be stale for up to the cache TTL.
        """
        q = check_query(q)
        if type_ not in SEARCH_TYPES:
            raise ValidationError(f"type must be one of: {', '.join(SEARCH_TYPES)}")
        limit = clamp_limit(limit, UNIVERSAL_MAX_LIMIT)
        offset = max(offset, 0)

        if viewer_id is not None:
            self.record_recent(db, viewer_id, q)

        cache_key = f"search:{type_}:{q}:{limit}:{offset}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Search cache hit: {cache_key}")
            return UniversalSearchData.model_validate(cached)

        data = UniversalSearchData(meta=UniversalSearchMeta(query=q))
        if type_ in ("all", "users"):
            data.users, data.meta.total_users = self._matching_users(db, q, limit, offset)
        if type_ in ("all", "playlists"):
            data.playlists, data.meta.total_playlists = self._matching_playlists(
                db, q, limit, offset, POPULAR_ORDER, viewer_id
            )
        if type_ in ("all", "tags"):
            data.tags = self._matching_tags(db, q, limit)
            data.meta.total_tags = len(data.tags)

        self.cache.set(cache_key, data.model_dump(by_alias=True, mode="json"), self.ttl)
        return data

    def search_users(self, db: Session, q: Optional[str], limit: int = 20, offset: int = 0) -> UserSearchData:
        q = check_query(q)
        limit = clamp_limit(limit)
        offset = max(offset, 0)
        users, total = self._matching_users(db, q, limit, offset)
        return UserSearchData(
            users=users,
            meta=SearchMeta(total=total, limit=limit, offset=offset, has_more=total > offset + limit),
        )

    def search_playlists(
        self,
        db: Session,
        q: Optional[str],
        limit: int = 20,
        offset: int = 0,
        sort: str = "relevant",
        viewer_id: Optional[int] = None,
    ) -> PlaylistSearchData:
        """Sort is recent or popular; anything else means newest first"""
        q = check_query(q)
        limit = clamp_limit(limit)
        offset = max(offset, 0)
        order = POPULAR_ORDER if sort == "popular" else RECENT_ORDER
        playlists, total = self._matching_playlists(db, q, limit, offset, order, viewer_id)
        return PlaylistSearchData(
            playlists=playlists,
            meta=SearchMeta(
                total=total, limit=limit, offset=offset,
                has_more=total > offset + limit, sort=sort,
            ),
        )

    def search_tags(self, db: Session, q: Optional[str], limit: int = 20) -> TagSearchData:
        q = check_query(q)
        return TagSearchData(tags=self._matching_tags(db, q, clamp_limit(limit)))

    def suggestions(self, db: Session, q: Optional[str]) -> SuggestionData:
        """Up to three username, playlist title and tag prefix matches each"""
        q = (q or "").strip()
        if not q:
            return SuggestionData(suggestions=[])

        suggestions = []
        users = (
            db.query(User)
            .filter(starts_with(User.username, q))
            .order_by(User.username)
            .limit(SUGGESTIONS_PER_KIND)
            .all()
        )
        suggestions.extend(Suggestion(type="user", text=u.username, id=u.id) for u in users)

        playlists = (
            db.query(Playlist)
            .filter(Playlist.is_public.is_(True), starts_with(Playlist.title, q))
            .order_by(*POPULAR_ORDER)
            .limit(SUGGESTIONS_PER_KIND)
            .all()
        )
        suggestions.extend(Suggestion(type="playlist", text=p.title, id=p.id) for p in playlists)

        for tag in self._matching_tags(db, q, SUGGESTIONS_PER_KIND):
            suggestions.append(Suggestion(type="tag", text=tag.name, count=tag.playlist_count))
        return SuggestionData(suggestions=suggestions)

    def trending(self, db: Session, limit: int = 10, now: Optional[datetime] = None) -> TrendingData:
        """Most searched queries of the last week, or the seed list when there are none"""
        limit = clamp_limit(limit)
        since = (now or datetime.utcnow()) - TRENDING_WINDOW
        search_count = func.count(SearchHistory.id)
        rows = db.execute(
            select(SearchHistory.query, search_count)
            .where(SearchHistory.searched_at >= since)
            .group_by(SearchHistory.query)
            .order_by(search_count.desc(), SearchHistory.query)
            .limit(limit)
        ).all()
        if not rows:
            rows = SEED_TRENDING[:limit]
        return TrendingData(trending=[TrendingSearch(query=q, search_count=n) for q, n in rows])

    # ------------------------------------------------------------------
    # Recent searches
    # ------------------------------------------------------------------

    def record_recent(self, db: Session, user_id: int, q: str) -> None:
        """Keep one history row per (user, query), refreshed to now"""
        try:
            db.execute(delete(SearchHistory).where(SearchHistory.user_id == user_id, SearchHistory.query == q))
            db.add(SearchHistory(user_id=user_id, query=q[:255]))
            db.commit()
        except Exception as e:
            db.rollback()
            logger.warning(f"Failed to record search for user {user_id}: {e}")

    def list_recent(self, db: Session, user_id: int, limit: int = 10) -> RecentSearchData:
        rows = (
            db.query(SearchHistory)
            .filter(SearchHistory.user_id == user_id)
            .order_by(SearchHistory.searched_at.desc(), SearchHistory.id.desc())
            .limit(clamp_limit(limit))
            .all()
        )
        return RecentSearchData(recent_searches=[RecentSearch.model_validate(r) for r in rows])

    def clear_recent(self, db: Session, user_id: int) -> int:
        try:
            result = db.execute(delete(SearchHistory).where(SearchHistory.user_id == user_id))
            db.commit()
            return result.rowcount or 0
        except Exception as e:
            db.rollback()
            logger.error(f"Clear recent searches error: {e}")
            raise

    def remove_recent(self, db: Session, user_id: int, search_id: int) -> None:
        try:
            result = db.execute(
                delete(SearchHistory).where(SearchHistory.id == search_id, SearchHistory.user_id == user_id)
            )
            if result.rowcount == 0:
                db.rollback()
                raise NotFoundError("Recent search not found")
            db.commit()
        except NotFoundError:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Remove recent search error: {e}")
            raise
