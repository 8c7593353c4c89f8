# ============================================================================
# FILE: vibeshare/schemas/notification.py
# ============================================================================
from typing import Optional, List
from datetime import datetime
from vibeshare.schemas.common import CamelModel, Pagination
from vibeshare.schemas.user import UserSummary

class NotificationPlaylist(CamelModel):
    id: int
    title: str
    cover_gradient: Optional[str] = None
    thumbnail_url: Optional[str] = None

class NotificationResponse(CamelModel):
    id: int
    type: str
    is_read: bool
    created_at: datetime
    actor: Optional[UserSummary] = None
    playlist: Optional[NotificationPlaylist] = None

class NotificationListData(CamelModel):
    notifications: List[NotificationResponse]
    pagination: Pagination
    unread_count: int

class UnreadCountData(CamelModel):
    unread_count: int
