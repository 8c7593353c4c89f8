# ============================================================================
# FILE: vibeshare/db/models/notification.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from vibeshare.db.base import Base

NOTIFICATION_TYPES = ("playlist_like", "playlist_save")

class Notification(Base):
    """Notification for a playlist owner when someone likes or saves it"""
    __tablename__ = "notifications"
    __table_args__ = (
        # One notification per (recipient, type, actor, playlist)
        UniqueConstraint("user_id", "type", "actor_id", "playlist_id", name="uq_notification"),
        Index("ix_notifications_user_read_created", "user_id", "is_read", "created_at"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    actor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    playlist_id = Column(Integer, ForeignKey("playlists.id"), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    # Relationships
    actor = relationship("User", foreign_keys=[actor_id])
    playlist = relationship("Playlist")
