# ============================================================================
# FILE: vibeshare/db/models/user.py
# ============================================================================
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text, JSON,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from vibeshare.db.base import Base

class User(Base):
    """User model for authentication and profile data"""
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # Absent for accounts created through Google sign-in
    hashed_password = Column(String(255), nullable=True)
    # Unique when present; NULLs never collide
    google_id = Column(String(255), unique=True, nullable=True)
    provider = Column(String(20), nullable=False, default="local")
    bio = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)
    social_links = Column(JSON, nullable=False, default=dict)
    playlist_count = Column(Integer, nullable=False, default=0)
    # Follow feature is disabled; counters stay in the schema
    followers_count = Column(Integer, nullable=False, default=0)
    following_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    playlists = relationship("Playlist", back_populates="user")

class UserFollow(Base):
    """Directed follow edge (follower -> following)"""
    __tablename__ = "user_follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_user_follow"),
        CheckConstraint("follower_id <> following_id", name="ck_user_follow_not_self"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    follower_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    following_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
