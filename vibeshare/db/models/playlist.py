# ============================================================================
# FILE: vibeshare/db/models/playlist.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from vibeshare.db.base import Base

DEFAULT_COVER_GRADIENT = "from-purple-800 to-pink-900"

class Playlist(Base):
    """Playlist model for user-created playlists"""
    __tablename__ = "playlists"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    cover_gradient = Column(String(100), nullable=False, default=DEFAULT_COVER_GRADIENT)
    thumbnail_url = Column(String, nullable=True)
    likes_count = Column(Integer, nullable=False, default=0)
    is_public = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    user = relationship("User", back_populates="playlists")
    tag_rows = relationship(
        "PlaylistTag",
        order_by="PlaylistTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    songs = relationship("Song", back_populates="playlist", order_by="Song.position")
    
    @property
    def tags(self):
        return [row.name for row in self.tag_rows]
    
    def set_tags(self, tags):
        """Replace the tag list, keeping the given order. Rows for kept tags are reused."""
        existing = {row.name: row for row in self.tag_rows}
        rows = []
        for i, name in enumerate(tags):
            row = existing.get(name) or PlaylistTag(name=name)
            row.position = i
            rows.append(row)
        self.tag_rows = rows

class PlaylistTag(Base):
    """One tag of a playlist (max 5 per playlist)"""
    __tablename__ = "playlist_tags"
    __table_args__ = (
        UniqueConstraint("playlist_id", "name", name="uq_playlist_tag"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

class Song(Base):
    """Song link stored in a playlist at a 1-based position"""
    __tablename__ = "songs"
    __table_args__ = (
        Index("ix_songs_playlist_position", "playlist_id", "position"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    artist = Column(String(255), nullable=False)
    url = Column(String, nullable=False)
    platform = Column(String(50), nullable=False)
    thumbnail = Column(String, nullable=True)
    position = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    playlist = relationship("Playlist", back_populates="songs")
