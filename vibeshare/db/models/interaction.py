# ============================================================================
# FILE: vibeshare/db/models/interaction.py
# Membership edges: existence of the row is the whole state
# ============================================================================
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime
from vibeshare.db.base import Base

class PlaylistLike(Base):
    __tablename__ = "playlist_likes"
    __table_args__ = (
        UniqueConstraint("user_id", "playlist_id", name="uq_playlist_like"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

class SavedPlaylist(Base):
    __tablename__ = "saved_playlists"
    __table_args__ = (
        UniqueConstraint("user_id", "playlist_id", name="uq_saved_playlist"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

class SavedSong(Base):
    __tablename__ = "saved_songs"
    __table_args__ = (
        UniqueConstraint("user_id", "song_id", name="uq_saved_song"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    song_id = Column(Integer, ForeignKey("songs.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
