# ============================================================================
# FILE: vibeshare/db/models/search_history.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from datetime import datetime
from vibeshare.db.base import Base

class SearchHistory(Base):
    """Search query issued by a logged-in user"""
    __tablename__ = "search_history"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    query = Column(String(255), nullable=False, index=True)
    searched_at = Column(DateTime, default=datetime.utcnow, index=True)
