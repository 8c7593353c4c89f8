# ============================================================================
# FILE: vibeshare/db/queries.py
# Small query helpers shared by the services
# ============================================================================
from typing import List, Tuple, Any
from sqlalchemy.orm import Query

LIKE_ESCAPE = "\\"

def _escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )

def contains(column, text: str):
    """Case-insensitive substring match"""
    return column.ilike(f"%{_escape_like(text)}%", escape=LIKE_ESCAPE)

def starts_with(column, text: str):
    """Case-insensitive prefix match"""
    return column.ilike(f"{_escape_like(text)}%", escape=LIKE_ESCAPE)

def fetch_page(query: Query, offset: int, limit: int) -> Tuple[List[Any], int]:
    """Run a query for one window and count the full result set"""
    total = query.order_by(None).count()
    items = query.offset(offset).limit(limit).all()
    return items, total
