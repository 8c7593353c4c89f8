# ============================================================================
# FILE: vibeshare/api/dependencies.py
# ============================================================================
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from vibeshare.config import settings
from vibeshare.core.cache import get_search_cache
from vibeshare.core.exceptions import AuthError
from vibeshare.core.security import verify_token
from vibeshare.db.session import get_db
from vibeshare.db.models.user import User
from vibeshare.services.search_service import SearchService
from typing import Optional

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)

def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Get current authenticated user from JWT token
    Returns None if no token or invalid token (allows anonymous access)
    """
    if not token:
        return None

    try:
        user_id = verify_token(token)
    except AuthError:
        return None

    return db.get(User, user_id)

def require_current_user(
    current_user: Optional[User] = Depends(get_current_user)
) -> User:
    """
    Require authenticated user (raises 401 if not authenticated)
    Use this dependency for protected endpoints
    """
    if current_user is None:
        raise AuthError("Not authenticated")
    return current_user

def viewer_id(current_user: Optional[User]) -> Optional[int]:
    return current_user.id if current_user else None

def get_search_service(cache=Depends(get_search_cache)) -> SearchService:
    return SearchService(cache)
