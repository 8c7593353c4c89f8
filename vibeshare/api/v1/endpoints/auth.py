# ============================================================================
# FILE: vibeshare/api/v1/endpoints/auth.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import require_current_user
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.user import (
    UserCreate,
    UserLogin,
    RefreshRequest,
    GoogleSignInRequest,
    AuthUser,
    AuthData,
    TokenPair,
    MeData,
    UserResponse,
)
from vibeshare.services.user_service import user_service
from vibeshare.core.exceptions import AuthError
from vibeshare.core.security import issue_token_pair, verify_token, decode_google_credential, REFRESH_TOKEN
from vibeshare.db.models.user import User
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

def _auth_data(user: User) -> AuthData:
    tokens = issue_token_pair(user.id)
    return AuthData(
        user=AuthUser.model_validate(user),
        access_token=tokens["accessToken"],
        refresh_token=tokens["refreshToken"],
    )

@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """
    Register a new user account
    Returns the user and a fresh token pair
    """
    user = user_service.create_user(db, user_data)
    logger.info(f"User registered: {user.username}")
    return ApiResponse(data=_auth_data(user), message="User registered successfully")

@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login with email and password
    """
    user = user_service.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise AuthError("Invalid credentials")

    logger.info(f"User logged in: {user.username}")
    return ApiResponse(data=_auth_data(user), message="Login successful")

@router.post("/refresh", response_model=ApiResponse[TokenPair])
async def refresh(
    body: RefreshRequest,
    db: Session = Depends(get_db)
):
    """Exchange a refresh token for a new token pair"""
    try:
        user_id = verify_token(body.refresh_token, REFRESH_TOKEN)
    except AuthError:
        raise AuthError("Invalid refresh token")

    if user_service.get_user_by_id(db, user_id) is None:
        raise AuthError("Invalid refresh token")

    tokens = issue_token_pair(user_id)
    return ApiResponse(data=TokenPair(access_token=tokens["accessToken"], refresh_token=tokens["refreshToken"]))

@router.post("/logout", response_model=ApiResponse[None])
async def logout():
    """Tokens are stateless; the client simply forgets them"""
    return ApiResponse(message="Logged out successfully")

@router.get("/me", response_model=ApiResponse[MeData])
async def get_me(
    current_user: User = Depends(require_current_user)
):
    """
    Get current user information
    Requires authentication
    """
    return ApiResponse(data=MeData(user=UserResponse.model_validate(current_user)))

@router.post("/google", response_model=ApiResponse[AuthData])
async def google_sign_in(
    body: GoogleSignInRequest,
    db: Session = Depends(get_db)
):
    """
    Sign in with a Google ID token credential
    Links to an existing account by email or creates a new one
    """
    identity = decode_google_credential(body.credential)
    user = user_service.google_sign_in(db, identity)
    logger.info(f"Google sign-in: {user.username}")
    return ApiResponse(data=_auth_data(user), message="Google sign-in successful")
