# ============================================================================
# FILE: vibeshare/core/security.py
# Password hashing and JWT session tokens
# ============================================================================
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from vibeshare.config import settings
from vibeshare.core.exceptions import AuthError
import logging

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Accounts created through Google have no password and never match"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False

def _create_token(user_id: int, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        user_id,
        ACCESS_TOKEN,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

def create_refresh_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        user_id,
        REFRESH_TOKEN,
        expires_delta or timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES),
    )

def issue_token_pair(user_id: int) -> Dict[str, str]:
    """Issue an access token and a refresh token for a user"""
    return {
        "accessToken": create_access_token(user_id),
        "refreshToken": create_refresh_token(user_id),
    }

def verify_token(token: str, token_type: str = ACCESS_TOKEN) -> int:
    """
    Verify a session token and return the user id it was issued for
    
    Raises:
        AuthError: token is malformed, expired, badly signed or of the wrong type
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise AuthError("Invalid or expired token") from e
    
    if payload.get("type") != token_type:
        raise AuthError("Invalid token type")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise AuthError("Invalid token subject") from e

def decode_google_credential(credential: str) -> Dict[str, Any]:
    """
    Extract identity claims from a Google ID token.
    
    WARNING: the signature is NOT verified (claims are read as-is). Only the
    email_verified claim is enforced before the identity is trusted.
    """
    try:
        claims = jwt.get_unverified_claims(credential)
    except JWTError as e:
        logger.warning(f"Undecodable Google credential: {e}")
        raise AuthError("Invalid Google credential") from e
    
    if not claims.get("sub") or not claims.get("email"):
        raise AuthError("Invalid Google credential: missing required fields")
    if claims.get("email_verified") is not True:
        raise AuthError("Invalid Google credential: email not verified")
    
    return {
        "google_id": str(claims["sub"]),
        "email": claims["email"],
        "name": claims.get("name") or "",
        "picture": claims.get("picture"),
        "email_verified": True,
    }
