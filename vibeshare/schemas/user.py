# ============================================================================
# FILE: vibeshare/schemas/user.py
# ============================================================================
import re
from pydantic import EmailStr, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, List
from datetime import datetime
from vibeshare.schemas.common import CamelModel, Pagination

USERNAME_PATTERN = r"^[a-zA-Z0-9_\-]{3,50}$"
SOCIAL_URL_RE = re.compile(r"^https?://.+")

def check_username_format(value: str) -> str:
    value = value.strip()
    if not re.match(USERNAME_PATTERN, value):
        raise ValueError("Username must be 3-50 chars, alphanumeric, underscore or dash")
    return value

class SocialLinks(CamelModel):
    """Allowed social platforms; anything else is rejected"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")
    
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    youtube: Optional[str] = None
    spotify: Optional[str] = None
    website: Optional[str] = None
    
    @field_validator("*")
    @classmethod
    def check_url(cls, value, info):
        if value and not SOCIAL_URL_RE.match(value):
            raise ValueError(f"Invalid URL format for {info.field_name}")
        return value or None

class UserCreate(CamelModel):
    """Schema for user registration"""
    email: EmailStr
    username: str
    password: str = Field(min_length=6)
    
    @field_validator("username")
    @classmethod
    def check_username(cls, value):
        return check_username_format(value)

class UserLogin(CamelModel):
    """Schema for user login"""
    email: EmailStr
    password: str = Field(min_length=1)

class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)

class GoogleSignInRequest(CamelModel):
    credential: str = Field(min_length=1)

class UserUpdate(CamelModel):
    """Profile update; only fields present in the body are applied"""
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    username: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    
    @field_validator("username")
    @classmethod
    def check_username(cls, value):
        if value is None:
            return value
        return check_username_format(value)

class UserSummary(CamelModel):
    id: int
    username: str
    avatar_url: Optional[str] = None

class PublicUser(CamelModel):
    """User as shown to other people"""
    id: int
    username: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    social_links: Dict[str, Optional[str]] = {}
    playlist_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    created_at: datetime
    
    @field_validator("social_links", mode="before")
    @classmethod
    def default_links(cls, value):
        return value or {}

class UserResponse(PublicUser):
    """User as shown to themselves"""
    email: str
    provider: str
    updated_at: Optional[datetime] = None

class AuthUser(CamelModel):
    id: int
    email: str
    username: str
    avatar_url: Optional[str] = None

class AuthData(CamelModel):
    user: AuthUser
    access_token: str
    refresh_token: str

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str

class UserData(CamelModel):
    user: PublicUser

class MeData(CamelModel):
    user: UserResponse

class UserListData(CamelModel):
    users: List[PublicUser]
    pagination: Pagination

class AvatarUploadData(CamelModel):
    user: UserResponse
    image_url: str

class SuggestedUsersData(CamelModel):
    users: List[PublicUser]
