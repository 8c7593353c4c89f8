# ============================================================================
# FILE: vibeshare/services/user_service.py
# ============================================================================
import random
import re
import uuid
from typing import Optional, Dict, Any
from sqlalchemy import select, update, delete, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from vibeshare.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from vibeshare.core.security import get_password_hash, verify_password
from vibeshare.core.storage import image_storage
from vibeshare.db.models import (
    User, UserFollow, Playlist, PlaylistLike, SavedPlaylist, SavedSong, Notification, SearchHistory,
)
from vibeshare.db.queries import contains, fetch_page
from vibeshare.schemas.common import Pagination
from vibeshare.schemas.user import UserCreate, UserUpdate, PublicUser, UserListData
from vibeshare.services.playlist_service import playlist_service, clamp_limit
import logging

logger = logging.getLogger(__name__)

USERNAME_STRIP_RE = re.compile(r"[^a-z0-9_\-]")

class UserService:
    """Service layer for user operations"""

    def create_user(self, db: Session, user_data: UserCreate) -> User:
        """Create a new password account"""
        if self.get_user_by_email(db, user_data.email):
            raise ConflictError("Email already exists")
        if self.get_user_by_username(db, user_data.username):
            raise ConflictError("Username already exists")

        try:
            user = User(
                username=user_data.username,
                email=user_data.email,
                hashed_password=get_password_hash(user_data.password),
                provider="local",
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info(f"User created: {user.username}")
            return user
        except IntegrityError:
            db.rollback()
            raise ConflictError("User with this email or username already exists")
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating user: {e}")
            raise

    def get_user_by_id(self, db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()

    def get_user_by_google_id(self, db: Session, google_id: str) -> Optional[User]:
        return db.query(User).filter(User.google_id == google_id).first()

    def require_user(self, db: Session, user_id: int) -> User:
        user = self.get_user_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def authenticate_user(self, db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        user = self.get_user_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    # ------------------------------------------------------------------
    # Google sign-in
    # ------------------------------------------------------------------

    def _generate_username(self, db: Session, name: str, email: str) -> str:
        base = USERNAME_STRIP_RE.sub("", (name or "").lower().replace(" ", "_"))
        if len(base) < 3:
            base = USERNAME_STRIP_RE.sub("", email.split("@")[0].lower())
        base = (base or "user")[:40]

        for _ in range(10):
            candidate = f"{base}{random.randint(0, 999)}"
            if len(candidate) >= 3 and not self.get_user_by_username(db, candidate):
                return candidate
        return f"{base}_{uuid.uuid4().hex[:8]}"

    def google_sign_in(self, db: Session, identity: Dict[str, Any]) -> User:
        """
        Resolve a decoded Google identity to an account.

        Match by Google id first, then link by email, otherwise create a
        new account with a generated username.
        """
        user = self.get_user_by_google_id(db, identity["google_id"])
        if user:
            return user

        try:
            user = self.get_user_by_email(db, identity["email"])
            if user:
                user.google_id = identity["google_id"]
                if not user.avatar_url and identity.get("picture"):
                    user.avatar_url = identity["picture"]
                logger.info(f"Linked Google account to user {user.username}")
            else:
                user = User(
                    username=self._generate_username(db, identity.get("name"), identity["email"]),
                    email=identity["email"],
                    google_id=identity["google_id"],
                    provider="google",
                    avatar_url=identity.get("picture"),
                )
                db.add(user)
                logger.info(f"User created via Google: {user.username}")
            db.commit()
            db.refresh(user)
            return user
        except IntegrityError:
            db.rollback()
            raise ConflictError("Account already exists")
        except Exception as e:
            db.rollback()
            logger.error(f"Google sign-in error: {e}")
            raise

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_users(self, db: Session, search: Optional[str] = None, page: int = 1, limit: int = 20) -> UserListData:
        limit = clamp_limit(limit)
        page = max(page, 1)
        query = db.query(User)
        if search:
            query = query.filter(or_(contains(User.username, search), contains(User.bio, search)))
        query = query.order_by(User.created_at.desc(), User.id.desc())

        users, total = fetch_page(query, (page - 1) * limit, limit)
        return UserListData(
            users=[PublicUser.model_validate(u) for u in users],
            pagination=Pagination.build(page, limit, total),
        )

    def suggested_users(self, db: Session, viewer_id: int, limit: int = 10):
        """Users the viewer does not follow yet, most followed first"""
        followed = select(UserFollow.following_id).where(UserFollow.follower_id == viewer_id)
        return (
            db.query(User)
            .filter(User.id != viewer_id, User.id.not_in(followed))
            .order_by(User.followers_count.desc(), User.created_at.desc(), User.id.desc())
            .limit(clamp_limit(limit))
            .all()
        )

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def update_profile(self, db: Session, user_id: int, viewer_id: int, update_data: UserUpdate) -> User:
        """Apply the fields present in the body to the viewer's own profile"""
        if user_id != viewer_id:
            raise ForbiddenError("Can only update your own profile")
        user = self.require_user(db, user_id)
        changes = update_data.model_dump(exclude_unset=True)

        if changes.get("avatar_url") and not image_storage.owns(changes["avatar_url"]):
            raise ValidationError("avatarUrl must point to an uploaded image")
        username = changes.get("username")
        if username and username != user.username and self.get_user_by_username(db, username):
            raise ConflictError("Username already exists")

        try:
            if "bio" in changes:
                user.bio = changes["bio"]
            if "avatar_url" in changes:
                user.avatar_url = changes["avatar_url"]
            if username:
                user.username = username
            if "social_links" in changes:
                links = changes["social_links"] or {}
                user.social_links = {k: v for k, v in links.items() if v}
            db.commit()
            db.refresh(user)
            logger.info(f"Profile updated: {user.username}")
            return user
        except IntegrityError:
            db.rollback()
            raise ConflictError("Username already exists")
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating profile: {e}")
            raise

    def set_avatar(self, db: Session, user: User, avatar_url: str) -> Optional[str]:
        """Store a new avatar URL and return the previous one"""
        previous = user.avatar_url
        try:
            user.avatar_url = avatar_url
            db.commit()
            db.refresh(user)
            return previous
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating avatar: {e}")
            raise

    def delete_user(self, db: Session, user_id: int, viewer_id: int) -> None:
        """
        Delete an account and everything hanging off it in one transaction:
        owned playlists (with their songs, likes, saves, notifications), the
        user's own likes (decrementing likesCount), saves, saved songs,
        notifications, follow edges and search history.
        """
        if user_id != viewer_id:
            raise ForbiddenError("Can only delete your own account")
        self.require_user(db, user_id)

        try:
            playlist_ids = db.scalars(select(Playlist.id).where(Playlist.user_id == user_id)).all()
            playlist_service.purge_playlists(db, list(playlist_ids))

            liked = select(PlaylistLike.playlist_id).where(PlaylistLike.user_id == user_id)
            db.execute(
                update(Playlist)
                .where(Playlist.id.in_(liked))
                .values(likes_count=Playlist.likes_count - 1)
                .execution_options(synchronize_session=False)
            )
            db.execute(delete(PlaylistLike).where(PlaylistLike.user_id == user_id))
            db.execute(delete(SavedPlaylist).where(SavedPlaylist.user_id == user_id))
            db.execute(delete(SavedSong).where(SavedSong.user_id == user_id))
            db.execute(delete(Notification).where(
                or_(Notification.user_id == user_id, Notification.actor_id == user_id)
            ))

            following = select(UserFollow.following_id).where(UserFollow.follower_id == user_id)
            followers = select(UserFollow.follower_id).where(UserFollow.following_id == user_id)
            db.execute(
                update(User).where(User.id.in_(following))
                .values(followers_count=User.followers_count - 1)
                .execution_options(synchronize_session=False)
            )
            db.execute(
                update(User).where(User.id.in_(followers))
                .values(following_count=User.following_count - 1)
                .execution_options(synchronize_session=False)
            )
            db.execute(delete(UserFollow).where(
                or_(UserFollow.follower_id == user_id, UserFollow.following_id == user_id)
            ))
            db.execute(delete(SearchHistory).where(SearchHistory.user_id == user_id))
            db.execute(delete(User).where(User.id == user_id).execution_options(synchronize_session=False))
            db.commit()
            db.expire_all()
            logger.info(f"User deleted: {user_id} ({len(playlist_ids)} playlists removed)")
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting user: {e}")
            raise

# Create singleton instance
user_service = UserService()
