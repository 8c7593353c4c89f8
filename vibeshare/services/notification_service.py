# ============================================================================
# FILE: vibeshare/services/notification_service.py
# ============================================================================
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import delete, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from vibeshare.config import settings
from vibeshare.core.exceptions import NotFoundError
from vibeshare.db.models import Notification
from vibeshare.db.queries import fetch_page
from vibeshare.schemas.common import Pagination
from vibeshare.schemas.notification import NotificationResponse, NotificationListData, NotificationPlaylist
from vibeshare.schemas.user import UserSummary
import logging

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50

class NotificationService:
    """Service layer for like/save notifications"""

    def __init__(self, ttl_days: int = None):
        self.ttl = timedelta(days=ttl_days or settings.NOTIFICATION_TTL_DAYS)

    def cutoff(self, now: Optional[datetime] = None) -> datetime:
        return (now or datetime.utcnow()) - self.ttl

    def create_notification(
        self,
        db: Session,
        recipient_id: int,
        type_: str,
        actor_id: int,
        playlist_id: int,
    ) -> Optional[Notification]:
        """
        Insert a notification unless one already exists for
        (recipient, type, actor, playlist). Acting on your own playlist
        never notifies. Duplicate-key races count as success.
        """
        if recipient_id == actor_id:
            return None

        existing = db.query(Notification).filter_by(
            user_id=recipient_id, type=type_, actor_id=actor_id, playlist_id=playlist_id
        ).first()
        if existing:
            return existing

        notification = Notification(
            user_id=recipient_id,
            type=type_,
            actor_id=actor_id,
            playlist_id=playlist_id,
        )
        try:
            db.add(notification)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Notification already exists: {type_} {actor_id}->{recipient_id} on {playlist_id}")
            return None
        except Exception:
            db.rollback()
            raise

        logger.info(f"Notification created: {type_} {actor_id}->{recipient_id} on {playlist_id}")
        return notification

    def retract_notification(self, db: Session, type_: str, actor_id: int, playlist_id: int) -> bool:
        """Best-effort delete after unlike/unsave; failures are only logged"""
        try:
            result = db.execute(
                delete(Notification).where(
                    Notification.type == type_,
                    Notification.actor_id == actor_id,
                    Notification.playlist_id == playlist_id,
                )
            )
            db.commit()
            return result.rowcount > 0
        except Exception as e:
            db.rollback()
            logger.error(f"Delete notification error: {e}")
            return False

    def sweep_expired_notifications(self, db: Session, now: Optional[datetime] = None) -> int:
        """Delete notifications older than the TTL. Idempotent."""
        try:
            result = db.execute(
                delete(Notification)
                .where(Notification.created_at < self.cutoff(now))
                .execution_options(synchronize_session=False)
            )
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Cleanup old notifications error: {e}")
            raise

        deleted = result.rowcount or 0
        if deleted:
            logger.info(f"Cleaned up {deleted} old notifications")
        return deleted

    def _serialize(self, notification: Notification) -> NotificationResponse:
        actor = notification.actor
        playlist = notification.playlist
        return NotificationResponse(
            id=notification.id,
            type=notification.type,
            is_read=notification.is_read,
            created_at=notification.created_at,
            actor=UserSummary(id=actor.id, username=actor.username, avatar_url=actor.avatar_url) if actor else None,
            playlist=NotificationPlaylist(
                id=playlist.id,
                title=playlist.title,
                cover_gradient=playlist.cover_gradient,
                thumbnail_url=playlist.thumbnail_url,
            ) if playlist else None,
        )

    def list_notifications(
        self,
        db: Session,
        user_id: int,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
        now: Optional[datetime] = None,
    ) -> NotificationListData:
        """Newest first; expired rows are swept and never returned"""
        try:
            self.sweep_expired_notifications(db, now)
        except Exception as e:
            logger.warning(f"Lazy notification sweep skipped: {e}")

        limit = max(1, min(limit, MAX_PAGE_SIZE))
        page = max(page, 1)
        cutoff = self.cutoff(now)

        query = (
            db.query(Notification)
            .options(joinedload(Notification.actor), joinedload(Notification.playlist))
            .filter(Notification.user_id == user_id, Notification.created_at >= cutoff)
        )
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())

        notifications, total = fetch_page(query, (page - 1) * limit, limit)
        return NotificationListData(
            notifications=[self._serialize(n) for n in notifications],
            pagination=Pagination.build(page, limit, total),
            unread_count=self.unread_count(db, user_id, now),
        )

    def unread_count(self, db: Session, user_id: int, now: Optional[datetime] = None) -> int:
        return db.query(func.count(Notification.id)).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
            Notification.created_at >= self.cutoff(now),
        ).scalar() or 0

    def mark_all_read(self, db: Session, user_id: int) -> int:
        try:
            result = db.execute(
                update(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            db.commit()
            return result.rowcount or 0
        except Exception as e:
            db.rollback()
            logger.error(f"Mark all as read error: {e}")
            raise

    def delete_notification(self, db: Session, notification_id: int, user_id: int) -> None:
        try:
            result = db.execute(
                delete(Notification).where(
                    Notification.id == notification_id,
                    Notification.user_id == user_id,
                )
            )
            if result.rowcount == 0:
                db.rollback()
                raise NotFoundError("Notification not found")
            db.commit()
        except NotFoundError:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Delete notification error: {e}")
            raise

# Create singleton instance
notification_service = NotificationService()
