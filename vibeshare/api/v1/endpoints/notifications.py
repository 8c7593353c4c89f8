# ============================================================================
# FILE: vibeshare/api/v1/endpoints/notifications.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from vibeshare.db.session import get_db
from vibeshare.api.dependencies import require_current_user
from vibeshare.schemas.common import ApiResponse
from vibeshare.schemas.notification import NotificationListData, UnreadCountData
from vibeshare.services.notification_service import notification_service
from vibeshare.db.models.user import User

# Every route here requires authentication
router = APIRouter(dependencies=[Depends(require_current_user)])

@router.get("", response_model=ApiResponse[NotificationListData])
async def get_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    """Newest notifications first; expired ones are swept before reading"""
    data = notification_service.list_notifications(
        db, current_user.id, page=page, limit=limit, unread_only=unread_only
    )
    return ApiResponse(data=data)

@router.get("/unread-count", response_model=ApiResponse[UnreadCountData])
async def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    return ApiResponse(data=UnreadCountData(unread_count=notification_service.unread_count(db, current_user.id)))

@router.post("/mark-all-read", response_model=ApiResponse[None])
async def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    notification_service.mark_all_read(db, current_user.id)
    return ApiResponse(message="All notifications marked as read")

@router.delete("/{notification_id}", response_model=ApiResponse[None])
async def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_current_user)
):
    notification_service.delete_notification(db, notification_id, current_user.id)
    return ApiResponse(message="Notification deleted")
