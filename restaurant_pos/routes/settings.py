from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from config import APP_VERSION
from restaurant_pos.database import get_db, commit_or_500
from restaurant_pos.dependencies import get_current_user
from restaurant_pos.models.models import UserORM
from restaurant_pos.notifications import NotificationManager, get_notification_manager
from restaurant_pos.schemas.schemas import Settings, SettingsUpdate, NotificationStatus

router = APIRouter(tags=["settings"])


def _settings(user: UserORM, notifier: NotificationManager) -> dict:
    return {
        "username": user.username,
        "role": user.role,
        "dark_mode": bool(user.dark_mode),
        "notifications_enabled": notifier.is_authorized,
        "version": APP_VERSION
    }


@router.get("/settings", response_model=Settings)
def get_settings(
    user: UserORM = Depends(get_current_user),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    return _settings(user, notifier)


@router.patch("/settings", response_model=Settings)
def update_settings(
    changes: SettingsUpdate,
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    user.dark_mode = changes.dark_mode
    commit_or_500(db, "save settings")
    return _settings(user, notifier)


@router.get("/notifications", response_model=NotificationStatus, dependencies=[Depends(get_current_user)])
def notification_status(notifier: NotificationManager = Depends(get_notification_manager)):
    return {
        "is_authorized": notifier.is_authorized,
        "pending": notifier.pending_identifiers(),
        "delivered": notifier.delivered()
    }


@router.post("/notifications/authorize", response_model=NotificationStatus, dependencies=[Depends(get_current_user)])
def enable_notifications(notifier: NotificationManager = Depends(get_notification_manager)):
    notifier.request_authorization()
    return notification_status(notifier)


@router.delete("/notifications/authorize", response_model=NotificationStatus, dependencies=[Depends(get_current_user)])
def disable_notifications(notifier: NotificationManager = Depends(get_notification_manager)):
    notifier.revoke_authorization()
    return notification_status(notifier)
