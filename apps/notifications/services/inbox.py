"""
Inbox service.

Read-side operations on the current user's notifications.
"""

from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.notifications.models import Notification

from .exceptions import NotificationNotFoundError


def get_user_notifications(*, user: User) -> QuerySet[Notification]:
    return Notification.objects.filter(user=user).order_by('-created_at')


def get_unread_count(*, user: User) -> int:
    return Notification.objects.filter(user=user, read=False).count()


def _get_own_notification(notification_id, user):
    try:
        return Notification.objects.get(id=notification_id, user=user)
    except (Notification.DoesNotExist, ValidationError, ValueError):
        raise NotificationNotFoundError("Notification not found")


def mark_as_read(*, notification_id: UUID, user: User) -> Notification:
    """
    Mark a single notification as read.

    Raises:
        NotificationNotFoundError: If it doesn't exist or isn't the user's
    """
    notification = _get_own_notification(notification_id, user)
    if not notification.read:
        notification.read = True
        notification.save(update_fields=['read'])
    return notification


def mark_all_as_read(*, user: User) -> int:
    """Mark every unread notification of the user as read."""
    return Notification.objects.filter(user=user, read=False).update(read=True)


def delete_notification(*, notification_id: UUID, user: User) -> None:
    notification = _get_own_notification(notification_id, user)
    notification.delete()
