"""
Notification delivery service.

Persists in-app notifications and hands them to the configured push hook.
Delivery is best-effort: every failure is logged and swallowed so that a
notification problem never fails or rolls back the action that caused it.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils.module_loading import import_string

from apps.notifications.models import Notification

User = get_user_model()

logger = logging.getLogger(__name__)


def log_push(tokens, title, body, data):
    """Default push hook: no external provider, just log the delivery."""
    logger.info("Push to %d device(s): %s", len(tokens), title)


def get_push_backend():
    """Return the push callable named by NOTIFICATIONS_PUSH_BACKEND."""
    return import_string(settings.NOTIFICATIONS_PUSH_BACKEND)


def _push(user_ids, title, body, data):
    try:
        tokens = list(
            User.objects
            .filter(id__in=user_ids)
            .exclude(push_token='')
            .values_list('push_token', flat=True)
        )
        if tokens:
            get_push_backend()(tokens, title, body, data)
    except Exception:
        logger.exception("Push notification failed (non-blocking)")


def notify(
    *,
    user_id,
    type: str,
    title: str,
    body: str,
    data: Optional[Dict[str, Any]] = None
) -> Optional[Notification]:
    """
    Create a notification for one user and push it.

    Returns:
        The created Notification, or None if it could not be stored
    """
    payload = data or {}
    try:
        notification = Notification.objects.create(
            user_id=user_id,
            type=type,
            title=title,
            body=body,
            data=payload,
        )
    except Exception:
        logger.exception("Failed to store %s notification for user %s", type, user_id)
        return None

    _push([user_id], title, body, {'type': type, **payload})
    return notification


def notify_many(
    *,
    user_ids: Iterable,
    type: str,
    title: str,
    body: str,
    data: Optional[Dict[str, Any]] = None
) -> int:
    """
    Create the same notification for several users and push it.

    Returns:
        Number of notifications stored
    """
    recipients = list(dict.fromkeys(str(uid) for uid in user_ids))
    if not recipients:
        return 0

    payload = data or {}
    try:
        created = Notification.objects.bulk_create([
            Notification(
                user_id=uid,
                type=type,
                title=title,
                body=body,
                data=payload,
            )
            for uid in recipients
        ])
    except Exception:
        logger.exception("Failed to store %s notifications for %d users", type, len(recipients))
        return 0

    _push(recipients, title, body, {'type': type, **payload})
    return len(created)
