"""
Notifications app services layer.

Delivery functions are used by other apps as a fire-and-forget side
effect; inbox functions back the notifications API.
"""

from .exceptions import (
    NotificationsServiceError,
    NotificationNotFoundError,
)

from .delivery import (
    notify,
    notify_many,
    log_push,
)

from .inbox import (
    get_user_notifications,
    get_unread_count,
    mark_as_read,
    mark_all_as_read,
    delete_notification,
)


__all__ = [
    # Exceptions
    'NotificationsServiceError',
    'NotificationNotFoundError',

    # Delivery
    'notify',
    'notify_many',
    'log_push',

    # Inbox
    'get_user_notifications',
    'get_unread_count',
    'mark_as_read',
    'mark_all_as_read',
    'delete_notification',
]
