"""Domain exceptions for notifications app."""


class NotificationsServiceError(Exception):
    """Base exception for all notifications service errors."""
    pass


class NotificationNotFoundError(NotificationsServiceError):
    """Notification does not exist or belongs to another user."""
    pass
