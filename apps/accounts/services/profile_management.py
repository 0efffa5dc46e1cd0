"""
Profile management service.

Profile edits and push token registration. A push token identifies one
device, so registering it moves it off any other account that still holds
it; plan notifications for the old account stop reaching that device.
"""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model

from .exceptions import InvalidPushTokenError, ProfileValidationError

User = get_user_model()

logger = logging.getLogger(__name__)

PUSH_TOKEN_PREFIXES = ('ExponentPushToken[', 'ExpoPushToken[')

PROFILE_FIELDS = ('name', 'avatar_uri', 'push_token')


def validate_push_token(push_token) -> str:
    """Return the token, or '' for None. Non-empty tokens must be Expo tokens."""
    if push_token is None:
        return ''
    if not isinstance(push_token, str):
        raise InvalidPushTokenError("Invalid push token format")
    if push_token and not push_token.startswith(PUSH_TOKEN_PREFIXES):
        raise InvalidPushTokenError("Invalid push token format")
    return push_token


def _release_push_token(push_token: str, *, keep_user_id) -> None:
    if not push_token:
        return
    released = (
        User.objects
        .filter(push_token=push_token)
        .exclude(id=keep_user_id)
        .update(push_token='')
    )
    if released:
        logger.info("Push token moved to user %s from %d other account(s)", keep_user_id, released)


@transaction.atomic
def update_profile(*, user: User, **changes) -> User:
    """
    Edit the caller's own profile.

    Args:
        user: User whose profile changes
        **changes: Any of name, avatar_uri, push_token

    Returns:
        Updated User instance

    Raises:
        ProfileValidationError: If a field is not editable
        InvalidPushTokenError: If push_token is not a valid device token
    """
    unknown = set(changes) - set(PROFILE_FIELDS)
    if unknown:
        raise ProfileValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    if 'push_token' in changes:
        changes['push_token'] = validate_push_token(changes['push_token'])
        _release_push_token(changes['push_token'], keep_user_id=user.id)

    for field, value in changes.items():
        setattr(user, field, value)
    if changes:
        user.save(update_fields=sorted(changes))

    return user


def register_push_token(*, user: User, push_token: str) -> User:
    """Attach a device push token to the user (empty string clears it)."""
    user = update_profile(user=user, push_token=push_token)
    logger.info("Push token %s for user %s", 'registered' if user.push_token else 'cleared', user.id)
    return user


def clear_push_token(*, user: User) -> User:
    """Detach the device push token, e.g. on logout."""
    return register_push_token(user=user, push_token='')
