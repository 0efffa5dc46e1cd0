"""User authentication service."""

import logging
from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError
from .profile_management import update_profile, validate_push_token

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str, push_token: Optional[str] = None) -> User:
    """
    Check an email/password pair and record the login.

    When the client sends its device push token with the login, the token
    is registered on the account in the same transaction so plan
    notifications follow the user to that device.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
        InactiveAccountError: If account is deactivated
        InvalidPushTokenError: If push_token is not a valid device token
    """
    if push_token is not None:
        validate_push_token(push_token)

    try:
        user = User.objects.select_for_update().get(email__iexact=email)
    except User.DoesNotExist:
        logger.info("Login failed for unknown email")
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.info("Login failed for user %s", user.id)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    if push_token:
        update_profile(user=user, push_token=push_token)

    return user
