"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    ProfileValidationError,
    InvalidPushTokenError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .profile_management import (
    validate_push_token,
    update_profile,
    register_push_token,
    clear_push_token,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'ProfileValidationError',
    'InvalidPushTokenError',
    # Services
    'register_user',
    'authenticate_user',
    'validate_push_token',
    'update_profile',
    'register_push_token',
    'clear_push_token',
]
