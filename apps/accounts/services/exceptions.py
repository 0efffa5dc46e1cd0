"""Exceptions raised by the accounts services; views map them to 4xx responses."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """The email is already taken."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Unknown email or wrong password; the two are not told apart."""
    pass


class InactiveAccountError(AccountsServiceError):
    pass


class ProfileValidationError(AccountsServiceError):
    """A profile edit names a field that cannot be changed."""
    pass


class InvalidPushTokenError(ProfileValidationError):
    """The push token is not an Expo device token."""
    pass
