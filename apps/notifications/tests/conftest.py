import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.notifications.models import Notification, NotificationType


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return the inbox owner."""
    return User.objects.create_user(
        email='inbox@example.com',
        password='TestPass123!',
        name='Inbox Owner',
        push_token='device-inbox',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user with their own notifications."""
    return User.objects.create_user(
        email='elsewhere@example.com',
        password='TestPass123!',
        name='Someone Else',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as the inbox owner."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def notification(db, user):
    """Create and return an unread notification."""
    return Notification.objects.create(
        user=user,
        type=NotificationType.PLAN_INVITE,
        title='Dining Plan Invite',
        body='Alice invited you to "Friday dinner"',
        data={'planId': 'plan-1'},
    )


@pytest.fixture
def other_notification(db, other_user):
    """Create and return a notification belonging to another user."""
    return Notification.objects.create(
        user=other_user,
        type=NotificationType.PLAN_CANCELLED,
        title='Plan Cancelled',
        body='"Lunch" has been cancelled',
    )
