import uuid

import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'name': 'New User',
            'avatarUri': 'https://example.com/avatars/new.png',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['name'] == 'New User'
        assert response.data['user']['avatarUri'] == 'https://example.com/avatars/new.png'

        user = User.objects.get(email='newuser@example.com')
        assert user.avatar_uri == 'https://example.com/avatars/new.png'

    def test_register_without_name(self, api_client):
        """Name and avatar are optional."""
        url = reverse('users:register')
        data = {
            'email': 'minimal@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='minimal@example.com').get_display_name() == 'minimal'

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email, whatever its case."""
        url = reverse('users:register')
        data = {
            'email': user.email.upper(),
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_weak_password(self, api_client):
        """Password validators reject weak passwords."""
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not User.objects.filter(email='weak@example.com').exists()


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_registers_push_token(self, api_client, user):
        """A device token sent with the login is stored on the account."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'TestPass123!',
            'pushToken': 'ExponentPushToken[login-device]',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.push_token == 'ExponentPushToken[login-device]'

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'WrongPassword123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_login_nonexistent_user(self, api_client):
        """Login fails for non-existent user."""
        url = reverse('users:login')
        data = {
            'email': 'nonexistent@example.com',
            'password': 'SomePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, user_inactive):
        """Deactivated accounts cannot log in."""
        url = reverse('users:login')
        data = {
            'email': user_inactive.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_updates_last_login(self, api_client, user):
        """Login updates last_login timestamp."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.last_login is not None

    def test_refresh_token(self, api_client, user):
        """A refresh token from login yields a new access token."""
        login = api_client.post(reverse('users:login'), {
            'email': user.email,
            'password': 'TestPass123!',
        })

        response = api_client.post(
            reverse('token_refresh'),
            {'refresh': login.data['tokens']['refresh']},
        )

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestGetCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        """Get current authenticated user profile."""
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(user.id)
        assert response.data['email'] == user.email
        assert response.data['name'] == 'Test User'
        assert 'pushToken' not in response.data

    def test_get_current_user_unauthenticated(self, api_client):
        """Cannot get user profile when not authenticated."""
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestUpdateProfile:
    """Tests for PATCH /api/auth/user/update/"""

    def test_update_name_and_push_token(self, authenticated_client, user):
        """Name and push token can be changed."""
        url = reverse('users:update-profile')
        data = {'name': 'Updated Name', 'pushToken': 'ExponentPushToken[device-1]'}
        response = authenticated_client.patch(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Updated Name'
        user.refresh_from_db()
        assert user.name == 'Updated Name'
        assert user.push_token == 'ExponentPushToken[device-1]'

    def test_invalid_push_token(self, authenticated_client, user):
        """Only Expo device tokens are accepted."""
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'pushToken': 'not-a-device'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        user.refresh_from_db()
        assert user.push_token == ''

    def test_cannot_update_email(self, authenticated_client, user):
        """Email is read-only on the profile endpoint."""
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'email': 'changed@example.com'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.email == 'testuser@example.com'

    def test_update_profile_unauthenticated(self, api_client):
        """Cannot update profile when not authenticated."""
        url = reverse('users:update-profile')
        response = api_client.patch(url, {'name': 'Hacked'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestPushToken:
    """Tests for POST/DELETE /api/auth/user/push-token/"""

    def test_register(self, authenticated_client, user):
        url = reverse('users:push-token')
        response = authenticated_client.post(url, {'pushToken': 'ExpoPushToken[abc]'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'ok': True}
        user.refresh_from_db()
        assert user.push_token == 'ExpoPushToken[abc]'

    def test_register_invalid_format(self, authenticated_client):
        url = reverse('users:push-token')
        response = authenticated_client.post(url, {'pushToken': 'abc'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_clear(self, authenticated_client, user):
        user.push_token = 'ExpoPushToken[abc]'
        user.save(update_fields=['push_token'])

        response = authenticated_client.delete(reverse('users:push-token'))

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.push_token == ''

    def test_unauthenticated(self, api_client):
        response = api_client.post(reverse('users:push-token'), {'pushToken': 'ExpoPushToken[abc]'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestGetUserById:
    """Tests for GET /api/auth/users/{id}/"""

    def test_get_user_by_id(self, authenticated_client, other_user):
        """Public profile exposes name and avatar only."""
        url = reverse('users:user-detail', args=[other_user.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Other User'
        assert 'email' not in response.data

    def test_get_user_by_id_not_found(self, authenticated_client):
        """Return 404 for non-existent user ID."""
        url = reverse('users:user-detail', args=[uuid.uuid4()])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# User Model Tests
# =============================================================================

@pytest.mark.django_db
class TestUserModel:
    """Tests for User model methods."""

    def test_create_user(self, db):
        user = User.objects.create_user(
            email='model@example.com',
            password='TestPass123!',
        )

        assert user.check_password('TestPass123!')
        assert user.is_active is True
        assert user.is_staff is False

    def test_create_superuser(self, db):
        user = User.objects.create_superuser(
            email='admin@example.com',
            password='AdminPass123!',
        )

        assert user.is_staff is True
        assert user.is_superuser is True

    def test_get_display_name(self, user):
        """get_display_name returns name or email prefix."""
        assert user.get_display_name() == 'Test User'

        user.name = ''
        assert user.get_display_name() == 'testuser'
