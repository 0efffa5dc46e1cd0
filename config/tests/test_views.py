import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient


@pytest.fixture
def api_client():
    return APIClient()


@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_healthy(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'ok', 'database': 'ok'}

    def test_plain_http_served_without_debug(self, api_client, settings):
        """Test requests are answered directly, never redirected to https."""
        settings.DEBUG = False

        response = api_client.get(reverse('health-check'), secure=False)

        assert response.status_code == status.HTTP_200_OK

    def test_database_unavailable(self, api_client, monkeypatch):
        class UnreachableDatabase:
            def cursor(self):
                raise DatabaseError('connection refused')

        monkeypatch.setattr('config.views.connection', UnreachableDatabase())

        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()['status'] == 'unhealthy'


class TestTestSettings:

    def test_ssl_redirect_disabled(self, settings):
        assert settings.SECURE_SSL_REDIRECT is False
