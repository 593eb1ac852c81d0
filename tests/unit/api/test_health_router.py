"""Tests for health check endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from bandstosee.api.dependencies import get_token_manager
from bandstosee.application.services import TokenManager
from bandstosee.main import create_app


class TestHealthEndpoints:
    """Test /health/live and /health/ready."""

    def test_liveness(self) -> None:
        response = TestClient(create_app(app_lifespan=None)).get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_not_ready_without_token_manager(self) -> None:
        response = TestClient(create_app(app_lifespan=None)).get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
        assert response.json()["spotify_token"] is False

    def test_ready_with_valid_token(self) -> None:
        token_manager = MagicMock(spec=TokenManager)
        token_manager.is_valid.return_value = True
        app = create_app(app_lifespan=None)
        app.dependency_overrides[get_token_manager] = lambda: token_manager

        response = TestClient(app).get("/health/ready")

        assert response.status_code == 200
        assert response.json()["spotify_token"] is True

    def test_not_ready_with_expired_token(self) -> None:
        token_manager = MagicMock(spec=TokenManager)
        token_manager.is_valid.return_value = False
        app = create_app(app_lifespan=None)
        app.dependency_overrides[get_token_manager] = lambda: token_manager

        response = TestClient(app).get("/health/ready")

        assert response.status_code == 503
