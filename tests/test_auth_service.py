"""Tests for Supabase Auth token verification."""
from unittest.mock import patch
import httpx
import pytest
from fitnlitt.services.auth_service import SupabaseAuthClient, SupabaseAuthError


@pytest.fixture
def auth():
    return SupabaseAuthClient("https://proj.supabase.co/", "service-key", timeout=5)


def _response(status, payload=None):
    request = httpx.Request("GET", "https://proj.supabase.co/auth/v1/user")
    return httpx.Response(status, json=payload, request=request)


@patch("fitnlitt.services.auth_service.httpx.get")
def test_valid_token_returns_user(mock_get, auth):
    mock_get.return_value = _response(200, {"id": "u-1", "email": "admin@fitnlitt.com"})

    user = auth.get_user("jwt-token")

    assert user == {"id": "u-1", "email": "admin@fitnlitt.com"}
    mock_get.assert_called_once_with(
        "https://proj.supabase.co/auth/v1/user",
        headers={"Authorization": "Bearer jwt-token", "apikey": "service-key"},
        timeout=5,
    )


@pytest.mark.parametrize("status", [401, 403, 404])
@patch("fitnlitt.services.auth_service.httpx.get")
def test_rejected_token_returns_none(mock_get, status, auth):
    mock_get.return_value = _response(status, {"msg": "invalid JWT"})
    assert auth.get_user("expired") is None


@patch("fitnlitt.services.auth_service.httpx.get")
def test_user_without_id_returns_none(mock_get, auth):
    mock_get.return_value = _response(200, {})
    assert auth.get_user("jwt-token") is None


@patch("fitnlitt.services.auth_service.httpx.get")
def test_server_error_raises(mock_get, auth):
    mock_get.return_value = _response(502, {"msg": "bad gateway"})
    with pytest.raises(SupabaseAuthError):
        auth.get_user("jwt-token")


@patch("fitnlitt.services.auth_service.httpx.get")
def test_transport_error_raises(mock_get, auth):
    mock_get.side_effect = httpx.ConnectError("connection refused")
    with pytest.raises(SupabaseAuthError):
        auth.get_user("jwt-token")


def test_missing_config_raises():
    with pytest.raises(SupabaseAuthError):
        SupabaseAuthClient("", "").get_user("jwt-token")


def test_from_config():
    client = SupabaseAuthClient.from_config(
        {
            "SUPABASE_URL": "https://proj.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "k",
            "SUPABASE_AUTH_TIMEOUT": 3.0,
        }
    )
    assert client.base_url == "https://proj.supabase.co"
    assert client.service_key == "k"
    assert client.timeout == 3.0


def test_app_factory_uses_injected_client(app, auth_client):
    assert app.extensions["supabase_auth"] is auth_client
