"""Supabase Auth token verification for admin routes."""
import logging
from functools import wraps
import httpx
from flask import current_app, g, request
from fitnlitt.utils.response import error_response

logger = logging.getLogger(__name__)


class SupabaseAuthError(RuntimeError):
    """Auth backend unreachable or misconfigured (not a rejected token)."""


class SupabaseAuthClient:
    """Validates access tokens against ``GET /auth/v1/user``.

    Built once by the app factory and stored in ``app.extensions``.
    """

    def __init__(self, base_url, service_key, timeout=10.0):
        self.base_url = (base_url or "").rstrip("/")
        self.service_key = service_key or ""
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            config.get("SUPABASE_URL", ""),
            config.get("SUPABASE_SERVICE_ROLE_KEY", ""),
            timeout=config.get("SUPABASE_AUTH_TIMEOUT", 10.0),
        )

    def get_user(self, token):
        """Return the user dict for a valid token, None for a rejected one."""
        if not self.base_url or not self.service_key:
            raise SupabaseAuthError("SUPABASE_SERVICE_ROLE_KEY is not configured")

        try:
            resp = httpx.get(
                f"{self.base_url}/auth/v1/user",
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": self.service_key,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise SupabaseAuthError(f"Supabase Auth request failed: {e}") from e

        if resp.status_code in (401, 403, 404):
            return None
        if resp.status_code >= 400:
            raise SupabaseAuthError(f"Supabase Auth returned HTTP {resp.status_code}")

        user = resp.json()
        if not user or not user.get("id"):
            return None
        return user


def get_auth_client():
    return current_app.extensions["supabase_auth"]


def require_auth(view):
    """Reject requests without a valid ``Authorization: Bearer <jwt>`` header.

    The verified user is available as ``g.user``.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return error_response("Missing or invalid authorization header", 401)

        token = auth_header[len("Bearer "):].strip()
        try:
            user = get_auth_client().get_user(token)
        except SupabaseAuthError:
            logger.exception("Auth middleware error")
            return error_response("Authentication failed", 500)

        if not user:
            return error_response("Invalid or expired token", 401)

        g.user = user
        return view(*args, **kwargs)

    return wrapper


def current_admin_id():
    return g.user["id"]
