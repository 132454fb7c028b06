"""Supabase JWT authentication and webhook secret checks."""

import hmac
import time
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Header, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from config.settings import settings

security = HTTPBearer(auto_error=False)

# Cache for JWKS client
_jwks_client: PyJWKClient | None = None
_jwks_client_created_at: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour

DEV_USER_ID = "dev-user"


def get_jwks_client() -> PyJWKClient:
    """Get or create JWKS client with caching."""
    global _jwks_client, _jwks_client_created_at

    now = time.time()
    if _jwks_client is None or (now - _jwks_client_created_at) > JWKS_CACHE_TTL:
        jwks_url = f"{settings.supabase_url}/auth/v1/.well-known/jwks.json"
        _jwks_client = PyJWKClient(jwks_url)
        _jwks_client_created_at = now

    return _jwks_client


@dataclass
class AuthUser:
    """Authenticated user information from JWT."""

    user_id: str
    email: str | None = None
    name: str | None = None
    crm_synced: bool = False


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_token(token: str) -> dict[str, Any]:
    """Verify a token against the project JWKS, falling back to the HS256 secret."""
    try:
        jwks_client = get_jwks_client()
        signing_key = jwks_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256", "RS256"],
            audience="authenticated",
        )
    except Exception:
        if not settings.supabase_jwt_secret:
            raise
        return jwt.decode(
            token,
            settings.supabase_jwt_secret.get_secret_value(),
            algorithms=["HS256"],
            audience="authenticated",
        )


def user_from_claims(payload: dict[str, Any]) -> AuthUser:
    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token: missing user ID.")
    metadata = payload.get("user_metadata") or {}
    return AuthUser(
        user_id=user_id,
        email=payload.get("email"),
        name=metadata.get("name") or metadata.get("full_name"),
        crm_synced=str(metadata.get("brevo_synced", "")).lower() == "true",
    )


async def verify_supabase_token(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
) -> AuthUser:
    """Verify the Supabase JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header.

    Returns:
        AuthUser with user_id from the token.

    Raises:
        HTTPException: If token is missing, invalid, or expired.
    """
    # If no Supabase configured, allow all requests (dev mode)
    if not settings.supabase_url:
        return AuthUser(user_id=DEV_USER_ID, email="dev@example.com")

    if credentials is None:
        raise _unauthorized(
            "Missing authentication token. Include Authorization: Bearer <token> header."
        )

    try:
        return user_from_claims(_decode_token(credentials.credentials))
    except HTTPException:
        raise
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired.")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {str(e)}")
    except Exception as e:
        raise _unauthorized(f"Authentication failed: {str(e)}")


async def verify_webhook_secret(
    x_webhook_secret: str | None = Header(default=None),
) -> None:
    """Check the shared secret sent by database and auth webhooks."""
    if not settings.webhook_secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhooks are not configured.",
        )
    expected = settings.webhook_secret.get_secret_value()
    if not x_webhook_secret or not hmac.compare_digest(x_webhook_secret, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret.",
        )
