"""API middleware."""

from src.api.middleware.supabase_auth import (
    AuthUser,
    verify_supabase_token,
    verify_webhook_secret,
)

__all__ = ["AuthUser", "verify_supabase_token", "verify_webhook_secret"]
