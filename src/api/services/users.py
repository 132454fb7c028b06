"""Lookups and flags on Supabase Auth users."""

from typing import Any

from supabase import Client

from src.utils.logger import get_logger

logger = get_logger("users")

CRM_SYNCED_FLAG = "brevo_synced"


class UserDirectory:
    """Admin access to auth users (needs the service-role client)."""

    def __init__(self, client: Client):
        self.client = client

    def _get_user(self, user_id: str) -> Any | None:
        response = self.client.auth.admin.get_user_by_id(user_id)
        return getattr(response, "user", None)

    def get_email(self, user_id: str) -> str | None:
        """Email of a user, or None when the lookup fails."""
        try:
            user = self._get_user(user_id)
        except Exception as e:
            logger.error("user_lookup_failed", user_id=user_id, error=str(e))
            return None
        return getattr(user, "email", None) if user else None

    def is_crm_synced(self, user_id: str) -> bool:
        user = self._get_user(user_id)
        metadata = getattr(user, "user_metadata", None) or {}
        return str(metadata.get(CRM_SYNCED_FLAG, "")).lower() == "true"

    def mark_crm_synced(self, user_id: str) -> None:
        user = self._get_user(user_id)
        metadata = dict(getattr(user, "user_metadata", None) or {})
        metadata[CRM_SYNCED_FLAG] = "true"
        self.client.auth.admin.update_user_by_id(user_id, {"user_metadata": metadata})
        logger.info("user_marked_crm_synced", user_id=user_id)
