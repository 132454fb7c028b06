"""Sign-up and sign-in hooks that push users into the Brevo CRM.

Nothing here may block the auth flow: CRM failures are logged and dropped.
"""

from dataclasses import dataclass

from config.settings import settings
from src.api.services.users import UserDirectory
from src.crm.brevo import BrevoClient
from src.utils.errors import DemoServiceError
from src.utils.logger import get_logger

logger = get_logger("crm_sync")


@dataclass
class CrmUser:
    """The user attributes an auth hook hands over."""

    user_id: str
    email: str | None = None
    name: str | None = None
    crm_synced: bool = False


class CrmSyncService:
    """Upserts users as Brevo contacts."""

    def __init__(self, brevo: BrevoClient, users: UserDirectory | None = None):
        self.brevo = brevo
        self.users = users

    async def on_signup_confirmed(self, user: CrmUser) -> bool:
        """Create the contact after email confirmation. Returns True when synced."""
        if not user.email:
            logger.info("crm_sync_skipped_no_email", user_id=user.user_id)
            return False
        try:
            await self.brevo.upsert_contact(user.email, first_name=user.name)
        except DemoServiceError as e:
            logger.error("crm_signup_sync_failed", user_id=user.user_id, email=user.email, error=str(e))
            return False
        return True

    async def on_authenticated(self, user: CrmUser) -> bool:
        """Upsert the contact (with the list id) on first sign-in, then flag the user."""
        if user.crm_synced:
            logger.debug("crm_sync_skipped_already_synced", user_id=user.user_id)
            return False
        if not user.email:
            logger.info("crm_sync_skipped_no_email", user_id=user.user_id)
            return False
        if not self.brevo.is_configured():
            logger.warning("crm_sync_skipped_no_api_key", user_id=user.user_id)
            return False

        list_id = settings.get_brevo_list_id()
        if list_id is None:
            logger.warning("brevo_list_id_missing")
        try:
            await self.brevo.upsert_contact(user.email, first_name=user.name, list_id=list_id)
        except DemoServiceError as e:
            logger.error("crm_login_sync_failed", user_id=user.user_id, email=user.email, error=str(e))
            return False

        if self.users is not None:
            try:
                self.users.mark_crm_synced(user.user_id)
            except Exception as e:
                logger.error("crm_synced_flag_failed", user_id=user.user_id, error=str(e))
        return True
