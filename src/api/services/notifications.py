"""Owner email notifications for new leads."""

from typing import Any

from pydantic import ValidationError

from config.settings import settings
from src.api.services.users import UserDirectory
from src.crm.brevo import BrevoClient
from src.models.lead import LeadSubmission
from src.store.codec import lead_from_row
from src.utils.errors import DemoServiceError
from src.utils.logger import get_logger

logger = get_logger("notifications")


class LeadNotifier:
    """Emails a demo owner when a viewer submits a lead."""

    def __init__(self, brevo: BrevoClient, users: UserDirectory):
        self.brevo = brevo
        self.users = users

    def dashboard_link(self, demo_id: str) -> str:
        return f"{settings.dashboard_url.rstrip('/')}/leads/{demo_id}"

    async def notify(self, lead: LeadSubmission) -> bool:
        """Send the notification. Returns False when it could not be sent."""
        if not lead.owner_id:
            logger.warning("lead_notification_no_owner", demo_id=lead.demo_id)
            return False
        owner_email = self.users.get_email(lead.owner_id)
        if not owner_email:
            logger.warning("lead_notification_no_owner_email", demo_id=lead.demo_id, lead_email=lead.email)
            return False

        link = self.dashboard_link(lead.demo_id)
        subject = f"You've received a new contact submission: {lead.email or 'unknown'}"
        body = (
            f"You've received a new contact submission: {lead.email or 'unknown'}\n\n"
            f"Open the dashboard to check it out: {link}\n\n"
            "---\n"
            "This is an automated notification."
        )
        try:
            await self.brevo.send_email(owner_email, subject, body)
        except DemoServiceError as e:
            logger.error("lead_notification_failed", demo_id=lead.demo_id, error=str(e))
            return False
        logger.info("lead_notification_sent", demo_id=lead.demo_id, to=owner_email, lead_email=lead.email)
        return True

    async def process_insert_events(self, records: list[dict[str, Any]]) -> list[str]:
        """Handle a batch of lead-intake change records.

        Only INSERT records are processed. Returns the identifiers of records
        that failed so the sender can retry just those.
        """
        failed: list[str] = []
        sent = 0
        for index, record in enumerate(records):
            if record.get("type", record.get("eventName")) != "INSERT":
                continue
            row = record.get("record") or {}
            identifier = str(record.get("id") or row.get("item_sk") or index)
            if not row:
                continue
            try:
                lead = lead_from_row(row)
            except ValidationError as e:
                logger.error("lead_record_invalid", record_id=identifier, error=str(e))
                failed.append(identifier)
                continue
            if await self.notify(lead):
                sent += 1
            else:
                failed.append(identifier)

        if failed:
            logger.error("lead_notifications_to_retry", failed=failed)
        logger.info("lead_notifications_processed", sent=sent, failed=len(failed))
        return failed

