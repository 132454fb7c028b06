"""CRM and transactional email integrations."""

from src.crm.brevo import BrevoClient, BrevoResponseError

__all__ = ["BrevoClient", "BrevoResponseError"]
