"""Brevo API client for contacts and transactional email.

API Docs: https://developers.brevo.com/reference
"""

from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_chain,
    wait_fixed,
)

from config.settings import settings
from src.utils.errors import UpstreamFailure
from src.utils.logger import get_logger

logger = get_logger("brevo")


class BrevoResponseError(UpstreamFailure):
    """Brevo answered with a status that is neither 2xx nor 409."""


def _log_retry(retry_state) -> None:
    logger.warning(
        "brevo_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()),
    )


class BrevoClient:
    """Thin async client over the Brevo v3 REST API.

    Every call gets 3 attempts with 200 ms then 500 ms backoff. A 409 from
    Brevo means the contact already exists and counts as success.
    """

    BASE_URL = "https://api.brevo.com/v3"
    USER_AGENT = "demo-api/1.0"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if api_key is None and settings.brevo_api_key:
            api_key = settings.brevo_api_key.get_secret_value()
        self.api_key = (api_key or "").strip()
        self.timeout = timeout if timeout is not None else settings.brevo_timeout_seconds
        self.transport = transport

    def is_configured(self) -> bool:
        return bool(self.api_key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_chain(wait_fixed(0.2), wait_fixed(0.5)),
        retry=retry_if_exception_type((httpx.HTTPError, BrevoResponseError)),
        before_sleep=_log_retry,
        reraise=True,
    )
    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=self.timeout,
            transport=self.transport,
            headers={"api-key": self.api_key, "User-Agent": self.USER_AGENT},
        ) as client:
            response = await client.post(path, json=payload)

        if response.is_success or response.status_code == 409:
            return response
        raise BrevoResponseError(
            f"Brevo {path} returned {response.status_code}",
            details={"status_code": response.status_code, "body": response.text[:500]},
        )

    async def _request(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        if not self.is_configured():
            raise UpstreamFailure("BREVO_API_KEY is not configured")
        try:
            return await self._post(path, payload)
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"Brevo request failed: {e}") from e

    async def upsert_contact(
        self,
        email: str,
        first_name: str | None = None,
        list_id: int | None = None,
    ) -> int:
        """Create or update a contact. Returns the HTTP status (2xx or 409)."""
        payload: dict[str, Any] = {
            "email": email,
            "attributes": {"FIRSTNAME": first_name or ""},
            "updateEnabled": True,
        }
        if list_id:
            payload["listIds"] = [list_id]
        response = await self._request("/contacts", payload)
        logger.info("brevo_contact_upserted", email=email, status=response.status_code)
        return response.status_code

    async def send_email(
        self,
        to: str,
        subject: str,
        text: str,
        sender: str | None = None,
    ) -> str | None:
        """Send a plain-text transactional email. Returns Brevo's message id."""
        payload = {
            "sender": {"email": sender or settings.notification_email},
            "to": [{"email": to}],
            "subject": subject,
            "textContent": text,
        }
        response = await self._request("/smtp/email", payload)
        try:
            message_id = response.json().get("messageId")
        except ValueError:
            message_id = None
        logger.info("brevo_email_sent", to=to, message_id=message_id)
        return message_id
