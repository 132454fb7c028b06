"""Tests for owner notifications on new leads."""

import json
from unittest.mock import MagicMock

import pytest

from src.api.services.notifications import LeadNotifier
from src.api.services.users import UserDirectory
from src.crm.brevo import BrevoClient
from src.models.lead import LeadSubmission
from src.utils.errors import UpstreamFailure


@pytest.fixture
def brevo():
    return MagicMock(spec=BrevoClient)


@pytest.fixture
def users():
    directory = MagicMock(spec=UserDirectory)
    directory.get_email.side_effect = lambda user_id: {"o1": "owner@example.com"}.get(user_id)
    return directory


@pytest.fixture
def notifier(brevo, users):
    return LeadNotifier(brevo, users)


def _record(item_sk, owner_id="o1", event="INSERT"):
    return {
        "type": event,
        "table": "lead_intake",
        "record": {
            "demo_id": "d1",
            "item_sk": item_sk,
            "owner_id": owner_id,
            "email": "jane@example.com",
            "fields": json.dumps({"name": "Jane"}),
        },
    }


@pytest.mark.asyncio
async def test_notify_sends_dashboard_link(notifier, brevo):
    lead = LeadSubmission(demo_id="d1", item_sk="LEAD#1", owner_id="o1", email="jane@example.com")

    assert await notifier.notify(lead)

    to, subject, body = brevo.send_email.await_args.args
    assert to == "owner@example.com"
    assert subject == "You've received a new contact submission: jane@example.com"
    assert "https://app.example.com/leads/d1" in body


@pytest.mark.asyncio
async def test_notify_without_owner_email(notifier, brevo):
    lead = LeadSubmission(demo_id="d1", item_sk="LEAD#1", owner_id="unknown")
    assert not await notifier.notify(lead)
    brevo.send_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_batch_reports_failed_records(notifier, brevo):
    records = [
        _record("LEAD#1"),
        _record("LEAD#2", event="UPDATE"),
        _record("LEAD#3", owner_id="unknown"),
    ]

    failed = await notifier.process_insert_events(records)

    assert failed == ["LEAD#3"]
    assert brevo.send_email.await_count == 1


@pytest.mark.asyncio
async def test_send_failure_is_reported(notifier, brevo):
    brevo.send_email.side_effect = UpstreamFailure("Brevo down")
    assert await notifier.process_insert_events([_record("LEAD#1")]) == ["LEAD#1"]


@pytest.mark.asyncio
async def test_invalid_record_is_reported(notifier, brevo):
    record = {"type": "INSERT", "id": "evt-9", "record": {"demo_id": ["not", "a", "string"]}}
    assert await notifier.process_insert_events([record]) == ["evt-9"]
    brevo.send_email.assert_not_awaited()
