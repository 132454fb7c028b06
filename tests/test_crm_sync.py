"""Tests for the sign-up and sign-in CRM hooks."""

from unittest.mock import MagicMock

import pytest

from config.settings import settings
from src.api.services.crm_sync import CrmSyncService, CrmUser
from src.api.services.users import UserDirectory
from src.crm.brevo import BrevoClient
from src.utils.errors import UpstreamFailure


@pytest.fixture
def brevo():
    client = MagicMock(spec=BrevoClient)
    client.is_configured.return_value = True
    return client


@pytest.fixture
def users():
    return MagicMock(spec=UserDirectory)


@pytest.fixture
def crm(brevo, users):
    return CrmSyncService(brevo, users)


@pytest.mark.asyncio
async def test_signup_upserts_without_list(crm, brevo):
    assert await crm.on_signup_confirmed(CrmUser(user_id="u1", email="jane@example.com", name="Jane"))
    brevo.upsert_contact.assert_awaited_once_with("jane@example.com", first_name="Jane")


@pytest.mark.asyncio
async def test_signup_failure_does_not_raise(crm, brevo):
    brevo.upsert_contact.side_effect = UpstreamFailure("Brevo down")
    assert not await crm.on_signup_confirmed(CrmUser(user_id="u1", email="jane@example.com"))


@pytest.mark.asyncio
async def test_first_login_adds_to_list_and_flags_user(crm, brevo, users, monkeypatch):
    monkeypatch.setattr(settings, "brevo_list_id", " 7 ")

    assert await crm.on_authenticated(CrmUser(user_id="u1", email="jane@example.com", name="Jane"))

    brevo.upsert_contact.assert_awaited_once_with("jane@example.com", first_name="Jane", list_id=7)
    users.mark_crm_synced.assert_called_once_with("u1")


@pytest.mark.asyncio
async def test_login_without_list_id_still_upserts(crm, brevo, monkeypatch):
    monkeypatch.setattr(settings, "brevo_list_id", "not-a-number")

    assert await crm.on_authenticated(CrmUser(user_id="u1", email="jane@example.com"))
    brevo.upsert_contact.assert_awaited_once_with("jane@example.com", first_name=None, list_id=None)


@pytest.mark.asyncio
async def test_already_synced_user_is_skipped(crm, brevo, users):
    assert not await crm.on_authenticated(CrmUser(user_id="u1", email="jane@example.com", crm_synced=True))
    brevo.upsert_contact.assert_not_awaited()
    users.mark_crm_synced.assert_not_called()


@pytest.mark.asyncio
async def test_missing_email_or_key_is_skipped(crm, brevo):
    assert not await crm.on_authenticated(CrmUser(user_id="u1"))
    brevo.is_configured.return_value = False
    assert not await crm.on_authenticated(CrmUser(user_id="u1", email="jane@example.com"))
    brevo.upsert_contact.assert_not_awaited()


@pytest.mark.asyncio
async def test_crm_failure_leaves_user_unflagged(crm, brevo, users):
    brevo.upsert_contact.side_effect = UpstreamFailure("Brevo down")

    assert not await crm.on_authenticated(CrmUser(user_id="u1", email="jane@example.com"))
    users.mark_crm_synced.assert_not_called()


@pytest.mark.asyncio
async def test_flag_failure_is_not_fatal(crm, users):
    users.mark_crm_synced.side_effect = RuntimeError("auth admin unavailable")
    assert await crm.on_authenticated(CrmUser(user_id="u1", email="jane@example.com"))


def test_settings_list_id_parsing(monkeypatch):
    for raw, expected in [("12", 12), ("", None), ("0", None), ("-3", None), ("abc", None)]:
        monkeypatch.setattr(settings, "brevo_list_id", raw)
        assert settings.get_brevo_list_id() == expected
