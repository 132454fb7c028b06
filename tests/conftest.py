"""Shared fixtures: in-memory stores behind user and API-key data clients."""

import os

# Settings are read at import time; pin the values tests rely on first.
os.environ["SUPABASE_URL"] = ""
os.environ["WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ["BREVO_LIST_ID"] = ""
os.environ["DASHBOARD_URL"] = "https://app.example.com"

import pytest

from src.models.demo import Hotspot, LeadConfig
from src.store.base import DataClient
from src.store.client import restrict_to_api_key
from src.store.keys import LEAD_KEY_FIELDS
from tests.fakes import FakeTable

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


@pytest.fixture
def stores() -> dict[str, FakeTable]:
    return {
        "app_data": FakeTable("app_data"),
        "public_mirror": FakeTable("public_mirror"),
        "lead_intake": FakeTable("lead_intake", LEAD_KEY_FIELDS),
    }


@pytest.fixture
def public_client(stores) -> DataClient:
    return restrict_to_api_key(DataClient(**stores))


@pytest.fixture
def user_client(stores, public_client) -> DataClient:
    return DataClient(**stores, public_client=public_client)


@pytest.fixture
def lead_config() -> LeadConfig:
    return LeadConfig.model_validate(
        {
            "bg": "black",
            "title": "Talk to sales",
            "fields": [
                {"kind": "email", "key": "email", "label": "Email", "required": True},
                {"kind": "text", "key": "name", "label": "Name", "required": True},
                {"kind": "textarea", "key": "message", "label": "Message"},
            ],
        }
    )


@pytest.fixture
def hotspots() -> list[Hotspot]:
    return [
        Hotspot(id="h1", x_norm=0.25, y_norm=0.5, width=40, height=20, tooltip="Click here", dot_color="#ff0000"),
        Hotspot(id="h2", x_norm=0.75, y_norm=0.1, width=10, height=10),
    ]
