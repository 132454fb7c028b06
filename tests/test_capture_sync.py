"""Tests for turning a captured draft into a stored demo."""

from unittest.mock import MagicMock

import pytest

from src.api.services.capture_sync import CaptureSyncService, decode_data_url
from src.api.services.demos import DemoService
from src.api.services.storage import StorageService
from src.models.capture import CapturedDemo
from src.utils.errors import ValidationFailure
from tests.conftest import OWNER

PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="


@pytest.fixture
def storage():
    service = MagicMock(spec=StorageService)
    service.upload_step_image.side_effect = (
        lambda owner_id, demo_id, step_id, data, content_type: f"public/demos/{owner_id}/{demo_id}/{step_id}.png"
    )
    return service


@pytest.fixture
def demos(user_client):
    return DemoService(user_client, OWNER)


@pytest.fixture
def sync(demos, storage):
    return CaptureSyncService(demos, storage)


def _draft(**overrides):
    data = {
        "name": "Captured tour",
        "steps": [
            {"id": "a", "pageUrl": "https://app.example.com", "order": 0, "screenshotDataUrl": PNG_DATA_URL},
            {
                "id": "b",
                "order": 1,
                "screenshotDataUrl": PNG_DATA_URL,
                "isLeadCapture": True,
                "leadBg": "black",
            },
            {"id": "c", "order": 2},
            {"id": "d", "order": 3, "screenshotDataUrl": "not a data url"},
        ],
        "hotspotsByStep": {"a": [{"id": "h1", "xNorm": 0.5, "yNorm": 0.5, "tooltip": "Start"}]},
    }
    data.update(overrides)
    return CapturedDemo.model_validate(data)


def test_decode_data_url():
    data, content_type = decode_data_url(PNG_DATA_URL)
    assert content_type == "image/png"
    assert data.startswith(b"\x89PNG")
    with pytest.raises(ValidationFailure):
        decode_data_url("https://example.com/a.png")


def test_sync_creates_demo_and_valid_steps(sync, demos, storage):
    result = sync.sync_captured_demo(_draft(), demo_id="d1")

    assert result.demo_id == "d1"
    assert result.step_count == 2
    items = demos.list_demo_items("d1")
    assert items.metadata.name == "Captured tour"
    assert [s.step_id for s in items.steps] == ["a", "b"]
    assert items.steps[0].s3_key == f"public/demos/{OWNER}/d1/a.png"
    assert items.steps[0].hotspots[0].tooltip == "Start"
    assert items.steps[0].page_url == "https://app.example.com"
    assert storage.upload_step_image.call_count == 2


def test_sync_records_lead_step(sync, demos):
    sync.sync_captured_demo(_draft(), demo_id="d1")

    metadata = demos.get_demo_metadata("d1")
    assert metadata.lead_step_index == 1
    assert metadata.lead_config.bg == "black"


def test_explicit_lead_selection_wins(sync, demos):
    draft = _draft(leadStepIndex=0, leadConfig={"title": "Stay in touch", "bg": "white"})

    sync.sync_captured_demo(draft, demo_id="d1")

    metadata = demos.get_demo_metadata("d1")
    assert metadata.lead_step_index == 0
    assert metadata.lead_config.title == "Stay in touch"


def test_invalid_lead_config_is_not_fatal(sync, demos):
    draft = _draft(leadStepIndex=0, leadConfig={"fields": [{"kind": "checkbox", "key": "x"}]})

    result = sync.sync_captured_demo(draft, demo_id="d1")

    assert result.step_count == 2
    assert demos.get_demo_metadata("d1").lead_step_index is None


def test_upload_failure_skips_step(sync, storage):
    storage.upload_step_image.side_effect = RuntimeError("bucket missing")
    assert sync.sync_captured_demo(_draft(), demo_id="d1").step_count == 0


def test_empty_draft(sync, stores):
    with pytest.raises(ValidationFailure):
        sync.sync_captured_demo(CapturedDemo(name="Empty"))
    assert stores["app_data"].all() == []


def test_generated_demo_id(sync):
    result = sync.sync_captured_demo(_draft())
    assert len(result.demo_id) == 36
