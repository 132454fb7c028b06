"""Tests for JSON field codecs and row mapping."""

import json

from src.models.demo import DemoStatus, DemoStep, Hotspot, LeadConfig
from src.store.codec import (
    decode_hotspots,
    decode_json,
    decode_lead_config,
    encode_json,
    items_from_rows,
    metadata_from_row,
    step_from_row,
    step_to_row,
)


def test_decode_json_handles_double_encoding():
    raw = json.dumps(json.dumps({"bg": "black"}))
    assert decode_json(raw) == {"bg": "black"}


def test_decode_json_malformed_is_absent():
    assert decode_json("{not json") is None
    assert decode_json("") is None
    assert decode_json(None) is None


def test_decode_json_passes_through_decoded_values():
    assert decode_json({"a": 1}) == {"a": 1}
    assert decode_json([1, 2]) == [1, 2]


def test_hotspots_keep_unknown_keys():
    raw = json.dumps([{"id": "h1", "xNorm": 0.5, "targetStep": 3}])

    hotspots = decode_hotspots(raw)
    stored = json.loads(encode_json(hotspots))

    assert hotspots[0].x_norm == 0.5
    assert stored == [{"id": "h1", "xNorm": 0.5, "width": 0, "height": 0, "targetStep": 3}]


def test_invalid_hotspots_are_skipped():
    raw = json.dumps([{"xNorm": 0.1}, {"id": "ok"}])
    assert [h.id for h in decode_hotspots(raw)] == ["ok"]
    assert decode_hotspots("nonsense") == []


def test_lead_config_accepts_legacy_field_type():
    raw = json.dumps({"bg": "purple", "fields": [{"type": "email", "key": "email", "required": True}]})

    config = decode_lead_config(raw)

    assert config.bg == "white"
    assert config.fields[0].kind == "email"
    assert config.required_keys() == ["email"]


def test_metadata_from_row_decodes_json_fields(lead_config):
    row = {
        "pk": "DEMO#d1",
        "sk": "METADATA",
        "owner_id": "o1",
        "status": "PUBLISHED",
        "lead_step_index": 2,
        "lead_config": encode_json(lead_config),
        "hotspot_style": json.dumps({"dotSize": 20, "animation": "pulse"}),
    }

    metadata = metadata_from_row(row)

    assert metadata.demo_id == "d1"
    assert metadata.status is DemoStatus.PUBLISHED
    assert metadata.lead_config == lead_config
    assert metadata.hotspot_style.dot_size == 20
    assert metadata.hotspot_style.animation == "pulse"


def test_unknown_status_reads_as_draft():
    assert metadata_from_row({"pk": "DEMO#d1", "status": "ARCHIVED"}).status is DemoStatus.DRAFT


def test_step_row_round_trip_uses_step_order_column(hotspots):
    step = DemoStep(demo_id="d1", step_id="s1", s3_key="public/demos/o/d1/s1.png", order=3, hotspots=hotspots)

    row = step_to_row(step)
    restored = step_from_row({"pk": "DEMO#d1", "sk": "STEP#s1", **row})

    assert row["step_order"] == 3
    assert "order" not in row
    assert restored.order == 3
    assert restored.hotspots == hotspots


def test_step_without_hotspots_stores_none():
    assert step_to_row(DemoStep(demo_id="d1", step_id="s1"))["hotspots"] is None


def test_items_from_rows_orders_steps():
    rows = [
        {"pk": "DEMO#d1", "sk": "STEP#b", "step_order": 2},
        {"pk": "DEMO#d1", "sk": "STEP#a", "step_order": 1},
        {"pk": "DEMO#d1", "sk": "METADATA", "name": "Tour"},
        {"pk": "DEMO#d1", "sk": "SOMETHING_ELSE"},
    ]

    items = items_from_rows("d1", rows, source="public")

    assert items.metadata.name == "Tour"
    assert [s.step_id for s in items.steps] == ["a", "b"]
    assert items.source == "public"


def test_encode_json_none_stays_none():
    assert encode_json(None) is None
    assert json.loads(encode_json(LeadConfig())) == {"style": "solid", "bg": "white", "fields": []}


def test_hotspot_documents_are_camel_case():
    doc = Hotspot(id="h1", dot_size=10, tooltip_bg_color="#000").to_document()
    assert doc["dotSize"] == 10
    assert doc["tooltipBgColor"] == "#000"
