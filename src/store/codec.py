"""JSON field codecs and row <-> model mapping.

hotspots, lead_config, hotspot_style and lead fields are persisted as JSON
strings. This is the only module that encodes or decodes them; everything
above the store works with typed models.
"""

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from src.models.demo import (
    DemoItems,
    DemoMetadata,
    DemoStatus,
    DemoStep,
    Hotspot,
    HotspotStyle,
    LeadConfig,
)
from src.models.lead import LeadSubmission, LeadTemplate, OwnerSettings
from src.store.keys import METADATA_SK, TEMPLATE_PREFIX, is_step_sk, step_id_from_sk
from src.utils.logger import get_logger

logger = get_logger("store.codec")


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        if hasattr(value, "to_document"):
            return value.to_document()
        return value.model_dump(exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    return value


def encode_json(value: Any) -> str | None:
    """Serialize a JSON-valued field for storage. None stays None."""
    if value is None:
        return None
    return json.dumps(_to_plain(value), separators=(",", ":"))


def decode_json(raw: Any, field: str = "json") -> Any:
    """Parse a stored JSON field.

    Already-decoded values (dict/list) pass through. A string that decodes to
    another string is decoded once more, since older writers double-encoded.
    Malformed input is logged and treated as absent.
    """
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        return raw
    try:
        value = json.loads(raw)
        if isinstance(value, str):
            value = json.loads(value)
        return value
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("json_field_malformed", field=field, error=str(e))
        return None


def decode_hotspots(raw: Any) -> list[Hotspot]:
    value = decode_json(raw, "hotspots")
    if not isinstance(value, list):
        return []
    hotspots = []
    for entry in value:
        try:
            hotspots.append(Hotspot.model_validate(entry))
        except ValidationError as e:
            logger.warning("hotspot_invalid", error=str(e))
    return hotspots


def decode_lead_config(raw: Any) -> LeadConfig | None:
    value = decode_json(raw, "lead_config")
    if not isinstance(value, dict):
        return None
    try:
        return LeadConfig.model_validate(value)
    except ValidationError as e:
        logger.warning("lead_config_invalid", error=str(e))
        return None


def decode_hotspot_style(raw: Any) -> HotspotStyle | None:
    value = decode_json(raw, "hotspot_style")
    if not isinstance(value, dict):
        return None
    try:
        return HotspotStyle.model_validate(value)
    except ValidationError as e:
        logger.warning("hotspot_style_invalid", error=str(e))
        return None


def decode_fields(raw: Any) -> dict[str, Any]:
    value = decode_json(raw, "fields")
    return value if isinstance(value, dict) else {}


# ============== Row -> model ==============


def _demo_id_from_pk(pk: str | None) -> str:
    if not pk:
        return ""
    return pk.split("#", 1)[1] if "#" in pk else pk


def metadata_from_row(row: dict[str, Any]) -> DemoMetadata:
    status = row.get("status")
    return DemoMetadata(
        demo_id=row.get("demo_id") or _demo_id_from_pk(row.get("pk")),
        owner_id=row.get("owner_id"),
        name=row.get("name"),
        status=DemoStatus.PUBLISHED if status == DemoStatus.PUBLISHED.value else DemoStatus.DRAFT,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        status_updated_at=row.get("status_updated_at"),
        lead_step_index=row.get("lead_step_index"),
        lead_config=decode_lead_config(row.get("lead_config")),
        hotspot_style=decode_hotspot_style(row.get("hotspot_style")),
        lead_use_global=row.get("lead_use_global"),
        current_version=row.get("current_version"),
    )


def step_from_row(row: dict[str, Any]) -> DemoStep:
    sk = row.get("sk") or ""
    return DemoStep(
        demo_id=row.get("demo_id") or _demo_id_from_pk(row.get("pk")),
        step_id=row.get("step_id") or (step_id_from_sk(sk) if is_step_sk(sk) else sk),
        s3_key=row.get("s3_key"),
        order=row.get("step_order") or 0,
        page_url=row.get("page_url"),
        thumbnail_s3_key=row.get("thumbnail_s3_key"),
        hotspots=decode_hotspots(row.get("hotspots")),
        zoom=row.get("zoom"),
    )


def lead_from_row(row: dict[str, Any]) -> LeadSubmission:
    return LeadSubmission(
        demo_id=row.get("demo_id") or "",
        item_sk=row.get("item_sk") or "",
        owner_id=row.get("owner_id"),
        email=row.get("email"),
        fields=decode_fields(row.get("fields")),
        page_url=row.get("page_url"),
        step_index=row.get("step_index"),
        source=row.get("source"),
        user_agent=row.get("user_agent"),
        referrer=row.get("referrer"),
        created_at=row.get("created_at"),
    )


def template_from_row(row: dict[str, Any]) -> LeadTemplate:
    sk = row.get("sk") or ""
    return LeadTemplate(
        template_id=row.get("template_id") or sk.removeprefix(TEMPLATE_PREFIX),
        owner_id=row.get("owner_id"),
        name=row.get("name") or "",
        lead_config=decode_lead_config(row.get("lead_config")),
        created_at=row.get("created_at"),
    )


def settings_from_row(row: dict[str, Any]) -> OwnerSettings:
    return OwnerSettings(
        owner_id=row.get("owner_id") or _demo_id_from_pk(row.get("pk")),
        lead_config=decode_lead_config(row.get("lead_config")),
        updated_at=row.get("updated_at"),
    )


# ============== Model -> row ==============


def step_to_row(step: DemoStep) -> dict[str, Any]:
    """Step columns shared by private and mirrored step items (no keys)."""
    return {
        "demo_id": step.demo_id,
        "step_id": step.step_id,
        "s3_key": step.s3_key,
        "step_order": step.order,
        "page_url": step.page_url,
        "thumbnail_s3_key": step.thumbnail_s3_key,
        "hotspots": encode_json(step.hotspots) if step.hotspots else None,
        "zoom": step.zoom,
    }


def lead_to_row(lead: LeadSubmission) -> dict[str, Any]:
    return {
        "demo_id": lead.demo_id,
        "item_sk": lead.item_sk,
        "owner_id": lead.owner_id,
        "email": lead.email,
        "fields": encode_json(lead.fields),
        "page_url": lead.page_url,
        "step_index": lead.step_index,
        "source": lead.source,
        "user_agent": lead.user_agent,
        "referrer": lead.referrer,
        "created_at": lead.created_at,
    }


def items_from_rows(
    demo_id: str,
    rows: list[dict[str, Any]],
    source: str = "private",
) -> DemoItems:
    """Group a demo's rows: METADATA first, steps sorted by order."""
    metadata = None
    steps = []
    for row in rows:
        sk = row.get("sk")
        if sk == METADATA_SK:
            metadata = metadata_from_row(row)
        elif is_step_sk(sk):
            steps.append(step_from_row(row))
    steps.sort(key=lambda s: s.order)
    return DemoItems(demo_id=demo_id, metadata=metadata, steps=steps, source=source)
