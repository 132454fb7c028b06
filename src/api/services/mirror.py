"""Publish/unpublish orchestration between the private store and the public mirror.

The private METADATA status is always written first. Mirroring happens after
and its failures are logged, never rolled back: publish state and mirror
contents may diverge until the next save re-syncs them.
"""

from dataclasses import dataclass
from typing import Any

from src.api.services.templates import TemplateService
from src.models.demo import DemoMetadata, DemoStatus, DemoStep, HotspotStyle, LeadConfig, MirrorOverrides
from src.store.base import DataClient, Table
from src.store.codec import encode_json, metadata_from_row, step_from_row, step_to_row
from src.store.keys import (
    METADATA_SK,
    demo_pk,
    is_step_sk,
    item_key,
    now_iso,
    private_key,
    public_key,
    public_pk,
    step_sk,
)
from src.store.pagination import collect_all
from src.utils.errors import (
    ConditionalCheckFailed,
    ForbiddenError,
    MirrorInconsistency,
    NotFoundError,
    ValidationFailure,
    not_signed_in,
)
from src.utils.logger import get_logger

logger = get_logger("mirror")

# Written even when None so clearing the lead step on save reaches the mirror
LEAD_FIELDS = frozenset({"lead_step_index", "lead_config"})
STEP_FIELDS = frozenset({"hotspots"})


@dataclass
class MirrorResult:
    """Outcome of a full mirror pass."""

    demo_id: str
    metadata_mirrored: bool = False
    steps_mirrored: int = 0
    steps_failed: int = 0


class MirrorService:
    """Keeps the public mirror of an owner's demos in step with the private store."""

    def __init__(
        self,
        client: DataClient,
        owner_id: str | None,
        templates: TemplateService | None = None,
    ):
        self.client = client
        self.owner_id = owner_id
        self.templates = templates or TemplateService(client, owner_id)

    @property
    def mirror(self) -> Table:
        return self.client.public_mirror

    def _require_owner(self) -> str:
        if not self.owner_id:
            raise not_signed_in()
        return self.owner_id

    def _check_owner(self, row: dict[str, Any]) -> None:
        if row.get("owner_id") != self._require_owner():
            raise ForbiddenError("Forbidden: not the owner of this demo")

    # ============== Status ==============

    def set_demo_status(self, demo_id: str, status: DemoStatus) -> DemoMetadata:
        """Update the private status, then mirror (PUBLISHED) or tear down (DRAFT)."""
        status = DemoStatus(status)
        row = self.client.app_data.get(private_key(demo_id))
        if row is None:
            raise NotFoundError(f"Demo {demo_id} not found")
        self._check_owner(row)

        now = now_iso()
        updated = self.client.app_data.update(
            private_key(demo_id),
            {"status": status.value, "status_updated_at": now, "updated_at": now},
        )
        logger.info("demo_status_updated", demo_id=demo_id, status=status.value)

        try:
            if status is DemoStatus.PUBLISHED:
                self.mirror_demo_to_public(demo_id)
            else:
                self.delete_public_demo_items(demo_id)
        except Exception as e:
            inconsistency = MirrorInconsistency(
                f"Public mirror of demo {demo_id} is out of sync",
                details={"target_status": status.value, "cause": str(e), "cause_type": type(e).__name__},
            )
            logger.error("mirror_inconsistency", demo_id=demo_id, **inconsistency.to_dict())

        return metadata_from_row(updated)

    # ============== Mirror ==============

    def mirror_demo_to_public(
        self,
        demo_id: str,
        overrides: MirrorOverrides | None = None,
    ) -> MirrorResult:
        """Copy the METADATA and every STEP of a demo into the public mirror.

        Safe to repeat: the mirror's updated_at comes from the private
        metadata, so two calls without private changes leave identical rows.
        Fields explicitly set on ``overrides`` replace the stored values.
        Only a PUBLISHED demo is mirrored; any other status raises
        ``ValidationFailure``.
        """
        owner_id = self._require_owner()
        result = MirrorResult(demo_id=demo_id)
        rows = collect_all(self.client.app_data, {"pk": demo_pk(demo_id)})
        if not rows:
            logger.warning("mirror_no_private_items", demo_id=demo_id)
            return result

        meta_row = next((row for row in rows if row.get("sk") == METADATA_SK), None)
        if meta_row is None:
            logger.warning("mirror_metadata_missing", demo_id=demo_id)
            return result
        self._check_owner(meta_row)
        metadata = metadata_from_row(meta_row)
        if metadata.status is not DemoStatus.PUBLISHED:
            raise ValidationFailure(
                f"Demo {demo_id} is not published",
                details={"status": metadata.status.value},
            )

        if overrides is not None:
            metadata = metadata.model_copy(
                update={field: getattr(overrides, field) for field in overrides.model_fields_set}
            )
        self.create_public_demo_metadata(
            demo_id,
            owner_id=metadata.owner_id or owner_id,
            name=metadata.name,
            created_at=metadata.created_at,
            updated_at=metadata.updated_at,
            lead_step_index=metadata.lead_step_index,
            lead_config=self._effective_lead_config(metadata),
            hotspot_style=metadata.hotspot_style,
            replace_lead_fields=True,
        )
        result.metadata_mirrored = True

        step_rows = [row for row in rows if is_step_sk(row.get("sk"))]
        for row in step_rows:
            if row.get("owner_id") not in (None, owner_id):
                continue
            try:
                # Re-read so a just-saved step is mirrored, not the listed copy
                fresh = self.client.app_data.get(item_key(row)) or row
                self.create_public_demo_step(step_from_row(fresh), owner_id=owner_id)
                result.steps_mirrored += 1
            except Exception as e:
                result.steps_failed += 1
                logger.error("mirror_step_failed", demo_id=demo_id, sk=row.get("sk"), error=str(e))

        logger.info(
            "demo_mirrored",
            demo_id=demo_id,
            steps=result.steps_mirrored,
            failed=result.steps_failed,
        )
        return result

    def _effective_lead_config(self, metadata: DemoMetadata) -> LeadConfig | None:
        if metadata.lead_config is not None:
            return metadata.lead_config
        if metadata.lead_use_global:
            return self.templates.get_global_lead_config()
        return None

    def create_public_demo_metadata(
        self,
        demo_id: str,
        owner_id: str | None = None,
        name: str | None = None,
        created_at: str | None = None,
        updated_at: str | None = None,
        lead_step_index: int | None = None,
        lead_config: LeadConfig | None = None,
        hotspot_style: HotspotStyle | None = None,
        replace_lead_fields: bool = False,
    ) -> dict[str, Any]:
        """Write the mirror METADATA, merging into an existing item.

        With ``replace_lead_fields`` the lead step and config are written even
        when None, clearing what the mirror had.
        """
        now = now_iso()
        item = {
            **public_key(demo_id),
            "entity_type": "DEMO",
            "demo_id": demo_id,
            "owner_id": owner_id or self.owner_id,
            "name": name,
            "status": DemoStatus.PUBLISHED.value,
            "created_at": created_at or now,
            "updated_at": updated_at or now,
            "lead_step_index": lead_step_index,
            "lead_config": encode_json(lead_config),
            "hotspot_style": encode_json(hotspot_style),
        }
        keep_none = LEAD_FIELDS if replace_lead_fields else frozenset()
        return self._create_or_merge(item, keep_none)

    def create_public_demo_step(self, step: DemoStep, owner_id: str | None = None) -> dict[str, Any]:
        item = {
            **public_key(step.demo_id, step_sk(step.step_id)),
            "entity_type": "STEP",
            "owner_id": owner_id or self.owner_id,
            **step_to_row(step),
        }
        return self._create_or_merge(item, STEP_FIELDS)

    def _create_or_merge(
        self,
        item: dict[str, Any],
        keep_none: frozenset[str] = frozenset(),
    ) -> dict[str, Any]:
        """Create a mirror item; if it exists, merge the new non-null fields over it.

        A partial payload never nulls fields (owner_id, s3_key...) the existing
        item already holds, except those named in ``keep_none``.
        """
        payload = {k: v for k, v in item.items() if v is not None}
        try:
            return self.mirror.create(payload)
        except ConditionalCheckFailed:
            pass

        key = item_key(item)
        existing = self.mirror.get(key)
        if existing is None:
            # Removed between the failed create and the read
            return self.mirror.create(payload)

        merged = {**existing, **payload}
        for field in keep_none:
            merged[field] = item.get(field)
        changes = {k: v for k, v in merged.items() if k not in key}
        logger.debug("mirror_item_merged", pk=key["pk"], sk=key["sk"])
        return self.mirror.update(key, changes)

    # ============== Teardown ==============

    def delete_public_demo_items(self, demo_id: str) -> int:
        """Delete every mirror item of a demo. Returns the number deleted."""
        owner_id = self._require_owner()
        rows = collect_all(self.mirror, {"pk": public_pk(demo_id), "owner_id": owner_id})
        for row in rows:
            self.mirror.delete(item_key(row))
        logger.info("public_mirror_removed", demo_id=demo_id, items=len(rows))
        return len(rows)
