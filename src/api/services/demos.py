"""Owner-scoped demo operations on the private item store."""

from typing import Any

from src.editor.style import apply_global_style_to_hotspots, derive_tooltip_style_from_hotspots
from src.models.demo import (
    DemoItems,
    DemoMetadata,
    DemoStatus,
    DemoStep,
    Hotspot,
    HotspotStyle,
    HotspotStylePatch,
    LeadConfig,
)
from src.store.base import DataClient
from src.store.codec import (
    encode_json,
    items_from_rows,
    metadata_from_row,
    step_from_row,
    step_to_row,
)
from src.store.keys import METADATA_SK, demo_pk, now_iso, private_key, public_pk, step_sk
from src.store.pagination import collect_all
from src.utils.errors import ForbiddenError, NotFoundError, not_signed_in
from src.utils.logger import get_logger

logger = get_logger("demos")


class DemoService:
    """Reads and writes a single owner's demos."""

    def __init__(self, client: DataClient, owner_id: str | None):
        self.client = client
        self.owner_id = owner_id

    # ============== Ownership ==============

    def require_owner(self) -> str:
        if not self.owner_id:
            raise not_signed_in()
        return self.owner_id

    def _owned_metadata_row(self, demo_id: str) -> dict[str, Any]:
        owner_id = self.require_owner()
        row = self.client.app_data.get(private_key(demo_id))
        if row is None:
            raise NotFoundError(f"Demo {demo_id} not found")
        if row.get("owner_id") != owner_id:
            raise ForbiddenError("Forbidden: not the owner of this demo")
        return row

    def _update_metadata(self, demo_id: str, changes: dict[str, Any]) -> DemoMetadata:
        self._owned_metadata_row(demo_id)
        changes = {**changes, "updated_at": now_iso()}
        row = self.client.app_data.update(private_key(demo_id), changes)
        return metadata_from_row(row)

    # ============== Writes ==============

    def create_demo_metadata(
        self,
        demo_id: str,
        name: str | None = None,
        status: DemoStatus = DemoStatus.DRAFT,
    ) -> DemoMetadata:
        """Create the METADATA item of a new demo."""
        owner_id = self.require_owner()
        now = now_iso()
        row = self.client.app_data.create(
            {
                **private_key(demo_id),
                "entity_type": "DEMO",
                "demo_id": demo_id,
                "owner_id": owner_id,
                "name": name,
                "status": DemoStatus(status).value,
                "created_at": now,
                "updated_at": now,
                "status_updated_at": now,
                "current_version": 1,
            }
        )
        logger.info("demo_created", demo_id=demo_id, owner_id=owner_id)
        return metadata_from_row(row)

    def create_demo_step(
        self,
        demo_id: str,
        step_id: str,
        s3_key: str,
        order: int = 0,
        page_url: str | None = None,
        hotspots: list[Hotspot] | None = None,
        thumbnail_s3_key: str | None = None,
        zoom: int | None = None,
    ) -> DemoStep:
        """Create a STEP item. Hotspots are only written when non-empty."""
        owner_id = self.require_owner()
        step = DemoStep(
            demo_id=demo_id,
            step_id=step_id,
            s3_key=s3_key,
            order=order,
            page_url=page_url,
            thumbnail_s3_key=thumbnail_s3_key,
            hotspots=hotspots or [],
            zoom=zoom,
        )
        row = {
            **private_key(demo_id, step_sk(step_id)),
            "entity_type": "STEP",
            "owner_id": owner_id,
            **step_to_row(step),
        }
        row = {k: v for k, v in row.items() if v is not None}
        created = self.client.app_data.create(row)
        logger.debug("demo_step_created", demo_id=demo_id, step_id=step_id, order=order)
        return step_from_row(created)

    def _update_step(self, demo_id: str, step_id: str, changes: dict[str, Any]) -> DemoStep:
        self._owned_metadata_row(demo_id)
        row = self.client.app_data.update(
            private_key(demo_id, step_sk(step_id)),
            {**changes, "updated_at": now_iso()},
        )
        return step_from_row(row)

    def update_demo_step_hotspots(
        self, demo_id: str, step_id: str, hotspots: list[Hotspot]
    ) -> DemoStep:
        return self._update_step(demo_id, step_id, {"hotspots": encode_json(hotspots)})

    def update_demo_step_zoom(self, demo_id: str, step_id: str, zoom: int | None) -> DemoStep:
        return self._update_step(demo_id, step_id, {"zoom": zoom})

    def update_demo_lead_config(
        self,
        demo_id: str,
        lead_step_index: int | None,
        lead_config: LeadConfig | None = None,
        lead_use_global: bool | None = None,
    ) -> DemoMetadata:
        """Set (or clear, with None) the lead step and its form config."""
        changes: dict[str, Any] = {
            "lead_step_index": lead_step_index,
            "lead_config": encode_json(lead_config),
        }
        if lead_use_global is not None:
            changes["lead_use_global"] = lead_use_global
        return self._update_metadata(demo_id, changes)

    def update_demo_style_config(self, demo_id: str, hotspot_style: HotspotStyle) -> DemoMetadata:
        return self._update_metadata(demo_id, {"hotspot_style": encode_json(hotspot_style)})

    def rename_demo(self, demo_id: str, name: str) -> DemoMetadata:
        metadata = self._update_metadata(demo_id, {"name": name})
        logger.info("demo_renamed", demo_id=demo_id)
        return metadata

    def apply_global_style(self, demo_id: str, patch: HotspotStylePatch) -> HotspotStyle:
        """Apply a style change to every hotspot and store the new demo style.

        Returns the resulting demo-wide style.
        """
        items = self.list_demo_items(demo_id)
        if items.source != "private" or items.metadata is None:
            raise NotFoundError(f"Demo {demo_id} not found")

        hotspots_by_step = {step.step_id: step.hotspots for step in items.steps}
        current = derive_tooltip_style_from_hotspots(
            hotspots_by_step, items.metadata.hotspot_style or HotspotStyle()
        )
        updated = apply_global_style_to_hotspots(hotspots_by_step, current, patch)
        for step_id, hotspots in updated.items():
            if hotspots:
                self.update_demo_step_hotspots(demo_id, step_id, hotspots)

        style = current.model_copy(update=patch.model_dump(exclude_none=True))
        self.update_demo_style_config(demo_id, style)
        logger.info("demo_style_applied", demo_id=demo_id, steps=len(updated))
        return style

    # ============== Reads ==============

    def get_demo_metadata(self, demo_id: str) -> DemoMetadata | None:
        owner_id = self.require_owner()
        row = self.client.app_data.get(private_key(demo_id))
        if row is None:
            return None
        if row.get("owner_id") != owner_id:
            raise ForbiddenError("Forbidden: not the owner of this demo")
        return metadata_from_row(row)

    def list_my_demos(self, status: DemoStatus | None = None) -> list[DemoMetadata]:
        """All of the caller's demos, most recently updated first."""
        owner_id = self.require_owner()
        filters: dict[str, Any] = {"owner_id": owner_id, "sk": METADATA_SK}
        if status:
            filters["status"] = DemoStatus(status).value
        rows = collect_all(self.client.app_data, filters)
        demos = [metadata_from_row(row) for row in rows]
        demos.sort(key=lambda d: d.updated_at or "", reverse=True)
        return demos

    def list_demo_items(self, demo_id: str) -> DemoItems:
        """Private items of an owned demo, falling back to the public mirror."""
        owner_id = self.require_owner()
        rows = collect_all(self.client.app_data, {"pk": demo_pk(demo_id), "owner_id": owner_id})
        if rows:
            return items_from_rows(demo_id, rows, source="private")

        public_rows = collect_all(self.client.public().public_mirror, {"pk": public_pk(demo_id)})
        if public_rows:
            logger.debug("demo_items_from_public_mirror", demo_id=demo_id)
        return items_from_rows(demo_id, public_rows, source="public")

    # ============== Delete ==============

    def delete_demo(self, demo_id: str) -> int:
        """Delete every private item of a demo.

        The public mirror and lead intake are not touched; leads outlive the
        demo. Returns the number of items deleted.
        """
        self.require_owner()
        rows = collect_all(self.client.app_data, {"pk": demo_pk(demo_id)})
        metadata = next((row for row in rows if row.get("sk") == METADATA_SK), None)
        if metadata is not None and metadata.get("owner_id") != self.owner_id:
            raise ForbiddenError("Forbidden: not the owner of this demo")

        deleted = 0
        for row in rows:
            if row.get("owner_id") not in (None, self.owner_id):
                continue
            key = {"pk": row["pk"], "sk": row["sk"]}
            try:
                self.client.app_data.delete(key)
            except Exception as e:
                logger.error("demo_item_delete_failed", demo_id=demo_id, sk=row["sk"], error=str(e))
                raise
            deleted += 1

        logger.info("demo_deleted", demo_id=demo_id, items=deleted)
        return deleted
