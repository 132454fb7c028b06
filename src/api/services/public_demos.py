"""Anonymous reads of published demos."""

from src.api.services.storage import StorageService
from src.editor.style import apply_style_defaults
from src.models.demo import DemoItems, HotspotStyle, PublicDemoView
from src.store.base import DataClient
from src.store.codec import items_from_rows
from src.store.keys import public_pk
from src.store.pagination import collect_all
from src.utils.errors import NotFoundError
from src.utils.logger import get_logger

logger = get_logger("public_demos")


class PublicDemoService:
    """Serves the public mirror to viewers through an API-key client."""

    def __init__(self, client: DataClient, storage: StorageService | None = None):
        self.client = client.public()
        self.storage = storage

    def list_public_demo_items(self, demo_id: str) -> DemoItems:
        rows = collect_all(self.client.public_mirror, {"pk": public_pk(demo_id)})
        return items_from_rows(demo_id, rows, source="public")

    def get_public_demo(self, demo_id: str) -> PublicDemoView:
        """Everything the player needs, with demo style defaults applied."""
        items = self.list_public_demo_items(demo_id)
        metadata = items.metadata
        if metadata is None:
            raise NotFoundError(f"Demo {demo_id} not found or not published")

        style = metadata.hotspot_style or HotspotStyle()
        steps = []
        for step in items.steps:
            update = {"hotspots": apply_style_defaults(step.hotspots, style)}
            if self.storage is not None:
                update["image_url"] = self.storage.resolve_screenshot_url(step.s3_key)
            steps.append(step.model_copy(update=update))

        logger.debug("public_demo_loaded", demo_id=demo_id, steps=len(steps))
        return PublicDemoView(
            demo_id=demo_id,
            name=metadata.name,
            lead_step_index=metadata.lead_step_index,
            lead_config=metadata.lead_config,
            lead_bg=metadata.lead_config.bg if metadata.lead_config else "white",
            hotspot_style=style,
            steps=steps,
        )
