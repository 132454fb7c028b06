"""Turn a captured, locally edited draft into a stored demo."""

import base64
import binascii
import re
import uuid
from dataclasses import dataclass

from src.api.services.demos import DemoService
from src.api.services.storage import StorageService
from src.editor.lead_config import extract_lead_config
from src.models.capture import CapturedDemo
from src.models.demo import DemoStatus, LeadConfig
from src.utils.errors import ValidationFailure
from src.utils.logger import get_logger

logger = get_logger("capture_sync")

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*)(?:;[^,]*)?;base64,(?P<data>.*)$", re.DOTALL)


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """Split a base64 data URL into bytes and content type."""
    match = DATA_URL_PATTERN.match(data_url or "")
    if not match:
        raise ValidationFailure("Screenshot is not a base64 data URL")
    try:
        data = base64.b64decode(match.group("data"), validate=False)
    except (binascii.Error, ValueError) as e:
        raise ValidationFailure(f"Screenshot data is not valid base64: {e}")
    return data, match.group("mime") or "application/octet-stream"


@dataclass
class SyncResult:
    demo_id: str
    step_count: int


class CaptureSyncService:
    """Creates the demo, uploads each screenshot and records each step."""

    def __init__(self, demos: DemoService, storage: StorageService):
        self.demos = demos
        self.storage = storage

    def sync_captured_demo(self, draft: CapturedDemo, demo_id: str | None = None) -> SyncResult:
        """Persist a draft. Steps that fail are skipped; the demo is kept."""
        owner_id = self.demos.require_owner()
        if not draft.steps:
            raise ValidationFailure("No captures returned, aborting demo creation")

        demo_id = demo_id or str(uuid.uuid4())
        self.demos.create_demo_metadata(demo_id, name=draft.name, status=DemoStatus.DRAFT)

        try:
            lead_step_index, lead_config = self._lead_selection(draft)
            if lead_step_index is not None:
                self.demos.update_demo_lead_config(demo_id, lead_step_index, lead_config)
        except Exception as e:
            logger.warning("capture_lead_config_failed", demo_id=demo_id, error=str(e))

        created = 0
        for step in draft.steps:
            if not step.screenshot_data_url:
                logger.warning("capture_step_missing_screenshot", demo_id=demo_id, step_id=step.id)
                continue
            try:
                data, content_type = decode_data_url(step.screenshot_data_url)
                s3_key = self.storage.upload_step_image(
                    owner_id, demo_id, step.id, data, content_type
                )
                self.demos.create_demo_step(
                    demo_id,
                    step.id,
                    s3_key=s3_key,
                    order=step.order,
                    page_url=step.page_url,
                    hotspots=draft.hotspots_by_step.get(step.id) or [],
                    zoom=step.zoom,
                )
                created += 1
            except Exception as e:
                logger.error("capture_step_failed", demo_id=demo_id, step_id=step.id, error=str(e))

        if created == 0:
            logger.warning("capture_no_steps_created", demo_id=demo_id)
        logger.info("capture_synced", demo_id=demo_id, steps=created, total=len(draft.steps))
        return SyncResult(demo_id=demo_id, step_count=created)

    @staticmethod
    def _lead_selection(draft: CapturedDemo) -> tuple[int | None, LeadConfig | None]:
        # Explicit draft values win over per-step lead flags
        if draft.lead_step_index is not None:
            config = LeadConfig.model_validate(draft.lead_config) if draft.lead_config else None
            return draft.lead_step_index, config
        selection = extract_lead_config(draft.steps, draft.lead_config)
        return selection.lead_step_index, selection.lead_config
