"""Response schemas for the API."""

from pydantic import BaseModel, Field

from src.models.demo import DemoMetadata
from src.models.lead import LeadSubmission


class DemoListResponse(BaseModel):
    demos: list[DemoMetadata] = Field(default_factory=list)
    total: int = 0


class DeleteDemoResponse(BaseModel):
    """Result of deleting a demo. Leads are kept."""

    demo_id: str
    deleted_items: int = 0
    mirror_items_removed: int = 0


class MirrorResponse(BaseModel):
    demo_id: str
    metadata_mirrored: bool = False
    steps_mirrored: int = 0
    steps_failed: int = 0


class LeadListResponse(BaseModel):
    leads: list[LeadSubmission] = Field(default_factory=list)
    total: int = 0


class LeadCreatedResponse(BaseModel):
    demo_id: str
    item_sk: str
    created_at: str | None = None


class SyncResponse(BaseModel):
    demo_id: str
    step_count: int = 0


class HookResponse(BaseModel):
    """Webhook outcome; ``batch_item_failures`` lists records to retry."""

    processed: int = 0
    batch_item_failures: list[str] = Field(default_factory=list)


class CrmSyncResponse(BaseModel):
    synced: bool = False
