"""Request schemas for the API."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from src.models.demo import DemoStatus, Hotspot, LeadConfig


class CreateDemoRequest(BaseModel):
    """Request body for creating an empty demo."""

    demo_id: str | None = Field(default=None, description="Client-chosen id; generated when omitted")
    name: str | None = None


class CreateStepRequest(BaseModel):
    """Request body for adding a step to a demo."""

    step_id: str
    s3_key: str = Field(..., description="Storage key of the step screenshot")
    order: int = Field(default=0, ge=0)
    page_url: str | None = None
    thumbnail_s3_key: str | None = None
    hotspots: list[Hotspot] = Field(default_factory=list)
    zoom: int | None = Field(default=None, ge=10, le=400)


class RenameDemoRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class SetStatusRequest(BaseModel):
    status: DemoStatus


class UpdateHotspotsRequest(BaseModel):
    hotspots: list[Hotspot] = Field(default_factory=list)


class UpdateZoomRequest(BaseModel):
    zoom: int | None = Field(default=None, ge=10, le=400)


class UpdateLeadConfigRequest(BaseModel):
    """Lead step selection; a null index removes the lead step."""

    lead_step_index: int | None = Field(default=None, ge=0)
    lead_config: LeadConfig | None = None
    lead_use_global: bool | None = None


class SaveLeadTemplateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    lead_config: LeadConfig


class GlobalLeadConfigRequest(BaseModel):
    lead_config: LeadConfig | None = None


class PublicLeadRequest(BaseModel):
    """Lead form submission from an anonymous viewer."""

    email: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    page_url: str | None = None
    step_index: int | None = Field(default=None, ge=0)
    source: str | None = Field(default=None, max_length=100)
    referrer: str | None = None


class CrmUserHook(BaseModel):
    """Auth webhook payload describing the user who signed up or signed in."""

    user_id: str
    email: str | None = None
    name: str | None = None
    brevo_synced: bool = False


class LeadInsertHook(BaseModel):
    """Database webhook payload for lead-intake inserts.

    Accepts a batch (``{"records": [...]}``) or a single change event
    (``{"type": "INSERT", "record": {...}}``).
    """

    records: list[dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _wrap_single_event(cls, data: Any) -> Any:
        if isinstance(data, dict) and "records" not in data and "record" in data:
            return {"records": [data]}
        return data
