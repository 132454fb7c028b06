"""Lead data models using Pydantic."""

from typing import Any

from pydantic import BaseModel, Field

from src.models.demo import LeadConfig


class LeadSubmission(BaseModel):
    """A lead captured by a public viewer.

    ``fields`` holds the submitted form values plus the ``_demo_name`` and
    ``_demo_id`` snapshots taken at submission time. Leads outlive their demo.
    """

    demo_id: str
    item_sk: str  # LEAD#<ISO timestamp>
    owner_id: str | None = None
    email: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    page_url: str | None = None
    step_index: int | None = None
    source: str | None = None
    user_agent: str | None = None
    referrer: str | None = None
    created_at: str | None = None


class SmartLeadsResult(BaseModel):
    """Leads for a demo, whether or not the demo still exists."""

    leads: list[LeadSubmission] = Field(default_factory=list)
    is_demo_deleted: bool = False
    demo_name: str | None = None


class LeadStats(BaseModel):
    """Per-demo lead counts, including demos that were deleted."""

    demo_id: str
    demo_name: str
    lead_count: int = 0
    earliest_lead_date: str | None = None
    latest_lead_date: str | None = None


class LeadTemplate(BaseModel):
    """A named, reusable lead form saved by an owner."""

    template_id: str
    owner_id: str | None = None
    name: str
    lead_config: LeadConfig | None = None
    created_at: str | None = None


class OwnerSettings(BaseModel):
    """Per-owner settings; ``lead_config`` is the global lead template."""

    owner_id: str
    lead_config: LeadConfig | None = None
    updated_at: str | None = None
