"""Captured-demo draft models sent by the capture client on first save."""

from typing import Any, Literal

from pydantic import Field

from src.models.demo import CamelModel, Hotspot


class CapturedStep(CamelModel):
    """One captured screen with its screenshot as a data URL."""

    id: str
    page_url: str | None = None
    order: int = 0
    zoom: int | None = None
    screenshot_data_url: str | None = None
    is_lead_capture: bool = False
    lead_bg: Literal["white", "black"] | None = None


class CapturedDemo(CamelModel):
    """A locally edited draft to be turned into a stored demo."""

    draft_id: str | None = None
    name: str | None = None
    steps: list[CapturedStep] = Field(default_factory=list)
    hotspots_by_step: dict[str, list[Hotspot]] = Field(default_factory=dict)
    lead_step_index: int | None = None
    lead_config: dict[str, Any] | None = None
