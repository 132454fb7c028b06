"""Demo data models using Pydantic.

Hotspot, style and lead-config models are the JSON documents the editor and
player exchange, so they serialize with camelCase aliases. The item models
(DemoMetadata, DemoStep) are internal and use plain field names.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Animation = Literal["none", "pulse", "breathe", "fade"]

DEFAULT_DOT_SIZE = 12
DEFAULT_DOT_COLOR = "#2563eb"
DEFAULT_DOT_STROKE_PX = 2
DEFAULT_DOT_STROKE_COLOR = "#ffffff"
DEFAULT_TOOLTIP_BG_COLOR = "#2563eb"
DEFAULT_TOOLTIP_TEXT_COLOR = "#ffffff"
DEFAULT_TOOLTIP_TEXT_SIZE_PX = 12


class DemoStatus(str, Enum):
    """Publication state of a demo."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class CamelModel(BaseModel):
    """Base for JSON documents stored and served in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class HotspotStyle(CamelModel):
    """Demo-wide tooltip/dot style defaults."""

    dot_size: float = DEFAULT_DOT_SIZE
    dot_color: str = DEFAULT_DOT_COLOR
    dot_stroke_px: float = DEFAULT_DOT_STROKE_PX
    dot_stroke_color: str = DEFAULT_DOT_STROKE_COLOR
    animation: Animation = "none"
    tooltip_bg_color: str | None = None
    tooltip_text_color: str | None = None
    tooltip_text_size_px: float | None = None
    tooltip_offset_x_norm: float | None = None
    tooltip_offset_y_norm: float | None = None


class HotspotStylePatch(CamelModel):
    """Partial style update applied across every hotspot of a demo."""

    dot_size: float | None = None
    dot_color: str | None = None
    dot_stroke_px: float | None = None
    dot_stroke_color: str | None = None
    animation: Animation | None = None


class Hotspot(CamelModel):
    """Clickable region on a step screenshot.

    Unknown keys sent by older editor builds (``x``, ``y``, ``targetStep``...)
    are kept so a round trip never drops them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    x_norm: float | None = None
    y_norm: float | None = None
    width: float = 0
    height: float = 0
    tooltip: str | None = None
    dot_size: float | None = None
    dot_color: str | None = None
    dot_stroke_px: float | None = None
    dot_stroke_color: str | None = None
    animation: Animation | None = None
    tooltip_offset_x_norm: float | None = None
    tooltip_offset_y_norm: float | None = None
    tooltip_bg_color: str | None = None
    tooltip_text_color: str | None = None
    tooltip_text_size_px: float | None = None


# ============== Lead form configuration ==============


class _FieldSpecBase(CamelModel):
    key: str
    label: str | None = None
    required: bool = False
    placeholder: str | None = None


class TextFieldSpec(_FieldSpecBase):
    kind: Literal["text"] = "text"


class EmailFieldSpec(_FieldSpecBase):
    kind: Literal["email"] = "email"


class TelFieldSpec(_FieldSpecBase):
    kind: Literal["tel"] = "tel"


class TextareaFieldSpec(_FieldSpecBase):
    kind: Literal["textarea"] = "textarea"


class NumberFieldSpec(_FieldSpecBase):
    kind: Literal["number"] = "number"


FieldSpec = Annotated[
    Union[TextFieldSpec, EmailFieldSpec, TelFieldSpec, TextareaFieldSpec, NumberFieldSpec],
    Field(discriminator="kind"),
]


class LeadConfig(CamelModel):
    """Lead-capture form shown at the lead step of a demo."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    style: Literal["solid"] = "solid"
    bg: Literal["white", "black"] = "white"
    title: str | None = None
    subtitle: str | None = None
    cta_text: str | None = None
    fields: list[FieldSpec] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_field_type(cls, data: Any) -> Any:
        # Editor builds before FieldSpec wrote {"type": "email"} instead of {"kind": ...}
        if not isinstance(data, dict) or not isinstance(data.get("fields"), list):
            return data
        fields = []
        for spec in data["fields"]:
            if isinstance(spec, dict) and "kind" not in spec:
                spec = {**spec, "kind": spec.get("type") or "text"}
                spec.pop("type", None)
            fields.append(spec)
        return {**data, "fields": fields}

    @field_validator("bg", mode="before")
    @classmethod
    def _normalize_bg(cls, value: Any) -> str:
        return "black" if value == "black" else "white"

    @field_validator("style", mode="before")
    @classmethod
    def _normalize_style(cls, value: Any) -> str:
        return "solid"

    def required_keys(self) -> list[str]:
        return [spec.key for spec in self.fields if spec.required]


# ============== Stored items ==============


class DemoMetadata(BaseModel):
    """The METADATA item of a demo (private or mirrored)."""

    demo_id: str
    owner_id: str | None = None
    name: str | None = None
    status: DemoStatus = DemoStatus.DRAFT
    created_at: str | None = None
    updated_at: str | None = None
    status_updated_at: str | None = None
    lead_step_index: int | None = None
    lead_config: LeadConfig | None = None
    hotspot_style: HotspotStyle | None = None
    lead_use_global: bool | None = None
    current_version: int | None = None


class DemoStep(BaseModel):
    """A STEP#<stepId> item: one captured screen and its hotspots."""

    demo_id: str
    step_id: str
    s3_key: str | None = None
    order: int = 0
    page_url: str | None = None
    thumbnail_s3_key: str | None = None
    hotspots: list[Hotspot] = Field(default_factory=list)
    zoom: int | None = None
    image_url: str | None = None  # resolved for viewers, never stored


class DemoItems(BaseModel):
    """All items of one demo, METADATA first and steps in display order."""

    demo_id: str
    metadata: DemoMetadata | None = None
    steps: list[DemoStep] = Field(default_factory=list)
    source: Literal["private", "public"] = "private"


class MirrorOverrides(BaseModel):
    """Values the editor's Save action pushes over the stored metadata."""

    name: str | None = None
    lead_step_index: int | None = None
    lead_config: LeadConfig | None = None


class PublicDemoView(BaseModel):
    """Everything an anonymous viewer needs to play a published demo."""

    demo_id: str
    name: str | None = None
    lead_step_index: int | None = None
    lead_config: LeadConfig | None = None
    lead_bg: Literal["white", "black"] = "white"
    hotspot_style: HotspotStyle = Field(default_factory=HotspotStyle)
    steps: list[DemoStep] = Field(default_factory=list)
