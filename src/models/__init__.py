"""Data models package."""

from src.models.demo import (
    DemoItems,
    DemoMetadata,
    DemoStatus,
    DemoStep,
    FieldSpec,
    Hotspot,
    HotspotStyle,
    HotspotStylePatch,
    LeadConfig,
    MirrorOverrides,
    PublicDemoView,
)
from src.models.capture import CapturedDemo, CapturedStep
from src.models.lead import (
    LeadStats,
    LeadSubmission,
    LeadTemplate,
    OwnerSettings,
    SmartLeadsResult,
)

__all__ = [
    "DemoStatus",
    "DemoMetadata",
    "DemoStep",
    "DemoItems",
    "Hotspot",
    "HotspotStyle",
    "HotspotStylePatch",
    "FieldSpec",
    "LeadConfig",
    "MirrorOverrides",
    "PublicDemoView",
    "LeadSubmission",
    "SmartLeadsResult",
    "LeadStats",
    "LeadTemplate",
    "OwnerSettings",
    "CapturedDemo",
    "CapturedStep",
]
