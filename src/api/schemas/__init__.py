"""API schemas."""

from src.api.schemas.requests import (
    CreateDemoRequest,
    CreateStepRequest,
    CrmUserHook,
    GlobalLeadConfigRequest,
    LeadInsertHook,
    PublicLeadRequest,
    RenameDemoRequest,
    SaveLeadTemplateRequest,
    SetStatusRequest,
    UpdateHotspotsRequest,
    UpdateLeadConfigRequest,
    UpdateZoomRequest,
)
from src.api.schemas.responses import (
    CrmSyncResponse,
    DeleteDemoResponse,
    DemoListResponse,
    HookResponse,
    LeadCreatedResponse,
    LeadListResponse,
    MirrorResponse,
    SyncResponse,
)

__all__ = [
    "CreateDemoRequest",
    "CreateStepRequest",
    "CrmUserHook",
    "GlobalLeadConfigRequest",
    "LeadInsertHook",
    "PublicLeadRequest",
    "RenameDemoRequest",
    "SaveLeadTemplateRequest",
    "SetStatusRequest",
    "UpdateHotspotsRequest",
    "UpdateLeadConfigRequest",
    "UpdateZoomRequest",
    "CrmSyncResponse",
    "DeleteDemoResponse",
    "DemoListResponse",
    "HookResponse",
    "LeadCreatedResponse",
    "LeadListResponse",
    "MirrorResponse",
    "SyncResponse",
]
