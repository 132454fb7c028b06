"""Owner demo endpoints: CRUD, status, mirror and editor saves."""

import uuid

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_capture_sync_service,
    get_demo_service,
    get_mirror_service,
)
from src.api.schemas.requests import (
    CreateDemoRequest,
    CreateStepRequest,
    RenameDemoRequest,
    SetStatusRequest,
    UpdateHotspotsRequest,
    UpdateLeadConfigRequest,
    UpdateZoomRequest,
)
from src.api.schemas.responses import (
    DeleteDemoResponse,
    DemoListResponse,
    MirrorResponse,
    SyncResponse,
)
from src.api.services.capture_sync import CaptureSyncService
from src.api.services.demos import DemoService
from src.api.services.mirror import MirrorService
from src.models.capture import CapturedDemo
from src.models.demo import (
    DemoItems,
    DemoMetadata,
    DemoStatus,
    DemoStep,
    HotspotStyle,
    HotspotStylePatch,
    MirrorOverrides,
)
from src.utils.errors import NotFoundError
from src.utils.logger import get_logger

router = APIRouter()
logger = get_logger("demos_route")


@router.get("/demos", response_model=DemoListResponse)
def list_demos(
    status_filter: DemoStatus | None = Query(default=None, alias="status"),
    demos: DemoService = Depends(get_demo_service),
) -> DemoListResponse:
    """List the caller's demos, most recently updated first."""
    items = demos.list_my_demos(status_filter)
    return DemoListResponse(demos=items, total=len(items))


@router.post("/demos", response_model=DemoMetadata, status_code=status.HTTP_201_CREATED)
def create_demo(
    request: CreateDemoRequest,
    demos: DemoService = Depends(get_demo_service),
) -> DemoMetadata:
    demo_id = request.demo_id or str(uuid.uuid4())
    return demos.create_demo_metadata(demo_id, name=request.name)


@router.post("/demos/sync", response_model=SyncResponse, status_code=status.HTTP_201_CREATED)
def sync_captured_demo(
    draft: CapturedDemo,
    capture_sync: CaptureSyncService = Depends(get_capture_sync_service),
) -> SyncResponse:
    """Create a demo from a captured draft, uploading each screenshot."""
    result = capture_sync.sync_captured_demo(draft)
    return SyncResponse(demo_id=result.demo_id, step_count=result.step_count)


@router.get("/demos/{demo_id}", response_model=DemoItems)
def get_demo(
    demo_id: str,
    demos: DemoService = Depends(get_demo_service),
) -> DemoItems:
    """Get a demo's metadata and steps (public mirror when no private copy)."""
    items = demos.list_demo_items(demo_id)
    if items.metadata is None and not items.steps:
        raise NotFoundError(f"Demo {demo_id} not found")
    return items


@router.patch("/demos/{demo_id}", response_model=DemoMetadata)
def rename_demo(
    demo_id: str,
    request: RenameDemoRequest,
    demos: DemoService = Depends(get_demo_service),
) -> DemoMetadata:
    return demos.rename_demo(demo_id, request.name)


@router.delete("/demos/{demo_id}", response_model=DeleteDemoResponse)
def delete_demo(
    demo_id: str,
    demos: DemoService = Depends(get_demo_service),
    mirror: MirrorService = Depends(get_mirror_service),
) -> DeleteDemoResponse:
    """Delete a demo and take down its public copy. Its leads are kept."""
    removed = 0
    try:
        removed = mirror.delete_public_demo_items(demo_id)
    except Exception as e:
        logger.error("mirror_inconsistency", demo_id=demo_id, error=str(e))
    deleted = demos.delete_demo(demo_id)
    return DeleteDemoResponse(demo_id=demo_id, deleted_items=deleted, mirror_items_removed=removed)


@router.put("/demos/{demo_id}/status", response_model=DemoMetadata)
def set_demo_status(
    demo_id: str,
    request: SetStatusRequest,
    mirror: MirrorService = Depends(get_mirror_service),
) -> DemoMetadata:
    """Publish (mirror) or unpublish (tear down the mirror) a demo."""
    return mirror.set_demo_status(demo_id, request.status)


@router.post("/demos/{demo_id}/mirror", response_model=MirrorResponse)
def mirror_demo(
    demo_id: str,
    overrides: MirrorOverrides | None = None,
    mirror: MirrorService = Depends(get_mirror_service),
) -> MirrorResponse:
    """Re-sync the public copy of a published demo."""
    result = mirror.mirror_demo_to_public(demo_id, overrides)
    return MirrorResponse(
        demo_id=result.demo_id,
        metadata_mirrored=result.metadata_mirrored,
        steps_mirrored=result.steps_mirrored,
        steps_failed=result.steps_failed,
    )


@router.post(
    "/demos/{demo_id}/steps",
    response_model=DemoStep,
    status_code=status.HTTP_201_CREATED,
)
def create_step(
    demo_id: str,
    request: CreateStepRequest,
    demos: DemoService = Depends(get_demo_service),
) -> DemoStep:
    return demos.create_demo_step(
        demo_id,
        request.step_id,
        s3_key=request.s3_key,
        order=request.order,
        page_url=request.page_url,
        hotspots=request.hotspots,
        thumbnail_s3_key=request.thumbnail_s3_key,
        zoom=request.zoom,
    )


@router.put("/demos/{demo_id}/steps/{step_id}/hotspots", response_model=DemoStep)
def update_step_hotspots(
    demo_id: str,
    step_id: str,
    request: UpdateHotspotsRequest,
    demos: DemoService = Depends(get_demo_service),
) -> DemoStep:
    return demos.update_demo_step_hotspots(demo_id, step_id, request.hotspots)


@router.put("/demos/{demo_id}/steps/{step_id}/zoom", response_model=DemoStep)
def update_step_zoom(
    demo_id: str,
    step_id: str,
    request: UpdateZoomRequest,
    demos: DemoService = Depends(get_demo_service),
) -> DemoStep:
    return demos.update_demo_step_zoom(demo_id, step_id, request.zoom)


@router.put("/demos/{demo_id}/lead-config", response_model=DemoMetadata)
def update_lead_config(
    demo_id: str,
    request: UpdateLeadConfigRequest,
    demos: DemoService = Depends(get_demo_service),
) -> DemoMetadata:
    return demos.update_demo_lead_config(
        demo_id,
        request.lead_step_index,
        request.lead_config,
        request.lead_use_global,
    )


@router.put("/demos/{demo_id}/style", response_model=HotspotStyle)
def apply_style(
    demo_id: str,
    patch: HotspotStylePatch,
    demos: DemoService = Depends(get_demo_service),
) -> HotspotStyle:
    """Apply a style change to every hotspot of the demo."""
    return demos.apply_global_style(demo_id, patch)
