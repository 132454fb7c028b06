"""Public endpoints for anonymous demo viewers."""

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import settings
from src.api.dependencies import get_public_demo_service, get_public_lead_service
from src.api.schemas.requests import PublicLeadRequest
from src.api.schemas.responses import LeadCreatedResponse
from src.api.services.leads import LeadService
from src.api.services.public_demos import PublicDemoService
from src.models.demo import PublicDemoView

router = APIRouter()

limiter = Limiter(key_func=get_remote_address)


@router.get("/public/demos/{demo_id}", response_model=PublicDemoView)
def get_public_demo(
    demo_id: str,
    public_demos: PublicDemoService = Depends(get_public_demo_service),
) -> PublicDemoView:
    """Get a published demo for the player (no auth required)."""
    return public_demos.get_public_demo(demo_id)


@router.post(
    "/public/demos/{demo_id}/leads",
    response_model=LeadCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.public_lead_rate_limit)
def submit_lead(
    request: Request,
    demo_id: str,
    payload: PublicLeadRequest,
    leads: LeadService = Depends(get_public_lead_service),
) -> LeadCreatedResponse:
    """Submit the lead form of a published demo (no auth required)."""
    lead = leads.create_lead_submission_public(
        demo_id,
        fields=payload.fields,
        email=payload.email,
        page_url=payload.page_url,
        step_index=payload.step_index,
        source=payload.source,
        user_agent=request.headers.get("user-agent"),
        referrer=payload.referrer or request.headers.get("referer"),
    )
    return LeadCreatedResponse(demo_id=lead.demo_id, item_sk=lead.item_sk, created_at=lead.created_at)
