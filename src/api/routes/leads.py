"""Owner lead endpoints, lead templates and lead settings."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.api.dependencies import get_lead_service, get_template_service
from src.api.schemas.requests import GlobalLeadConfigRequest, SaveLeadTemplateRequest
from src.api.schemas.responses import LeadListResponse
from src.api.services.leads import LeadService, leads_to_csv
from src.api.services.templates import TemplateService
from src.models.lead import LeadStats, LeadTemplate, OwnerSettings, SmartLeadsResult

router = APIRouter()


@router.get("/demos/{demo_id}/leads", response_model=SmartLeadsResult)
def get_demo_leads(
    demo_id: str,
    leads: LeadService = Depends(get_lead_service),
) -> SmartLeadsResult:
    """Leads for a demo, including demos the caller has since deleted."""
    return leads.list_lead_submissions_smartly(demo_id)


@router.get("/demos/{demo_id}/leads/export")
def export_demo_leads(
    demo_id: str,
    leads: LeadService = Depends(get_lead_service),
) -> Response:
    """Download a demo's leads as CSV."""
    result = leads.list_lead_submissions_smartly(demo_id)
    return Response(
        content=leads_to_csv(result.leads),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="leads-{demo_id}.csv"'},
    )


@router.get("/leads", response_model=LeadListResponse)
def list_all_leads(
    leads: LeadService = Depends(get_lead_service),
) -> LeadListResponse:
    items = leads.list_all_my_leads()
    return LeadListResponse(leads=items, total=len(items))


@router.get("/leads/stats", response_model=list[LeadStats])
def lead_stats(
    leads: LeadService = Depends(get_lead_service),
) -> list[LeadStats]:
    """Lead counts per demo, deleted demos included."""
    return leads.get_lead_stats_by_demo()


@router.get("/lead-templates", response_model=list[LeadTemplate])
def list_lead_templates(
    templates: TemplateService = Depends(get_template_service),
) -> list[LeadTemplate]:
    return templates.list_lead_templates()


@router.post(
    "/lead-templates",
    response_model=LeadTemplate,
    status_code=status.HTTP_201_CREATED,
)
def save_lead_template(
    request: SaveLeadTemplateRequest,
    templates: TemplateService = Depends(get_template_service),
) -> LeadTemplate:
    return templates.save_lead_template(request.name, request.lead_config)


@router.get("/settings/lead-config", response_model=OwnerSettings)
def get_lead_settings(
    templates: TemplateService = Depends(get_template_service),
) -> OwnerSettings:
    return templates.get_owner_settings()


@router.put("/settings/lead-config", response_model=OwnerSettings)
def save_lead_settings(
    request: GlobalLeadConfigRequest,
    templates: TemplateService = Depends(get_template_service),
) -> OwnerSettings:
    """Save the lead form used by demos set to the global config."""
    return templates.save_global_lead_config(request.lead_config)
