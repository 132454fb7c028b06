"""Webhooks called by the database (lead inserts) and by auth (sign-up, sign-in)."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_crm_sync_service, get_lead_notifier
from src.api.middleware.supabase_auth import verify_webhook_secret
from src.api.schemas.requests import CrmUserHook, LeadInsertHook
from src.api.schemas.responses import CrmSyncResponse, HookResponse
from src.api.services.crm_sync import CrmSyncService, CrmUser
from src.api.services.notifications import LeadNotifier

router = APIRouter(dependencies=[Depends(verify_webhook_secret)])


def _crm_user(payload: CrmUserHook) -> CrmUser:
    return CrmUser(
        user_id=payload.user_id,
        email=payload.email,
        name=payload.name,
        crm_synced=payload.brevo_synced,
    )


@router.post("/hooks/lead-inserted", response_model=HookResponse)
async def lead_inserted(
    payload: LeadInsertHook,
    notifier: LeadNotifier = Depends(get_lead_notifier),
) -> HookResponse:
    """Email owners about new leads; failed records are returned for retry."""
    failed = await notifier.process_insert_events(payload.records)
    return HookResponse(processed=len(payload.records), batch_item_failures=failed)


@router.post("/hooks/signup-confirmed", response_model=CrmSyncResponse)
async def signup_confirmed(
    payload: CrmUserHook,
    crm: CrmSyncService = Depends(get_crm_sync_service),
) -> CrmSyncResponse:
    return CrmSyncResponse(synced=await crm.on_signup_confirmed(_crm_user(payload)))


@router.post("/hooks/authenticated", response_model=CrmSyncResponse)
async def authenticated(
    payload: CrmUserHook,
    crm: CrmSyncService = Depends(get_crm_sync_service),
) -> CrmSyncResponse:
    return CrmSyncResponse(synced=await crm.on_authenticated(_crm_user(payload)))
