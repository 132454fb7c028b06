"""FastAPI dependencies that build per-request services."""

from fastapi import Depends

from src.api.middleware.supabase_auth import AuthUser, verify_supabase_token
from src.api.services.capture_sync import CaptureSyncService
from src.api.services.crm_sync import CrmSyncService
from src.api.services.demos import DemoService
from src.api.services.leads import LeadService
from src.api.services.mirror import MirrorService
from src.api.services.notifications import LeadNotifier
from src.api.services.public_demos import PublicDemoService
from src.api.services.storage import StorageService
from src.api.services.templates import TemplateService
from src.api.services.users import UserDirectory
from src.crm.brevo import BrevoClient
from src.store.base import DataClient
from src.store.client import data_clients


def get_data_client() -> DataClient:
    return data_clients.for_user()


def get_public_client() -> DataClient:
    return data_clients.public()


def get_storage_service() -> StorageService:
    return StorageService(data_clients.service_client)


def get_brevo_client() -> BrevoClient:
    return BrevoClient()


def get_user_directory() -> UserDirectory:
    return UserDirectory(data_clients.service_client)


# ============== Owner services ==============


def get_demo_service(
    auth_user: AuthUser = Depends(verify_supabase_token),
    client: DataClient = Depends(get_data_client),
) -> DemoService:
    return DemoService(client, auth_user.user_id)


def get_template_service(
    auth_user: AuthUser = Depends(verify_supabase_token),
    client: DataClient = Depends(get_data_client),
) -> TemplateService:
    return TemplateService(client, auth_user.user_id)


def get_mirror_service(
    auth_user: AuthUser = Depends(verify_supabase_token),
    client: DataClient = Depends(get_data_client),
    templates: TemplateService = Depends(get_template_service),
) -> MirrorService:
    return MirrorService(client, auth_user.user_id, templates)


def get_lead_service(
    auth_user: AuthUser = Depends(verify_supabase_token),
    client: DataClient = Depends(get_data_client),
) -> LeadService:
    return LeadService(client, auth_user.user_id)


def get_capture_sync_service(
    demos: DemoService = Depends(get_demo_service),
    storage: StorageService = Depends(get_storage_service),
) -> CaptureSyncService:
    return CaptureSyncService(demos, storage)


# ============== Public services ==============


def get_public_demo_service(
    client: DataClient = Depends(get_public_client),
    storage: StorageService | None = Depends(get_storage_service),
) -> PublicDemoService:
    return PublicDemoService(client, storage)


def get_public_lead_service(
    client: DataClient = Depends(get_public_client),
) -> LeadService:
    return LeadService(client)


# ============== Webhook services ==============


def get_crm_sync_service(
    brevo: BrevoClient = Depends(get_brevo_client),
    users: UserDirectory = Depends(get_user_directory),
) -> CrmSyncService:
    return CrmSyncService(brevo, users)


def get_lead_notifier(
    brevo: BrevoClient = Depends(get_brevo_client),
    users: UserDirectory = Depends(get_user_directory),
) -> LeadNotifier:
    return LeadNotifier(brevo, users)
