"""Data client factory for the Supabase-backed stores."""

from typing import Any

from postgrest.types import ReturnMethod
from supabase import Client, create_client

from config.settings import settings
from src.store.base import AuthMode, DataClient, Item, Page, Table
from src.store.keys import ITEM_KEY_FIELDS, LEAD_KEY_FIELDS
from src.store.supabase_table import SupabaseTable
from src.utils.errors import ForbiddenError
from src.utils.logger import get_logger

logger = get_logger("store.client")

# Operations an anonymous viewer may perform, per table
PUBLIC_MIRROR_OPS = frozenset({"get", "list_page"})
LEAD_INTAKE_OPS = frozenset({"create"})


class ApiKeyTable:
    """Wraps a table, allowing only the operations granted to API-key callers."""

    def __init__(self, table: Table, allowed: frozenset[str]):
        self._table = table
        self._allowed = allowed
        self.name = table.name
        self.key_fields = table.key_fields

    def _check(self, op: str) -> None:
        if op not in self._allowed:
            raise ForbiddenError(
                f"Not authorized to {op} on {self.name} with API key",
                status=401,
            )

    def get(self, key: dict[str, Any]) -> Item | None:
        self._check("get")
        return self._table.get(key)

    def list_page(
        self,
        filters: dict[str, Any] | None = None,
        next_token: str | None = None,
        limit: int | None = None,
    ) -> Page:
        self._check("list_page")
        return self._table.list_page(filters, next_token=next_token, limit=limit)

    def create(self, item: Item) -> Item:
        self._check("create")
        return self._table.create(item)

    def update(self, key: dict[str, Any], changes: dict[str, Any]) -> Item:
        self._check("update")
        return self._table.update(key, changes)

    def delete(self, key: dict[str, Any]) -> Item | None:
        self._check("delete")
        return self._table.delete(key)


def restrict_to_api_key(client: DataClient) -> DataClient:
    """Build the API-key view of a set of tables."""
    return DataClient(
        app_data=ApiKeyTable(client.app_data, frozenset()),
        public_mirror=ApiKeyTable(client.public_mirror, PUBLIC_MIRROR_OPS),
        lead_intake=ApiKeyTable(client.lead_intake, LEAD_INTAKE_OPS),
        mode=AuthMode.API_KEY,
    )


class DataClientFactory:
    """Builds data clients over lazily created Supabase clients.

    USER mode uses the service-role key; owner checks happen in the services.
    API_KEY mode uses the anon key when configured and is additionally
    restricted to public-mirror reads and lead creation.
    """

    def __init__(self):
        self._service: Client | None = None
        self._anon: Client | None = None

    def is_configured(self) -> bool:
        return bool(settings.supabase_url and settings.supabase_service_role_key)

    @property
    def service_client(self) -> Client:
        """Get or create the service-role Supabase client."""
        if self._service is None:
            if not self.is_configured():
                raise ValueError(
                    "Supabase URL and service role key are required for database operations"
                )
            self._service = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key.get_secret_value(),
            )
        return self._service

    @property
    def anon_client(self) -> Client:
        """Get or create the anon-key Supabase client."""
        if self._anon is None:
            if not settings.supabase_anon_key:
                logger.warning("anon_key_missing_using_service_role")
                return self.service_client
            self._anon = create_client(settings.supabase_url, settings.supabase_anon_key)
        return self._anon

    def _tables(self, client: Client) -> DataClient:
        page_size = settings.list_page_size
        return DataClient(
            app_data=SupabaseTable(client, settings.app_data_table, ITEM_KEY_FIELDS, page_size),
            public_mirror=SupabaseTable(
                client, settings.public_mirror_table, ITEM_KEY_FIELDS, page_size
            ),
            # Anon may insert leads but never read them back
            lead_intake=SupabaseTable(
                client,
                settings.lead_intake_table,
                LEAD_KEY_FIELDS,
                page_size,
                returning=ReturnMethod.minimal,
            ),
        )

    def public(self) -> DataClient:
        return restrict_to_api_key(self._tables(self.anon_client))

    def for_user(self) -> DataClient:
        client = self._tables(self.service_client)
        client.public_client = self.public()
        return client


# Global factory instance
data_clients = DataClientFactory()
