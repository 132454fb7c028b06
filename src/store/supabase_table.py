"""Supabase (PostgREST) implementation of the table protocol."""

from typing import Any

from postgrest.exceptions import APIError
from postgrest.types import ReturnMethod
from supabase import Client

from src.store.base import Item, Page
from src.utils.errors import ConditionalCheckFailed, NotFoundError, ValidationFailure
from src.utils.logger import get_logger

logger = get_logger("store.supabase")

UNIQUE_VIOLATION = "23505"


class SupabaseTable:
    """One Postgres table addressed by a two-column key.

    Continuation tokens are row offsets. Rows are ordered by the key columns
    so offsets stay stable between pages. With ``ReturnMethod.minimal``
    inserts do not read the row back, which insert-only RLS policies require.
    """

    def __init__(
        self,
        client: Client,
        name: str,
        key_fields: tuple[str, str] = ("pk", "sk"),
        page_size: int = 100,
        returning: ReturnMethod = ReturnMethod.representation,
    ):
        self.client = client
        self.name = name
        self.key_fields = key_fields
        self.page_size = page_size
        self.returning = returning

    def _keyed(self, query, key: dict[str, Any]):
        for field in self.key_fields:
            if field not in key:
                raise ValidationFailure(f"Missing key field '{field}' for {self.name}")
            query = query.eq(field, key[field])
        return query

    def get(self, key: dict[str, Any]) -> Item | None:
        query = self._keyed(self.client.table(self.name).select("*"), key)
        result = query.limit(1).execute()
        return result.data[0] if result.data else None

    def list_page(
        self,
        filters: dict[str, Any] | None = None,
        next_token: str | None = None,
        limit: int | None = None,
    ) -> Page:
        limit = limit or self.page_size
        try:
            start = int(next_token) if next_token else 0
        except ValueError:
            raise ValidationFailure(f"Invalid next token: {next_token}")

        query = self.client.table(self.name).select("*")
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        for field in self.key_fields:
            query = query.order(field)

        # One extra row tells us whether another page exists
        result = query.range(start, start + limit).execute()
        rows = result.data or []
        if len(rows) > limit:
            return Page(items=rows[:limit], next_token=str(start + limit))
        return Page(items=rows, next_token=None)

    def create(self, item: Item) -> Item:
        try:
            result = self.client.table(self.name).insert(item, returning=self.returning).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConditionalCheckFailed(
                    f"Item already exists in {self.name}",
                    details={k: item.get(k) for k in self.key_fields},
                )
            raise
        if self.returning is ReturnMethod.minimal:
            return dict(item)
        if not result.data:
            raise ValidationFailure(f"Failed to create item in {self.name}: no data returned")
        return result.data[0]

    def update(self, key: dict[str, Any], changes: dict[str, Any]) -> Item:
        changes = {k: v for k, v in changes.items() if k not in self.key_fields}
        query = self._keyed(self.client.table(self.name).update(changes), key)
        result = query.execute()
        if not result.data:
            raise NotFoundError(
                f"Failed to update item in {self.name}: no data returned",
                details=dict(key),
            )
        return result.data[0]

    def delete(self, key: dict[str, Any]) -> Item | None:
        query = self._keyed(self.client.table(self.name).delete(), key)
        result = query.execute()
        if result.data:
            logger.debug("item_deleted", table=self.name, **{k: key[k] for k in self.key_fields})
            return result.data[0]
        return None
