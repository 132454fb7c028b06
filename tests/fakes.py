"""In-memory table used in place of Supabase in tests."""

import copy
from typing import Any

from src.store.base import Item, Page
from src.utils.errors import ConditionalCheckFailed, NotFoundError


class FakeTable:
    """Dict-backed table with the same contract as SupabaseTable.

    Pages are deliberately small so list calls exercise continuation tokens.
    ``fail(op, exc)`` makes every later call to ``op`` raise ``exc``.
    """

    def __init__(self, name: str, key_fields: tuple[str, str] = ("pk", "sk"), page_size: int = 2):
        self.name = name
        self.key_fields = key_fields
        self.page_size = page_size
        self.rows: dict[tuple, Item] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[str] = []

    def fail(self, op: str, exc: Exception) -> None:
        self.failures[op] = exc

    def _enter(self, op: str) -> None:
        self.calls.append(op)
        if op in self.failures:
            raise self.failures[op]

    def _key(self, key: dict[str, Any]) -> tuple:
        return tuple(key[field] for field in self.key_fields)

    def get(self, key: dict[str, Any]) -> Item | None:
        self._enter("get")
        row = self.rows.get(self._key(key))
        return copy.deepcopy(row) if row is not None else None

    def list_page(
        self,
        filters: dict[str, Any] | None = None,
        next_token: str | None = None,
        limit: int | None = None,
    ) -> Page:
        self._enter("list_page")
        limit = limit or self.page_size
        start = int(next_token) if next_token else 0
        matching = [
            row
            for key, row in sorted(self.rows.items())
            if all(row.get(field) == value for field, value in (filters or {}).items())
        ]
        page = matching[start:start + limit]
        token = str(start + limit) if len(matching) > start + limit else None
        return Page(items=copy.deepcopy(page), next_token=token)

    def create(self, item: Item) -> Item:
        self._enter("create")
        key = self._key(item)
        if key in self.rows:
            raise ConditionalCheckFailed(f"Item already exists in {self.name}")
        self.rows[key] = copy.deepcopy(item)
        return copy.deepcopy(item)

    def update(self, key: dict[str, Any], changes: dict[str, Any]) -> Item:
        self._enter("update")
        row = self.rows.get(self._key(key))
        if row is None:
            raise NotFoundError(f"Failed to update item in {self.name}: no data returned")
        row.update({k: v for k, v in changes.items() if k not in self.key_fields})
        return copy.deepcopy(row)

    def delete(self, key: dict[str, Any]) -> Item | None:
        self._enter("delete")
        return self.rows.pop(self._key(key), None)

    def all(self) -> list[Item]:
        return [copy.deepcopy(row) for _, row in sorted(self.rows.items())]
