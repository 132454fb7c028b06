"""Continuation-token pagination helper."""

from typing import Any

from src.store.base import Item, Table


def collect_all(
    table: Table,
    filters: dict[str, Any] | None = None,
    page_size: int | None = None,
) -> list[Item]:
    """Follow next tokens until exhausted, concatenating every page.

    Pages may be empty while a token is still returned, so only the token
    decides when to stop. No ordering is implied; callers sort afterwards.
    """
    items: list[Item] = []
    next_token: str | None = None
    while True:
        page = table.list_page(filters, next_token=next_token, limit=page_size)
        items.extend(page.items)
        next_token = page.next_token
        if not next_token:
            return items
