"""Table protocol and the data client handed to services."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

Item = dict[str, Any]


@dataclass
class Page:
    """One page of a list call plus the token for the next one."""

    items: list[Item] = field(default_factory=list)
    next_token: str | None = None


class Table(Protocol):
    """Keyed item table with equality-filtered, token-paginated listing.

    ``create`` raises ConditionalCheckFailed when the key exists.
    ``update`` writes only the given fields and raises NotFoundError when the
    item is missing. ``delete`` returns the removed item or None.
    """

    name: str
    key_fields: tuple[str, str]

    def get(self, key: dict[str, Any]) -> Item | None: ...

    def list_page(
        self,
        filters: dict[str, Any] | None = None,
        next_token: str | None = None,
        limit: int | None = None,
    ) -> Page: ...

    def create(self, item: Item) -> Item: ...

    def update(self, key: dict[str, Any], changes: dict[str, Any]) -> Item: ...

    def delete(self, key: dict[str, Any]) -> Item | None: ...


class AuthMode(str, Enum):
    """Authorization mode a data client operates under."""

    USER = "user"  # authenticated owner
    API_KEY = "api_key"  # anonymous public viewer


@dataclass
class DataClient:
    """The three stores under one authorization mode.

    A user-mode client carries its API-key sibling so services can switch
    modes per operation (e.g. the public-mirror fallback reads).
    """

    app_data: Table
    public_mirror: Table
    lead_intake: Table
    mode: AuthMode = AuthMode.USER
    public_client: "DataClient | None" = None

    def public(self) -> "DataClient":
        if self.mode is AuthMode.API_KEY:
            return self
        if self.public_client is None:
            raise RuntimeError("No API-key client configured for public reads")
        return self.public_client
