"""Persistence edge: keys, codecs, tables and data clients."""

from src.store.base import AuthMode, DataClient, Page, Table
from src.store.client import ApiKeyTable, data_clients, restrict_to_api_key
from src.store.pagination import collect_all
from src.store.supabase_table import SupabaseTable

__all__ = [
    "AuthMode",
    "DataClient",
    "Page",
    "Table",
    "ApiKeyTable",
    "SupabaseTable",
    "collect_all",
    "data_clients",
    "restrict_to_api_key",
]
