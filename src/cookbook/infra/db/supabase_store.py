from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from src.cookbook.domain.errors import StoreError
from src.cookbook.infra.db.base import RelationalStore, Row

logger = logging.getLogger(__name__)

_STORE_ERRORS = (APIError, httpx.HTTPError, ConnectionError, TimeoutError)


def _describe(error: Exception) -> str:
    message = getattr(error, "message", None)
    code = getattr(error, "code", None)
    if message and code:
        return f"{code}: {message}"
    return str(message or error)


class SupabaseRelationalStore(RelationalStore):
    def __init__(self, client: Client):
        self._client = client
        logger.info("SupabaseRelationalStore initialized")

    def _filtered(self, query: Any, filters: Optional[dict[str, Any]]) -> Any:
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return query

    def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[Row]:
        try:
            query = self._filtered(self._client.table(table).select("*"), filters)
            if order_by:
                query = query.order(order_by, desc=descending)
            result = query.execute()
            return list(result.data or [])
        except _STORE_ERRORS as error:
            logger.error("Error selecting from %s: %s", table, error)
            raise StoreError(f"select {table}", _describe(error)) from error

    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        try:
            result = self._client.table(table).insert(list(rows)).execute()
            return list(result.data or [])
        except _STORE_ERRORS as error:
            logger.error("Error inserting into %s: %s", table, error)
            raise StoreError(f"insert {table}", _describe(error)) from error

    def update(self, table: str, filters: dict[str, Any], patch: Row) -> list[Row]:
        try:
            query = self._filtered(self._client.table(table).update(patch), filters)
            result = query.execute()
            return list(result.data or [])
        except _STORE_ERRORS as error:
            logger.error("Error updating %s: %s", table, error)
            raise StoreError(f"update {table}", _describe(error)) from error

    def delete(self, table: str, filters: dict[str, Any]) -> list[Row]:
        try:
            query = self._filtered(self._client.table(table).delete(), filters)
            result = query.execute()
            return list(result.data or [])
        except _STORE_ERRORS as error:
            logger.error("Error deleting from %s: %s", table, error)
            raise StoreError(f"delete {table}", _describe(error)) from error
