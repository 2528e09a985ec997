# src/cookbook/infra/db/base.py
"""
Abstract base class for the relational store.
This interface allows swapping the Supabase/PostgREST backend for another one
(or an in-memory one in tests).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

Row = dict[str, Any]


class RelationalStore(ABC):
    """
    Single-table operations with equality filters; no joins.

    Implementations:
    - SupabaseRelationalStore: PostgREST tables through supabase-py

    Every method raises StoreError on failure.
    """

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[Row]:
        """
        Fetch rows matching every column == value in filters.

        Args:
            table: Table name
            filters: Column equality filters (None = all rows)
            order_by: Column to sort by
            descending: Sort direction

        Returns:
            Matching rows, possibly empty
        """
        pass

    @abstractmethod
    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        """
        Insert one or more rows.

        Returns:
            The inserted rows as stored
        """
        pass

    @abstractmethod
    def update(self, table: str, filters: dict[str, Any], patch: Row) -> list[Row]:
        """
        Apply patch to rows matching filters.

        Returns:
            The updated rows (empty when nothing matched)
        """
        pass

    @abstractmethod
    def delete(self, table: str, filters: dict[str, Any]) -> list[Row]:
        """
        Delete rows matching filters.

        Returns:
            The deleted rows (empty when nothing matched)
        """
        pass
