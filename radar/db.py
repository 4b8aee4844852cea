"""Supabase storage adapter.

Thin wrapper over the supabase client exposing the four operations the
pipelines need: insert / select / count / update. Every client failure is
re-raised as StoreError so callers handle one exception type.
"""
import logging
from typing import Any, Iterable, Optional

from supabase import Client, create_client

from radar.errors import StoreError

logger = logging.getLogger(__name__)

# (column, op, value); op is one of _FILTER_OPS
Filter = tuple[str, str, Any]

_FILTER_OPS = ("eq", "neq", "gt", "gte", "lt", "lte", "is", "in")


def _apply_filters(query, filters: Optional[Iterable[Filter]]):
    for column, op, value in filters or ():
        if op not in _FILTER_OPS:
            raise ValueError(f"Unsupported filter op '{op}'")
        if op == "is":
            # PostgREST expects the literal string "null" for IS NULL
            query = query.is_(column, "null" if value is None else value)
        elif op == "in":
            query = query.in_(column, list(value))
        else:
            query = getattr(query, op)(column, value)
    return query


class SupabaseStore:
    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_config(cls, config) -> "SupabaseStore":
        return cls(create_client(config.supabase_url, config.supabase_key))

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        """Bulk insert. Returns the inserted rows as echoed by the store."""
        try:
            res = self.client.table(table).insert(rows).execute()
        except Exception as e:
            raise StoreError(table, "insert", e) from e
        return list(res.data or [])

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Iterable[Filter]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order: Optional[str] = None,
        desc: bool = False,
    ) -> list[dict]:
        try:
            query = _apply_filters(self.client.table(table).select(columns), filters)
            if order:
                query = query.order(order, desc=desc)
            if offset is not None:
                end = offset + (limit or 1000) - 1
                query = query.range(offset, end)
            elif limit is not None:
                query = query.limit(limit)
            res = query.execute()
        except ValueError:
            raise
        except Exception as e:
            raise StoreError(table, "select", e) from e
        return list(res.data or [])

    def count(self, table: str, filters: Optional[Iterable[Filter]] = None) -> int:
        try:
            query = _apply_filters(self.client.table(table).select("*", count="exact", head=True), filters)
            res = query.execute()
        except ValueError:
            raise
        except Exception as e:
            raise StoreError(table, "count", e) from e
        return int(res.count or 0)

    def update(self, table: str, values: dict, filters: Iterable[Filter]) -> list[dict]:
        filters = list(filters)
        if not filters:
            # PostgREST refuses unfiltered updates anyway
            raise ValueError("update() requires at least one filter")
        try:
            res = _apply_filters(self.client.table(table).update(values), filters).execute()
        except ValueError:
            raise
        except Exception as e:
            raise StoreError(table, "update", e) from e
        return list(res.data or [])
