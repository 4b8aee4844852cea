"""
Pytest fixtures: injected config, an in-memory store and a scripted provider.
No test touches the network.
"""
from datetime import datetime, timezone

import pytest

from radar.config import RadarConfig
from radar.errors import StoreError
from radar.models import RawItem, SignalItem


class FakeStore:
    """In-memory stand-in for SupabaseStore."""

    def __init__(self, tables=None, fail_on=()):
        self.tables = {k: list(v) for k, v in (tables or {}).items()}
        self.fail_on = set(fail_on)       # {(table, operation)}
        self.inserts: list[tuple[str, list[dict]]] = []
        self.selects: list[tuple[str, dict]] = []
        self.updates: list[tuple[str, dict, list]] = []

    def _check(self, table, op):
        if (table, op) in self.fail_on:
            raise StoreError(table, op, "boom")

    def insert(self, table, rows):
        self._check(table, "insert")
        self.inserts.append((table, rows))
        saved = [dict(r, id=i) for i, r in enumerate(rows, start=1)]
        self.tables.setdefault(table, []).extend(saved)
        return saved

    def select(self, table, columns="*", filters=None, limit=None, offset=None, order=None, desc=False):
        self._check(table, "select")
        self.selects.append((table, {"columns": columns, "filters": filters, "limit": limit}))
        rows = list(self.tables.get(table, []))
        return rows[:limit] if limit is not None else rows

    def count(self, table, filters=None):
        self._check(table, "count")
        return len(self.tables.get(table, []))

    def update(self, table, values, filters):
        self._check(table, "update")
        self.updates.append((table, values, list(filters)))
        return []


class FakeProvider:
    """Returns a canned reply (or raises) and records every call."""

    model_name = "fake-model"

    def __init__(self, reply="[]", error=None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def config(tmp_path):
    return RadarConfig(
        supabase_url="https://example.supabase.co",
        supabase_key="anon-key",
        llm_api_key="test-key",
        outbox_dir=str(tmp_path / "outbox"),
    )


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def now():
    return datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_item(title, label="Kemenkes Rilis", link="", published_at=None) -> RawItem:
    return RawItem(title=title, link=link or f"https://news.example/{abs(hash(title))}",
                   source_label=label, publisher=label, published_at=published_at)


def make_signal(title, priority=False, label="Kemenkes Rilis", link="") -> SignalItem:
    return SignalItem(**make_item(title, label, link).model_dump(), is_priority_signal=priority)
