"""Feed text -> RawItem list.

Isolated behind parse(raw, label) so the fetcher never sees parsing
details. feedparser is lenient with malformed XML (bozo feeds still yield
entries), which is all the pipeline needs: title, link, source, date.
"""
import calendar
import re
from datetime import datetime, timezone

import feedparser

from radar.models import RawItem

_CDATA_RE = re.compile(r"<!\[CDATA\[|\]\]>")


def _clean(value) -> str:
    if not value:
        return ""
    return _CDATA_RE.sub("", str(value)).strip()


def _published_at(entry) -> datetime | None:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
    except (OverflowError, ValueError, TypeError):
        return None


def parse(raw: bytes | str, label: str) -> list[RawItem]:
    """Extract items from RSS/Atom text. Entries without a title are skipped.

    Args:
        raw: feed body as returned by the HTTP GET. Bytes let feedparser honour
            the encoding the XML declares; str is encoded as UTF-8 first so it
            is never mistaken for a URL or file path.
        label: configured feed label, stamped on every item
    """
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    feed = feedparser.parse(raw)
    items: list[RawItem] = []
    for entry in feed.entries:
        title = _clean(entry.get("title"))
        if not title:
            continue

        source = entry.get("source")
        publisher = _clean(source.get("title")) if isinstance(source, dict) else ""

        items.append(RawItem(
            title=title,
            link=_clean(entry.get("link")),
            source_label=label,
            publisher=publisher or label,
            published_at=_published_at(entry),
        ))
    return items
