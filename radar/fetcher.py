"""Feed fetcher.

Fans the configured feeds out over a small thread pool and merges the
results back in configured order on the calling thread. A failing feed
yields zero items and never aborts the others.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import requests

from radar import rss_parser
from radar.layer_minus1_time import layer_minus1_time
from radar.models import FeedSource, RawItem

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; AlproMarketRadar/1.0)"


def fetch_rss_feed(
    source: FeedSource,
    session: requests.Session,
    max_age_days: int = 7,
    timeout: float = 20.0,
    now: datetime | None = None,
) -> list[RawItem]:
    """Fetch and parse one feed. Returns [] on any network or parse failure."""
    try:
        resp = session.get(source.endpoint, timeout=timeout, headers={"User-Agent": USER_AGENT})
        resp.raise_for_status()
        items = rss_parser.parse(resp.content, source.label)
    except Exception as e:
        logger.error("Failed to fetch [%s]: %s", source.label, e)
        return []

    fresh = [i for i in items if layer_minus1_time(i.published_at, max_age_days, now)]
    if len(fresh) < len(items):
        logger.debug("[%s] %d items older than %d days dropped",
                     source.label, len(items) - len(fresh), max_age_days)
    return fresh


def fetch_all(
    sources: list[FeedSource],
    max_age_days: int = 7,
    timeout: float = 20.0,
    workers: int = 5,
    session: requests.Session | None = None,
    now: datetime | None = None,
) -> list[RawItem]:
    """Fetch every source concurrently; results are concatenated in source order."""
    if not sources:
        return []

    now = now or datetime.now(timezone.utc)
    own_session = session is None
    session = session or requests.Session()
    try:
        with ThreadPoolExecutor(max_workers=max(1, min(workers, len(sources)))) as pool:
            futures = [
                pool.submit(fetch_rss_feed, src, session, max_age_days, timeout, now)
                for src in sources
            ]
            # fan-in on this thread only
            all_items: list[RawItem] = []
            for src, fut in zip(sources, futures):
                items = fut.result()
                logger.info("  [%s] %d articles", src.label, len(items))
                all_items.extend(items)
    finally:
        if own_session:
            session.close()
    return all_items
