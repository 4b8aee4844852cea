"""
Review Sentiment Analyzer - customer pulse pipeline.

Pulls unprocessed rows from raw_reviews, classifies them in one
mega-batch request, saves review_sentiments and marks the source rows
processed. Reviews without a matching classifier record are NEUTRAL.
"""
import logging
import sys
from datetime import datetime, timezone

from radar import mailer
from radar.config import RadarConfig
from radar.db import SupabaseStore
from radar.errors import ConfigError, StoreError
from radar.log import configure_logging
from radar.models import ClassificationRecord
from radar_agent.agent import CompletionProvider, classify_reviews, make_provider

logger = logging.getLogger(__name__)

RAW_TABLE = "raw_reviews"
RESULT_TABLE = "review_sentiments"

DEFAULT_CATEGORY = "NEUTRAL"
POSITIVE_SCORE = 0.9
OTHER_SCORE = 0.2


def fetch_unprocessed_reviews(store, limit: int = 50) -> list[dict]:
    try:
        return store.select(RAW_TABLE, filters=[("processed_at", "is", None)], limit=limit)
    except StoreError as e:
        logger.error("Failed to fetch reviews: %s", e)
        return []


def merge_reviews(reviews: list[dict], records: list[ClassificationRecord]) -> list[dict]:
    """One output row per review, matched on 1-based index (first match wins)."""
    by_index: dict[int, ClassificationRecord] = {}
    for rec in records:
        by_index.setdefault(rec.index, rec)

    rows = []
    for i, review in enumerate(reviews, start=1):
        rec = by_index.get(i)
        category = rec.category if rec else DEFAULT_CATEGORY
        rows.append({
            "outlet_id": review.get("outlet_id"),
            "reviewer_name": review.get("reviewer_name"),
            "rating": review.get("rating"),
            "comment": review.get("comment"),
            "sentiment_category": category,
            "sentiment_score": POSITIVE_SCORE if category == "POSITIVE" else OTHER_SCORE,
        })
    return rows


def run_review_analyzer(config: RadarConfig, store, provider: CompletionProvider) -> int:
    """Returns the process exit code."""
    logger.info("Step 1: Fetching unprocessed reviews from %s...", RAW_TABLE)
    reviews = fetch_unprocessed_reviews(store, config.review_batch_limit)
    if not reviews:
        logger.info("No new reviews found to analyze. Exiting.")
        return 0
    logger.info("Found %d reviews.", len(reviews))

    logger.info("Step 2: Classifying...")
    result = classify_reviews(reviews, provider)
    if not result.records:
        logger.warning("Analysis failed or returned empty (%s).", result.error or result.status.value)
        return 0
    logger.info("AI classification complete. Received %d results.", len(result.records))

    logger.info("Step 3: Merging & saving...")
    payload = merge_reviews(reviews, result.records)
    try:
        saved = store.insert(RESULT_TABLE, payload)
    except StoreError as e:
        logger.error("Insert failed: %s", e)
        return 1
    logger.info("Saved %d analyzed reviews.", len(saved))

    ids = [r["id"] for r in reviews if r.get("id") is not None]
    if ids:
        try:
            store.update(RAW_TABLE, {"processed_at": datetime.now(timezone.utc).isoformat()},
                         [("id", "in", ids)])
        except StoreError as e:
            # results are saved; the rows will be offered again next run
            logger.error("Could not mark reviews processed: %s", e)

    counts = mailer.count_review_categories(payload)
    logger.info("Batch summary:")
    for cat in ("POSITIVE", "STOK_ISSUE", "SERVICE_ISSUE", "NEUTRAL"):
        logger.info("   - %s: %d", cat, counts.get(cat, 0))

    if config.notify:
        mailer.send_customer_pulse_alert(payload, config)
    return 0


def main() -> int:
    configure_logging()
    logger.info("Review Sentiment Analyzer - Alpro Hub")
    try:
        config = RadarConfig.from_env()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    store = SupabaseStore.from_config(config)
    return run_review_analyzer(config, store, make_provider(config, config.review_temperature))


if __name__ == "__main__":
    sys.exit(main())
