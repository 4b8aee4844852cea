"""Reconciler & persister.

Classifier records point back at the batch by 1-based position. Records
with an index outside the batch still produce an item, with an empty
source URL, so a sloppy reply never fails the run.
"""
import logging

from radar.errors import StoreError
from radar.models import ClassificationRecord, IntelligenceItem, PersistResult, SignalItem

logger = logging.getLogger(__name__)

INTELLIGENCE_TABLE = "market_trends"


def resolve_source(record: ClassificationRecord, batch: list[SignalItem]) -> SignalItem | None:
    if 1 <= record.index <= len(batch):
        return batch[record.index - 1]
    return None


def build_summary(reason: str, recommendation: str) -> str:
    if recommendation:
        return f"{reason} | Rekomendasi: {recommendation}"
    return reason


def build_item(record: ClassificationRecord, source: SignalItem | None,
               viral_threshold: int = 9) -> IntelligenceItem:
    # Scores are stored as given; 12 becomes 1.2
    if source is not None and record.title and record.title.strip() != source.title:
        logger.warning("Index %d title mismatch: model echoed '%s', batch has '%s'",
                       record.index, record.title[:60], source.title[:60])

    return IntelligenceItem(
        source_type=record.category,
        title=source.title if source is not None else record.title,
        summary=build_summary(record.reason, record.recommendation),
        sentiment_score=record.score / 10,
        is_viral=record.score >= viral_threshold,
        source_url=source.link if source is not None else "",
    )


def reconcile(records: list[ClassificationRecord], batch: list[SignalItem],
              viral_threshold: int = 9) -> list[IntelligenceItem]:
    items = []
    for record in records:
        source = resolve_source(record, batch)
        if source is None:
            logger.warning("Index %d outside batch of %d; saving without source link",
                           record.index, len(batch))
        items.append(build_item(record, source, viral_threshold))
    return items


def reconcile_and_save(records: list[ClassificationRecord], batch: list[SignalItem], store,
                       viral_threshold: int = 9, table: str = INTELLIGENCE_TABLE) -> PersistResult:
    """Map records to batch items and write them in one bulk insert."""
    if not records:
        logger.info("No high-impact strategic items found.")
        return PersistResult(ok=True, message="no high-impact items found")

    items = reconcile(records, batch, viral_threshold)
    logger.info("Saving %d strategic intelligence items...", len(items))

    try:
        rows = store.insert(table, [item.to_row() for item in items])
    except StoreError as e:
        logger.error("Failed to save to %s: %s", table, e)
        return PersistResult(ok=False, error=str(e), message="insert failed")

    logger.info("Saved %d items to %s.", len(rows), table)
    for i, row in enumerate(rows, start=1):
        logger.info("  %d. [%s] %s", i, row.get("source_type"), (row.get("title") or "")[:50])
        logger.info("     %s", row.get("source_url") or "(no url)")
    return PersistResult(ok=True, saved=len(rows), rows=rows, message=f"saved {len(rows)} items")
