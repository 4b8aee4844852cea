"""
Strategic Market Radar - news intelligence pipeline.

Fetch      : every configured feed, concurrently, items older than the
             recency window dropped at fetch time
Layer  0   : exact-title dedupe (first occurrence wins)
Layer  1   : noise rejection (bypass for competitor feeds) + priority tagging
Layer  2   : priority-first batch cap
Classify   : ONE mega-batch LLM request for the whole batch
Reconcile  : map records back by 1-based index, bulk insert into market_trends
Notify     : optional email digest of high-impact items

Each run is a stateless batch job. Stage failures degrade to empty
results; only the final insert can fail the run.
"""
import logging
import sys
import time
from collections import Counter
from typing import Callable

from radar import mailer
from radar.config import RadarConfig, apply_store_overrides
from radar.db import SupabaseStore
from radar.errors import ConfigError
from radar.fetcher import fetch_all
from radar.layer_0_dedupe import layer_0_dedupe
from radar.layer_1_noise_signal import layer_1_noise_signal
from radar.layer_2_batch import layer_2_batch
from radar.log import configure_logging
from radar.models import RawItem, RunReport, RunStatus
from radar.reconcile import reconcile_and_save
from radar_agent.agent import CompletionProvider, classify_batch, make_provider

logger = logging.getLogger(__name__)


def _fetch_with_config(config: RadarConfig) -> list[RawItem]:
    return fetch_all(
        config.feeds,
        max_age_days=config.max_age_days,
        timeout=config.fetch_timeout,
        workers=config.fetch_workers,
    )


def run_market_radar(
    config: RadarConfig,
    store,
    provider: CompletionProvider,
    fetch: Callable[[RadarConfig], list[RawItem]] = _fetch_with_config,
) -> RunReport:
    # -- Fetch --
    logger.info("Step 1: Fetching %d strategic RSS feeds...", len(config.feeds))
    raw = fetch(config)

    # -- Layer 0: Dedupe --
    unique = layer_0_dedupe(raw)
    logger.info("Total unique articles: %d (of %d fetched)", len(unique), len(raw))

    # -- Layer 1: Noise vs Signal --
    logger.info("Step 2: Applying noise vs signal filter...")
    signals, noise = layer_1_noise_signal(
        unique, config.noise_keywords, config.signal_keywords, config.noise_bypass_labels
    )
    priority = sum(1 for s in signals if s.is_priority_signal)
    logger.info("  Signals: %d articles (%d high-priority)", len(signals), priority)
    logger.info("  Noise:   %d articles discarded", len(noise))
    for item in noise:
        logger.debug("  [DROP noise] '%s'", item.title[:70])

    report = RunReport(
        status=RunStatus.NO_ITEMS,
        fetched=len(raw), unique=len(unique),
        signals=len(signals), priority=priority, noise=len(noise),
    )
    if not signals:
        logger.info("No signal articles found. Exiting.")
        return report

    # -- Layer 2: Batch cap --
    batch, overflow = layer_2_batch(signals, config.batch_size)
    if overflow:
        logger.info("  Batch cap %d: %d lower-ranked signals dropped this run",
                    config.batch_size, len(overflow))
    report.batch = len(batch)

    # -- Classify (single API call) --
    logger.info("Step 3: Sending mega-bundle (%d signals) to %s...",
                len(batch), getattr(provider, "model_name", "classifier"))
    start = time.monotonic()
    result = classify_batch(batch, provider, config.score_threshold)
    report.classifier_seconds = round(time.monotonic() - start, 1)
    if not result.ok:
        report.classifier_error = result.error or result.status.value

    records = result.records
    report.classified = len(records)
    report.categories = dict(Counter(r.category for r in records))
    logger.info("  AI analysis complete in %.1fs", report.classifier_seconds)
    logger.info("  High-impact items found: %d", len(records))
    if records:
        logger.info("  Category breakdown:")
        for cat, count in report.categories.items():
            logger.info("     - %s: %d", cat, count)

    # -- Reconcile + persist --
    persisted = reconcile_and_save(records, batch, store, config.viral_threshold)
    if not persisted.ok:
        report.status = RunStatus.FAILED
        report.persist_error = persisted.error
        return report

    report.saved = persisted.saved
    report.status = RunStatus.DONE if persisted.saved else RunStatus.NO_HIGH_IMPACT

    # -- Notify --
    if config.notify and persisted.rows:
        high_impact = [
            row for row in persisted.rows
            if float(row.get("sentiment_score") or 0) * 10 > config.score_threshold
        ]
        mailer.send_strategic_alert(high_impact, config)

    logger.info("API calls used: 1 for %d articles.", len(batch))
    return report


def _log_summary(report: RunReport) -> None:
    logger.info("=" * 60)
    logger.info("RADAR SUMMARY (%s)", report.status.value)
    logger.info("=" * 60)
    logger.info("  Fetched:     %d", report.fetched)
    logger.info("  Unique:      %d", report.unique)
    logger.info("  Signals:     %d (%d priority)", report.signals, report.priority)
    logger.info("  Noise:       %d", report.noise)
    logger.info("  Batch sent:  %d", report.batch)
    logger.info("  Classified:  %d", report.classified)
    logger.info("  Saved:       %d", report.saved)
    if report.classifier_error:
        logger.info("  Classifier:  %s", report.classifier_error)
    if report.persist_error:
        logger.info("  Persist:     %s", report.persist_error)
    logger.info("=" * 60)


def main() -> int:
    configure_logging()
    logger.info("Strategic Market Radar - Alpro Intelligence Hub")
    try:
        config = RadarConfig.from_env()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    store = SupabaseStore.from_config(config)
    config = apply_store_overrides(config, store)
    report = run_market_radar(config, store, make_provider(config, config.news_temperature))
    _log_summary(report)
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
