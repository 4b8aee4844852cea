"""Z-STOP analysis: stock on hand but zero sales (dead-stock candidates).

Every matching inventory snapshot becomes one CRITICAL row in system_alerts.
"""
import logging
import sys

from radar.config import RadarConfig
from radar.db import SupabaseStore
from radar.errors import ConfigError, StoreError
from radar.log import configure_logging

logger = logging.getLogger(__name__)

SNAPSHOT_COLUMNS = (
    "stock_qty, sales_qty, snapshot_date, "
    "outlets (branch_code, name, region), "
    "products (sku, name, category, min_stock)"
)


def find_zstop_snapshots(store) -> list[dict]:
    return store.select(
        "daily_inventory_snapshots",
        columns=SNAPSHOT_COLUMNS,
        filters=[("stock_qty", "gt", 0), ("sales_qty", "eq", 0)],
    )


def build_alert(snapshot: dict) -> dict:
    product = snapshot.get("products") or {}
    outlet = snapshot.get("outlets") or {}
    return {
        "alert_type": "Z-STOP",
        "severity": "CRITICAL",
        "message": (
            f"Z-STOP ALERT: Product {product.get('name')} ({product.get('sku')}) at "
            f"{outlet.get('name')} has STOCK: {snapshot.get('stock_qty')} but SALES: 0."
        ),
        "is_resolved": False,
    }


def run_zstop(store) -> int:
    logger.info("Running Z-STOP analysis (stock > 0 AND sales = 0)...")
    try:
        snapshots = find_zstop_snapshots(store)
    except StoreError as e:
        logger.error("Error fetching Z-STOP data: %s", e)
        return 1

    if not snapshots:
        logger.info("No Z-STOP items found.")
        return 0

    logger.info("Found %d Z-STOP items. Creating system alerts...", len(snapshots))
    try:
        store.insert("system_alerts", [build_alert(s) for s in snapshots])
    except StoreError as e:
        logger.error("Failed to create system alerts: %s", e)
        return 1

    logger.info("Inserted %d alerts into system_alerts.", len(snapshots))
    for i, s in enumerate(snapshots, start=1):
        logger.info("%d. [%s] %s", i, (s.get("outlets") or {}).get("branch_code"),
                    (s.get("products") or {}).get("name"))
    return 0


def main() -> int:
    configure_logging()
    try:
        config = RadarConfig.from_env(require_llm=False)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    return run_zstop(SupabaseStore.from_config(config))


if __name__ == "__main__":
    sys.exit(main())
