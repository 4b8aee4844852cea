"""Supabase connectivity check: reads one row from `outlets`."""
import logging
import sys

from radar.config import RadarConfig
from radar.db import SupabaseStore
from radar.errors import ConfigError, StoreError
from radar.log import configure_logging

logger = logging.getLogger(__name__)


def check_connection(store) -> bool:
    logger.info("Testing Supabase connection...")
    try:
        sample = store.select("outlets", limit=1)
    except StoreError as e:
        logger.error("Connection failed: %s", e)
        return False
    logger.info("Connection OK. Sample: %s", sample)
    return True


def main() -> int:
    configure_logging()
    try:
        config = RadarConfig.from_env(require_llm=False)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    return 0 if check_connection(SupabaseStore.from_config(config)) else 1


if __name__ == "__main__":
    sys.exit(main())
