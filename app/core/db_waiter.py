import time
import logging
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("crypto_assets", "crypto_price_history")


def _missing_tables(engine, required):
    existing = set(inspect(engine).get_table_names())
    return [name for name in required if name not in existing]


def wait_for_db(engine, retries=30, delay=2, required_tables=REQUIRED_TABLES):
    """Block until the database answers and the tracker schema is migrated."""
    for attempt in range(1, retries + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            missing = _missing_tables(engine, required_tables)
            if not missing:
                logger.info("[DB] Ready")
                return

            logger.warning(
                "[DB] Schema not migrated, missing %s (attempt %s/%s)",
                ", ".join(missing),
                attempt,
                retries,
            )
        except OperationalError:
            logger.warning(
                "[DB] Not ready (attempt %s/%s), retrying in %ss",
                attempt,
                retries,
                delay,
            )
        time.sleep(delay)

    raise RuntimeError(f"Database not ready after {retries} attempts")
