from app.core.logging import setup_logging
import logging
import threading
import time
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

setup_logging()
logger = logging.getLogger(__name__)

from app.core.metrics import (
    icon_updates_total,
    price_records_total,
    update_cycle_duration,
    update_cycles_total,
)
from app.ingestion.coingecko import (
    MarketDataError,
    extract_price,
    fetch_markets,
    fetch_prices,
)
from app.schemas.models import UpdateSummary
from app.transform.loader import load_assets, load_price_history
from app.transform.price_validator import PriceValidator
from app.transform.transformer import append_price_record, update_icon_url

# one cycle at a time within this process; uq_crypto_price_history_asset_day
# holds the once-per-day rule across processes
_update_lock = threading.Lock()


# ---------------- ICONS ----------------

def update_asset_icons(engine, assets):
    """Refresh icon URLs from market metadata. Failures never stop the cycle."""
    try:
        markets = fetch_markets(a["external_id"] for a in assets)
        images = {m.id: m.image for m in markets}

        updated = 0
        with engine.begin() as conn:
            for asset in assets:
                image = images.get(asset["external_id"])
                if image and image != asset["icon_url"]:
                    update_icon_url(conn, asset_id=asset["asset_id"], icon_url=image)
                    updated += 1

        icon_updates_total.inc(updated)
        logger.info("[ICONS] Refreshed %d icon(s)", updated)
        return updated

    except Exception:
        logger.warning("[ICONS] Could not update icons from CoinGecko", exc_info=True)
        return 0


# ---------------- PRICES ----------------

def update_prices(engine, validator=None, now=None):
    validator = validator or PriceValidator()

    with _update_lock:
        start_ts = time.time()
        try:
            summary = _run_cycle(engine, validator, now)
        except Exception:
            update_cycles_total.labels("failed").inc()
            raise
        finally:
            update_cycle_duration.observe(time.time() - start_ts)

    update_cycles_total.labels("success").inc()
    return summary


def _save_asset_price(engine, validator, asset, prices, observed_at):
    """Read, validate and write one asset in its own transaction.

    Returns the outcome: ``saved``, ``rejected`` or ``missing``.
    """
    external_id = asset["external_id"]

    new_price = extract_price(prices, external_id)
    if new_price is None:
        logger.warning("[UPDATE] No price found for %s", external_id)
        return "missing"

    try:
        with engine.begin() as conn:
            history = load_price_history(conn, asset["asset_id"])

            if not validator.should_save_price(new_price, observed_at, history):
                logger.warning(
                    "[UPDATE] Price %s for %s is invalid or already saved for today",
                    new_price,
                    external_id,
                )
                return "rejected"

            append_price_record(
                conn,
                asset_id=asset["asset_id"],
                price=new_price,
                recorded_at=observed_at,
            )
    except IntegrityError:
        # uq_crypto_price_history_asset_day: another cycle wrote today's row after our read
        logger.warning(
            "[UPDATE] Price for %s already saved for today by a concurrent update",
            external_id,
        )
        return "rejected"

    return "saved"


def _run_cycle(engine, validator, now):
    summary = UpdateSummary()

    with engine.connect() as conn:
        assets = load_assets(conn)

    if not assets:
        logger.info("[UPDATE] No tracked assets, nothing to do")
        return summary

    logger.info("[UPDATE] Cycle started for %d asset(s)", len(assets))

    update_asset_icons(engine, assets)

    try:
        prices = fetch_prices(a["external_id"] for a in assets)
    except MarketDataError:
        logger.exception("[UPDATE] Error fetching crypto prices from CoinGecko")
        raise

    observed_at = now or datetime.now(timezone.utc)

    for asset in assets:
        outcome = _save_asset_price(engine, validator, asset, prices, observed_at)
        # counted only once the asset's transaction has committed
        price_records_total.labels(outcome).inc()
        setattr(summary, outcome, getattr(summary, outcome) + 1)

    logger.info(
        "[UPDATE] Cycle completed: saved=%d rejected=%d missing=%d",
        summary.saved,
        summary.rejected,
        summary.missing,
    )
    return summary


# ---------------- ENTRYPOINT ----------------

if __name__ == "__main__":
    from app.core.db import get_engine
    from app.core.db_waiter import wait_for_db
    engine = get_engine()
    wait_for_db(engine)
    update_prices(engine)
