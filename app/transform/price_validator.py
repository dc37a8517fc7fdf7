from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from typing import Iterable

from app.schemas.models import PriceRecord


def calendar_day(ts: datetime, tz: tzinfo = timezone.utc) -> date:
    """Calendar date of ``ts`` in ``tz``. Naive timestamps are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).date()


def should_save_price(
    candidate_price: Decimal,
    observed_at: datetime,
    existing_history: Iterable[PriceRecord],
    *,
    tz: tzinfo = timezone.utc,
) -> bool:
    """Decide whether a freshly fetched price becomes a new history record.

    A price is accepted only if it is strictly positive and the asset has no
    record on the same calendar day as ``observed_at``. Time of day and the
    stored price values play no part. ``existing_history`` may be in any
    order and is only read.
    """
    if not candidate_price > 0:
        return False

    day = calendar_day(observed_at, tz)
    return all(calendar_day(r.recorded_at, tz) != day for r in existing_history)


class PriceValidator:
    def __init__(self, tz: tzinfo = timezone.utc):
        self.tz = tz

    def should_save_price(
        self,
        candidate_price: Decimal,
        observed_at: datetime,
        existing_history: Iterable[PriceRecord],
    ) -> bool:
        return should_save_price(
            candidate_price,
            observed_at,
            existing_history,
            tz=self.tz,
        )
