from sqlalchemy import insert, update
from app.schemas.models import PriceRecord
from app.schemas.tables import crypto_assets, crypto_price_history


def append_price_record(conn, *, asset_id, price, recorded_at):
    """Insert one history row.

    Raises pydantic's ValidationError for a non-positive price and
    IntegrityError when the asset already has a row for that UTC day.
    """
    record = PriceRecord(price=price, recorded_at=recorded_at)

    conn.execute(
        insert(crypto_price_history).values(
            asset_id=asset_id,
            price=record.price,
            recorded_at=record.recorded_at,
        )
    )
    return record


def update_icon_url(conn, *, asset_id, icon_url):
    conn.execute(
        update(crypto_assets)
        .where(crypto_assets.c.asset_id == asset_id)
        .values(icon_url=icon_url)
    )
