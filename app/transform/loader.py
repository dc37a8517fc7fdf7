from sqlalchemy import select
from app.schemas.models import PriceRecord
from app.schemas.tables import crypto_assets, crypto_price_history


def load_assets(conn):
    stmt = select(crypto_assets).order_by(crypto_assets.c.symbol.asc())
    return conn.execute(stmt).mappings().all()


def load_price_history(conn, asset_id):
    stmt = select(
        crypto_price_history.c.price,
        crypto_price_history.c.recorded_at,
    ).where(crypto_price_history.c.asset_id == asset_id)

    return [
        PriceRecord(price=row["price"], recorded_at=row["recorded_at"])
        for row in conn.execute(stmt).mappings()
    ]


def load_recent_prices(conn, asset_id, limit=2):
    stmt = (
        select(
            crypto_price_history.c.price,
            crypto_price_history.c.recorded_at,
        )
        .where(crypto_price_history.c.asset_id == asset_id)
        .order_by(crypto_price_history.c.recorded_at.desc())
        .limit(limit)
    )
    return conn.execute(stmt).mappings().all()


def load_latest_prices(conn):
    """Per asset, the latest and previous recorded price (None when absent)."""
    result = []

    for asset in load_assets(conn):
        recent = load_recent_prices(conn, asset["asset_id"])
        last = recent[0] if recent else None
        previous = recent[1] if len(recent) > 1 else None

        result.append(
            {
                "name": asset["name"],
                "symbol": asset["symbol"],
                "external_id": asset["external_id"],
                "icon_url": asset["icon_url"],
                "latest_price": last["price"] if last else None,
                "last_updated": last["recorded_at"] if last else None,
                "previous_price": previous["price"] if previous else None,
            }
        )

    return result
