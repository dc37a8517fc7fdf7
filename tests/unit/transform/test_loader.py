import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine

from app.schemas.tables import metadata, crypto_assets, crypto_price_history
from app.transform.loader import (
    load_assets,
    load_latest_prices,
    load_price_history,
)


@pytest.fixture
def engine():
    engine = create_engine("sqlite:///:memory:")
    metadata.create_all(engine)
    return engine


def _insert_asset(conn, symbol, external_id, icon_url=None):
    asset_id = uuid.uuid4()
    conn.execute(
        crypto_assets.insert(),
        {
            "asset_id": asset_id,
            "name": external_id.title(),
            "symbol": symbol,
            "external_id": external_id,
            "icon_url": icon_url,
        },
    )
    return asset_id


def test_load_assets_ordered_by_symbol(engine):
    with engine.begin() as conn:
        _insert_asset(conn, "ETH", "ethereum")
        _insert_asset(conn, "BTC", "bitcoin")

        rows = load_assets(conn)

    assert [r["symbol"] for r in rows] == ["BTC", "ETH"]


def test_load_price_history_only_for_asset(engine):
    with engine.begin() as conn:
        btc = _insert_asset(conn, "BTC", "bitcoin")
        eth = _insert_asset(conn, "ETH", "ethereum")
        conn.execute(
            crypto_price_history.insert(),
            [
                {"asset_id": btc, "price": 100, "recorded_at": datetime(2024, 6, 1, tzinfo=timezone.utc)},
                {"asset_id": btc, "price": 110, "recorded_at": datetime(2024, 6, 2, tzinfo=timezone.utc)},
                {"asset_id": eth, "price": 5, "recorded_at": datetime(2024, 6, 2, tzinfo=timezone.utc)},
            ],
        )

        history = load_price_history(conn, btc)

    assert sorted(r.price for r in history) == [Decimal("100"), Decimal("110")]
    assert {r.recorded_at.date().isoformat() for r in history} == {"2024-06-01", "2024-06-02"}


def test_load_price_history_empty(engine):
    with engine.begin() as conn:
        btc = _insert_asset(conn, "BTC", "bitcoin")
        assert load_price_history(conn, btc) == []


def test_load_latest_prices_latest_and_previous(engine):
    with engine.begin() as conn:
        btc = _insert_asset(conn, "BTC", "bitcoin", icon_url="https://img/btc.png")
        conn.execute(
            crypto_price_history.insert(),
            [
                {"asset_id": btc, "price": 110, "recorded_at": datetime(2024, 6, 2, tzinfo=timezone.utc)},
                {"asset_id": btc, "price": 90, "recorded_at": datetime(2024, 5, 31, tzinfo=timezone.utc)},
                {"asset_id": btc, "price": 100, "recorded_at": datetime(2024, 6, 1, tzinfo=timezone.utc)},
            ],
        )

        rows = load_latest_prices(conn)

    assert len(rows) == 1
    row = rows[0]
    assert row["symbol"] == "BTC"
    assert row["icon_url"] == "https://img/btc.png"
    assert row["latest_price"] == Decimal("110")
    assert row["previous_price"] == Decimal("100")
    assert row["last_updated"].date().isoformat() == "2024-06-02"


def test_load_latest_prices_asset_without_history(engine):
    with engine.begin() as conn:
        _insert_asset(conn, "BTC", "bitcoin")
        rows = load_latest_prices(conn)

    assert rows[0]["latest_price"] is None
    assert rows[0]["last_updated"] is None
    assert rows[0]["previous_price"] is None
