import os
import logging
from decimal import Decimal

import requests
from pydantic import ValidationError

from app.core.http import ThrottledSession
from app.schemas.models import MarketQuote

logger = logging.getLogger(__name__)

VS_CURRENCY = "usd"

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"

# CoinGecko answers 403 to clients without a User-Agent
USER_AGENT = "CryptoPriceTracker/1.0"


class MarketDataError(RuntimeError):
    pass


cg_http = ThrottledSession(
    min_interval_sec=float(os.getenv("COINGECKO_MIN_INTERVAL_SEC", "1")),
    headers={"User-Agent": USER_AGENT},
)


def _base_url() -> str:
    return os.getenv("COINGECKO_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def _params(**params) -> dict:
    api_key = os.getenv("COINGECKO_API_KEY")
    if api_key:
        params["x_cg_demo_api_key"] = api_key
    return params


def _get_json(path: str, params: dict):
    url = f"{_base_url()}{path}"
    try:
        response = cg_http.get(url, params=params)
        # decimal prices, never binary floats
        return response.json(parse_float=Decimal)
    except requests.RequestException as exc:
        raise MarketDataError(f"CoinGecko request to {path} failed: {exc}") from exc


def fetch_prices(external_ids) -> dict[str, dict[str, Decimal]]:
    """Spot prices keyed by CoinGecko id, e.g. ``{"bitcoin": {"usd": Decimal(...)}}``."""
    ids = ",".join(external_ids)
    payload = _get_json(
        "/simple/price",
        _params(ids=ids, vs_currencies=VS_CURRENCY),
    )

    if not isinstance(payload, dict):
        raise MarketDataError(
            f"unexpected /simple/price payload type {type(payload).__name__}"
        )

    prices = {}
    for coin_id, quotes in payload.items():
        if not isinstance(quotes, dict):
            logger.warning("Ignoring malformed quote for %s: %r", coin_id, quotes)
            continue
        prices[coin_id] = {
            currency: Decimal(value) if isinstance(value, int) else value
            for currency, value in quotes.items()
            if isinstance(value, (int, Decimal)) and not isinstance(value, bool)
        }

    return prices


def fetch_markets(external_ids) -> list[MarketQuote]:
    ids = ",".join(external_ids)
    payload = _get_json(
        "/coins/markets",
        _params(vs_currency=VS_CURRENCY, ids=ids),
    )

    if not isinstance(payload, list):
        raise MarketDataError(
            f"unexpected /coins/markets payload type {type(payload).__name__}"
        )

    markets = []
    for item in payload:
        try:
            markets.append(MarketQuote.model_validate(item))
        except ValidationError:
            logger.warning("Skipping market record without id: %r", item)

    return markets


def extract_price(prices, external_id):
    """The ``usd`` price for ``external_id``, or None when the response lacks it."""
    quotes = prices.get(external_id)
    if not quotes:
        return None
    return quotes.get(VS_CURRENCY)
