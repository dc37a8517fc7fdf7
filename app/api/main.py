from app.core.logging import setup_logging
import logging
setup_logging()
logger = logging.getLogger(__name__)

from fastapi import FastAPI, APIRouter, Depends, HTTPException, Response
from sqlalchemy import text
from app.core.db import get_engine
from app.ingestion.coingecko import MarketDataError
from app.schemas.models import LatestPrice
from app.services.price_service import update_prices
from app.transform.loader import load_latest_prices
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST


router = APIRouter()
crypto = APIRouter(prefix="/api/crypto", tags=["crypto"])


@router.get("/health")
def health(engine=Depends(get_engine)):
    db_connected = True
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("[HEALTH] Database check failed", exc_info=True)
        db_connected = False

    return {
        "status": "ok" if db_connected else "degraded",
        "db": {"connected": db_connected},
    }


@router.get("/metrics")
def metrics():
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


@crypto.post("/update-prices")
def trigger_update(engine=Depends(get_engine)):
    """Fetch prices from CoinGecko and append the accepted ones to history."""
    try:
        summary = update_prices(engine)
    except MarketDataError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"message": "Prices updated.", **summary.model_dump()}


@crypto.get("/latest-prices", response_model=list[LatestPrice])
def latest_prices(engine=Depends(get_engine)):
    """Latest and previous recorded price of every tracked asset."""
    with engine.connect() as conn:
        return load_latest_prices(conn)


app = FastAPI(title="Crypto Price Tracker")
app.include_router(router)
app.include_router(crypto)
