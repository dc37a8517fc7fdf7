import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

_engine: Engine | None = None

def build_db_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL not set")
    return url

def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(
            build_db_url(),
            future=True,
            pool_pre_ping=True,
        )
    return _engine
