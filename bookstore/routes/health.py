import logging

import redis
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlmodel import Session
from datetime import datetime, timezone

from bookstore.cache import get_redis
from bookstore.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/check")
def health_check(
    session: Session = Depends(get_session),
    cache: redis.Redis = Depends(get_redis)
):
    db_status = "ok"
    cache_status = "ok"

    try:
        # simple DB ping
        session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database ping failed")
        db_status = "failed"

    try:
        cache.ping()
    except redis.RedisError:
        logger.exception("Cache ping failed")
        cache_status = "failed"

    return {
        "status": "ok",
        "database": db_status,
        "cache": cache_status,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
