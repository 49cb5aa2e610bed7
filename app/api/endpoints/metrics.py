# app/api/endpoints/metrics.py

from fastapi import APIRouter, Depends, HTTPException
import redis.asyncio as redis
from sqlalchemy.exc import SQLAlchemyError
import psutil
import socket
import time
from loguru import logger

from app.core.config import settings
from app.core.database import test_connection
from app.api.deps import require_admin
from app.models.user import UserProfile

router = APIRouter(
    prefix="/api/metrics",
    tags=["System & Metrics"]
)

# Track when the module is loaded for uptime calculation
START_TIME = time.time()


async def _database_status() -> tuple[str, float]:
    start = time.time()
    try:
        await test_connection()
    except (SQLAlchemyError, OSError):
        logger.exception("Metrics: database ping failed")
        return "Error", 0
    return "Connected", round((time.time() - start) * 1000, 2)


# ===================================================================
# 1. HOST + DATABASE METRICS
# ===================================================================
@router.get("")
async def metrics():
    try:
        disk_usage = psutil.disk_usage("/").percent
    except OSError:
        disk_usage = 0

    db_status, db_latency = await _database_status()

    return {
        "status": "Online",
        "cpu": psutil.cpu_percent(interval=None),
        "ram": psutil.virtual_memory().percent,
        "disk": disk_usage,
        "uptime": int(time.time() - START_TIME),
        "database": db_status,
        "db_latency": db_latency,
    }


# ===================================================================
# 2. SERVICE HEALTH (DB + SMTP reachability)
# ===================================================================
@router.get("/health")
async def system_health():
    db_status, _ = await _database_status()

    smtp_status = "Not Configured"
    if settings.SMTP_HOST:
        try:
            sock = socket.create_connection((settings.SMTP_HOST, settings.SMTP_PORT), timeout=2)
            sock.close()
            smtp_status = "Connected"
        except OSError:
            smtp_status = "Error"

    return {
        "status": "Online",
        "uptime_seconds": int(time.time() - START_TIME),
        "database": db_status,
        "smtp_server": smtp_status,
        "environment": settings.ENV,
    }


# ===================================================================
# 3. RATE LIMIT STORAGE (Admin Only)
# ===================================================================
@router.get("/redis-stats")
async def get_redis_statistics(
    _: UserProfile = Depends(require_admin),
):
    if not settings.REDIS_URL:
        return {"status": "Disabled", "message": "Redis is not configured."}

    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2
    )
    try:
        info = await client.info()
        active_limits = []
        async for key in client.scan_iter(match="LIMITER/*", count=100):
            active_limits.append(key)
            if len(active_limits) >= 20:
                break

        return {
            "status": "Online",
            "metrics": {
                "redis_version": info.get("redis_version"),
                "connected_clients": info.get("connected_clients"),
                "used_memory": info.get("used_memory_human"),
                "total_keys": await client.dbsize(),
                "active_rate_limit_windows": len(active_limits),
            }
        }
    except redis.ConnectionError:
        return {"status": "Offline", "detail": "Redis server unreachable."}
    finally:
        await client.aclose()


@router.post("/clear-rate-limits")
async def clear_rate_limits(
    _: UserProfile = Depends(require_admin),
):
    if not settings.REDIS_URL:
        raise HTTPException(status_code=400, detail="Redis not configured.")

    client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        count = 0
        async for key in client.scan_iter(match="LIMITER/*"):
            await client.delete(key)
            count += 1
    except redis.RedisError as e:
        logger.error(f"Cache Clear Error: {e}")
        raise HTTPException(status_code=500, detail="Failed to clear rate limits.")
    finally:
        await client.aclose()

    return {"status": "Success", "message": f"Cleared {count} rate limit keys"}
