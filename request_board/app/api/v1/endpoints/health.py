"""Liveness endpoint used by process managers and the client watcher."""

from datetime import datetime, timezone

from fastapi import APIRouter


router = APIRouter()


@router.get("/health")
async def health() -> dict:
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
