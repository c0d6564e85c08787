"""Liveness endpoint."""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Process liveness; backend connectivity is /models/health."""
    return {"status": "ok"}
