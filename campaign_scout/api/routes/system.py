from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from campaign_scout.api.dependencies import get_settings
from campaign_scout.core.config import Settings

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Liveness plus which providers are live (the rest serve demo data)."""
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "providers": {
            "songstats": settings.songstats_key_valid,
            "tracklists": settings.tracklists_configured,
            "google_sheets": bool(settings.GOOGLE_CREDENTIALS and settings.SHEET_ID),
        },
    }
