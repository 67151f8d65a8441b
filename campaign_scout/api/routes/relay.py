"""
Pass-through access to the music data providers.

Responses are always 200: the body is the provider JSON, or an
``{"error", "status", "details"}`` payload when the call failed.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from campaign_scout.api.dependencies import get_songstats_service, get_tracklists_service
from campaign_scout.domain.models import RelayRequest
from campaign_scout.services.songstats_svc import SongstatsService
from campaign_scout.services.tracklists_svc import TracklistsService

router = APIRouter(prefix="/api/relay", tags=["relay"])


@router.post("/songstats")
async def relay_songstats(
    request: RelayRequest,
    songstats: SongstatsService = Depends(get_songstats_service),
) -> dict[str, Any]:
    return await songstats.call(request.path, request.params)


@router.get("/songstats/status")
async def songstats_status(
    songstats: SongstatsService = Depends(get_songstats_service),
) -> dict[str, Any]:
    """Report whether a usable Songstats key is configured."""
    return songstats.check_configuration()


@router.post("/tracklists")
async def relay_tracklists(
    request: RelayRequest,
    tracklists: TracklistsService = Depends(get_tracklists_service),
) -> dict[str, Any]:
    return await tracklists.call(request.path, request.params)
