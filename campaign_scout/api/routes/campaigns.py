from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from campaign_scout.api.dependencies import get_campaign_storage
from campaign_scout.domain.models import (
    CampaignDetail,
    FilterOptions,
    FilterRequest,
    ResearchResults,
    Vertical,
)
from campaign_scout.services.filter_svc import filter_research_results
from campaign_scout.storage.campaign_storage import CampaignStorage

router = APIRouter(prefix="/api", tags=["campaigns"])
logger = logging.getLogger(__name__)


@router.get("/campaigns")
async def list_campaigns(
    limit: int = Query(50, ge=1, le=500),
    storage: CampaignStorage = Depends(get_campaign_storage),
) -> list[dict[str, Any]]:
    """List saved campaigns, newest first."""
    return storage.list_campaigns(limit=limit)


@router.get("/campaigns/{campaign_id}", response_model=CampaignDetail)
async def get_campaign(
    campaign_id: str,
    recent_only: bool = False,
    min_followers: int = Query(0, ge=0),
    verticals: list[Vertical] = Query(default=[]),
    storage: CampaignStorage = Depends(get_campaign_storage),
) -> CampaignDetail:
    """
    Retrieve a saved campaign with its results.

    Optional query parameters filter the results the same way as ``/api/filter``.
    """
    detail = storage.get_campaign_with_results(campaign_id)
    if detail is None:
        raise HTTPException(status_code=404, detail=f"Campaign {campaign_id} not found")

    options = FilterOptions(recent_only=recent_only, min_followers=min_followers, verticals=set(verticals))
    detail.results = filter_research_results(detail.results, options)
    return detail


@router.post("/filter", response_model=ResearchResults)
async def filter_results_endpoint(request: FilterRequest) -> ResearchResults:
    """Apply recency, follower and vertical filters to a result set."""
    return filter_research_results(request.results, request.options)
