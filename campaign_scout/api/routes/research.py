"""Campaign research submission."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from campaign_scout.api.dependencies import get_campaign_storage, get_research_orchestrator
from campaign_scout.core.exceptions import DatabaseError, ValidationError
from campaign_scout.domain.models import ResearchRequest, ResearchResponse
from campaign_scout.services.research_logic import ResearchOrchestrator
from campaign_scout.storage.campaign_storage import CampaignStorage

router = APIRouter(prefix="/api", tags=["research"])
logger = logging.getLogger(__name__)


@router.post("/research", response_model=ResearchResponse)
async def run_research(
    request: ResearchRequest,
    orchestrator: ResearchOrchestrator = Depends(get_research_orchestrator),
    storage: CampaignStorage = Depends(get_campaign_storage),
) -> ResearchResponse:
    """
    Research a campaign across the selected verticals.

    Flow:
    1. Normalize the reference inputs (blank and unrecognised ones dropped)
    2. Fetch every selected vertical concurrently
    3. Fall back to demo data if nothing was found
    4. Persist the campaign; a storage failure only adds a warning

    Returns:
        The normalized inputs, per-vertical results and any warnings
    """
    try:
        response = await orchestrator.execute_research(request.reference_inputs, request.selected_verticals)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        response.campaign_id = storage.save_campaign(
            request.campaign_name,
            response.normalized_inputs,
            response.results,
        )
        logger.info("Campaign '%s' saved as %s", request.campaign_name, response.campaign_id)
    except DatabaseError as e:
        logger.error("Failed to persist campaign '%s': %s", request.campaign_name, e)
        response.warnings.append("Results could not be saved; they are shown but not stored")

    return response
