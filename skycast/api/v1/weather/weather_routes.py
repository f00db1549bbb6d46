from datetime import date
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from skycast.api.auth import verify_token
from skycast.api.dependencies import get_orchestrator
from skycast.models.outcome import ClassifiedOutcome, ErrorCategory, RecoverableError, Success
from skycast.services.weather_orchestrator import WeatherOrchestrator

logger = structlog.get_logger(__name__)

# Create router
router = APIRouter(prefix="/weather", tags=["Weather"])

STATUS_BY_CATEGORY = {
    ErrorCategory.INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.LOCATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCategory.TRANSPORT: status.HTTP_502_BAD_GATEWAY,
    ErrorCategory.TIER: status.HTTP_502_BAD_GATEWAY,
    ErrorCategory.UPSTREAM: status.HTTP_502_BAD_GATEWAY,
}


def _render(outcome: ClassifiedOutcome, orchestrator: WeatherOrchestrator) -> JSONResponse:
    """Render an outcome together with the orchestrator state."""
    content: Dict[str, Any] = {
        "outcome": outcome.model_dump(mode="json"),
        "state": orchestrator.get_state().model_dump(mode="json"),
    }
    if isinstance(outcome, Success):
        status_code = status.HTTP_200_OK
    elif isinstance(outcome, RecoverableError):
        status_code = status.HTTP_202_ACCEPTED
    else:
        status_code = STATUS_BY_CATEGORY[outcome.category]
    return JSONResponse(status_code=status_code, content=content)


@router.get("/state", summary="Get Weather State")
async def get_weather_state(
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """
    Get the orchestrator state: held report, error, interim notice, recent
    searches, mode and auto refresh settings.
    """
    return orchestrator.get_state().model_dump(mode="json")


@router.get("/recent", summary="Get Recent Searches")
async def get_recent_searches(
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """Get the most-recent-first list of resolved locations."""
    recent = orchestrator.recent.entries
    return {"recent_searches": recent, "count": len(recent)}


@router.post("/location", summary="Get Weather For Current Location")
async def get_weather_for_location(
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """Resolve the current coordinates and run the pipeline for them."""
    logger.info("API request: Weather for current location")
    outcome = await orchestrator.use_current_location()
    return _render(outcome, orchestrator)


@router.post("/refresh", summary="Refresh Current Report")
async def refresh_weather(
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """
    Re-issue the pipeline for the location of the held report.

    Raises:
        HTTPException: 404 if no report is held.
    """
    outcome = await orchestrator.refresh_report()
    if outcome is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No weather report to refresh",
        )
    return _render(outcome, orchestrator)


@router.get("", summary="Get Weather By Query Parameter")
async def search_weather(
    query: str = Query(..., description="Free-text location"),
    historical_date: Optional[date] = Query(None, description="Request this date (YYYY-MM-DD)"),
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """
    Same as GET /weather/{query}, for any location name. Use this form for
    places called "state" or "recent", whose paths belong to the routes above.
    """
    logger.info("API request: Search weather", query=query, historical_date=historical_date)
    outcome = await orchestrator.fetch_weather(query, historical_date=historical_date)
    return _render(outcome, orchestrator)


@router.get("/{query}", summary="Get Weather")
async def get_weather(
    query: str,
    historical_date: Optional[date] = Query(None, description="Request this date (YYYY-MM-DD)"),
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """
    Run the weather pipeline for a free-text location query.

    Without ``historical_date`` the mode comes from the orchestrator settings
    (see PUT /api/v1/settings/historical). With it, this call requests that
    date and leaves the settings untouched.

    The literal paths /state and /recent are matched first; GET
    /weather?query=... reaches the pipeline for those names.

    Returns:
        200 with the report, 202 when a tier-downgrade retry has been
        scheduled, or an error status matching the failure category.

    An empty query raises InputError, which the application maps to 400.
    """
    logger.info("API request: Get weather", query=query, historical_date=historical_date)
    outcome = await orchestrator.fetch_weather(query, historical_date=historical_date)
    return _render(outcome, orchestrator)
