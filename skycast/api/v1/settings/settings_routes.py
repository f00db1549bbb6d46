import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from skycast.api.auth import verify_token
from skycast.api.dependencies import get_orchestrator
from skycast.exceptions.weather import AuthError
from skycast.models.settings import AutoRefreshRequest, CredentialUpdateRequest, HistoricalModeRequest
from skycast.services.weather_orchestrator import WeatherOrchestrator

logger = structlog.get_logger(__name__)

# Create router
router = APIRouter(prefix="/settings", tags=["Settings"])


@router.put("/credential", summary="Update Access Key")
async def update_credential(
    request: CredentialUpdateRequest,
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """
    Store a new Weatherstack access key and clear the current error.

    Raises:
        HTTPException: 400 for a key that is blank after trimming.
    """
    logger.info("API request: Update access key")
    try:
        orchestrator.set_credential(request.access_key)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"message": "Access key updated"}


@router.put("/historical", summary="Toggle Historical Mode")
async def update_historical_mode(
    request: HistoricalModeRequest,
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """Enable or disable historical mode and set its target date."""
    orchestrator.set_historical(request.enabled, request.historical_date)
    state = orchestrator.get_state()
    return {"use_historical": state.use_historical, "historical_date": state.historical_date}


@router.put("/auto-refresh", summary="Toggle Auto Refresh")
async def update_auto_refresh(
    request: AutoRefreshRequest,
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator),
    authenticated: bool = Depends(verify_token),
):
    """Enable or disable the periodic refresh of the held report."""
    orchestrator.set_auto_refresh(request.enabled)
    return {"auto_refresh": orchestrator.refresh.enabled, "active": orchestrator.refresh.active}
