from fastapi import HTTPException, Request, status

from skycast.services.weather_orchestrator import WeatherOrchestrator


def get_orchestrator(request: Request) -> WeatherOrchestrator:
    """Return the orchestrator created by the application lifespan."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Weather orchestrator is not running",
        )
    return orchestrator
