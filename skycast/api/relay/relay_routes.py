import structlog
from fastapi import APIRouter, Request, Response, status

from skycast.services.relay_service import CORS_HEADERS, relay_service

logger = structlog.get_logger(__name__)

# Create router
router = APIRouter(prefix="/api/weather", tags=["Relay"])


@router.get("", summary="Relay a Weatherstack Request")
async def relay_weather(request: Request):
    """
    Forward a request to Weatherstack over HTTP and mirror its response.

    Clients served over HTTPS cannot call Weatherstack's HTTP-only endpoint
    directly, so they call this same-origin route instead.

    Query parameters:
        access_key: Weatherstack access key (required)
        query: Location query (required)
        endpoint: "current" or "historical" (default "current")
        Any other parameter is passed through unchanged.

    Returns:
        The upstream status and body, with permissive CORS headers.
    """
    result = await relay_service.forward(request.query_params)
    return Response(
        content=result.content,
        status_code=result.status_code,
        media_type=result.media_type,
        headers=CORS_HEADERS,
    )


@router.options("", include_in_schema=False)
async def relay_preflight():
    """Answer CORS preflight requests."""
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)
