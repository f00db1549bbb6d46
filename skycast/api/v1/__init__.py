from fastapi import APIRouter

from skycast.api.v1.settings import settings_router
from skycast.api.v1.weather import weather_router

# Create main router
router = APIRouter(prefix="/api/v1")

# Include all sub-routers
router.include_router(settings_router)
router.include_router(weather_router)
