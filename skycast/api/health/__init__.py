from skycast.api.health.health_route import router as health_router

__all__ = ["health_router"]
