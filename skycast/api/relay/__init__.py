from skycast.api.relay.relay_routes import router as relay_router

__all__ = ["relay_router"]
