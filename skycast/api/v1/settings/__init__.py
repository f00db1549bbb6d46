from skycast.api.v1.settings.settings_routes import router as settings_router

__all__ = ["settings_router"]
