from skycast.models.settings.settings import AutoRefreshRequest, CredentialUpdateRequest, HistoricalModeRequest

__all__ = ["AutoRefreshRequest", "CredentialUpdateRequest", "HistoricalModeRequest"]
