import structlog

from skycast.exceptions.weather import AuthError
from skycast.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)

CREDENTIAL_KEY = "skycast_api_key"


class CredentialStore:
    """Persists the Weatherstack access key, falling back to the configured default."""

    def __init__(self, store: KeyValueStore, default: str, key: str = CREDENTIAL_KEY):
        self.store = store
        self.default = default
        self.key = key

    def get(self) -> str:
        stored = self.store.get(self.key)
        if stored and stored.strip():
            return stored.strip()
        return self.default

    def save(self, credential: str) -> str:
        """
        Store a new credential.

        Raises:
            AuthError: If the credential is empty after trimming
        """
        credential = (credential or "").strip()
        if not credential:
            raise AuthError("Access key must not be empty")
        self.store.set(self.key, credential)
        logger.info("Access key updated")
        return credential
