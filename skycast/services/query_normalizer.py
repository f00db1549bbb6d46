from typing import Dict, Optional

import structlog

from skycast.exceptions.weather import InputError

logger = structlog.get_logger(__name__)

# Known misspellings, keyed by their normalized form
KNOWN_ALIASES: Dict[str, str] = {
    "banglore": "bangalore",
}


class QueryNormalizer:
    """Canonicalizes raw location input into a lookup key."""

    def __init__(self, aliases: Optional[Dict[str, str]] = None):
        self.aliases = dict(KNOWN_ALIASES if aliases is None else aliases)

    def normalize(self, raw: Optional[str]) -> str:
        """
        Trim, lowercase and alias-correct a raw query.

        Args:
            raw: Free-text location query

        Returns:
            Normalized lookup key

        Raises:
            InputError: If nothing is left after trimming
        """
        key = (raw or "").strip().lower()
        if not key:
            raise InputError("Please enter a location to search for.")

        corrected = self.aliases.get(key, key)
        if corrected != key:
            logger.info("Corrected known misspelling", query=key, corrected=corrected)
        return corrected


query_normalizer = QueryNormalizer()
