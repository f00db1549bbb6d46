from typing import Any, Dict, Mapping

SENSITIVE_PARAMS = ("access_key", "token", "key", "secret")


def mask_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of request parameters with credentials masked for logging."""
    masked = {}
    for key, value in params.items():
        if any(token in key.lower() for token in SENSITIVE_PARAMS) and value:
            text = str(value)
            masked[key] = f"{text[:4]}***" if len(text) > 8 else "***"
        else:
            masked[key] = value
    return masked


def format_coordinates(latitude: float, longitude: float) -> str:
    """Format a coordinate pair as a Weatherstack query string."""
    return f"{latitude},{longitude}"
