class SkyCastError(Exception):
    """Base exception for all SkyCast errors."""

    pass
