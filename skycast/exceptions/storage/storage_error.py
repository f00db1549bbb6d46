from skycast.exceptions.base import SkyCastError


class StorageError(SkyCastError):
    """Exception raised when the key/value store cannot be read or written."""

    pass
