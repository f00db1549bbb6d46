from skycast.exceptions.storage.storage_error import StorageError

__all__ = ["StorageError"]
