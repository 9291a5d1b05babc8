class FiledropError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(FiledropError):
    """Request input is missing or malformed."""


class NotFoundError(FiledropError):
    """Requested resource does not exist."""


class StorageError(FiledropError):
    """Backing store is unavailable or a write failed."""


class RelocationError(FiledropError):
    """Moving a staged file to its destination failed."""
