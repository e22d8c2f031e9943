"""Errors raised by storage backends."""


class StorageError(Exception):
    """Base class for storage errors."""

    prefix = "storage: error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}" if detail else self.prefix)


class NotFoundError(StorageError):
    """A requested entity does not exist."""

    prefix = "storage: not found"


class ConflictError(StorageError):
    """An entity is duplicated or conflicts with stored data."""

    prefix = "storage: conflict"