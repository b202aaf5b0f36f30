"""Error taxonomy for storage access."""


class StorageError(Exception):
    """Base class for key-value storage failures."""

    def __init__(self, key: str, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"Storage operation failed for key {key!r}")


class StorageReadFailure(StorageError):
    """Reading a key from storage failed."""


class StorageWriteFailure(StorageError):
    """Writing or removing a key in storage failed."""


class ParseFailure(StorageError):
    """A stored value is not valid JSON."""
