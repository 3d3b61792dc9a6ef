class StorageError(Exception):
    """Backend or driver failure. The message carries the original cause."""


class DuplicateRecordError(StorageError):
    """A write hit a uniqueness rule (purchase pair, like pair, follow edge)."""
