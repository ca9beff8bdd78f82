"""Exception hierarchy shared by the engine, score store and storage."""

from __future__ import annotations


class MemoryGameError(Exception):
    """Base class for every error raised by the backend."""


class ValidationError(MemoryGameError):
    """Raised when user input is rejected before any state changes."""


class PersistenceError(MemoryGameError):
    """A key-value store operation failed."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{message} (key={key!r})")
        self.key = key


class PersistenceReadError(PersistenceError):
    pass


class PersistenceWriteError(PersistenceError):
    pass
