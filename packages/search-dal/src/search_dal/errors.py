"""Error types for provider operations."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Classification of provider errors."""

    CONFIG = "config"
    CONNECTION = "connection"
    FIELD = "field"
    PROVIDER = "provider"


class DalError(Exception):
    """Base error for all provider operations."""

    __slots__ = ("kind", "message", "source")

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.PROVIDER,
        source: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.source = source

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, kind={self.kind!r})"


class ConfigError(DalError):
    """Invalid construction-time parameters. Never retried."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind=ErrorKind.CONFIG)


class TransportError(DalError):
    """A search failed at the network level on every allowed attempt.

    `source` holds the failure observed on the last attempt.
    """

    __slots__ = ("attempts",)

    def __init__(self, message: str, attempts: int, source: BaseException | None = None) -> None:
        super().__init__(message, kind=ErrorKind.CONNECTION, source=source)
        self.attempts = attempts


class FieldExtractionError(DalError):
    """A document lacks a usable value for a cursor field."""

    __slots__ = ("path",)

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message, kind=ErrorKind.FIELD)
        self.path = path
