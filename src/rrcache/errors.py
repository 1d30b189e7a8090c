"""Error taxonomy and classification.

Collaborators raise one of the tagged ``FetchError`` subclasses at the
point of failure. ``classify()`` maps any failure onto an ``ErrorKind``;
message sniffing is only used for errors raised outside the library.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Classification of failures for retry decisions."""

    NETWORK = "network"
    VALIDATION = "validation"
    REMOTE_GENERATION = "remote_generation"
    STORAGE = "storage"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        return self in _RETRYABLE


_RETRYABLE = frozenset(
    {ErrorKind.NETWORK, ErrorKind.STORAGE, ErrorKind.REMOTE_GENERATION}
)


class FetchError(Exception):
    """Base class for tagged failures raised by collaborators.

    Attributes:
        message: Human-readable description.
        details: Optional context (status code, path, original error...).
    """

    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NetworkError(FetchError):
    """Transport or connectivity failure, including per-attempt timeouts."""

    kind = ErrorKind.NETWORK


class StorageError(FetchError):
    """Remote object-store failure."""

    kind = ErrorKind.STORAGE


class RemoteGenerationError(FetchError):
    """Upstream content-generation service failure."""

    kind = ErrorKind.REMOTE_GENERATION


class ValidationError(FetchError):
    """Malformed request or payload. Never retried."""

    kind = ErrorKind.VALIDATION


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """Classification result for a failure."""

    kind: ErrorKind
    message: str

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


# Checked in order; first match wins.
_MESSAGE_RULES: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (ErrorKind.NETWORK, ("network", "fetch", "timeout", "timed out", "connection")),
    (ErrorKind.REMOTE_GENERATION, ("quota", "api key", "safety")),
    (ErrorKind.VALIDATION, ("validation failed",)),
)


def _message_of(failure: object) -> str:
    if isinstance(failure, BaseException):
        return str(failure) or type(failure).__name__
    return str(failure)


def classify(failure: object) -> ClassifiedError:
    """Map a raw failure onto an ``ErrorKind``. Pure, no side effects."""
    if isinstance(failure, ClassifiedError):
        return failure
    if isinstance(failure, FetchError):
        return ClassifiedError(failure.kind, failure.message)

    message = _message_of(failure)
    if isinstance(failure, (TimeoutError, asyncio.TimeoutError, ConnectionError)):
        return ClassifiedError(ErrorKind.NETWORK, message)

    lowered = message.lower()
    for kind, needles in _MESSAGE_RULES:
        if any(needle in lowered for needle in needles):
            return ClassifiedError(kind, message)
    return ClassifiedError(ErrorKind.UNKNOWN, message)
