"""Core types for the rrcache library."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Generic, Literal, TypeVar

from rrcache.errors import ErrorKind

T = TypeVar("T")

# Duration type alias
Duration = str | int | timedelta  # "30s", "5m", "1m30s", milliseconds or timedelta


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached value with metadata."""

    value: T
    stored_at: int  # Unix timestamp ms
    expires_at: int | None  # None never expires

    def is_fresh(self, now: int) -> bool:
        """Check if the entry is still within its TTL at ``now``."""
        return self.expires_at is None or now < self.expires_at


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry configuration for one call site.

    ``max_attempts`` counts retries *after* the initial try, so a policy with
    ``max_attempts=2`` invokes the operation at most three times. Delays are
    in milliseconds.
    """

    max_attempts: int = 3
    base_delay: int = 1000
    max_delay: int = 10_000
    backoff_multiplier: float = 2.0
    jitter: int = 1000  # upper bound of the additive random delay

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.base_delay < 0 or self.max_delay < 0 or self.jitter < 0:
            raise ValueError("delays must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")

    @property
    def total_attempts(self) -> int:
        """Initial try plus every permitted retry."""
        return self.max_attempts + 1


@dataclass(frozen=True, slots=True)
class FetchSuccess(Generic[T]):
    """A successfully resolved resource."""

    value: T
    key: str  # key that produced the value; differs from the request on fallback
    served_from_cache: bool
    elapsed_ms: float

    @property
    def ok(self) -> Literal[True]:
        return True


@dataclass(frozen=True, slots=True)
class FetchFailure:
    """Terminal failure after retries and any fallback were exhausted."""

    kind: ErrorKind
    message: str
    key: str
    attempts: int
    elapsed_ms: float

    @property
    def ok(self) -> Literal[False]:
        return False

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


FetchResult = FetchSuccess[T] | FetchFailure
