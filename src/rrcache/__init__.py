"""rrcache - Resilient resource cache for asyncio applications."""

# Collaborator adapters
from rrcache.adapters import (
    BinaryLoader,
    DemoRecordStore,
    HttpBinaryLoader,
    HttpRecordStore,
    RecordStore,
    UrlResolver,
)

# Core building blocks
from rrcache.dedupe import InFlightDeduplicator

# Duration parsing
from rrcache.duration import parse_duration
from rrcache.errors import (
    ClassifiedError,
    ErrorKind,
    FetchError,
    NetworkError,
    RemoteGenerationError,
    StorageError,
    ValidationError,
    classify,
)

# Call sites
from rrcache.images import ImageLoader, ImageLoadOptions
from rrcache.models import (
    ImageHandle,
    Material,
    ProjectDetail,
    ProjectList,
    ProjectSummary,
    Step,
)
from rrcache.records import ProjectRecordCache
from rrcache.resource_cache import ResilientResourceCache
from rrcache.retry import DEFAULT_RETRY_POLICY, backoff_delay, run_with_retry
from rrcache.ttl_cache import BoundedTTLCache, EvictionPolicy

# Core types
from rrcache.types import (
    CacheEntry,
    Duration,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    RetryPolicy,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "BinaryLoader",
    "BoundedTTLCache",
    "CacheEntry",
    "ClassifiedError",
    "DemoRecordStore",
    "Duration",
    "ErrorKind",
    "EvictionPolicy",
    "FetchError",
    "FetchFailure",
    "FetchResult",
    "FetchSuccess",
    "HttpBinaryLoader",
    "HttpRecordStore",
    "ImageHandle",
    "ImageLoadOptions",
    "ImageLoader",
    "InFlightDeduplicator",
    "Material",
    "NetworkError",
    "ProjectDetail",
    "ProjectList",
    "ProjectRecordCache",
    "ProjectSummary",
    "RecordStore",
    "RemoteGenerationError",
    "ResilientResourceCache",
    "RetryPolicy",
    "Step",
    "StorageError",
    "UrlResolver",
    "ValidationError",
    "backoff_delay",
    "classify",
    "parse_duration",
    "run_with_retry",
]
