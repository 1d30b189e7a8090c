"""Image loading - binary resource call site.

Per-URL cache without expiry, per-attempt timeout, bounded retry and a
single fallback URL.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from rrcache.adapters.base import BinaryLoader, UrlResolver
from rrcache.duration import parse_duration
from rrcache.errors import ValidationError, classify
from rrcache.models import ImageHandle
from rrcache.resource_cache import ResilientResourceCache
from rrcache.retry import SleepFunc
from rrcache.ttl_cache import Clock
from rrcache.types import Duration, FetchFailure, FetchResult, RetryPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImageLoadOptions:
    """Per-call image loading options.

    ``retry_attempts`` counts retries after the initial try.
    ``retry_delay`` is the base backoff delay and ``timeout`` bounds each
    individual attempt.
    """

    fallback_url: str | None = None
    retry_attempts: int = 3
    retry_delay: Duration = "1s"
    timeout: Duration = "10s"
    max_retry_delay: Duration = "10s"

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_attempts,
            base_delay=parse_duration(self.retry_delay),
            max_delay=parse_duration(self.max_retry_delay),
        )


DEFAULT_IMAGE_OPTIONS = ImageLoadOptions()


class ImageLoader:
    """Cached, deduplicated, retried image loading."""

    def __init__(
        self,
        loader: BinaryLoader,
        *,
        resolver: UrlResolver | None = None,
        max_entries: int = 256,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        sleep_func: SleepFunc | None = None,
    ) -> None:
        self._loader = loader
        self._resolver = resolver
        self._images: ResilientResourceCache[ImageHandle] = ResilientResourceCache(
            "images",
            max_capacity=max_entries,
            default_ttl=None,
            clock=clock,
            rng=rng,
            sleep_func=sleep_func,
        )

    def _attempt(
        self, url: str, timeout_ms: int
    ) -> Callable[[], Awaitable[ImageHandle]]:
        async def load() -> ImageHandle:
            # wait_for guards loaders that ignore their own timeout.
            return await asyncio.wait_for(
                self._loader.load_binary(url, timeout_ms), timeout=timeout_ms / 1000
            )

        return load

    async def load_image(
        self, url: str, options: ImageLoadOptions | None = None
    ) -> FetchResult[ImageHandle]:
        """Load an image by URL, substituting ``options.fallback_url`` on failure."""
        opts = options or DEFAULT_IMAGE_OPTIONS
        timeout_ms = parse_duration(opts.timeout)
        fallback_url = opts.fallback_url
        return await self._images.fetch(
            url,
            self._attempt(url, timeout_ms),
            retry_policy=opts.retry_policy(),
            fallback_key=fallback_url,
            fallback_loader=(
                self._attempt(fallback_url, timeout_ms) if fallback_url else None
            ),
        )

    async def load_storage_image(
        self, path: str, options: ImageLoadOptions | None = None
    ) -> FetchResult[ImageHandle]:
        """Resolve an object-storage path to a download URL, then load it."""
        started = time.perf_counter()
        try:
            if self._resolver is None:
                raise ValidationError("No storage URL resolver configured")
            url = await self._resolver.resolve(path)
        except Exception as exc:
            failure = classify(exc)
            logger.info(f"Could not resolve storage path {path}: {failure.message}")
            return FetchFailure(
                kind=failure.kind,
                message=failure.message,
                key=path,
                attempts=1,
                elapsed_ms=(time.perf_counter() - started) * 1000,
            )
        return await self.load_image(url, options)

    async def preload_images(
        self, urls: Iterable[str], options: ImageLoadOptions | None = None
    ) -> list[FetchResult[ImageHandle]]:
        """Load many images concurrently; results follow the input order."""
        return list(await asyncio.gather(*(self.load_image(u, options) for u in urls)))

    async def preload_storage_images(
        self, paths: Iterable[str], options: ImageLoadOptions | None = None
    ) -> list[FetchResult[ImageHandle]]:
        """Resolve and load many storage paths concurrently, in input order."""
        return list(
            await asyncio.gather(*(self.load_storage_image(p, options) for p in paths))
        )

    def is_cached(self, url: str) -> bool:
        return self._images.is_cached(url)

    def cache_size(self) -> int:
        return int(self._images.stats()["entries"])

    def clear(self) -> None:
        """Drop every cached image."""
        self._images.clear()

    def stats(self) -> dict[str, Any]:
        return self._images.stats()
