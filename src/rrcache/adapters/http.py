"""HTTP collaborators built on httpx."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Self
from urllib.parse import quote

import httpx

from rrcache.duration import parse_duration
from rrcache.errors import FetchError, NetworkError, StorageError, ValidationError
from rrcache.models import ImageHandle, ProjectDetail, ProjectList
from rrcache.types import Duration

logger = logging.getLogger(__name__)


def _status_error(response: httpx.Response) -> FetchError:
    """Tag a non-success response from the record or object store.

    400 and 422 mean the request itself was malformed and are never retried.
    """
    try:
        error = response.json().get("error")
    except Exception:
        error = None
    details = {"status_code": response.status_code, "url": str(response.url)}
    if response.status_code == 404:
        message = "File not found"
    elif response.status_code in (401, 403):
        message = "Unauthorized access"
    else:
        message = error or f"HTTP {response.status_code}"
    if response.status_code in (400, 422):
        return ValidationError(f"Request validation failed: {message}", details=details)
    return StorageError(message, details=details)


async def _get(client: httpx.AsyncClient, url: str, **kwargs: Any) -> httpx.Response:
    """GET ``url`` and convert transport failures into tagged errors."""
    try:
        response = await client.get(url, **kwargs)
    except httpx.TimeoutException as e:
        raise NetworkError(f"Request to {url} timed out", details=e) from e
    except httpx.TransportError as e:
        raise NetworkError(f"Network error fetching {url}: {e}", details=e) from e
    if not response.is_success:
        raise _status_error(response)
    return response


class _OwnedClient:
    """Shared client lifecycle: close only what we created."""

    def __init__(self, client: httpx.AsyncClient | None, **client_kwargs: Any) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(**client_kwargs)

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class HttpRecordStore(_OwnedClient):
    """Record store served as JSON over HTTP.

    ``GET {base_url}/projects`` and ``GET {base_url}/projects/{id}``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: Duration = "10s",
    ) -> None:
        self._timeout = parse_duration(timeout) / 1000
        super().__init__(client, timeout=self._timeout)
        self._base_url = base_url.rstrip("/")

    async def _get_json(self, url: str) -> Any:
        response = await _get(self._client, url, timeout=self._timeout)
        try:
            return response.json()
        except ValueError as e:
            raise ValidationError(f"Invalid JSON from {url}", details=e) from e

    async def load_list(self) -> ProjectList:
        """Load the project list."""
        data = await self._get_json(f"{self._base_url}/projects")
        projects = ProjectList.from_dict(data)
        logger.debug(f"Loaded {projects.total} projects from {self._base_url}")
        return projects

    async def load_detail(self, project_id: str) -> ProjectDetail:
        """Load one project with its steps and materials."""
        if not project_id or "/" in project_id:
            raise ValidationError(f"Invalid project id: {project_id!r}")
        data = await self._get_json(f"{self._base_url}/projects/{quote(project_id)}")
        return ProjectDetail.from_dict(data)


class HttpBinaryLoader(_OwnedClient):
    """Binary loader that GETs each URL with a per-attempt timeout."""

    def __init__(self, *, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client, follow_redirects=True)

    async def load_binary(self, url: str, timeout_ms: int) -> ImageHandle:
        """Load ``url``, bounding the attempt by ``timeout_ms``."""
        if not url.startswith(("http://", "https://")):
            raise ValidationError(f"Unsupported image URL: {url!r}")
        response = await _get(self._client, url, timeout=timeout_ms / 1000)
        if not response.content:
            raise FetchError(f"Empty response body for {url}")
        return ImageHandle(
            url=url,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )
