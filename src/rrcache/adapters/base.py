"""Collaborator protocols consumed by the call sites.

Implementations raise the tagged ``FetchError`` subclasses from
``rrcache.errors`` so failures are classified without message sniffing.
"""

from typing import Protocol, runtime_checkable

from rrcache.models import ImageHandle, ProjectDetail, ProjectList


@runtime_checkable
class RecordStore(Protocol):
    """Remote store of structured project records."""

    async def load_list(self) -> ProjectList:
        """Load the project list."""
        ...

    async def load_detail(self, project_id: str) -> ProjectDetail:
        """Load one project with its steps and materials."""
        ...


@runtime_checkable
class BinaryLoader(Protocol):
    """Loader for binary resources addressed by URL."""

    async def load_binary(self, url: str, timeout_ms: int) -> ImageHandle:
        """Load ``url``, bounding the attempt by ``timeout_ms``."""
        ...


@runtime_checkable
class UrlResolver(Protocol):
    """Resolves object-storage paths to download URLs."""

    async def resolve(self, path: str) -> str:
        """Return a download URL for ``path``."""
        ...
