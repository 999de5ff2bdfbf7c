from typing import Protocol, runtime_checkable

import aiohttp

from readme_importer.importing.domain.models import RepositoryReference


@runtime_checkable
class SanitizerPort(Protocol):
    def sanitize(self, fragment: str) -> str: ...
    """Strip unsafe markup from an HTML fragment, keeping safe structural tags."""


@runtime_checkable
class ReadmeClientPort(Protocol):
    async def fetch_readme(self, session: aiohttp.ClientSession, reference: RepositoryReference) -> str: ...
    """Return the raw README text of a repository."""

    async def fetch_asset(self, session: aiohttp.ClientSession, url: str) -> bytes: ...
    """Return the binary body of an asset URL."""


@runtime_checkable
class AssetStorePort(Protocol):
    def ensure_container(self) -> object: ...
    """Create the asset container if missing; must tolerate an existing one."""

    def write(self, filename: str, data: bytes) -> str: ...
    """Persist one asset and return its document-relative path."""


@runtime_checkable
class EditorPort(Protocol):
    def replace_selection(self, text: str) -> None: ...
    """Insert text at the current selection of the target document."""


@runtime_checkable
class NotifierPort(Protocol):
    def success(self, message: str) -> None: ...

    def failure(self, message: str) -> None: ...
