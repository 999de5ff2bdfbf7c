import asyncio
from typing import Awaitable, Callable, TypeVar

import aiohttp

from readme_importer.config.logger_config import logger
from readme_importer.importing.domain.errors import FetchError, MalformedReferenceError
from readme_importer.importing.domain.models import RepositoryReference

RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"
DEFAULT_API_BASE = "https://api.github.com"
USER_AGENT = "readme-importer/0.1"

T = TypeVar("T")


def open_session(concurrency: int = 5) -> aiohttp.ClientSession:
    connector = aiohttp.TCPConnector(limit=0, limit_per_host=max(concurrency, 1), ttl_dns_cache=300)
    return aiohttp.ClientSession(connector=connector, headers={"User-Agent": USER_AGENT})


class GitHubClient:
    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        token: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.token = token
        self.timeout_seconds = timeout_seconds

    def readme_url(self, reference: RepositoryReference) -> str:
        return f"{self.api_base}/repos/{reference.owner}/{reference.name}/readme"

    async def fetch_readme(self, session: aiohttp.ClientSession, reference: RepositoryReference) -> str:
        url = self.readme_url(reference)
        headers = {"Accept": RAW_MEDIA_TYPE}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            content = await self._get(session, url, headers=headers, operation="fetch_readme", reader=_read_text)
        except FetchError as exc:
            if exc.status == 404 and not reference.is_well_formed:
                raise MalformedReferenceError(
                    url,
                    status=404,
                    message=f"{reference.slug!r} is not an owner/name pair",
                ) from exc
            raise
        logger.info("Fetched README for {} ({} chars)", reference.slug, len(content))
        return content

    async def fetch_asset(self, session: aiohttp.ClientSession, url: str) -> bytes:
        data = await self._get(session, url, headers={}, operation="fetch_asset", reader=_read_bytes)
        logger.debug("Downloaded asset {} ({} bytes)", url, len(data))
        return data

    async def _get(
        self,
        session: aiohttp.ClientSession,
        url: str,
        *,
        headers: dict[str, str],
        operation: str,
        reader: Callable[[aiohttp.ClientResponse], Awaitable[T]],
    ) -> T:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds, connect=10)
        try:
            async with session.get(url, headers=headers, timeout=timeout) as resp:
                if not 200 <= resp.status < 300:
                    body = await resp.text()
                    logger.error("{}: HTTP {} for {}: {}", operation, resp.status, url, body[:200])
                    raise FetchError(url, status=resp.status)
                return await reader(resp)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.error("{}: request to {} failed: {}", operation, url, exc)
            raise FetchError(url, message=f"{type(exc).__name__}: {exc}") from exc


async def _read_text(resp: aiohttp.ClientResponse) -> str:
    return await resp.text()


async def _read_bytes(resp: aiohttp.ClientResponse) -> bytes:
    return await resp.read()
