import asyncio
import re
from dataclasses import dataclass
from pathlib import PurePosixPath

import aiohttp
from tqdm import tqdm

from readme_importer.config.logger_config import logger
from readme_importer.importing.application.ports import AssetStorePort, ReadmeClientPort
from readme_importer.importing.domain.errors import ReadmeImportError
from readme_importer.importing.domain.models import AssetReference, MaterializeResult, ReadmeDocument
from readme_importer.importing.domain.rewriter import find_asset_references
from readme_importer.importing.domain.urls import DEFAULT_BRANCH, DEFAULT_HOST, asset_filename, is_relative


@dataclass(frozen=True)
class MaterializeConfig:
    semaphore_limit: int = 5
    show_progress: bool = True
    github_host: str = DEFAULT_HOST
    branch: str = DEFAULT_BRANCH


def allocate_filenames(urls: list[str]) -> dict[str, str]:
    """Map each URL to a file name, suffixing names already taken in this run."""
    taken: set[str] = set()
    names: dict[str, str] = {}
    for url in urls:
        name = asset_filename(url)
        if name in taken:
            path = PurePosixPath(name)
            counter = 2
            while f"{path.stem}_{counter}{path.suffix}" in taken:
                counter += 1
            name = f"{path.stem}_{counter}{path.suffix}"
        taken.add(name)
        names[url] = name
    return names


def substitute_references(content: str, references: tuple[AssetReference, ...]) -> str:
    """Replace every occurrence of each original URL with its resolved URL.

    One left-to-right pass, trying longer URLs first; replaced text is never
    matched again.
    """
    if not references:
        return content
    targets = {ref.original_url: ref.resolved_url for ref in references}
    pattern = re.compile("|".join(re.escape(url) for url in sorted(targets, key=len, reverse=True)))
    return pattern.sub(lambda match: targets[match.group(0)], content)


class AssetMaterializer:
    def __init__(
        self,
        client: ReadmeClientPort,
        store: AssetStorePort,
        config: MaterializeConfig | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.config = config or MaterializeConfig()
        self._semaphore = asyncio.Semaphore(self.config.semaphore_limit)

    async def download_and_store(
        self,
        session: aiohttp.ClientSession,
        asset_url: str,
        filename: str | None = None,
    ) -> str:
        data = await self.client.fetch_asset(session, asset_url)
        self.store.ensure_container()
        return self.store.write(filename or asset_filename(asset_url), data)

    async def materialize(self, session: aiohttp.ClientSession, document: ReadmeDocument) -> MaterializeResult:
        """Download every image of ``document`` and point it at the local copy.

        Relative sources are resolved against the repository first; sources
        that do not resolve to an http(s) URL are left as they are.
        """
        content = document.content
        references = [
            ref
            for ref in find_asset_references(
                content,
                document.reference,
                host=self.config.github_host,
                branch=self.config.branch,
            )
            if not is_relative(ref.resolved_url)
        ]
        urls = list(dict.fromkeys(ref.resolved_url for ref in references))
        if not urls:
            return MaterializeResult(content=content)

        names = allocate_filenames(urls)
        logger.info("Materializing {} assets for {}...", len(urls), document.reference.slug)
        with tqdm(
            total=len(urls),
            desc="Assets",
            unit=" asset",
            leave=False,
            disable=not self.config.show_progress,
        ) as progress:
            results = await asyncio.gather(
                *(self._materialize_one(session, url, names[url], progress) for url in urls)
            )

        local_paths = dict(zip(urls, results))
        stored = tuple(
            AssetReference(original_url=ref.original_url, resolved_url=local_paths[ref.resolved_url])
            for ref in references
            if local_paths[ref.resolved_url] is not None
        )
        failed = tuple(url for url in urls if local_paths[url] is None)

        content = substitute_references(content, stored)

        logger.info("Materialized {} assets, {} failed", len(urls) - len(failed), len(failed))
        return MaterializeResult(content=content, stored=stored, failed=failed)

    async def _materialize_one(
        self,
        session: aiohttp.ClientSession,
        url: str,
        filename: str,
        progress: tqdm,
    ) -> str | None:
        async with self._semaphore:
            try:
                return await self.download_and_store(session, url, filename)
            except ReadmeImportError as exc:
                logger.warning("Skipping asset {}: {}", url, exc)
                return None
            finally:
                progress.update(1)
