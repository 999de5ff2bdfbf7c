from dataclasses import dataclass, replace

import aiohttp

from readme_importer.config.logger_config import logger
from readme_importer.importing.application.ports import EditorPort, NotifierPort, ReadmeClientPort
from readme_importer.importing.application.workflows.materialize_assets import AssetMaterializer
from readme_importer.importing.domain.models import AssetMode, ImportRequest, ImportResult, ReadmeDocument
from readme_importer.importing.domain.normalizer import MarkdownHtmlNormalizer
from readme_importer.importing.domain.rewriter import rewrite_relative_images
from readme_importer.importing.domain.urls import DEFAULT_BRANCH, DEFAULT_HOST, parse_repository_reference

SUCCESS_MESSAGE = "README imported successfully"
FAILURE_MESSAGE = "Failed to import README. Please check the repository URL."


@dataclass(frozen=True)
class ImportWorkflowConfig:
    asset_mode: AssetMode = AssetMode.REWRITE
    github_host: str = DEFAULT_HOST
    branch: str = DEFAULT_BRANCH


class ImportReadmeWorkflow:
    def __init__(
        self,
        client: ReadmeClientPort,
        normalizer: MarkdownHtmlNormalizer,
        editor: EditorPort,
        notifier: NotifierPort,
        materializer: AssetMaterializer | None = None,
        config: ImportWorkflowConfig | None = None,
    ) -> None:
        self.client = client
        self.normalizer = normalizer
        self.editor = editor
        self.notifier = notifier
        self.materializer = materializer
        self.config = config or ImportWorkflowConfig()
        if self.config.asset_mode is AssetMode.MATERIALIZE and materializer is None:
            raise ValueError("Asset mode 'materialize' requires an AssetMaterializer.")

    async def run(self, session: aiohttp.ClientSession, request: ImportRequest) -> ImportResult:
        stage = "parse"
        assets_stored = 0
        assets_failed = 0
        try:
            reference = parse_repository_reference(request.repository_url)
            logger.info("Importing README from {} as {}", request.repository_url, reference.slug)

            stage = "fetch"
            document = ReadmeDocument(reference, await self.client.fetch_readme(session, reference))

            stage = "interleave"
            document = replace(document, content=self.normalizer.resolve_interleaving(document.content))

            stage = "rewrite"
            rewritten = rewrite_relative_images(
                document.content,
                document.reference,
                host=self.config.github_host,
                branch=self.config.branch,
            )
            document = replace(document, content=rewritten)

            stage = "line_breaks"
            document = replace(document, content=self.normalizer.normalize_layout(document.content))

            stage = "empty_tags"
            document = replace(document, content=self.normalizer.eliminate_empty_tags(document.content))

            if self.config.asset_mode is AssetMode.MATERIALIZE:
                stage = "materialize"
                materialized = await self.materializer.materialize(session, document)
                document = replace(document, content=materialized.content)
                assets_stored = len(materialized.stored)
                assets_failed = len(materialized.failed)

            stage = "insert"
            self.editor.replace_selection(document.content)
        except Exception as exc:
            logger.exception(
                "README import failed at stage '{}' for {} with error type {}: {}",
                stage,
                request.repository_url,
                type(exc).__name__,
                exc,
            )
            self.notifier.failure(FAILURE_MESSAGE)
            return ImportResult(ok=False, stage=stage, error=f"{type(exc).__name__}: {exc}")

        self.notifier.success(SUCCESS_MESSAGE)
        return ImportResult(
            ok=True,
            stage="done",
            content=document.content,
            assets_stored=assets_stored,
            assets_failed=assets_failed,
        )
