from __future__ import annotations
import asyncio
from dataclasses import replace
from pathlib import Path

from readme_importer.config.settings import ImporterSettings, load_settings
from readme_importer.importing.application.ports import EditorPort, NotifierPort
from readme_importer.importing.application.workflows.import_readme import ImportReadmeWorkflow, ImportWorkflowConfig
from readme_importer.importing.application.workflows.materialize_assets import AssetMaterializer, MaterializeConfig
from readme_importer.importing.domain.models import AssetMode, ImportRequest, ImportResult
from readme_importer.importing.domain.normalizer import MarkdownHtmlNormalizer
from readme_importer.importing.infrastructure.github_client import GitHubClient, open_session
from readme_importer.importing.infrastructure.note_editor import NoteEditor
from readme_importer.importing.infrastructure.notifier import ConsoleNotifier
from readme_importer.importing.infrastructure.sanitizer import SoupSanitizer
from readme_importer.importing.infrastructure.vault_store import VaultAssetStore


def build_workflow(
    settings: ImporterSettings,
    *,
    editor: EditorPort | None = None,
    notifier: NotifierPort | None = None,
    client: GitHubClient | None = None,
) -> ImportReadmeWorkflow:
    client = client or GitHubClient(
        api_base=settings.api_base,
        token=settings.github_token,
        timeout_seconds=settings.timeout_seconds,
    )
    materializer = None
    if settings.asset_mode is AssetMode.MATERIALIZE:
        materializer = AssetMaterializer(
            client=client,
            store=VaultAssetStore(settings.vault_dir, assets_dir=settings.assets_dir),
            config=MaterializeConfig(
                semaphore_limit=settings.concurrency,
                show_progress=settings.show_progress,
                github_host=settings.github_host,
                branch=settings.branch,
            ),
        )
    return ImportReadmeWorkflow(
        client=client,
        normalizer=MarkdownHtmlNormalizer(
            sanitize=SoupSanitizer().sanitize,
            strip_layout=settings.strip_layout_tags,
        ),
        editor=editor or NoteEditor(settings.resolved_note_path),
        notifier=notifier or ConsoleNotifier(),
        materializer=materializer,
        config=ImportWorkflowConfig(
            asset_mode=settings.asset_mode,
            github_host=settings.github_host,
            branch=settings.branch,
        ),
    )


async def run_import_async(
    request: ImportRequest,
    *,
    settings: ImporterSettings | None = None,
    vault_dir: str | Path | None = None,
    note_path: str | Path | None = None,
    editor: EditorPort | None = None,
    notifier: NotifierPort | None = None,
) -> ImportResult:
    settings = settings or load_settings()
    if vault_dir is not None:
        settings = replace(settings, vault_dir=Path(vault_dir))
    if note_path is not None:
        settings = replace(settings, note_path=Path(note_path))

    workflow = build_workflow(settings, editor=editor, notifier=notifier)
    async with open_session(settings.concurrency) as session:
        return await workflow.run(session, request)


def run_import(
    request: ImportRequest,
    *,
    settings: ImporterSettings | None = None,
    vault_dir: str | Path | None = None,
    note_path: str | Path | None = None,
    editor: EditorPort | None = None,
    notifier: NotifierPort | None = None,
) -> ImportResult:
    return asyncio.run(
        run_import_async(
            request,
            settings=settings,
            vault_dir=vault_dir,
            note_path=note_path,
            editor=editor,
            notifier=notifier,
        )
    )
