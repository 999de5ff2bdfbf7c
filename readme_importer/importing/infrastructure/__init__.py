"""Infrastructure adapters for README import."""

from readme_importer.importing.infrastructure.github_client import GitHubClient, open_session
from readme_importer.importing.infrastructure.note_editor import NoteEditor
from readme_importer.importing.infrastructure.notifier import ConsoleNotifier
from readme_importer.importing.infrastructure.sanitizer import PassthroughSanitizer, SoupSanitizer
from readme_importer.importing.infrastructure.vault_store import VaultAssetStore

__all__ = [
    "ConsoleNotifier",
    "GitHubClient",
    "NoteEditor",
    "open_session",
    "PassthroughSanitizer",
    "SoupSanitizer",
    "VaultAssetStore",
]
