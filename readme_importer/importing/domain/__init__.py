"""Domain models and pure text transforms for README import."""

from readme_importer.importing.domain.errors import (
    FetchError,
    MalformedReferenceError,
    ReadmeImportError,
    ResolutionError,
    StorageError,
)
from readme_importer.importing.domain.models import (
    AssetMode,
    AssetReference,
    ImportRequest,
    ImportResult,
    MaterializeResult,
    ReadmeDocument,
    RepositoryReference,
    UrlKind,
)
from readme_importer.importing.domain.normalizer import MarkdownHtmlNormalizer
from readme_importer.importing.domain.rewriter import find_asset_references, rewrite_relative_images
from readme_importer.importing.domain.urls import (
    classify_url,
    parse_repository_reference,
    resolve_against_base,
)

__all__ = [
    "AssetMode",
    "AssetReference",
    "classify_url",
    "FetchError",
    "find_asset_references",
    "ImportRequest",
    "ImportResult",
    "MalformedReferenceError",
    "MarkdownHtmlNormalizer",
    "MaterializeResult",
    "parse_repository_reference",
    "ReadmeDocument",
    "ReadmeImportError",
    "RepositoryReference",
    "resolve_against_base",
    "ResolutionError",
    "rewrite_relative_images",
    "StorageError",
    "UrlKind",
]
