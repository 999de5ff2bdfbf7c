from urllib.parse import unquote, urljoin, urlsplit

from pathvalidate import sanitize_filename as lib_sanitize

from readme_importer.config.logger_config import logger
from readme_importer.importing.domain.errors import ResolutionError
from readme_importer.importing.domain.models import RepositoryReference, UrlKind

ABSOLUTE_PREFIXES = ("http://", "https://")
DEFAULT_HOST = "github.com"
DEFAULT_BRANCH = "main"
FALLBACK_ASSET_NAME = "asset"


def parse_repository_reference(url: str) -> RepositoryReference:
    segments = [segment for segment in (url or "").split("/") if segment]
    if len(segments) >= 2:
        return RepositoryReference(owner=segments[-2], name=segments[-1])
    if len(segments) == 1:
        return RepositoryReference(owner="", name=segments[0])
    return RepositoryReference(owner="", name="")


def classify_url(url: str) -> UrlKind:
    if url.startswith(ABSOLUTE_PREFIXES):
        return UrlKind.ABSOLUTE
    return UrlKind.RELATIVE


def is_relative(url: str) -> bool:
    return classify_url(url) is UrlKind.RELATIVE


def build_blob_base_url(
    reference: RepositoryReference,
    host: str = DEFAULT_HOST,
    branch: str = DEFAULT_BRANCH,
) -> str:
    return f"https://{host}/{reference.owner}/{reference.name}/blob/{branch}/"


def resolve_strict(relative_url: str, base_url: str) -> str:
    try:
        return urljoin(base_url, relative_url)
    except ValueError as exc:
        raise ResolutionError(relative_url, base_url, str(exc)) from exc


def resolve_against_base(relative_url: str, base_url: str) -> str:
    """Resolve ``relative_url`` against ``base_url`` (RFC 3986).

    Malformed input never escapes: the unresolved string is returned and
    the failure is logged.
    """
    try:
        return resolve_strict(relative_url, base_url)
    except ResolutionError as exc:
        logger.warning("{}; keeping the original reference", exc)
        return relative_url


def asset_filename(url: str) -> str:
    try:
        path = urlsplit(url).path
    except ValueError:
        path = url.split("?", 1)[0].split("#", 1)[0]
    last_segment = unquote(path.rstrip("/").rsplit("/", 1)[-1])
    safe_name = lib_sanitize(last_segment, replacement_text="_")
    if not safe_name:
        return FALLBACK_ASSET_NAME
    return safe_name
