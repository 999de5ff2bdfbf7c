import re

from readme_importer.importing.domain.models import AssetReference, RepositoryReference
from readme_importer.importing.domain.urls import (
    DEFAULT_BRANCH,
    DEFAULT_HOST,
    build_blob_base_url,
    is_relative,
    resolve_against_base,
)

RAW_SUFFIX = "?raw=true"

# ![alt](url "optional title")
MARKDOWN_IMAGE_RE = re.compile(r"(!\[[^\]]*\]\()([^)\s]+)((?:\s+\"[^\"]*\")?\s*\))")
# <img ... src="url"> with either quote style
HTML_IMAGE_RE = re.compile(r"(<img\b[^>]*?\bsrc\s*=\s*)([\"'])(.*?)\2", re.I)


def _rewrite_url(url: str, base_url: str) -> str:
    if not is_relative(url):
        return url
    resolved = resolve_against_base(url, base_url)
    if resolved == url:
        # Unresolvable, or already carries its own scheme (data:, mailto:).
        return url
    return resolved + RAW_SUFFIX


def rewrite_relative_images(
    content: str,
    reference: RepositoryReference,
    host: str = DEFAULT_HOST,
    branch: str = DEFAULT_BRANCH,
) -> str:
    base_url = build_blob_base_url(reference, host=host, branch=branch)

    def _markdown(match: re.Match) -> str:
        return f"{match.group(1)}{_rewrite_url(match.group(2), base_url)}{match.group(3)}"

    def _html(match: re.Match) -> str:
        quote = match.group(2)
        return f"{match.group(1)}{quote}{_rewrite_url(match.group(3), base_url)}{quote}"

    content = MARKDOWN_IMAGE_RE.sub(_markdown, content)
    return HTML_IMAGE_RE.sub(_html, content)


def iter_image_urls(content: str) -> list[str]:
    urls = [match.group(2) for match in MARKDOWN_IMAGE_RE.finditer(content)]
    urls.extend(match.group(3) for match in HTML_IMAGE_RE.finditer(content))
    return urls


def find_asset_references(
    content: str,
    reference: RepositoryReference,
    host: str = DEFAULT_HOST,
    branch: str = DEFAULT_BRANCH,
) -> list[AssetReference]:
    base_url = build_blob_base_url(reference, host=host, branch=branch)
    seen: set[str] = set()
    result: list[AssetReference] = []
    for url in iter_image_urls(content):
        if not url or url in seen:
            continue
        seen.add(url)
        result.append(AssetReference(original_url=url, resolved_url=_rewrite_url(url, base_url)))
    return result
