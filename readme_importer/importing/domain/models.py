from dataclasses import dataclass, field
from enum import Enum


class UrlKind(str, Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class AssetMode(str, Enum):
    REWRITE = "rewrite"
    MATERIALIZE = "materialize"


class LineKind(str, Enum):
    HTML_OPEN = "html_open"
    HTML_CLOSE = "html_close"
    MARKDOWN_CONTENT = "markdown_content"
    HTML_CONTENT = "html_content"
    PLAIN = "plain"


@dataclass(frozen=True)
class RepositoryReference:
    owner: str
    name: str

    @property
    def is_well_formed(self) -> bool:
        return bool(self.owner) and bool(self.name)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class ReadmeDocument:
    reference: RepositoryReference
    content: str


@dataclass(frozen=True)
class LineSegment:
    kind: LineKind
    text: str
    tag: str | None = None


@dataclass(frozen=True)
class AssetReference:
    original_url: str
    resolved_url: str


@dataclass
class TagState:
    current_open_tag: str | None = None
    in_markdown_mode: bool = False

    def open(self, tag: str) -> None:
        self.current_open_tag = tag
        self.in_markdown_mode = False

    def reset(self) -> None:
        self.current_open_tag = None
        self.in_markdown_mode = False


@dataclass(frozen=True)
class ImportRequest:
    repository_url: str


@dataclass(frozen=True)
class MaterializeResult:
    content: str
    stored: tuple[AssetReference, ...] = field(default_factory=tuple)
    failed: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ImportResult:
    ok: bool
    stage: str
    content: str | None = None
    error: str | None = None
    assets_stored: int = 0
    assets_failed: int = 0
