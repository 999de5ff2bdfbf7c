"""Line-oriented normalization of README text that mixes Markdown and raw HTML.

README files wrap Markdown in HTML blocks (centered headers, ``<details>``
sections, badge rows). Markdown inside a literal HTML block does not render
in a note editor, so the scan below closes the open block before a run of
Markdown lines and re-opens it when HTML content resumes.

The scan keeps a single tracked tag and matches closes by name only; nested
blocks with the same tag name close on the first ``</tag>``.
"""

import re
from typing import Callable

from readme_importer.importing.domain.models import LineKind, LineSegment, TagState

Sanitize = Callable[[str], str]

MARKDOWN_INDICATORS = frozenset("#-*>[!`|123456789")
VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

_OPEN_TAG_RE = re.compile(r"^\s*<([A-Za-z][A-Za-z0-9-]*)(?=[\s/>])[^>]*>")
_EMPTY_TAG_RE = re.compile(r"<([A-Za-z][A-Za-z0-9-]*)\b[^>]*>\s*</\1\s*>", re.I)
_LINE_BREAK_RE = re.compile(r"<br\s*/?>[ \t]*(?:\r?\n)?", re.I)
_LAYOUT_LINE_RE = re.compile(r"^[ \t]*</?div\b[^>]*>[ \t]*(?:\r?\n|$)", re.I | re.M)
_LAYOUT_TAG_RE = re.compile(r"</?div\b[^>]*>", re.I)


def first_visible_char(line: str) -> str:
    stripped = line.lstrip()
    return stripped[0] if stripped else ""


def is_markdown_line(line: str) -> bool:
    return first_visible_char(line) in MARKDOWN_INDICATORS


def closes_tag(line: str, tag: str) -> bool:
    return re.search(rf"</{re.escape(tag)}\s*>", line, re.I) is not None


def opening_tag(line: str) -> str | None:
    match = _OPEN_TAG_RE.match(line)
    if match is None or match.group(0).endswith("/>"):
        return None
    tag = match.group(1).lower()
    if tag in VOID_TAGS or closes_tag(line, tag):
        return None
    return tag


def classify_line(line: str, state: TagState) -> LineSegment:
    tracked = state.current_open_tag
    if tracked is not None and closes_tag(line, tracked):
        return LineSegment(LineKind.HTML_CLOSE, line, tracked)
    if tracked is None:
        tag = opening_tag(line)
        if tag is not None:
            return LineSegment(LineKind.HTML_OPEN, line, tag)
    if is_markdown_line(line):
        return LineSegment(LineKind.MARKDOWN_CONTENT, line, tracked)
    if "<" in line:
        return LineSegment(LineKind.HTML_CONTENT, line, tracked)
    return LineSegment(LineKind.PLAIN, line, tracked)


def resolve_interleaving(text: str, sanitize: Sanitize | None = None) -> str:
    state = TagState()
    output: list[str] = []

    for line in text.split("\n"):
        segment = classify_line(line, state)
        tag = state.current_open_tag

        if tag is None:
            if segment.kind is LineKind.HTML_OPEN:
                state.open(segment.tag)
            output.append(line)
            continue

        if segment.kind is LineKind.HTML_CLOSE:
            # In markdown mode the synthetic close was already emitted.
            state.reset()
            output.append(line)
            continue

        if not line.strip():
            output.append(line)
            continue

        if segment.kind is LineKind.MARKDOWN_CONTENT:
            if not state.in_markdown_mode:
                output.append(f"</{tag}>")
                state.in_markdown_mode = True
            output.append(line)
            continue

        if state.in_markdown_mode:
            output.append(f"<{tag}>")
            state.in_markdown_mode = False
        if segment.kind is LineKind.HTML_CONTENT and sanitize is not None:
            output.append(sanitize(line))
        else:
            output.append(line)

    return "\n".join(output)


def eliminate_empty_tags(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = _EMPTY_TAG_RE.sub("", text)
    return text


def is_table_row(line: str) -> bool:
    return line.lstrip().startswith("|")


def normalize_line_breaks(text: str) -> str:
    """Turn ``<br>`` tags into newlines.

    GFM table rows keep their ``<br>`` tags: a newline inside a cell would
    split the row. Only rows written with a leading ``|`` are recognized.
    """
    return "".join(
        line if is_table_row(line) else _LINE_BREAK_RE.sub("\n", line)
        for line in text.splitlines(keepends=True)
    )


def strip_layout_tags(text: str) -> str:
    text = _LAYOUT_LINE_RE.sub("", text)
    return _LAYOUT_TAG_RE.sub("", text)


class MarkdownHtmlNormalizer:
    def __init__(self, sanitize: Sanitize | None = None, strip_layout: bool = True) -> None:
        self.sanitize = sanitize
        self.strip_layout = strip_layout

    def resolve_interleaving(self, text: str) -> str:
        return resolve_interleaving(text, self.sanitize)

    def normalize_layout(self, text: str) -> str:
        text = normalize_line_breaks(text)
        if self.strip_layout:
            text = strip_layout_tags(text)
        return text

    def eliminate_empty_tags(self, text: str) -> str:
        return eliminate_empty_tags(text)

    def normalize(self, text: str) -> str:
        text = self.resolve_interleaving(text)
        text = self.normalize_layout(text)
        return self.eliminate_empty_tags(text)
