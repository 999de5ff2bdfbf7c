import re

from bs4 import BeautifulSoup, Comment

from readme_importer.importing.application.ports import SanitizerPort
from readme_importer.importing.domain.normalizer import VOID_TAGS

DROPPED_TAGS = frozenset(
    {
        "applet",
        "base",
        "button",
        "embed",
        "form",
        "frame",
        "frameset",
        "iframe",
        "input",
        "link",
        "math",
        "meta",
        "noscript",
        "object",
        "script",
        "select",
        "style",
        "svg",
        "textarea",
    }
)

SAFE_TAGS = frozenset(
    {
        "a", "abbr", "b", "blockquote", "br", "caption", "center", "code", "dd", "del",
        "details", "div", "dl", "dt", "em", "figcaption", "figure", "h1", "h2", "h3",
        "h4", "h5", "h6", "hr", "i", "img", "ins", "kbd", "li", "mark", "ol", "p",
        "picture", "pre", "q", "s", "small", "source", "span", "strike", "strong",
        "sub", "summary", "sup", "table", "tbody", "td", "tfoot", "th", "thead", "tr",
        "tt", "u", "ul",
    }
)

URL_ATTRIBUTES = frozenset({"href", "src", "srcset", "action", "formaction"})
UNSAFE_SCHEMES = ("javascript:", "vbscript:")

_COMMENT_RE = re.compile(r"<!--.*?-->", re.S)
_TAG_RE = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9-]*)\b[^>]*?(/?)>")


def split_unbalanced(fragment: str) -> list[tuple[str, list[str]]]:
    """Split ``fragment`` at end tags whose start tag lies outside it.

    Returns ``(piece, unclosed)`` pairs. A piece is either a lone end tag
    (``unclosed`` is empty) or a run of markup, paired with the start tags
    still open at its end, outermost first.
    """
    pieces: list[tuple[str, list[str]]] = []
    scan = _COMMENT_RE.sub(lambda match: " " * len(match.group(0)), fragment)
    stack: list[str] = []
    start = 0
    for match in _TAG_RE.finditer(scan):
        closing, name, self_closing = match.group(1), match.group(2).lower(), match.group(3)
        if not closing:
            if not self_closing and name not in VOID_TAGS:
                stack.append(name)
            continue
        if name in stack:
            del stack[len(stack) - 1 - stack[::-1].index(name):]
            continue
        pieces.append((fragment[start:match.start()], stack))
        pieces.append((fragment[match.start():match.end()], []))
        stack = []
        start = match.end()
    pieces.append((fragment[start:], stack))
    return pieces


class SoupSanitizer(SanitizerPort):
    """Allow-list sanitizer for single lines of README markup.

    Lines are sanitized one at a time, so a line may open a tag that a
    later line closes. The output keeps the tag balance of the input: no
    end tag is added for a start tag left open, and a lone end tag of an
    allowed element is kept.
    """

    def __init__(
        self,
        allowed_tags: frozenset[str] = SAFE_TAGS,
        dropped_tags: frozenset[str] = DROPPED_TAGS,
    ) -> None:
        self.allowed_tags = allowed_tags
        self.dropped_tags = dropped_tags

    def sanitize(self, fragment: str) -> str:
        output: list[str] = []
        for piece, unclosed in split_unbalanced(fragment):
            lone_end = _TAG_RE.fullmatch(piece)
            if lone_end is not None and lone_end.group(1):
                name = lone_end.group(2).lower()
                if name in self.allowed_tags:
                    output.append(f"</{name}>")
                continue
            output.append(self._clean_piece(piece, unclosed))
        return "".join(output)

    def _clean_piece(self, piece: str, unclosed: list[str]) -> str:
        core = piece.strip()
        if not core:
            return piece
        leading = piece[: len(piece) - len(piece.lstrip())]
        trailing = piece[len(piece.rstrip()):]

        cleaned = self._clean(core)
        # html.parser closes open elements at the end of input, innermost first.
        for name in reversed(unclosed):
            end_tag = f"</{name}>"
            if name in self.allowed_tags and cleaned.endswith(end_tag):
                cleaned = cleaned[: -len(end_tag)]
        return f"{leading}{cleaned}{trailing}"

    def _clean(self, markup: str) -> str:
        soup = BeautifulSoup(markup, "html.parser")

        for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
            comment.extract()
        for tag in soup.find_all(list(self.dropped_tags)):
            if not tag.decomposed:
                tag.decompose()

        for tag in soup.find_all(True):
            if tag.name not in self.allowed_tags:
                tag.unwrap()
                continue
            for attr in list(tag.attrs):
                name = attr.lower()
                value = tag.attrs[attr]
                if name.startswith("on"):
                    del tag.attrs[attr]
                elif (
                    name in URL_ATTRIBUTES
                    and isinstance(value, str)
                    and value.strip().lower().startswith(UNSAFE_SCHEMES)
                ):
                    del tag.attrs[attr]

        return soup.decode(formatter="minimal")


class PassthroughSanitizer(SanitizerPort):
    def sanitize(self, fragment: str) -> str:
        return fragment
