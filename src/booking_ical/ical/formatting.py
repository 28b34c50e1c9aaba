"""Text and timestamp formatting for iCalendar content lines."""

import re
from datetime import datetime, timezone
from html.parser import HTMLParser
from typing import List, Optional

# Content lines are limited to 75 octets, excluding the line break
MAX_LINE_OCTETS = 75
FOLD = "\n "

ESCAPES = (
    ("\\", "\\\\"),
    ("\r\n", "\\n"),
    ("\r", "\\n"),
    ("\n", "\\n"),
    (";", "\\;"),
    (",", "\\,"),
)
UNESCAPES = {"\\": "\\", "n": "\n", "N": "\n", ";": ";", ",": ","}

# An escape sequence or a single character
_UNIT = re.compile(r"\\.|.", re.DOTALL)
_ESCAPED = re.compile(r"\\(.)", re.DOTALL)
_INLINE_SPACE = re.compile(r"[ \t\f\v\r]+")

BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
    "section", "table", "tr", "ul",
}
SKIPPED_TAGS = {"script", "style", "head", "title"}


def format_timestamp(timestamp: int) -> str:
    """Render seconds since the epoch as an iCalendar UTC date-time.

    Args:
        timestamp: Seconds since the epoch.

    Returns:
        String in the form YYYYMMDDTHHMMSSZ.
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y%m%dT%H%M%SZ")


class _TextExtractor(HTMLParser):
    """Collects the text of an HTML fragment, keeping block structure as newlines."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: List[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag == "br" or tag in BLOCK_TAGS:
            self._parts.append("\n")

    def handle_endtag(self, tag):
        if tag in SKIPPED_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in BLOCK_TAGS:
            self._parts.append("\n")

    def handle_data(self, data):
        if not self._skip_depth:
            self._parts.append(data)

    def get_text(self) -> str:
        lines = [_INLINE_SPACE.sub(" ", line).strip() for line in "".join(self._parts).split("\n")]
        text = "\n".join(lines)
        return re.sub(r"\n{3,}", "\n\n", text).strip()


def html_to_text(html: str) -> str:
    """Convert an HTML fragment to plain text.

    Block elements and <br> become line breaks, script and style content is
    dropped and entities are decoded.

    Args:
        html: HTML or plain text.

    Returns:
        Plain text.
    """
    extractor = _TextExtractor()
    extractor.feed(html)
    extractor.close()
    return extractor.get_text()


def escape_text(text: str) -> str:
    """Escape backslashes, newlines, semicolons and commas."""
    for raw, escaped in ESCAPES:
        text = text.replace(raw, escaped)
    return text


def unescape_text(text: str) -> str:
    """Reverse escape_text."""
    return _ESCAPED.sub(lambda match: UNESCAPES.get(match.group(1), match.group(0)), text)


def _octets(units: List[str]) -> int:
    return sum(len(unit.encode("utf-8")) for unit in units)


def _last_space(units: List[str]) -> Optional[int]:
    for index in range(len(units) - 1, -1, -1):
        if units[index] == " ":
            return index + 1
    return None


def fold(text: str, limit: int = MAX_LINE_OCTETS) -> str:
    """Fold escaped text so that no physical line exceeds ``limit`` octets.

    Continuation lines start with a single space, which counts toward the
    limit. Lines break after the last space that fits, or else after the
    last whole character or escape sequence that fits. Only FOLD is
    inserted, so unfold() gives back the input unchanged.

    Args:
        text: Escaped text without raw newlines.
        limit: Maximum octets per physical line.

    Returns:
        The folded text, with lines joined by FOLD.
    """
    lines: List[str] = []
    current: List[str] = []
    size = 0

    for unit in _UNIT.findall(text):
        width = len(unit.encode("utf-8"))
        while current and size + width > (limit if not lines else limit - 1):
            split_at = _last_space(current) or len(current)
            lines.append("".join(current[:split_at]))
            current = current[split_at:]
            size = _octets(current)
        current.append(unit)
        size += width

    lines.append("".join(current))
    return FOLD.join(lines)


def unfold(text: str) -> str:
    """Remove line folding, accepting both LF and CRLF line breaks."""
    return re.sub(r"\r?\n[ \t]", "", text)


def escape(text: Optional[str], convert_html: bool = False) -> str:
    """Prepare free text for use as an iCalendar property value.

    Args:
        text: The raw value.
        convert_html: Strip HTML to plain text before escaping.

    Returns:
        Escaped and folded text, or an empty string for empty input.
    """
    if not text:
        return ""

    if convert_html:
        text = html_to_text(text)

    return fold(escape_text(text))
