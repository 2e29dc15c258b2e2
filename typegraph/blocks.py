"""
Struct block extraction.

Locates every ``typedef struct [tag] { ... } name;`` block in a header with a
single left-to-right scan. No brace matching is attempted: a block ends at the
first closing marker ``} name;`` for its own name. Comments may sit anywhere
in the block head.
"""

import logging
import re
from typing import Iterator, List, NamedTuple, Optional

from core.type_names import typedef_name_for_tag
from typegraph.errors import MalformedStructBlockError

logger = logging.getLogger(__name__)

_TYPEDEF_STRUCT_RE = re.compile(r"^[ \t]*typedef\s+struct\b", re.MULTILINE)
_GAP = r"(?:\s|//[^\n]*|/\*.*?\*/)*"
_BLOCK_HEAD_RE = re.compile(
    _GAP + r"(?:(?P<tag>[A-Za-z_]\w*)" + _GAP + r")?(?P<next>.)", re.DOTALL
)
_DECLARATION_END_RE = re.compile(r"//[^\n]*|/\*.*?\*/|(?P<end>[{;])", re.DOTALL)
_ANONYMOUS_CLOSE_RE = re.compile(r"\}\s*(?P<name>[A-Za-z_]\w*)\s*;")
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


class StructBlock(NamedTuple):
    """A raw struct definition found in header text."""

    name: str
    body: str
    line: int


def strip_comments(text: str) -> str:
    """Remove ``/* */`` and ``//`` comments from a struct body."""
    text = _BLOCK_COMMENT_RE.sub(" ", text)
    return _LINE_COMMENT_RE.sub("", text)


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _closing_marker_re(name: str) -> "re.Pattern[str]":
    return re.compile(r"\}\s*" + re.escape(name) + r"\s*;")


def _declaration_end(text: str, start: int) -> Optional["re.Match[str]"]:
    """Find the first ``{`` or ``;`` at or after start, outside comments."""
    for match in _DECLARATION_END_RE.finditer(text, start):
        if match.group("end"):
            return match
    return None


def iter_struct_blocks(source_text: str) -> Iterator[StructBlock]:
    """Yield every struct block of a header in occurrence order.

    Args:
        source_text: Full text of one header.

    Yields:
        StructBlock with comment-stripped body text.

    Raises:
        MalformedStructBlockError: If a block has no closing marker, or a
            head carries tokens other than a tag before its opening brace.
    """
    pos = 0
    while True:
        match = _TYPEDEF_STRUCT_RE.search(source_text, pos)
        if match is None:
            return
        line = _line_of(source_text, match.start())
        head = _BLOCK_HEAD_RE.match(source_text, match.end())
        if head is None:
            raise MalformedStructBlockError(None, line, "unexpected end of header")

        tag = head.group("tag")
        if head.group("next") != "{":
            end = _declaration_end(source_text, head.start("next"))
            if end is None:
                raise MalformedStructBlockError(None, line, "unexpected end of header")
            if end.group("end") == "{":
                raise MalformedStructBlockError(
                    None, line, "unexpected tokens before '{'"
                )
            # typedef struct tag name; -- forward declaration, nothing to parse
            logger.debug("Skipping struct forward declaration at line %d", line)
            pos = end.end()
            continue

        body_start = head.end()
        if tag:
            name = typedef_name_for_tag(tag)
            close = _closing_marker_re(name).search(source_text, body_start)
            if close is None:
                raise MalformedStructBlockError(
                    name, line, f"missing closing marker '}} {name};'"
                )
        else:
            close = _ANONYMOUS_CLOSE_RE.search(source_text, body_start)
            if close is None:
                raise MalformedStructBlockError(
                    None, line, "missing closing marker '} <name>;'"
                )
            name = close.group("name")

        body = strip_comments(source_text[body_start:close.start()])
        logger.debug("Found struct block %s at line %d", name, line)
        yield StructBlock(name=name, body=body, line=line)
        pos = close.end()


def extract_struct_blocks(source_text: str) -> List[StructBlock]:
    """Extract all struct blocks of a header as a list."""
    return list(iter_struct_blocks(source_text))
