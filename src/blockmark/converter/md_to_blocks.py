"""Markdown-to-block-document decoder.

:class:`MarkdownToBlocksConverter` makes a single forward pass over the
input lines.  A :class:`_LineCursor` holds the current position; each
recognition rule advances it by however many lines it consumed.  List and
checklist items are gathered in a :class:`_PendingList`, which is flushed
to a finished block whenever the list style changes or a non-list line is
reached.

Line classification (first match wins, on the stripped line):

1. blank
2. horizontal rule -- ``---``, ``***`` or ``___``
3. code fence -- starts with three backticks
4. table -- contains ``|`` and splits into more than two parts
5. image -- ``![caption](url)`` alone on the line
6. heading -- ``#`` prefix
7. checklist item -- ``- [ ]`` / ``- [x]`` (``*`` and ``+`` bullets too)
8. unordered item -- ``-``, ``*`` or ``+`` then whitespace
9. ordered item -- digits, ``.``, whitespace
10. paragraph text -- anything else

The decoder never raises: anything it cannot place becomes a paragraph.
"""

from __future__ import annotations

import json
import re
import sys
from enum import Enum

from blockmark.config import BlockmarkConfig
from blockmark.converter.inline import markdown_to_markup
from blockmark.converter.tables import build_table, is_table_line
from blockmark.models import (
    MAX_HEADING_LEVEL,
    Block,
    BlockDocument,
    ChecklistBlock,
    ChecklistItem,
    CodeBlock,
    ConversionWarning,
    DecodeResult,
    DelimiterBlock,
    HeadingBlock,
    ImageBlock,
    ListBlock,
    ListStyle,
    ParagraphBlock,
)

_RULES: frozenset[str] = frozenset({"---", "***", "___"})
_FENCE = "```"
_IMAGE_RE = re.compile(r"^!\[(.*?)\]\((.*?)\)$")
_HEADING_RE = re.compile(r"^(#+)\s*(.*)$")
_CHECKLIST_RE = re.compile(r"^[-*+]\s*\[([ xX])\]\s*(.*)$")
_UNORDERED_RE = re.compile(r"^[-*+]\s+(.*)$")
_ORDERED_RE = re.compile(r"^\d+\.\s+(.*)$")


class _LineKind(str, Enum):
    BLANK = "blank"
    RULE = "rule"
    FENCE = "fence"
    TABLE = "table"
    IMAGE = "image"
    HEADING = "heading"
    CHECKLIST = "checklist"
    UNORDERED = "unordered"
    ORDERED = "ordered"
    TEXT = "text"


def _classify(line: str) -> _LineKind:
    """Classify a stripped line."""
    if not line:
        return _LineKind.BLANK
    if line in _RULES:
        return _LineKind.RULE
    if line.startswith(_FENCE):
        return _LineKind.FENCE
    if is_table_line(line):
        return _LineKind.TABLE
    if _IMAGE_RE.match(line):
        return _LineKind.IMAGE
    if line.startswith("#"):
        return _LineKind.HEADING
    if _CHECKLIST_RE.match(line):
        return _LineKind.CHECKLIST
    if _UNORDERED_RE.match(line):
        return _LineKind.UNORDERED
    if _ORDERED_RE.match(line):
        return _LineKind.ORDERED
    return _LineKind.TEXT


# ---------------------------------------------------------------------------
# Scanner state
# ---------------------------------------------------------------------------

class _LineCursor:
    """Explicit read position over the input lines."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self._lines)

    def raw(self, offset: int = 0) -> str | None:
        """Return the unstripped line at ``pos + offset``, or ``None`` past the end."""
        index = self.pos + offset
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return None

    def line(self, offset: int = 0) -> str | None:
        """Return the stripped line at ``pos + offset``, or ``None`` past the end."""
        raw = self.raw(offset)
        return raw.strip() if raw is not None else None

    def kind(self, offset: int = 0) -> _LineKind | None:
        line = self.line(offset)
        return _classify(line) if line is not None else None

    def advance(self, count: int = 1) -> None:
        self.pos += count


class _PendingStyle(str, Enum):
    UNORDERED = "unordered"
    ORDERED = "ordered"
    CHECKLIST = "checklist"


class _PendingList:
    """Items of the list or checklist currently being accumulated."""

    def __init__(self) -> None:
        self.style: _PendingStyle | None = None
        self.items: list = []

    def push(self, style: _PendingStyle, item: str | ChecklistItem) -> Block | None:
        """Append *item*; if *style* differs, flush first and return the flushed block."""
        flushed = None
        if style is not self.style:
            flushed = self.flush()
            self.style = style
        self.items.append(item)
        return flushed

    def flush(self) -> Block | None:
        """Return the accumulated block (or ``None``) and reset to empty."""
        style, items = self.style, self.items
        self.style = None
        self.items = []
        if not items:
            return None
        if style is _PendingStyle.CHECKLIST:
            return ChecklistBlock(items=items)
        if style is _PendingStyle.ORDERED:
            return ListBlock(style=ListStyle.ORDERED, items=items)
        return ListBlock(style=ListStyle.UNORDERED, items=items)


# ---------------------------------------------------------------------------
# Converter
# ---------------------------------------------------------------------------

class MarkdownToBlocksConverter:
    """Convert Markdown text to a :class:`BlockDocument`.

    Parameters
    ----------
    config:
        Supplies the document ``version`` tag, the ``time`` clock, and the
        debug-dump switch.

    Examples
    --------
    >>> converter = MarkdownToBlocksConverter(BlockmarkConfig())
    >>> result = converter.convert("# Hello\\n\\nWorld")
    >>> [b.kind.value for b in result.document.blocks]
    ['heading', 'paragraph']
    """

    def __init__(self, config: BlockmarkConfig) -> None:
        self._config = config

    def convert(self, markdown: str) -> DecodeResult:
        """Decode *markdown* into a block document.

        Returns
        -------
        DecodeResult
            The document plus any :class:`ConversionWarning` describing
            degraded handling.
        """
        run = _DecodeRun(markdown)
        run.scan()
        document = BlockDocument(
            blocks=run.blocks,
            time=self._config.clock(),
            version=self._config.editor_version,
        )

        if self._config.debug_dump_blocks:
            from blockmark.converter.editorjs import document_to_editorjs
            print(
                "[blockmark] Decoded blocks:",
                json.dumps(document_to_editorjs(document), indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        return DecodeResult(document=document, warnings=run.warnings)


class _DecodeRun:
    """Per-call scanning state; never shared between calls."""

    def __init__(self, markdown: str) -> None:
        text = markdown.replace("\r\n", "\n").replace("\r", "\n")
        self.cursor = _LineCursor(text.split("\n"))
        self.pending = _PendingList()
        self.blocks: list[Block] = []
        self.warnings: list[ConversionWarning] = []

    def scan(self) -> None:
        handlers = {
            _LineKind.BLANK: self._blank,
            _LineKind.RULE: self._rule,
            _LineKind.FENCE: self._fence,
            _LineKind.TABLE: self._table,
            _LineKind.IMAGE: self._image,
            _LineKind.HEADING: self._heading,
            _LineKind.CHECKLIST: self._checklist,
            _LineKind.UNORDERED: self._unordered,
            _LineKind.ORDERED: self._ordered,
            _LineKind.TEXT: self._paragraph,
        }
        cursor = self.cursor
        while not cursor.at_end():
            kind = cursor.kind()
            handlers[kind]()
        self._flush()

    # -- helpers ----------------------------------------------------------

    def _emit(self, block: Block | None) -> None:
        if block is not None:
            self.blocks.append(block)

    def _flush(self) -> None:
        self._emit(self.pending.flush())

    def _push(self, style: _PendingStyle, item: str | ChecklistItem) -> None:
        self._emit(self.pending.push(style, item))

    # -- rules ------------------------------------------------------------

    def _blank(self) -> None:
        self._flush()
        self.cursor.advance()

    def _rule(self) -> None:
        self._flush()
        self._emit(DelimiterBlock())
        self.cursor.advance()

    def _fence(self) -> None:
        self._flush()
        cursor = self.cursor
        language = cursor.line()[len(_FENCE):].strip()
        start = cursor.pos
        cursor.advance()

        body: list[str] = []
        closed = False
        while not cursor.at_end():
            if cursor.line().startswith(_FENCE):
                cursor.advance()
                closed = True
                break
            body.append(cursor.raw())
            cursor.advance()

        if not closed:
            self.warnings.append(ConversionWarning(
                code="UNTERMINATED_FENCE",
                message="Code fence has no closing ``` line; ran to end of input.",
                context={"line": start + 1},
            ))
        self._emit(CodeBlock(code="\n".join(body), language=language))

    def _table(self) -> None:
        self._flush()
        cursor = self.cursor
        lines: list[str] = []
        while not cursor.at_end() and "|" in cursor.raw():
            lines.append(cursor.line())
            cursor.advance()
        table, warnings = build_table(lines)
        self.warnings.extend(warnings)
        self._emit(table)

    def _image(self) -> None:
        self._flush()
        match = _IMAGE_RE.match(self.cursor.line())
        caption, url = match.group(1), match.group(2)
        self._emit(ImageBlock(url=url, caption=markdown_to_markup(caption)))
        self.cursor.advance()

    def _heading(self) -> None:
        self._flush()
        line = self.cursor.line()
        match = _HEADING_RE.match(line)
        marks, text = match.group(1), match.group(2).strip()
        if text:
            level = min(len(marks), MAX_HEADING_LEVEL)
            self._emit(HeadingBlock(text=markdown_to_markup(text), level=level))
        else:
            self.warnings.append(ConversionWarning(
                code="EMPTY_HEADING",
                message="Heading with no text was dropped.",
                context={"line": self.cursor.pos + 1, "source": line},
            ))
        self.cursor.advance()

    def _checklist(self) -> None:
        cursor = self.cursor
        while True:
            match = _CHECKLIST_RE.match(cursor.line())
            self._push(_PendingStyle.CHECKLIST, ChecklistItem(
                text=markdown_to_markup(match.group(2)),
                checked=match.group(1).lower() == "x",
            ))
            cursor.advance()

            if cursor.kind() is _LineKind.CHECKLIST:
                continue
            # A single blank line between items keeps the run going.
            if cursor.kind() is _LineKind.BLANK and cursor.kind(1) is _LineKind.CHECKLIST:
                cursor.advance()
                continue
            break
        self._flush()

    def _unordered(self) -> None:
        match = _UNORDERED_RE.match(self.cursor.line())
        self._push(_PendingStyle.UNORDERED, markdown_to_markup(match.group(1)))
        self.cursor.advance()

    def _ordered(self) -> None:
        match = _ORDERED_RE.match(self.cursor.line())
        self._push(_PendingStyle.ORDERED, markdown_to_markup(match.group(1)))
        self.cursor.advance()

    def _paragraph(self) -> None:
        self._flush()
        cursor = self.cursor
        parts = [cursor.line()]
        cursor.advance()
        while cursor.kind() is _LineKind.TEXT:
            parts.append(cursor.line())
            cursor.advance()
        self._emit(ParagraphBlock(text=markdown_to_markup(" ".join(parts))))
