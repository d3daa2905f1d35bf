"""Data models for blockmark.

A :class:`BlockDocument` is an ordered list of blocks plus two pieces of
pass-through metadata (``time`` and ``version``).  Each block kind is its
own dataclass carrying only the fields that kind needs; the shared
``kind`` class attribute is the discriminator.  :data:`Block` is the union
of every block class.

All types are plain dataclasses with no behaviour beyond what is needed
for structural equality.  The editing surface owns mutation; the
converters never modify a document they are given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockKind(str, Enum):
    """Discriminator for the closed set of block kinds."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    CHECKLIST = "checklist"
    QUOTE = "quote"
    CODE = "code"
    DELIMITER = "delimiter"
    TABLE = "table"
    IMAGE = "image"
    UNKNOWN = "unknown"
    """A block type produced by the editor that blockmark does not model."""


class ListStyle(str, Enum):
    """Numbering style of a :class:`ListBlock`."""

    ORDERED = "ordered"
    UNORDERED = "unordered"


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def clamp_heading_level(level: int) -> int:
    """Clamp *level* into ``[1, 6]``."""
    return max(MIN_HEADING_LEVEL, min(MAX_HEADING_LEVEL, level))


@dataclass
class HeadingBlock:
    """A section heading.  ``level`` is clamped to ``[1, 6]`` on construction."""

    kind: ClassVar[BlockKind] = BlockKind.HEADING

    text: str
    level: int = 1

    def __post_init__(self) -> None:
        self.level = clamp_heading_level(self.level)


@dataclass
class ParagraphBlock:
    kind: ClassVar[BlockKind] = BlockKind.PARAGRAPH

    text: str


@dataclass
class ListBlock:
    """An ordered or unordered list.

    Attributes
    ----------
    style:
        :attr:`ListStyle.ORDERED` items are renumbered ``1.``, ``2.``, ...
        on encode; any source numbering is discarded.
    items:
        Item texts carrying inline markup.
    """

    kind: ClassVar[BlockKind] = BlockKind.LIST

    style: ListStyle
    items: list[str] = field(default_factory=list)


@dataclass
class ChecklistItem:
    text: str
    checked: bool = False


@dataclass
class ChecklistBlock:
    kind: ClassVar[BlockKind] = BlockKind.CHECKLIST

    items: list[ChecklistItem] = field(default_factory=list)


@dataclass
class QuoteBlock:
    kind: ClassVar[BlockKind] = BlockKind.QUOTE

    text: str


@dataclass
class CodeBlock:
    """A fenced code block.  ``code`` is verbatim; no inline markup applies."""

    kind: ClassVar[BlockKind] = BlockKind.CODE

    code: str
    language: str = ""


@dataclass
class DelimiterBlock:
    kind: ClassVar[BlockKind] = BlockKind.DELIMITER


@dataclass
class TableBlock:
    """A pipe table.

    Attributes
    ----------
    rows:
        Cell strings, row-major.  The first row is the heading row.  Rows
        produced by the decoder are rectangular.
    with_headings:
        Editor flag; the Markdown form always treats row 0 as headings.
    """

    kind: ClassVar[BlockKind] = BlockKind.TABLE

    rows: list[list[str]] = field(default_factory=list)
    with_headings: bool = True

    @property
    def width(self) -> int:
        """Number of columns (length of the widest row)."""
        return max((len(row) for row in self.rows), default=0)


@dataclass
class ImageBlock:
    kind: ClassVar[BlockKind] = BlockKind.IMAGE

    url: str
    caption: str = ""


@dataclass
class UnknownBlock:
    """A block type the transcoder does not model, carried through as-is.

    Attributes
    ----------
    type:
        The editor's type string (e.g. ``"warning"``, ``"embed"``).
    data:
        The raw editor payload.  Only ``data["text"]`` is ever rendered.
    """

    kind: ClassVar[BlockKind] = BlockKind.UNKNOWN

    type: str
    data: dict = field(default_factory=dict)


Block = Union[
    HeadingBlock,
    ParagraphBlock,
    ListBlock,
    ChecklistBlock,
    QuoteBlock,
    CodeBlock,
    DelimiterBlock,
    TableBlock,
    ImageBlock,
    UnknownBlock,
]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

@dataclass
class BlockDocument:
    """An ordered sequence of blocks in top-to-bottom reading order.

    Attributes
    ----------
    blocks:
        The document content.
    time:
        Milliseconds since the epoch at which the document was produced.
        Pass-through metadata; never interpreted by the converters.
    version:
        Editor format-version tag.  Pass-through metadata.
    """

    blocks: list[Block] = field(default_factory=list)
    time: int = 0
    version: str = ""

    def kinds(self) -> list[BlockKind]:
        """Return the kind of every block, in order."""
        return [block.kind for block in self.blocks]


# ---------------------------------------------------------------------------
# Conversion warnings and results
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered during decoding or encoding.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"EMPTY_HEADING"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class DecodeResult:
    """Output of the Markdown-to-blocks conversion.

    Attributes
    ----------
    document:
        The decoded block document.
    warnings:
        Degraded-handling notices (dropped headings, unterminated fences,
        padded table rows).
    """

    document: BlockDocument
    warnings: list[ConversionWarning] = field(default_factory=list)
