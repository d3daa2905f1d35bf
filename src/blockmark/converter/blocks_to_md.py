"""Block document to Markdown renderer.

Every block renders to exactly one chunk (possibly multi-line).  Chunks
are joined with a blank line; a chunk that is empty after stripping is
dropped so no stray blank lines appear in its place.

Usage::

    from blockmark.config import BlockmarkConfig
    from blockmark.converter.blocks_to_md import BlocksToMarkdownRenderer

    renderer = BlocksToMarkdownRenderer(BlockmarkConfig())
    md = renderer.render_document(document)
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable as _Callable

from blockmark.config import BlockmarkConfig
from blockmark.models import (
    Block,
    BlockDocument,
    BlockKind,
    ChecklistBlock,
    CodeBlock,
    ConversionWarning,
    DelimiterBlock,
    HeadingBlock,
    ImageBlock,
    ListBlock,
    ListStyle,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
    UnknownBlock,
    clamp_heading_level,
)

from .inline import markup_to_markdown
from .tables import coerce_rows, render_table

CHUNK_SEPARATOR = "\n\n"


class BlocksToMarkdownRenderer:
    """Stateful renderer that converts a block document to Markdown.

    The renderer accumulates :class:`ConversionWarning` instances in
    :attr:`warnings` during a :meth:`render_document` call so callers can
    inspect non-fatal issues afterwards.  The document itself is never
    modified.

    Parameters
    ----------
    config:
        Controls ``unknown_block_policy`` and the Markdown debug dump.
    """

    def __init__(self, config: BlockmarkConfig) -> None:
        self._config = config
        self.warnings: list[ConversionWarning] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_document(self, document: BlockDocument) -> str:
        """Render every block of *document* and join the non-empty chunks."""
        return self.render_blocks(document.blocks)

    def render_blocks(self, blocks: list[Block]) -> str:
        """Render *blocks* in order and join the non-empty chunks."""
        self.warnings = []
        chunks: list[str] = []
        for index, block in enumerate(blocks):
            chunk = self.render_block(block)
            if chunk.strip():
                chunks.append(chunk)
            else:
                self.warnings.append(ConversionWarning(
                    code="EMPTY_BLOCK_DROPPED",
                    message=f"Block {index} ({_kind_name(block)}) rendered empty and was dropped.",
                    context={"index": index, "kind": _kind_name(block)},
                ))
        markdown = CHUNK_SEPARATOR.join(chunks)

        if self._config.debug_dump_markdown:
            print(
                "[blockmark] Encoded markdown:",
                json.dumps(markdown, ensure_ascii=False),
                file=sys.stderr,
            )
        return markdown

    def render_block(self, block: Block) -> str:
        """Render a single block to its Markdown chunk (may be empty)."""
        renderer = _BLOCK_RENDERERS.get(getattr(block, "kind", None))
        if renderer is None:
            return self._render_unrecognized(block)
        return renderer(self, block)

    # ------------------------------------------------------------------
    # Block kind renderers
    # ------------------------------------------------------------------

    def _render_heading(self, block: HeadingBlock) -> str:
        level = block.level if isinstance(block.level, int) else 1
        text = markup_to_markdown(block.text)
        return f"{'#' * clamp_heading_level(level)} {text}"

    def _render_paragraph(self, block: ParagraphBlock) -> str:
        return markup_to_markdown(block.text)

    def _render_list(self, block: ListBlock) -> str:
        items = self._items(block, block.items)
        lines: list[str] = []
        for number, item in enumerate(items, start=1):
            text = markup_to_markdown(item)
            if block.style == ListStyle.ORDERED:
                lines.append(f"{number}. {text}")
            else:
                lines.append(f"- {text}")
        return "\n".join(lines)

    def _render_checklist(self, block: ChecklistBlock) -> str:
        items = self._items(block, block.items)
        lines: list[str] = []
        for item in items:
            text = markup_to_markdown(getattr(item, "text", ""))
            mark = "x" if getattr(item, "checked", False) else " "
            lines.append(f"- [{mark}] {text}")
        return "\n".join(lines)

    def _render_quote(self, block: QuoteBlock) -> str:
        return f"> {markup_to_markdown(block.text)}"

    def _render_code(self, block: CodeBlock) -> str:
        code = block.code if isinstance(block.code, str) else ""
        language = block.language if isinstance(block.language, str) else ""
        return f"```{language}\n{code}\n```"

    def _render_delimiter(self, block: DelimiterBlock) -> str:
        return "---"

    def _render_table(self, block: TableBlock) -> str:
        return render_table(coerce_rows(self._items(block, block.rows)))

    def _render_image(self, block: ImageBlock) -> str:
        url = block.url if isinstance(block.url, str) else ""
        return f"![{markup_to_markdown(block.caption)}]({url})"

    def _render_unknown(self, block: UnknownBlock) -> str:
        self.warnings.append(ConversionWarning(
            code="UNKNOWN_BLOCK",
            message=f"Block type {block.type!r} has no Markdown form.",
            context={"type": block.type, "policy": self._config.unknown_block_policy},
        ))
        if self._config.unknown_block_policy == "skip":
            return ""
        data = block.data if isinstance(block.data, dict) else {}
        text = data.get("text")
        return markup_to_markdown(text) if isinstance(text, str) else ""

    # ------------------------------------------------------------------
    # Fallbacks
    # ------------------------------------------------------------------

    def _render_unrecognized(self, block: object) -> str:
        """Render an object that is not a block: its ``text`` attribute, if any."""
        self.warnings.append(ConversionWarning(
            code="UNRECOGNIZED_BLOCK",
            message=f"Object of type {type(block).__name__} is not a block.",
            context={"type": type(block).__name__},
        ))
        return markup_to_markdown(getattr(block, "text", None))

    def _items(self, block: Block, items: object) -> list:
        """Return *items* if it is a list, else record a warning and return ``[]``."""
        if isinstance(items, list):
            return items
        self.warnings.append(ConversionWarning(
            code="MALFORMED_PAYLOAD",
            message=f"{_kind_name(block)} block items are not a list; rendered empty.",
            context={"kind": _kind_name(block), "type": type(items).__name__},
        ))
        return []


# ------------------------------------------------------------------
# Block renderer dispatch table
# ------------------------------------------------------------------

_BlockRenderer = _Callable[["BlocksToMarkdownRenderer", Block], str]

_BLOCK_RENDERERS: dict[BlockKind, _BlockRenderer] = {
    BlockKind.HEADING: BlocksToMarkdownRenderer._render_heading,
    BlockKind.PARAGRAPH: BlocksToMarkdownRenderer._render_paragraph,
    BlockKind.LIST: BlocksToMarkdownRenderer._render_list,
    BlockKind.CHECKLIST: BlocksToMarkdownRenderer._render_checklist,
    BlockKind.QUOTE: BlocksToMarkdownRenderer._render_quote,
    BlockKind.CODE: BlocksToMarkdownRenderer._render_code,
    BlockKind.DELIMITER: BlocksToMarkdownRenderer._render_delimiter,
    BlockKind.TABLE: BlocksToMarkdownRenderer._render_table,
    BlockKind.IMAGE: BlocksToMarkdownRenderer._render_image,
    BlockKind.UNKNOWN: BlocksToMarkdownRenderer._render_unknown,
}


def _kind_name(block: object) -> str:
    kind = getattr(block, "kind", None)
    return kind.value if isinstance(kind, BlockKind) else type(block).__name__
