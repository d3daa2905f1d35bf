"""Editor exchange codec: block-editor JSON <-> :class:`BlockDocument`.

The editing surface exchanges documents as a single JSON value::

    {
        "time": 1719835200000,
        "blocks": [
            {"type": "header", "data": {"text": "Title", "level": 2}},
            {"type": "paragraph", "data": {"text": "Some <b>bold</b> text"}},
            {"type": "list", "data": {"style": "ordered", "items": ["a", "b"]}},
            {"type": "checklist", "data": {"items": [{"text": "x", "checked": true}]}},
            {"type": "quote", "data": {"text": "..."}},
            {"type": "code", "data": {"code": "print()", "language": "python"}},
            {"type": "delimiter", "data": {}},
            {"type": "table", "data": {"withHeadings": true, "content": [["a", "b"]]}},
            {"type": "image", "data": {"url": "https://...", "caption": ""}}
        ],
        "version": "2.28.2"
    }

Reading is lenient: the editor's plugins are not under our control, so
any field with the wrong shape is coerced (non-string text to ``""``,
non-list items to ``[]``) and reported as a :class:`ConversionWarning`.
Unknown block types become :class:`UnknownBlock` and keep their payload.
"""

from __future__ import annotations

from typing import Any

from blockmark.converter.tables import coerce_rows
from blockmark.models import (
    Block,
    BlockDocument,
    ChecklistBlock,
    ChecklistItem,
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
)

# The editor calls headings "header".
_HEADING_TYPE = "header"


class _Reader:
    """Collects coercion warnings while decoding one editor document."""

    def __init__(self) -> None:
        self.warnings: list[ConversionWarning] = []

    def coerced(self, index: int, field: str, value: Any) -> None:
        self.warnings.append(ConversionWarning(
            code="MALFORMED_PAYLOAD",
            message=f"Block {index}: field {field!r} has unexpected type {type(value).__name__}.",
            context={"index": index, "field": field, "type": type(value).__name__},
        ))

    def text(self, index: int, data: dict, field: str) -> str:
        value = data.get(field, "")
        if isinstance(value, str):
            return value
        if value is not None:
            self.coerced(index, field, value)
        return ""

    def items(self, index: int, data: dict, field: str) -> list:
        value = data.get(field, [])
        if isinstance(value, list):
            return value
        self.coerced(index, field, value)
        return []

    def block(self, index: int, raw: Any) -> Block | None:
        if not isinstance(raw, dict):
            self.coerced(index, "block", raw)
            return None
        block_type = raw.get("type", "")
        data = raw.get("data")
        if not isinstance(data, dict):
            if data is not None:
                self.coerced(index, "data", data)
            data = {}

        if block_type == _HEADING_TYPE:
            return HeadingBlock(
                text=self.text(index, data, "text"),
                level=_coerce_level(data.get("level")),
            )
        if block_type == "paragraph":
            return ParagraphBlock(text=self.text(index, data, "text"))
        if block_type == "list":
            style = ListStyle.ORDERED if data.get("style") == "ordered" else ListStyle.UNORDERED
            return ListBlock(
                style=style,
                items=[_list_item_text(item) for item in self.items(index, data, "items")],
            )
        if block_type == "checklist":
            return ChecklistBlock(items=[
                _checklist_item(item) for item in self.items(index, data, "items")
            ])
        if block_type == "quote":
            return QuoteBlock(text=self.text(index, data, "text"))
        if block_type == "code":
            return CodeBlock(
                code=self.text(index, data, "code"),
                language=self.text(index, data, "language"),
            )
        if block_type == "delimiter":
            return DelimiterBlock()
        if block_type == "table":
            return TableBlock(
                rows=coerce_rows(self.items(index, data, "content")),
                with_headings=bool(data.get("withHeadings", True)),
            )
        if block_type == "image":
            url = data.get("url")
            if url is None and isinstance(data.get("file"), dict):
                url = data["file"].get("url")
            return ImageBlock(
                url=url if isinstance(url, str) else "",
                caption=self.text(index, data, "caption"),
            )
        return UnknownBlock(type=str(block_type), data=data)


def _coerce_level(value: Any) -> int:
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return 1


def _list_item_text(item: Any) -> str:
    """Strings pass through; nested-list objects contribute ``content`` or ``text``."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for key in ("content", "text"):
            value = item.get(key)
            if isinstance(value, str) and value:
                return value
    return ""


def _checklist_item(item: Any) -> ChecklistItem:
    if isinstance(item, str):
        return ChecklistItem(text=item)
    if isinstance(item, dict):
        return ChecklistItem(
            text=_list_item_text(item),
            checked=bool(item.get("checked", False)),
        )
    return ChecklistItem(text="")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def document_from_editorjs(data: Any) -> tuple[BlockDocument, list[ConversionWarning]]:
    """Build a :class:`BlockDocument` from the editor's JSON value.

    Never raises.  A non-dict *data* or a missing ``blocks`` list yields an
    empty document.
    """
    reader = _Reader()
    if not isinstance(data, dict):
        return BlockDocument(), reader.warnings

    raw_blocks = data.get("blocks", [])
    if not isinstance(raw_blocks, list):
        reader.coerced(-1, "blocks", raw_blocks)
        raw_blocks = []

    blocks: list[Block] = []
    for index, raw in enumerate(raw_blocks):
        block = reader.block(index, raw)
        if block is not None:
            blocks.append(block)

    time_value = data.get("time", 0)
    version = data.get("version", "")
    document = BlockDocument(
        blocks=blocks,
        time=time_value if isinstance(time_value, int) and not isinstance(time_value, bool) else 0,
        version=version if isinstance(version, str) else "",
    )
    return document, reader.warnings


def block_to_editorjs(block: Block) -> dict[str, Any]:
    """Serialize one block to ``{"type": ..., "data": {...}}``."""
    if isinstance(block, HeadingBlock):
        return {"type": _HEADING_TYPE, "data": {"text": block.text, "level": block.level}}
    if isinstance(block, ParagraphBlock):
        return {"type": "paragraph", "data": {"text": block.text}}
    if isinstance(block, ListBlock):
        return {"type": "list", "data": {"style": block.style.value, "items": list(block.items)}}
    if isinstance(block, ChecklistBlock):
        return {"type": "checklist", "data": {"items": [
            {"text": item.text, "checked": item.checked} for item in block.items
        ]}}
    if isinstance(block, QuoteBlock):
        return {"type": "quote", "data": {"text": block.text}}
    if isinstance(block, CodeBlock):
        data: dict[str, Any] = {"code": block.code}
        if block.language:
            data["language"] = block.language
        return {"type": "code", "data": data}
    if isinstance(block, DelimiterBlock):
        return {"type": "delimiter", "data": {}}
    if isinstance(block, TableBlock):
        return {"type": "table", "data": {
            "withHeadings": block.with_headings,
            "content": [list(row) for row in block.rows],
        }}
    if isinstance(block, ImageBlock):
        return {"type": "image", "data": {"url": block.url, "caption": block.caption}}
    return {"type": block.type, "data": dict(block.data)}


def document_to_editorjs(document: BlockDocument) -> dict[str, Any]:
    """Serialize *document* to the editor's JSON value."""
    return {
        "time": document.time,
        "blocks": [block_to_editorjs(block) for block in document.blocks],
        "version": document.version,
    }
