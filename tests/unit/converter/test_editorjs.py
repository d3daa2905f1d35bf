"""Tests for the editor JSON codec (converter/editorjs.py)."""

import json

import pytest

from blockmark.converter.editorjs import (
    block_to_editorjs,
    document_from_editorjs,
    document_to_editorjs,
)
from blockmark.models import (
    BlockDocument,
    ChecklistBlock,
    ChecklistItem,
    CodeBlock,
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


def one_block(raw):
    document, warnings = document_from_editorjs({"blocks": [raw]})
    assert len(document.blocks) == 1
    return document.blocks[0], warnings


# =========================================================================
# Reading editor JSON
# =========================================================================

class TestReadBlocks:
    def test_header(self):
        block, warnings = one_block({"type": "header", "data": {"text": "T", "level": 3}})
        assert block == HeadingBlock(text="T", level=3)
        assert warnings == []

    @pytest.mark.parametrize("level, expected", [
        ("2", 2), (None, 1), (True, 1), ("big", 1), (0, 1), (9, 6),
    ])
    def test_header_level_coercion(self, level, expected):
        block, _ = one_block({"type": "header", "data": {"text": "T", "level": level}})
        assert block.level == expected

    def test_paragraph(self):
        block, _ = one_block({"type": "paragraph", "data": {"text": "a <b>b</b>"}})
        assert block == ParagraphBlock(text="a <b>b</b>")

    def test_list_styles(self):
        ordered, _ = one_block({"type": "list", "data": {"style": "ordered", "items": ["a"]}})
        unordered, _ = one_block({"type": "list", "data": {"items": ["b"]}})
        assert ordered == ListBlock(style=ListStyle.ORDERED, items=["a"])
        assert unordered == ListBlock(style=ListStyle.UNORDERED, items=["b"])

    def test_nested_list_item_objects(self):
        block, _ = one_block({"type": "list", "data": {"style": "unordered", "items": [
            {"content": "first", "items": []},
            {"text": "second"},
            7,
        ]}})
        assert block.items == ["first", "second", ""]

    def test_checklist(self):
        block, _ = one_block({"type": "checklist", "data": {"items": [
            {"text": "a", "checked": True},
            {"text": "b"},
            "c",
        ]}})
        assert block == ChecklistBlock(items=[
            ChecklistItem(text="a", checked=True),
            ChecklistItem(text="b"),
            ChecklistItem(text="c"),
        ])

    def test_quote_code_delimiter(self):
        document, _ = document_from_editorjs({"blocks": [
            {"type": "quote", "data": {"text": "q", "caption": "", "alignment": "left"}},
            {"type": "code", "data": {"code": "x = 1", "language": "python"}},
            {"type": "code", "data": {"code": "y"}},
            {"type": "delimiter", "data": {}},
        ]})
        assert document.blocks == [
            QuoteBlock(text="q"),
            CodeBlock(code="x = 1", language="python"),
            CodeBlock(code="y"),
            DelimiterBlock(),
        ]

    def test_table(self):
        block, _ = one_block({"type": "table", "data": {
            "withHeadings": False, "content": [["a", "b"], ["c", None]],
        }})
        assert block == TableBlock(rows=[["a", "b"], ["c", ""]], with_headings=False)

    def test_image_url_or_file_url(self):
        direct, _ = one_block({"type": "image", "data": {"url": "u1", "caption": "c"}})
        nested, _ = one_block({"type": "image", "data": {"file": {"url": "u2"}}})
        assert direct == ImageBlock(url="u1", caption="c")
        assert nested == ImageBlock(url="u2")

    def test_unknown_type_preserved(self):
        block, warnings = one_block({"type": "warning", "data": {"title": "t", "message": "m"}})
        assert block == UnknownBlock(type="warning", data={"title": "t", "message": "m"})
        assert warnings == []


class TestReadDocument:
    def test_metadata(self):
        document, _ = document_from_editorjs({"time": 123, "blocks": [], "version": "2.28.2"})
        assert (document.time, document.version) == (123, "2.28.2")

    @pytest.mark.parametrize("data", [None, "text", 5, []])
    def test_non_dict_yields_empty_document(self, data):
        document, warnings = document_from_editorjs(data)
        assert document == BlockDocument()
        assert warnings == []

    def test_blocks_not_a_list(self):
        document, warnings = document_from_editorjs({"blocks": "nope"})
        assert document.blocks == []
        assert [w.context["field"] for w in warnings] == ["blocks"]

    def test_bad_metadata_types_defaulted(self):
        document, _ = document_from_editorjs({"time": True, "version": 2, "blocks": []})
        assert (document.time, document.version) == (0, "")

    def test_non_dict_block_skipped_with_warning(self):
        document, warnings = document_from_editorjs({"blocks": [
            "junk", {"type": "paragraph", "data": {"text": "ok"}},
        ]})
        assert document.blocks == [ParagraphBlock(text="ok")]
        assert [w.code for w in warnings] == ["MALFORMED_PAYLOAD"]
        assert warnings[0].context["index"] == 0

    def test_non_string_text_coerced(self):
        block, warnings = one_block({"type": "paragraph", "data": {"text": 42}})
        assert block == ParagraphBlock(text="")
        assert warnings[0].context == {"index": 0, "field": "text", "type": "int"}

    def test_missing_data(self):
        block, warnings = one_block({"type": "paragraph"})
        assert block == ParagraphBlock(text="")
        assert warnings == []

    def test_non_list_items_coerced(self):
        block, warnings = one_block({"type": "list", "data": {"items": "a,b"}})
        assert block == ListBlock(style=ListStyle.UNORDERED, items=[])
        assert [w.context["field"] for w in warnings] == ["items"]


# =========================================================================
# Writing editor JSON
# =========================================================================

class TestWrite:
    def test_header_type_name(self):
        assert block_to_editorjs(HeadingBlock(text="T", level=2)) == {
            "type": "header", "data": {"text": "T", "level": 2},
        }

    def test_code_language_omitted_when_empty(self):
        assert block_to_editorjs(CodeBlock(code="x")) == {"type": "code", "data": {"code": "x"}}

    def test_table_field_names(self):
        assert block_to_editorjs(TableBlock(rows=[["a"]])) == {
            "type": "table", "data": {"withHeadings": True, "content": [["a"]]},
        }

    def test_unknown_payload_passthrough(self):
        block = UnknownBlock(type="embed", data={"service": "youtube"})
        assert block_to_editorjs(block) == {"type": "embed", "data": {"service": "youtube"}}

    def test_document_shape(self):
        document = BlockDocument(
            blocks=[
                ListBlock(style=ListStyle.ORDERED, items=["a"]),
                ChecklistBlock(items=[ChecklistItem(text="b", checked=True)]),
                DelimiterBlock(),
            ],
            time=5,
            version="2.28.2",
        )
        assert document_to_editorjs(document) == {
            "time": 5,
            "blocks": [
                {"type": "list", "data": {"style": "ordered", "items": ["a"]}},
                {"type": "checklist", "data": {"items": [{"text": "b", "checked": True}]}},
                {"type": "delimiter", "data": {}},
            ],
            "version": "2.28.2",
        }

    def test_output_is_json_serialisable(self):
        document = BlockDocument(blocks=[ImageBlock(url="u", caption="c")], time=1, version="v")
        assert json.loads(json.dumps(document_to_editorjs(document)))["blocks"][0]["type"] == "image"

    def test_read_back_equals_original(self):
        document = BlockDocument(
            blocks=[
                HeadingBlock(text="T", level=4),
                ParagraphBlock(text="<i>p</i>"),
                QuoteBlock(text="q"),
                CodeBlock(code="c", language="go"),
                TableBlock(rows=[["h"], ["v"]]),
                ImageBlock(url="u"),
                UnknownBlock(type="raw", data={"html": "<p/>"}),
            ],
            time=9,
            version="2.28.2",
        )
        restored, warnings = document_from_editorjs(document_to_editorjs(document))
        assert restored == document
        assert warnings == []
