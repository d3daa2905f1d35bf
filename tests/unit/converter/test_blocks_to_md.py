"""Tests for BlocksToMarkdownRenderer (block document -> Markdown)."""

import pytest

from blockmark.config import BlockmarkConfig
from blockmark.converter.blocks_to_md import BlocksToMarkdownRenderer
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


def render(*blocks, **kwargs):
    renderer = BlocksToMarkdownRenderer(BlockmarkConfig(**kwargs))
    return renderer.render_document(BlockDocument(blocks=list(blocks)))


def render_with_warnings(*blocks, **kwargs):
    renderer = BlocksToMarkdownRenderer(BlockmarkConfig(**kwargs))
    md = renderer.render_document(BlockDocument(blocks=list(blocks)))
    return md, renderer.warnings


# =========================================================================
# Per-kind rendering
# =========================================================================

class TestHeading:
    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6])
    def test_levels(self, level):
        assert render(HeadingBlock(text="T", level=level)) == "#" * level + " T"

    def test_level_clamped_on_construction(self):
        assert render(HeadingBlock(text="T", level=12)) == "###### T"

    def test_level_clamped_after_mutation(self):
        block = HeadingBlock(text="T", level=2)
        block.level = 0
        assert render(block) == "# T"

    def test_non_int_level_renders_as_one(self):
        block = HeadingBlock(text="T")
        block.level = "three"
        assert render(block) == "# T"

    def test_inline_markup_converted(self):
        assert render(HeadingBlock(text="<b>Bold</b> title", level=2)) == "## **Bold** title"


class TestParagraph:
    def test_plain(self):
        assert render(ParagraphBlock(text="Hello")) == "Hello"

    def test_markup(self):
        block = ParagraphBlock(text='<i>a</i> <mark class="cdx-marker">b</mark> <a href="u">c</a>')
        assert render(block) == "*a* ==b== [c](u)"

    def test_entities(self):
        assert render(ParagraphBlock(text="fish&nbsp;&amp;&nbsp;chips")) == "fish & chips"


class TestList:
    def test_unordered(self):
        assert render(ListBlock(style=ListStyle.UNORDERED, items=["a", "b"])) == "- a\n- b"

    def test_ordered_renumbered_from_one(self):
        md = render(ListBlock(style=ListStyle.ORDERED, items=["x", "y", "z"]))
        assert md == "1. x\n2. y\n3. z"

    def test_items_markup(self):
        assert render(ListBlock(style=ListStyle.UNORDERED, items=["<b>a</b>"])) == "- **a**"

    def test_non_string_item_renders_empty_text(self):
        block = ListBlock(style=ListStyle.UNORDERED, items=["a", 3])
        assert render(block) == "- a\n- "

    def test_non_list_items_warns_and_drops(self):
        block = ListBlock(style=ListStyle.UNORDERED, items="oops")
        md, warnings = render_with_warnings(block)
        assert md == ""
        assert [w.code for w in warnings] == ["MALFORMED_PAYLOAD", "EMPTY_BLOCK_DROPPED"]


class TestChecklist:
    def test_marks(self):
        block = ChecklistBlock(items=[
            ChecklistItem(text="done", checked=True),
            ChecklistItem(text="todo"),
        ])
        assert render(block) == "- [x] done\n- [ ] todo"

    def test_item_markup(self):
        block = ChecklistBlock(items=[ChecklistItem(text="<code>x</code>")])
        assert render(block) == "- [ ] `x`"


class TestOtherKinds:
    def test_quote(self):
        assert render(QuoteBlock(text="wise <i>words</i>")) == "> wise *words*"

    def test_code_with_language(self):
        assert render(CodeBlock(code="a = 1\nb = 2", language="py")) == "```py\na = 1\nb = 2\n```"

    def test_code_verbatim(self):
        assert render(CodeBlock(code="<b>x</b> **y**")) == "```\n<b>x</b> **y**\n```"

    def test_delimiter(self):
        assert render(DelimiterBlock()) == "---"

    def test_table(self):
        md = render(TableBlock(rows=[["a", "b"], ["1", "2"]]))
        assert md == "| a | b |\n| --- | --- |\n| 1 | 2 |"

    def test_empty_table_dropped(self):
        md, warnings = render_with_warnings(TableBlock(rows=[]))
        assert md == ""
        assert [w.code for w in warnings] == ["EMPTY_BLOCK_DROPPED"]

    def test_image(self):
        assert render(ImageBlock(url="https://x.io/a.png", caption="A")) == "![A](https://x.io/a.png)"

    def test_image_without_caption(self):
        assert render(ImageBlock(url="a.png")) == "![](a.png)"


# =========================================================================
# Unknown and unrecognised blocks
# =========================================================================

class TestUnknown:
    def test_text_policy_renders_payload_text(self):
        md, warnings = render_with_warnings(
            UnknownBlock(type="warning", data={"text": "<b>careful</b>", "title": "t"}),
        )
        assert md == "**careful**"
        assert [w.code for w in warnings] == ["UNKNOWN_BLOCK"]
        assert warnings[0].context == {"type": "warning", "policy": "text"}

    def test_text_policy_without_text_is_dropped(self):
        md, warnings = render_with_warnings(UnknownBlock(type="embed", data={"url": "x"}))
        assert md == ""
        assert [w.code for w in warnings] == ["UNKNOWN_BLOCK", "EMPTY_BLOCK_DROPPED"]

    def test_skip_policy(self):
        md = render(
            ParagraphBlock(text="a"),
            UnknownBlock(type="warning", data={"text": "hidden"}),
            ParagraphBlock(text="b"),
            unknown_block_policy="skip",
        )
        assert md == "a\n\nb"

    def test_non_block_object_uses_text_attribute(self):
        class Foreign:
            text = "<i>x</i>"

        renderer = BlocksToMarkdownRenderer(BlockmarkConfig())
        assert renderer.render_block(Foreign()) == "*x*"
        assert [w.code for w in renderer.warnings] == ["UNRECOGNIZED_BLOCK"]

    def test_non_block_object_without_text(self):
        renderer = BlocksToMarkdownRenderer(BlockmarkConfig())
        assert renderer.render_block(object()) == ""


# =========================================================================
# Document assembly
# =========================================================================

class TestDocumentAssembly:
    def test_chunks_joined_by_blank_line(self):
        md = render(HeadingBlock(text="T"), ParagraphBlock(text="p"), DelimiterBlock())
        assert md == "# T\n\np\n\n---"

    def test_empty_document(self):
        assert render() == ""

    def test_empty_paragraph_leaves_no_gap(self):
        md, warnings = render_with_warnings(
            ParagraphBlock(text="a"),
            ParagraphBlock(text=""),
            ParagraphBlock(text="   "),
            ParagraphBlock(text="b"),
        )
        assert md == "a\n\nb"
        assert "\n\n\n" not in md
        assert [w.context["index"] for w in warnings] == [1, 2]

    def test_markup_only_paragraph_dropped(self):
        assert render(ParagraphBlock(text="<br>"), ParagraphBlock(text="b")) == "b"

    def test_no_trailing_newline(self):
        assert not render(ParagraphBlock(text="a")).endswith("\n")

    def test_warnings_reset_between_calls(self):
        renderer = BlocksToMarkdownRenderer(BlockmarkConfig())
        renderer.render_blocks([ParagraphBlock(text="")])
        assert renderer.warnings
        renderer.render_blocks([ParagraphBlock(text="x")])
        assert renderer.warnings == []

    def test_document_not_mutated(self):
        doc = BlockDocument(blocks=[ListBlock(style=ListStyle.ORDERED, items=["a"])])
        BlocksToMarkdownRenderer(BlockmarkConfig()).render_document(doc)
        assert doc.blocks == [ListBlock(style=ListStyle.ORDERED, items=["a"])]

    def test_debug_dump_goes_to_stderr(self, capsys):
        render(ParagraphBlock(text="x"), debug_dump_markdown=True)
        captured = capsys.readouterr()
        assert "[blockmark] Encoded markdown:" in captured.err
        assert captured.out == ""
