"""Markdown <-> block document conversion.

Public API:

- :class:`MarkdownToBlocksConverter` -- Markdown -> block document.
- :class:`BlocksToMarkdownRenderer` -- block document -> Markdown.
- :func:`markdown_to_markup` / :func:`markup_to_markdown` -- inline marks.
- :func:`document_from_editorjs` / :func:`document_to_editorjs` -- the
  editor's JSON exchange format.
"""

from blockmark.converter.blocks_to_md import BlocksToMarkdownRenderer
from blockmark.converter.editorjs import document_from_editorjs, document_to_editorjs
from blockmark.converter.inline import markdown_to_markup, markup_to_markdown
from blockmark.converter.md_to_blocks import MarkdownToBlocksConverter

__all__ = [
    "BlocksToMarkdownRenderer",
    "MarkdownToBlocksConverter",
    "document_from_editorjs",
    "document_to_editorjs",
    "markdown_to_markup",
    "markup_to_markdown",
]
