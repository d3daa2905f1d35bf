"""Inline formatting: Markdown marks <-> editor markup.

The editor stores inline formatting as a small HTML vocabulary inside each
block's text (``<b>``, ``<i>``, ``<mark>``, ``<code>``, ``<a href>``).
Markdown stores the same marks as ``**bold**``, ``*italic*``,
``==highlight==``, ```code``` and ``[text](url)``.

Both directions are a flat, ordered list of regex substitutions, not a
recursive inline parser.  Overlapping markers are resolved by
substitution order (bold before italic), so nested emphasis such as
``***x***`` does not round-trip and callers must not rely on it.

Code spans are the one exception to "independent": their contents are
shielded from the emphasis substitutions so ```a*b*c``` stays literal.
Link targets are shielded the same way.

Markdown text is HTML-escaped before any substitution, so a literal
``<``, ``>`` or ``&`` in the source reaches the markup as ``&lt;``,
``&gt;`` or ``&amp;`` and is decoded back on the way out instead of being
read as a tag or an entity.
"""

from __future__ import annotations

import re
from typing import Any

from mistune.util import striptags

# ---------------------------------------------------------------------------
# Markdown -> markup
# ---------------------------------------------------------------------------

_CODE_SPAN_RE = re.compile(r"`([^`\n]+)`")
_LINK_RE = re.compile(r"(?<!!)\[([^\]\n]+)\]\(([^)\s]+)\)")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_HIGHLIGHT_RE = re.compile(r"==(.*?)==")

_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_ESCAPE_RE = re.compile(r"[&<>]")

# Private-use code points delimit shielded-fragment indices.
_SHIELD_OPEN = "\ue000"
_SHIELD_CLOSE = "\ue001"
_SHIELD_RE = re.compile(f"{_SHIELD_OPEN}(\\d+){_SHIELD_CLOSE}")


def escape_markup(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` in one pass.

    The inverse of :func:`decode_entities` for those three characters.
    """
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def markdown_to_markup(text: str) -> str:
    """Convert Markdown inline marks in *text* to editor markup.

    The text is escaped first; substitutions then run in a fixed order:
    code spans, links, bold, italic, highlight.  Text without markers or
    HTML-special characters is returned unchanged.

    Examples
    --------
    >>> markdown_to_markup("**a** and *b* and ==c==")
    '<b>a</b> and <i>b</i> and <mark>c</mark>'
    >>> markdown_to_markup("`Vec<T>`")
    '<code>Vec&lt;T&gt;</code>'
    """
    text = escape_markup(text)
    shielded: list[str] = []

    def _shield(value: str) -> str:
        shielded.append(value)
        return f"{_SHIELD_OPEN}{len(shielded) - 1}{_SHIELD_CLOSE}"

    text = _CODE_SPAN_RE.sub(lambda m: _shield(f"<code>{m.group(1)}</code>"), text)
    text = _LINK_RE.sub(
        lambda m: f'<a href="{_shield(m.group(2))}">{m.group(1)}</a>', text,
    )
    text = _BOLD_RE.sub(r"<b>\1</b>", text)
    text = _ITALIC_RE.sub(r"<i>\1</i>", text)
    text = _HIGHLIGHT_RE.sub(r"<mark>\1</mark>", text)

    if shielded:
        text = _SHIELD_RE.sub(lambda m: _restore(m, shielded), text)
    return text


def _restore(match: re.Match[str], shielded: list[str]) -> str:
    index = int(match.group(1))
    # Placeholder-like text already present in the input is left alone.
    return shielded[index] if index < len(shielded) else match.group(0)


# ---------------------------------------------------------------------------
# Markup -> Markdown
# ---------------------------------------------------------------------------

_MARKUP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"<code(?:\s[^>]*)?>([^<]+)</code>"), r"`\1`"),
    (re.compile(r"<(?:b|strong)>([^<]+)</(?:b|strong)>"), r"**\1**"),
    (re.compile(r"<(?:i|em)>([^<]+)</(?:i|em)>"), r"*\1*"),
    (re.compile(r"<mark(?:\s[^>]*)?>([^<]+)</mark>"), r"==\1=="),
    (re.compile(r'<a\s+href="([^"]+)"[^>]*>([^<]+)</a>'), r"[\2](\1)"),
)

_ENTITIES: dict[str, str] = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
}

_ENTITY_RE = re.compile(r"&(nbsp|amp|lt|gt);")

# Each pass unwraps one level of tags; the bound covers any sane nesting.
_MAX_PASSES = 8


def decode_entities(text: str) -> str:
    """Decode ``&nbsp;``, ``&amp;``, ``&lt;`` and ``&gt;`` in a single pass."""
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(1)], text)


def markup_to_markdown(text: Any) -> str:
    """Convert editor markup back to Markdown inline syntax.

    Known tags become their Markdown marks, every other tag is stripped,
    and the four entities the editor emits are decoded.  A non-string
    *text* (a malformed payload) renders as the empty string.

    Examples
    --------
    >>> markup_to_markdown('<b>a</b> &amp; <a href="https://x.io">b</a>')
    '**a** & [b](https://x.io)'
    """
    if not isinstance(text, str):
        return ""

    for _ in range(_MAX_PASSES):
        previous = text
        for pattern, replacement in _MARKUP_RULES:
            text = pattern.sub(replacement, text)
        if text == previous:
            break

    return decode_entities(striptags(text))
