"""blockmark — two-way Markdown / block-document transcoder.

Public re-exports
-----------------

* **Facade:** :class:`Transcoder`
* **Configuration:** :class:`BlockmarkConfig`
* **Errors:** Every :class:`BlockmarkError` subclass and :class:`ErrorCode`
* **Models:** The block document, every block kind, and result types
* **Vault:** :class:`VaultStore`, :class:`NoteSession`

Usage::

    from blockmark import Transcoder

    transcoder = Transcoder()
    document = transcoder.decode("# Hello\\n\\n- [x] done\\n- [ ] todo")
    markdown = transcoder.encode(document)
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from blockmark.config import DEFAULT_EDITOR_VERSION, BlockmarkConfig

# ── Errors ──────────────────────────────────────────────────────────────
from blockmark.errors import (
    BlockmarkConfigError,
    BlockmarkError,
    BlockmarkInvalidVaultError,
    BlockmarkNotFoundError,
    BlockmarkPathError,
    BlockmarkPermissionError,
    BlockmarkStorageError,
    ErrorCode,
)

# ── Models ──────────────────────────────────────────────────────────────
from blockmark.models import (
    Block,
    BlockDocument,
    BlockKind,
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
    QuoteBlock,
    TableBlock,
    UnknownBlock,
)

# ── Facade ──────────────────────────────────────────────────────────────
from blockmark.transcoder import Transcoder

# ── Vault ───────────────────────────────────────────────────────────────
from blockmark.vault import NoteSession, VaultStore

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Facade
    "Transcoder",
    # Configuration
    "BlockmarkConfig",
    "DEFAULT_EDITOR_VERSION",
    # Errors
    "BlockmarkError",
    "ErrorCode",
    "BlockmarkConfigError",
    "BlockmarkStorageError",
    "BlockmarkNotFoundError",
    "BlockmarkPermissionError",
    "BlockmarkPathError",
    "BlockmarkInvalidVaultError",
    # Models — document and blocks
    "Block",
    "BlockDocument",
    "BlockKind",
    "ListStyle",
    "HeadingBlock",
    "ParagraphBlock",
    "ListBlock",
    "ChecklistBlock",
    "ChecklistItem",
    "QuoteBlock",
    "CodeBlock",
    "DelimiterBlock",
    "TableBlock",
    "ImageBlock",
    "UnknownBlock",
    # Models — results
    "ConversionWarning",
    "DecodeResult",
    # Vault
    "VaultStore",
    "NoteSession",
]
