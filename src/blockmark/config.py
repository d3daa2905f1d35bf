"""Configuration for blockmark.

:class:`BlockmarkConfig` is a plain dataclass that captures every tuneable
knob of the transcoder, the editor exchange codec, and the vault session.
Instances are passed to :class:`~blockmark.transcoder.Transcoder` and to the
converter classes directly.
"""

from __future__ import annotations

import dataclasses
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from blockmark.errors import BlockmarkConfigError

DEFAULT_EDITOR_VERSION = "2.28.2"
"""Format-version tag stamped on freshly decoded block documents."""


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class BlockmarkConfig:
    """Complete configuration for the transcoder and vault session.

    Every parameter has a default, so ``BlockmarkConfig()`` is usable as-is.

    Parameters
    ----------
    editor_version:
        Format-version tag written to ``BlockDocument.version`` by the
        decoder.  Opaque to the transcoder.
    clock:
        Zero-argument callable returning milliseconds since the epoch.
        Used for ``BlockDocument.time``.  Override for deterministic tests.
    unknown_block_policy:
        How the encoder renders block types it does not recognise.

        * ``"text"`` -- render the block's ``text`` field (if it is a
          string) with inline markup converted; otherwise nothing.
        * ``"skip"`` -- drop the block.
    encoding:
        Text encoding of stored documents.
    document_suffix:
        File suffix appended to vault document names that lack one.
    autosave_enabled:
        Whether :class:`~blockmark.vault.NoteSession` schedules a save on
        every edit.
    autosave_debounce_seconds:
        Quiet period after the last edit before an auto-save fires.
    metrics:
        Optional :class:`~blockmark.observability.MetricsHook` backend.
    debug_dump_blocks:
        Write the decoded block document as JSON to *stderr*.
    debug_dump_markdown:
        Write the encoded Markdown to *stderr*.
    """

    # ── Document format ────────────────────────────────────────────────
    editor_version: str = DEFAULT_EDITOR_VERSION

    clock: Callable[[], int] = field(default=_now_ms, repr=False)

    # ── Encoding ───────────────────────────────────────────────────────
    unknown_block_policy: Literal["text", "skip"] = "text"

    # ── Storage ────────────────────────────────────────────────────────
    encoding: str = "utf-8"

    document_suffix: str = ".md"

    # ── Auto-save ──────────────────────────────────────────────────────
    autosave_enabled: bool = True

    autosave_debounce_seconds: float = 3.0

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ──────────────────────────────────────────────────────────
    debug_dump_blocks: bool = False

    debug_dump_markdown: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.unknown_block_policy not in ("text", "skip"):
            raise BlockmarkConfigError(
                f"unknown_block_policy must be 'text' or 'skip', got {self.unknown_block_policy!r}",
                context={"field": "unknown_block_policy", "value": self.unknown_block_policy},
            )
        if self.autosave_debounce_seconds < 0:
            raise BlockmarkConfigError(
                f"autosave_debounce_seconds must be >= 0, got {self.autosave_debounce_seconds}",
                context={
                    "field": "autosave_debounce_seconds",
                    "value": self.autosave_debounce_seconds,
                },
            )
        if not self.document_suffix.startswith("."):
            raise BlockmarkConfigError(
                f"document_suffix must start with '.', got {self.document_suffix!r}",
                context={"field": "document_suffix", "value": self.document_suffix},
            )
        try:
            "".encode(self.encoding)
        except LookupError as exc:
            raise BlockmarkConfigError(
                f"Unknown encoding: {self.encoding!r}",
                context={"field": "encoding", "value": self.encoding},
                cause=exc,
            ) from exc

    def replace(self, **changes: Any) -> BlockmarkConfig:
        """Return a copy of this config with *changes* applied."""
        return dataclasses.replace(self, **changes)
