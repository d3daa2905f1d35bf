"""Transcoder facade.

:class:`Transcoder` bundles the decoder, the encoder and the editor codec
behind one configuration object and adds the ambient concerns the pure
converters leave out: byte decoding for storage, metrics, and logging.

Usage::

    from blockmark import Transcoder

    transcoder = Transcoder()
    document = transcoder.decode("# Title\\n\\n- a\\n- b")
    markdown = transcoder.encode(document)

Every method is safe to call concurrently on independent inputs; no state
is shared between calls.
"""

from __future__ import annotations

import time
from typing import Any

from blockmark.config import BlockmarkConfig
from blockmark.converter.blocks_to_md import BlocksToMarkdownRenderer
from blockmark.converter.editorjs import document_from_editorjs, document_to_editorjs
from blockmark.converter.md_to_blocks import MarkdownToBlocksConverter
from blockmark.models import BlockDocument, ConversionWarning, DecodeResult
from blockmark.observability import get_logger, resolve_metrics

log = get_logger("blockmark.transcoder")


class Transcoder:
    """Markdown <-> block document conversion with observability.

    Parameters
    ----------
    config:
        Configuration.  Defaults to ``BlockmarkConfig()``.
    **kwargs:
        When *config* is omitted, forwarded to :class:`BlockmarkConfig`.
    """

    def __init__(self, config: BlockmarkConfig | None = None, **kwargs: Any) -> None:
        self._config = config if config is not None else BlockmarkConfig(**kwargs)
        self._metrics = resolve_metrics(self._config.metrics)
        self._converter = MarkdownToBlocksConverter(self._config)

    @property
    def config(self) -> BlockmarkConfig:
        return self._config

    # ------------------------------------------------------------------
    # Markdown -> blocks
    # ------------------------------------------------------------------

    def decode_result(self, markdown: str) -> DecodeResult:
        """Decode *markdown* and return the document together with its warnings."""
        t0 = time.monotonic()
        result = self._converter.convert(markdown)
        elapsed_ms = (time.monotonic() - t0) * 1000

        self._metrics.increment("blockmark.blocks_decoded_total", len(result.document.blocks))
        self._metrics.timing("blockmark.decode_duration_ms", elapsed_ms)
        self._report_warnings("decode", result.warnings)
        log.debug(
            "Markdown decoded",
            extra={
                "extra_fields": {
                    "op": "decode",
                    "chars": len(markdown),
                    "blocks": len(result.document.blocks),
                    "warnings": len(result.warnings),
                    "duration_ms": round(elapsed_ms, 3),
                }
            },
        )
        return result

    def decode(self, markdown: str) -> BlockDocument:
        """Decode *markdown* into a :class:`BlockDocument`.  Never raises."""
        return self.decode_result(markdown).document

    def decode_bytes(self, data: bytes) -> BlockDocument:
        """Decode stored document bytes.  Undecodable bytes are replaced."""
        return self.decode(data.decode(self._config.encoding, errors="replace"))

    # ------------------------------------------------------------------
    # Blocks -> Markdown
    # ------------------------------------------------------------------

    def encode_result(self, document: BlockDocument) -> tuple[str, list[ConversionWarning]]:
        """Encode *document* and return the Markdown together with its warnings."""
        renderer = BlocksToMarkdownRenderer(self._config)
        t0 = time.monotonic()
        markdown = renderer.render_document(document)
        elapsed_ms = (time.monotonic() - t0) * 1000

        self._metrics.increment("blockmark.blocks_encoded_total", len(document.blocks))
        self._metrics.timing("blockmark.encode_duration_ms", elapsed_ms)
        self._report_warnings("encode", renderer.warnings)
        log.debug(
            "Block document encoded",
            extra={
                "extra_fields": {
                    "op": "encode",
                    "blocks": len(document.blocks),
                    "chars": len(markdown),
                    "warnings": len(renderer.warnings),
                    "duration_ms": round(elapsed_ms, 3),
                }
            },
        )
        return markdown, renderer.warnings

    def encode(self, document: BlockDocument) -> str:
        """Encode *document* to Markdown.  Never raises on odd payloads."""
        return self.encode_result(document)[0]

    def encode_bytes(self, document: BlockDocument) -> bytes:
        """Encode *document* to Markdown bytes in the configured encoding."""
        return self.encode(document).encode(self._config.encoding)

    # ------------------------------------------------------------------
    # Editor exchange
    # ------------------------------------------------------------------

    def from_editor(self, data: Any) -> BlockDocument:
        """Build a document from the editor's JSON value, coercing bad fields."""
        document, warnings = document_from_editorjs(data)
        self._report_warnings("from_editor", warnings)
        return document

    def to_editor(self, document: BlockDocument) -> dict[str, Any]:
        """Serialize *document* to the editor's JSON value."""
        return document_to_editorjs(document)

    def markdown_to_editor(self, markdown: str) -> dict[str, Any]:
        """Decode *markdown* straight to the editor's JSON value."""
        return self.to_editor(self.decode(markdown))

    def editor_to_markdown(self, data: Any) -> str:
        """Encode the editor's JSON value straight to Markdown."""
        return self.encode(self.from_editor(data))

    def roundtrip(self, markdown: str) -> str:
        """Decode then re-encode *markdown*, yielding its canonical form."""
        return self.encode(self.decode(markdown))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _report_warnings(self, op: str, warnings: list[ConversionWarning]) -> None:
        if not warnings:
            return
        self._metrics.increment(
            "blockmark.conversion_warnings_total", len(warnings), tags={"op": op},
        )
        for warning in warnings:
            log.info(
                warning.message,
                extra={
                    "extra_fields": {
                        "op": op,
                        "warning": warning.code,
                        **warning.context,
                    }
                },
            )
