"""Editing session: one open document, debounced auto-save.

:class:`NoteSession` is the glue between an editing surface and the vault.
It decodes the stored Markdown once on :meth:`open`, accepts the editor's
current document on every :meth:`update`, and writes the encoded Markdown
back either after a quiet period (auto-save) or immediately on
:meth:`save`.

Each edit cancels the previously scheduled auto-save and schedules a new
one ``config.autosave_debounce_seconds`` later, so a burst of keystrokes
results in a single write.  An auto-save whose Markdown is byte-identical
to the last write skips the disk entirely.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from blockmark.errors import BlockmarkStorageError
from blockmark.models import BlockDocument
from blockmark.observability import get_logger, resolve_metrics
from blockmark.transcoder import Transcoder
from blockmark.utils.hashing import md5_hash
from blockmark.vault.store import VaultStore

log = get_logger("blockmark.vault.session")

TimerFactory = Callable[[float, Callable[[], None]], Any]


class NoteSession:
    """Serialize decode/encode/save for one open vault document.

    Parameters
    ----------
    store:
        The vault holding the document.
    name:
        Vault-relative document name.
    transcoder:
        Converter to use.  Defaults to a :class:`Transcoder` built from
        the store's config.
    timer_factory:
        ``factory(delay, callback)`` returning an object with ``start()``
        and ``cancel()``.  Defaults to :class:`threading.Timer`.
    """

    def __init__(
        self,
        store: VaultStore,
        name: str,
        transcoder: Transcoder | None = None,
        *,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self._store = store
        self._name = name
        self._transcoder = transcoder if transcoder is not None else Transcoder(store.config)
        self._config = self._transcoder.config
        self._metrics = resolve_metrics(self._config.metrics)
        self._timer_factory = timer_factory or _daemon_timer

        self._lock = threading.RLock()
        self._document: BlockDocument | None = None
        self._timer: Any | None = None
        self._dirty = False
        self._saved_hash: str | None = None
        self.last_error: BlockmarkStorageError | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> BlockDocument:
        """Load and decode the document.  A missing document opens empty."""
        with self._lock:
            if self._store.exists(self._name):
                data = self._store.read(self._name)
                self._saved_hash = md5_hash(data)
                document = self._transcoder.decode_bytes(data)
            else:
                self._saved_hash = None
                document = BlockDocument(
                    time=self._config.clock(),
                    version=self._config.editor_version,
                )
            self._document = document
            self._dirty = False
            log.debug(
                "Session opened",
                extra={"extra_fields": {
                    "op": "open",
                    "name": self._name,
                    "blocks": len(document.blocks),
                }},
            )
            return document

    def close(self) -> None:
        """Flush a pending auto-save, then stop scheduling new ones."""
        with self._lock:
            pending = self._timer is not None
            self._cancel_timer()
            if pending and self._dirty:
                self.save()

    def __enter__(self) -> NoteSession:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def document(self) -> BlockDocument | None:
        return self._document

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def markdown(self) -> str:
        """The current document encoded to Markdown (a live preview)."""
        with self._lock:
            if self._document is None:
                return ""
            return self._transcoder.encode(self._document)

    def update(self, document: BlockDocument) -> None:
        """Record the editor's latest document and (re)schedule auto-save."""
        with self._lock:
            self._document = document
            self._dirty = True
            if self._config.autosave_enabled:
                self._cancel_timer()
                self._timer = self._timer_factory(
                    self._config.autosave_debounce_seconds, self._autosave,
                )
                self._timer.start()

    def update_from_editor(self, data: Any) -> None:
        """Like :meth:`update`, taking the editor's JSON value."""
        self.update(self._transcoder.from_editor(data))

    def save(self) -> bool:
        """Encode and write the current document now.

        Returns
        -------
        bool
            ``True`` if bytes were written, ``False`` when there was nothing
            to write or the content was unchanged since the last write.

        Raises
        ------
        BlockmarkStorageError
            If the vault write fails.  The session stays dirty.
        """
        with self._lock:
            self._cancel_timer()
            if self._document is None:
                return False
            data = self._transcoder.encode_bytes(self._document)
            digest = md5_hash(data)
            if digest == self._saved_hash:
                self._dirty = False
                return False
            self._store.write(self._name, data)
            self._saved_hash = digest
            self._dirty = False
            self.last_error = None
            self._metrics.increment("blockmark.documents_saved_total")
            log.info(
                "Document saved",
                extra={"extra_fields": {"op": "save", "name": self._name, "bytes": len(data)}},
            )
            return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _autosave(self) -> None:
        with self._lock:
            self._timer = None
            try:
                self.save()
            except BlockmarkStorageError as exc:
                self.last_error = exc
                log.error(
                    "Auto-save failed",
                    exc_info=True,
                    extra={"extra_fields": {"op": "autosave", "name": self._name, "code": exc.code}},
                )


def _daemon_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer
